"""Ignore file dialects and the names the workspace client recognizes."""
from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Dict

import pathspec

from .errors import IgnoreFileCompileError

IGNORE_FILE_NAMES = frozenset({".gitignore", ".terraformignore"})
ALWAYS_IGNORE_NAMES = frozenset({".git", ".terraform"})
SKIP_DIRS = frozenset({".git"})


class IgnoreFile(ABC):
    """A compiled ignore file."""

    @abstractmethod
    def matches(self, path_relative_to_ignore_file: str) -> bool:
        """Return True if the path matches any of the file's patterns.

        The path must be expressed relative to the directory holding the
        ignore file.
        """


class GitignoreFile(IgnoreFile):
    """Ignore file using gitignore semantics, backed by ``pathspec``."""

    def __init__(self, spec: pathspec.PathSpec, path: str | None = None) -> None:
        self._spec = spec
        self.path = path

    @classmethod
    def from_lines(cls, lines, path: str | None = None) -> "GitignoreFile":
        return cls(pathspec.GitIgnoreSpec.from_lines(lines), path)

    @classmethod
    def compile(cls, path: str) -> "GitignoreFile":
        text = Path(path).read_text(encoding="utf-8", errors="ignore")
        return cls.from_lines(text.splitlines(), path)

    def matches(self, path_relative_to_ignore_file: str) -> bool:
        return self._spec.match_file(path_relative_to_ignore_file.replace(os.sep, "/"))


IgnoreFileFactory = Callable[[str], IgnoreFile]


class IgnoreFileRegistry:
    """Maps ignore file names to the factory that compiles them.

    Names without a dedicated factory are compiled with ``default``.
    """

    def __init__(self, default: IgnoreFileFactory) -> None:
        self._default = default
        self._factories: Dict[str, IgnoreFileFactory] = {}

    def register(self, *names: str) -> Callable[[IgnoreFileFactory], IgnoreFileFactory]:
        if not names:
            raise ValueError("at least one ignore file name is required")

        def decorator(factory: IgnoreFileFactory) -> IgnoreFileFactory:
            for name in names:
                self._factories[name] = factory
            return factory

        return decorator

    def factory_for(self, name: str) -> IgnoreFileFactory:
        return self._factories.get(name, self._default)

    def create(self, path: str) -> IgnoreFile:
        factory = self.factory_for(os.path.basename(path))
        try:
            return factory(path)
        except (OSError, ValueError) as exc:
            raise IgnoreFileCompileError(
                f"could not compile ignore file {path!r}: {exc}", path
            ) from exc


_registry = IgnoreFileRegistry(GitignoreFile.compile)


def register_ignore_file(*names: str):
    """Public decorator for registering an ignore file dialect by file name."""

    return _registry.register(*names)


@register_ignore_file(".gitignore", ".terraformignore")
def _compile_gitignore(path: str) -> IgnoreFile:
    return GitignoreFile.compile(path)


def compile_ignore_file(path: str) -> IgnoreFile:
    """Compile the ignore file at ``path`` using the dialect for its name."""

    return _registry.create(path)
