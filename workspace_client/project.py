"""Project model: hierarchical ignore files and project root discovery."""
from __future__ import annotations

import os
import stat
from collections.abc import Callable, Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Dict, List

from .errors import (
    NotFoundError,
    RelativePathError,
    StatError,
    UnknownIgnoreFileTypeError,
    WalkError,
    WorkspaceError,
)
from .ignore_rules import (
    ALWAYS_IGNORE_NAMES,
    IGNORE_FILE_NAMES,
    SKIP_DIRS,
    IgnoreFile,
    compile_ignore_file,
)
from .paths import clean_path, path_ancestors, split_path

METADATA_DIR = ".git"

ArchiveMatcher = Callable[[str], bool]


def _directory_key(directory: str) -> str:
    # Keys are stored the way split_path produces them.
    if directory == os.curdir:
        return ""
    return directory + os.sep


def _relative_path(path: str, start: str) -> str:
    try:
        return os.path.relpath(path, start)
    except ValueError as exc:
        raise RelativePathError(
            f"could not express {path!r} relative to {start!r}: {exc}"
        ) from exc


def _project_root_filter(project_root: str | None) -> Callable[[str], bool]:
    if project_root is None:
        return lambda rel_path: True
    project_root = clean_path(project_root)
    if project_root == os.curdir:
        return lambda rel_path: True
    if os.path.isabs(project_root) or project_root.split(os.sep)[0] == os.pardir:
        raise RelativePathError(f"project root {project_root!r} is not inside the project")

    # The directories leading to the project root are archived as well.
    leading = {os.curdir, project_root}
    parts = project_root.split(os.sep)
    leading.update(os.path.join(*parts[:i]) for i in range(1, len(parts)))
    prefix = project_root + os.sep

    return lambda rel_path: rel_path in leading or rel_path.startswith(prefix)


def _names(names: Iterable[str] | None, default: frozenset[str]) -> frozenset[str]:
    if names is None:
        return default
    return frozenset(names)


class Project:
    """Project-wide operations rooted at ``root_directory``.

    Ignore files are discovered once by :meth:`update_ignore_files` and kept
    per directory, so deciding whether a path is ignored only consults the
    ignore files of that path's ancestors, never those of sibling directories.

    Instances are not thread-safe. Queries may run concurrently only while no
    :meth:`update_ignore_files` call is in progress.
    """

    def __init__(
        self,
        root_directory: str,
        *,
        ignore_file_names: Iterable[str] | None = None,
        always_ignore_names: Iterable[str] | None = None,
        skip_dirs: Iterable[str] | None = None,
    ) -> None:
        self.root_directory = os.path.abspath(root_directory)
        self.ignore_file_names = _names(ignore_file_names, IGNORE_FILE_NAMES)
        self.always_ignore_names = _names(always_ignore_names, ALWAYS_IGNORE_NAMES)
        self.skip_dirs = _names(skip_dirs, SKIP_DIRS)
        self._ignore_files_by_directory: Dict[str, List[IgnoreFile]] = {}

    @property
    def ignore_files_by_directory(self) -> Mapping[str, Sequence[IgnoreFile]]:
        """Registered ignore files keyed by directory relative to the root."""

        return MappingProxyType(self._ignore_files_by_directory)

    def to_relative_path(self, abs_path: str) -> str:
        return _relative_path(abs_path, self.root_directory)

    def to_absolute_path(self, path_relative_to_project_root: str) -> str:
        return os.path.normpath(
            os.path.join(self.root_directory, path_relative_to_project_root)
        )

    def add_ignore_file(self, path_relative_to_project_root: str) -> None:
        """Compile and register a single ignore file."""

        self._register(self._ignore_files_by_directory, path_relative_to_project_root)

    def _register(
        self,
        ignore_files: Dict[str, List[IgnoreFile]],
        path_relative_to_project_root: str,
    ) -> None:
        directory, name = split_path(path_relative_to_project_root)
        abs_path = self.to_absolute_path(path_relative_to_project_root)
        if name not in self.ignore_file_names:
            raise UnknownIgnoreFileTypeError(f"unsupported ignore file {abs_path!r}")

        ignore_files.setdefault(directory, []).append(compile_ignore_file(abs_path))

    def update_ignore_files(self) -> None:
        """Rediscover every ignore file below the project root.

        The previous registrations are only replaced once the whole tree has
        been walked successfully.
        """

        found: Dict[str, List[IgnoreFile]] = {}

        def on_error(exc: OSError) -> None:
            raise WalkError(
                f"error updating ignore files: {exc}",
                exc.filename or self.root_directory,
            ) from exc

        for dirpath, dirnames, filenames in os.walk(self.root_directory, onerror=on_error):
            dirnames[:] = sorted(name for name in dirnames if name not in self.skip_dirs)

            rel_dir = os.path.relpath(dirpath, self.root_directory)
            for filename in sorted(filenames):
                if filename not in self.ignore_file_names:
                    continue
                abs_path = os.path.join(dirpath, filename)
                if os.path.islink(abs_path) or not os.path.isfile(abs_path):
                    continue
                rel_path = filename if rel_dir == os.curdir else os.path.join(rel_dir, filename)
                self._register(found, rel_path)

        self._ignore_files_by_directory = found

    def path_is_ignored(self, path_relative_to_project_root: str) -> bool:
        """Return True if the path is always ignored or matched by an ignore file.

        Ignore files are consulted from the path's own directory upwards; the
        first match wins. A trailing separator marks the path as a directory,
        which directory-only patterns such as ``build/`` need in order to match
        the directory itself.
        """

        cleaned = clean_path(path_relative_to_project_root)
        if any(part in self.always_ignore_names for part in cleaned.split(os.sep)):
            return True
        is_dir = path_relative_to_project_root.endswith(os.sep)

        abs_path = None
        for directory in path_ancestors(cleaned):
            ignore_files = self._ignore_files_by_directory.get(_directory_key(directory))
            if not ignore_files:
                continue

            if abs_path is None:
                abs_path = os.path.abspath(os.path.join(self.root_directory, cleaned))
            ignore_dir = os.path.join(self.root_directory, directory)
            path_relative_to_ignore_file = _relative_path(abs_path, ignore_dir)
            if is_dir:
                path_relative_to_ignore_file += os.sep

            for ignore_file in ignore_files:
                if ignore_file.matches(path_relative_to_ignore_file):
                    return True

        return False

    def archive_matcher(
        self, reference_path: str = "", project_root: str | None = None
    ) -> ArchiveMatcher:
        """Return a predicate telling an archiver whether to include a path.

        The predicate receives paths relative to ``reference_path``, itself
        relative to the project root, with a trailing separator for
        directories. Paths outside the project root and paths that cannot be
        evaluated are excluded.

        ``project_root`` narrows the result to one subdirectory of the project,
        e.g. a stack inside a monorepo: only that subdirectory's contents and
        the directories leading to it are accepted.

        This method expects :meth:`update_ignore_files` to have been called.
        """

        abs_matcher_root = self.to_absolute_path(reference_path)
        root_prefix = self.root_directory.rstrip(os.sep) + os.sep
        in_project_root = _project_root_filter(project_root)

        def matcher(path_to_match: str) -> bool:
            abs_path = os.path.normpath(os.path.join(abs_matcher_root, path_to_match))
            if abs_path != self.root_directory and not abs_path.startswith(root_prefix):
                return False

            try:
                rel_path = self.to_relative_path(abs_path)
                if not in_project_root(rel_path):
                    return False
                if path_to_match.endswith(os.sep) and rel_path != os.curdir:
                    rel_path += os.sep
                return not self.path_is_ignored(rel_path)
            except WorkspaceError:
                return False

        return matcher


def is_directory(path: str) -> bool:
    """Return whether ``path`` exists and is a directory."""

    try:
        st = os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        raise StatError(f"could not stat {path!r}: {exc}", path) from exc
    return stat.S_ISDIR(st.st_mode)


def find_first_existing_directory(candidates: Iterable[str]) -> str:
    for candidate in candidates:
        if is_directory(candidate):
            return candidate
    raise NotFoundError("not found")


def find_project_root(path_in_project: str) -> str:
    """Return the nearest directory containing ``.git``, starting at ``path_in_project``.

    ``path_in_project`` may point at any file or directory inside the
    project; it does not need to exist.
    """

    path = os.path.abspath(path_in_project)

    candidates: List[str] = []
    if is_directory(path):
        candidates.append(os.path.join(path, METADATA_DIR))
    candidates.extend(os.path.join(directory, METADATA_DIR) for directory in path_ancestors(path))

    try:
        metadata_dir = find_first_existing_directory(candidates)
    except NotFoundError as exc:
        raise NotFoundError(f"could not find project root for {path_in_project!r}") from exc

    return os.path.dirname(metadata_dir)
