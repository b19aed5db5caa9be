"""Pure path arithmetic used to scope ignore files to their directories."""
from __future__ import annotations

import os


def clean_path(path: str) -> str:
    """Collapse redundant separators and ``.``/``..`` segments.

    An empty path cleans to ``"."``.
    """

    cleaned = os.path.normpath(path)
    # POSIX normpath keeps exactly two leading slashes.
    if cleaned.startswith(os.sep * 2) and not cleaned.startswith(os.sep * 3):
        cleaned = cleaned[1:]
    return cleaned


def split_path(path: str) -> tuple[str, str]:
    """Split ``path`` right after its last separator.

    Unlike :func:`os.path.split` the directory part keeps its trailing
    separator, and is empty when ``path`` has no directory component.
    """

    name = os.path.basename(path)
    return path[: len(path) - len(name)], name


def parent_directory(path: str) -> tuple[str, bool]:
    """Return ``(parent, True)`` for the directory containing ``path``.

    Returns ``("", False)`` when there is no parent to report: for roots
    (``/``, ``.``, ``""``) and for relative paths that climb above their
    starting point via ``..``.
    """

    cleaned = clean_path(path)

    if not os.path.isabs(cleaned):
        joined_to_root = os.path.normpath(os.path.join(os.sep, cleaned))
        if os.path.relpath(joined_to_root, os.sep) != cleaned:
            return "", False

    parent = os.path.dirname(cleaned) or "."
    if len(parent) >= len(cleaned):
        return "", False

    return parent, True


def path_ancestors(path: str) -> list[str]:
    """Return the directory of ``path`` followed by all of its ancestors.

    >>> path_ancestors("hello/world/.gitignore")
    ['hello/world', 'hello', '.']
    """

    ancestors: list[str] = []
    parent, ok = parent_directory(path)
    while ok:
        ancestors.append(parent)
        parent, ok = parent_directory(parent)
    return ancestors
