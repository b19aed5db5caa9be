"""Pack a workspace into a gzipped tarball, honoring an archive predicate."""
from __future__ import annotations

import logging
import os
import posixpath
import tarfile
from collections.abc import Callable

from .errors import ArchiveError

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".tar.gz"


def _relative(rel_dir: str, name: str) -> str:
    return name if rel_dir == os.curdir else os.path.join(rel_dir, name)


def _arcname(prefix: str, rel_path: str) -> str:
    return posixpath.join(prefix, rel_path.replace(os.sep, "/"))


def _raise(exc: OSError) -> None:
    raise exc


def _add_tree(
    tgz: tarfile.TarFile,
    source_dir: str,
    dest: str,
    prefix: str,
    match_fn: Callable[[str], bool],
) -> int:
    tgz.add(source_dir, arcname=prefix, recursive=False)
    added = 1

    for dirpath, dirnames, filenames in os.walk(source_dir, onerror=_raise):
        rel_dir = os.path.relpath(dirpath, source_dir)

        kept: list[str] = []
        for name in sorted(dirnames):
            rel_path = _relative(rel_dir, name)
            if not match_fn(rel_path + os.sep):
                logger.debug("archive_skip_directory", extra={"rel_path": rel_path})
                continue
            kept.append(name)
            tgz.add(os.path.join(dirpath, name), arcname=_arcname(prefix, rel_path), recursive=False)
            added += 1
        # Symlinked directories were added as links; os.walk does not follow them.
        dirnames[:] = kept

        for name in sorted(filenames):
            abs_path = os.path.join(dirpath, name)
            if abs_path == dest:
                continue
            rel_path = _relative(rel_dir, name)
            if not match_fn(rel_path):
                logger.debug("archive_skip_file", extra={"rel_path": rel_path})
                continue
            tgz.add(abs_path, arcname=_arcname(prefix, rel_path), recursive=False)
            added += 1

    return added


def _discard_partial(dest: str) -> None:
    try:
        os.remove(dest)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("partial_archive_not_removed", extra={"archive_path": dest})


def create_archive(source_dir: str, dest: str, match_fn: Callable[[str], bool]) -> str:
    """Write the entries of ``source_dir`` accepted by ``match_fn`` to ``dest``.

    ``match_fn`` receives paths relative to ``source_dir``; directories carry
    a trailing separator. Excluded directories are not descended into.
    Entries are stored under a top-level folder named after the archive, e.g.
    ``abc123/src/main.go`` for ``abc123.tar.gz``. A failed run leaves no
    partial archive behind.
    """

    if not dest.endswith(ARCHIVE_SUFFIX):
        raise ArchiveError(f"{ARCHIVE_SUFFIX} extension required: {dest!r}", dest)

    source_dir = os.path.abspath(source_dir)
    dest = os.path.abspath(dest)
    prefix = os.path.basename(dest)[: -len(ARCHIVE_SUFFIX)]

    try:
        os.makedirs(os.path.dirname(dest), exist_ok=True)
        with tarfile.open(dest, "w:gz") as tgz:
            added = _add_tree(tgz, source_dir, dest, prefix, match_fn)
    except (OSError, tarfile.TarError) as exc:
        _discard_partial(dest)
        raise ArchiveError(f"could not create archive {dest!r}: {exc}", dest) from exc

    logger.info("archive_created", extra={"archive_path": dest, "entries": added})
    return dest
