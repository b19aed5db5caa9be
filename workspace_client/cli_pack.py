
import argparse
import logging
import os
import uuid

from .api import UploadClient
from .archive import create_archive
from .config import Settings, get_settings
from .errors import ArchiveError, UploadError, WorkspaceError
from .project import Project, find_project_root
from .utils.logging import ARCHIVE_PATH_CTX, WORKSPACE_ID_CTX, configure_logging

logger = logging.getLogger(__name__)

EXIT_OK, EXIT_PROJECT, EXIT_ARCHIVE, EXIT_UPLOAD = 0, 1, 2, 3


def parse_header(value: str) -> tuple[str, str]:
    key, sep, header_value = value.partition("=")
    if not sep or not key.strip():
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {value!r}")
    return key.strip(), header_value.strip()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="workspace-pack", description="Pack a local workspace for upload, honoring ignore files.")
    p.add_argument("path", nargs="?", default=".", help="Project directory (default: current directory)")
    p.add_argument("--reference", default="", help="Directory to pack, relative to the project root")
    p.add_argument("--output", help="Archive path (must end in .tar.gz)")
    p.add_argument("--find-repository-root", action="store_true", help="Use the nearest ancestor containing .git as the project root")
    p.add_argument("--project-root-only", action="store_true", help="Only pack PATH and the directories leading to it; paths stay relative to the repository root")
    p.add_argument("--disregard-gitignore", action="store_true", help="Do not honor .gitignore files")
    p.add_argument("--include-git-dir", action="store_true", help="Do not force-exclude .git")
    p.add_argument("--upload-url", help="PUT the archive to this URL")
    p.add_argument("--header", action="append", type=parse_header, default=[], metavar="KEY=VALUE", help="Extra upload header (repeatable)")
    p.add_argument("--keep-archive", action="store_true", help="Keep the archive after a successful upload")
    p.add_argument("--log-level", help="Logging level (default: WORKSPACE_LOG_LEVEL or INFO)")
    return p


def _pack(args: argparse.Namespace, settings: Settings, project: Project, match_fn, dest: str) -> int:
    try:
        create_archive(project.to_absolute_path(args.reference), dest, match_fn)
    except ArchiveError:
        logger.exception("archive_failed")
        return EXIT_ARCHIVE

    if not args.upload_url:
        print(dest)
        return EXIT_OK

    try:
        with UploadClient(timeout=settings.upload_timeout_s) as client:
            client.upload_archive(args.upload_url, dest, dict(args.header))
    except UploadError:
        logger.exception("upload_failed")
        return EXIT_UPLOAD
    finally:
        if not args.keep_archive:
            os.remove(dest)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging((args.log_level or settings.log_level).upper())

    ignore_file_names = set(settings.ignore_file_names)
    if args.disregard_gitignore:
        ignore_file_names.discard(".gitignore")
    always_ignore_names = set(settings.always_ignore_names)
    if args.include_git_dir:
        always_ignore_names.discard(".git")

    workspace_id = uuid.uuid4().hex
    token = WORKSPACE_ID_CTX.set(workspace_id)
    try:
        try:
            root = find_project_root(args.path) if args.find_repository_root else args.path
            project = Project(
                root,
                ignore_file_names=ignore_file_names,
                always_ignore_names=always_ignore_names,
                skip_dirs=settings.skip_dirs,
            )
            project.update_ignore_files()
            project_root = None
            if args.project_root_only:
                project_root = project.to_relative_path(os.path.abspath(args.path))
            match_fn = project.archive_matcher(args.reference, project_root=project_root)
        except WorkspaceError:
            logger.exception("project_load_failed", extra={"project_path": args.path})
            return EXIT_PROJECT

        logger.info(
            "packing_workspace",
            extra={"project_root": project.root_directory, "reference": args.reference, "project_subdir": project_root},
        )
        dest = args.output or settings.archive_path_for(workspace_id)
        archive_token = ARCHIVE_PATH_CTX.set(dest)
        try:
            return _pack(args, settings, project, match_fn, dest)
        finally:
            ARCHIVE_PATH_CTX.reset(archive_token)
    finally:
        WORKSPACE_ID_CTX.reset(token)


if __name__ == "__main__":
    raise SystemExit(main())
