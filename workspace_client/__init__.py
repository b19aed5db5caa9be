"""Client-side utilities for packing a local workspace for upload."""

from .errors import (
    ArchiveError,
    IgnoreFileCompileError,
    NotFoundError,
    RelativePathError,
    StatError,
    UnknownIgnoreFileTypeError,
    UploadError,
    WalkError,
    WorkspaceError,
)
from .ignore_rules import (
    ALWAYS_IGNORE_NAMES,
    IGNORE_FILE_NAMES,
    SKIP_DIRS,
    GitignoreFile,
    IgnoreFile,
    compile_ignore_file,
    register_ignore_file,
)
from .paths import parent_directory, path_ancestors
from .project import Project, find_first_existing_directory, find_project_root, is_directory

__all__ = [
    "ArchiveError",
    "IgnoreFileCompileError",
    "NotFoundError",
    "RelativePathError",
    "StatError",
    "UnknownIgnoreFileTypeError",
    "UploadError",
    "WalkError",
    "WorkspaceError",
    "ALWAYS_IGNORE_NAMES",
    "IGNORE_FILE_NAMES",
    "SKIP_DIRS",
    "GitignoreFile",
    "IgnoreFile",
    "compile_ignore_file",
    "register_ignore_file",
    "parent_directory",
    "path_ancestors",
    "Project",
    "find_first_existing_directory",
    "find_project_root",
    "is_directory",
]
