"""Exceptions raised by the workspace client."""
from __future__ import annotations


class WorkspaceError(Exception):
    """Base class for all workspace client errors."""


class UnknownIgnoreFileTypeError(WorkspaceError):
    """Raised when a file that is not a recognized ignore file is registered."""


class NotFoundError(WorkspaceError):
    """Raised when none of the candidate directories exist."""


class RelativePathError(WorkspaceError):
    """Raised when a path cannot be expressed relative to another one."""


class _PathError(WorkspaceError):
    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class IgnoreFileCompileError(_PathError):
    """Raised when an ignore file cannot be read or parsed."""


class StatError(_PathError):
    """Raised when a path cannot be stat'ed for a reason other than absence."""


class WalkError(_PathError):
    """Raised when the project tree cannot be traversed."""


class ArchiveError(_PathError):
    """Raised when the workspace archive cannot be written."""


class UploadError(WorkspaceError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
