
import os
import tempfile

from pydantic import BaseModel, Field

from .ignore_rules import ALWAYS_IGNORE_NAMES, IGNORE_FILE_NAMES, SKIP_DIRS


def _names_from_env(var: str, default: frozenset[str]) -> frozenset[str]:
    raw = os.getenv(var)
    if raw is None:
        return default
    return frozenset(name.strip() for name in raw.split(",") if name.strip())


def _default_archive_dir() -> str:
    return os.path.join(tempfile.gettempdir(), "workspace-client", "local-workspace")


class Settings(BaseModel):
    ignore_file_names: frozenset[str] = Field(default_factory=lambda: _names_from_env("WORKSPACE_IGNORE_FILES", IGNORE_FILE_NAMES))
    always_ignore_names: frozenset[str] = Field(default_factory=lambda: _names_from_env("WORKSPACE_ALWAYS_IGNORE", ALWAYS_IGNORE_NAMES))
    skip_dirs: frozenset[str] = Field(default_factory=lambda: _names_from_env("WORKSPACE_SKIP_DIRS", SKIP_DIRS))
    archive_dir: str = Field(default_factory=lambda: os.getenv("WORKSPACE_ARCHIVE_DIR") or _default_archive_dir())
    upload_timeout_s: float = Field(default_factory=lambda: float(os.getenv("WORKSPACE_UPLOAD_TIMEOUT_S", 300)))
    log_level: str = Field(default_factory=lambda: os.getenv("WORKSPACE_LOG_LEVEL", "INFO").upper())

    def archive_path_for(self, workspace_id: str) -> str: return os.path.join(self.archive_dir, f"{workspace_id}.tar.gz")


def get_settings() -> Settings:
    return Settings()
