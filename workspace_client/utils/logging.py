import json
import logging
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict


WORKSPACE_ID_CTX = ContextVar("workspace_id", default=None)
ARCHIVE_PATH_CTX = ContextVar("archive_path", default=None)

# Record attribute -> context var; unset values are left out of the payload.
_CONTEXT_FIELDS = {
    "workspace_id": WORKSPACE_ID_CTX,
    "archive_path": ARCHIVE_PATH_CTX,
}

_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
    }
)


class WorkspaceContextFilter(logging.Filter):
    """Attach the current workspace ID and archive path to every log record.

    Values passed explicitly through ``extra`` take precedence.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for field, ctx in _CONTEXT_FIELDS.items():
            if getattr(record, field, None) is None:
                setattr(record, field, ctx.get())
        return True


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_payload["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS or key in log_payload:
                continue
            if key in _CONTEXT_FIELDS and value is None:
                continue
            log_payload[key] = value

        return json.dumps(log_payload, default=str)


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send JSON logs to stderr, tagged with the workspace being packed."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    handler.addFilter(WorkspaceContextFilter())

    logging.basicConfig(level=level, handlers=[handler], force=True)
