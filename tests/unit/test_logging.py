import json
import logging

from workspace_client.utils.logging import ARCHIVE_PATH_CTX, WORKSPACE_ID_CTX, configure_logging


def _last_payload(capfd) -> dict:
    captured = capfd.readouterr()
    lines = [line for line in captured.err.splitlines() if line]
    assert lines, "expected at least one log line"
    return json.loads(lines[-1])


def test_structured_logging_includes_workspace_id(capfd):
    configure_logging()
    capfd.readouterr()

    token = WORKSPACE_ID_CTX.set("ws-123")
    try:
        logging.getLogger("test.logger").info("hello", extra={"foo": "bar"})
    finally:
        WORKSPACE_ID_CTX.reset(token)

    payload = _last_payload(capfd)
    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["foo"] == "bar"
    assert payload["workspace_id"] == "ws-123"


def test_structured_logging_without_workspace_id(capfd):
    configure_logging()
    capfd.readouterr()

    logging.getLogger("test.logger").warning("no workspace")

    payload = _last_payload(capfd)
    assert payload["message"] == "no workspace"
    assert "workspace_id" not in payload


def test_structured_logging_includes_archive_path(capfd):
    configure_logging()
    capfd.readouterr()

    token = ARCHIVE_PATH_CTX.set("/tmp/ws/abc123.tar.gz")
    try:
        logging.getLogger("test.logger").info("upload_started")
        in_context = _last_payload(capfd)
        logging.getLogger("test.logger").info("archive_created", extra={"archive_path": "/tmp/other.tar.gz"})
        explicit = _last_payload(capfd)
    finally:
        ARCHIVE_PATH_CTX.reset(token)

    logging.getLogger("test.logger").info("done")
    after = _last_payload(capfd)

    assert in_context["archive_path"] == "/tmp/ws/abc123.tar.gz"
    assert explicit["archive_path"] == "/tmp/other.tar.gz"
    assert "archive_path" not in after


def test_structured_logging_includes_exception(capfd):
    configure_logging("DEBUG")
    capfd.readouterr()

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logging.getLogger("test.logger").exception("failed")

    payload = _last_payload(capfd)
    assert payload["level"] == "ERROR"
    assert "RuntimeError: boom" in payload["exception"]


def test_configure_logging_respects_level(capfd):
    configure_logging("WARNING")
    capfd.readouterr()

    logging.getLogger("test.logger").info("hidden")

    assert capfd.readouterr().err == ""
