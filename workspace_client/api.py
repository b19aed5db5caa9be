
import logging
import os

import requests

from .errors import UploadError

logger = logging.getLogger(__name__)


class UploadClient:
    def __init__(self, timeout: float = 300, session: requests.Session | None = None):
        self.timeout = timeout
        # A caller-provided session is left open for the caller to close.
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "UploadClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def upload_archive(self, upload_url: str, path: str, headers: dict[str, str] | None = None) -> None:
        """PUT the archive at ``path`` to ``upload_url``.

        Raises :class:`UploadError` for unreadable archives, transport errors
        and any non-2xx response.
        """
        try:
            size = os.stat(path).st_size
            body = open(path, "rb")
        except OSError as exc:
            raise UploadError(f"couldn't open archive file {path!r}: {exc}") from exc

        request_headers = {"Content-Length": str(size)}
        request_headers.update(headers or {})

        logger.info("upload_started", extra={"size_bytes": size})
        with body:
            try:
                r = self.session.put(upload_url, data=body, headers=request_headers, timeout=self.timeout)
            except requests.RequestException as exc:
                raise UploadError(f"couldn't upload workspace: {exc}") from exc

        if not 200 <= r.status_code < 300:
            logger.warning("upload_failed", extra={"status_code": r.status_code, "size_bytes": size})
            raise UploadError(
                f"unexpected response code when uploading workspace: {r.status_code}",
                status_code=r.status_code,
            )
        logger.info("upload_completed", extra={"status_code": r.status_code, "size_bytes": size})
