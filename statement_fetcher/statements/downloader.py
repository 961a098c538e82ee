"""
Bounded HTTP download of statements referenced by URL.
"""

from __future__ import annotations

import logging
import posixpath
from urllib.parse import unquote, urlsplit

import requests

from statement_fetcher.config import StatementSettings

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class StatementDownloadError(RuntimeError):
    """
    Raised when a statement URL cannot be fetched within the configured limits.
    """


def extract_filename(url: str, fallback_name: str = "statement") -> str:
    """
    Derive a document filename from the URL path, forcing a `.pdf` extension.
    """

    try:
        path = urlsplit(url).path
    except ValueError:
        return f"{fallback_name}.pdf"

    filename = posixpath.basename(unquote(path)) or fallback_name
    if not filename.lower().endswith(".pdf"):
        return f"{filename}.pdf"
    return filename


class StatementDownloader:
    """
    Fetches statement bytes with a timeout and a maximum payload size.
    """

    def __init__(
        self,
        *,
        settings: StatementSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout_seconds = settings.download_timeout_seconds
        self._max_bytes = settings.max_download_bytes

    def download(self, url: str) -> bytes:
        """
        Download `url` and return its body.

        Oversized, slow or non-200 responses raise StatementDownloadError.
        """

        try:
            response = self._session.get(url, timeout=self._timeout_seconds, stream=True)
        except requests.Timeout as exc:
            raise StatementDownloadError(
                "Statement download timeout - file may be too large or server is slow"
            ) from exc
        except requests.RequestException as exc:
            raise StatementDownloadError(f"Failed to download statement: {exc}") from exc

        with response:
            if response.status_code != 200:
                raise StatementDownloadError(
                    f"Failed to download statement: HTTP {response.status_code} {response.reason}"
                )

            declared_length = response.headers.get("Content-Length")
            if declared_length and declared_length.isdigit() and int(declared_length) > self._max_bytes:
                raise StatementDownloadError(
                    f"Statement exceeds maximum size of {self._max_bytes} bytes "
                    f"(declared {declared_length})"
                )

            body = bytearray()
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    body.extend(chunk)
                    if len(body) > self._max_bytes:
                        raise StatementDownloadError(
                            f"Statement exceeds maximum size of {self._max_bytes} bytes"
                        )
            except requests.RequestException as exc:
                raise StatementDownloadError(f"Failed to download statement: {exc}") from exc

        logger.debug("Downloaded statement url=%s bytes=%s", url, len(body))
        return bytes(body)
