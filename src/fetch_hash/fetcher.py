"""HTTP transport: stream a remote file to a local path.

``Fetcher`` wraps a shared ``httpx.Client``. The module-level ``download``,
``fetch`` and ``hash_download`` helpers are one-off conveniences that open a
short-lived client per call.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import httpx
import structlog

from fetch_hash.config import FetcherSettings
from fetch_hash.errors import ErrorCode, FetchHashError, io_error, wrong_hash
from fetch_hash.hashing import hash_file

if TYPE_CHECKING:
    import os

log = structlog.get_logger()

# Request Timeout and Too Many Requests
_RETRYABLE_STATUS = frozenset({408, 429})


def build_http_client(settings: FetcherSettings | None = None) -> httpx.Client:
    """Create the HTTP client used for all downloads."""
    settings = settings or FetcherSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.timeout_seconds),
        follow_redirects=settings.follow_redirects,
    )


class Fetcher:
    """Downloads files over HTTP(S). No retries, no resume."""

    def __init__(self, client: httpx.Client, settings: FetcherSettings | None = None) -> None:
        self._client = client
        self._settings = settings or FetcherSettings()

    def close(self) -> None:
        self._client.close()

    def download(self, url: str, path: str | os.PathLike[str]) -> None:
        """GET ``url`` and write the body to ``path``, creating or truncating it.

        Missing parent directories are created. Anything but a 2xx response
        is a failure, including an unfollowed redirect. A failed transfer may
        leave a partial file behind; the hash check of the next fetch reports it.
        """
        path = Path(path)
        log.info("file_download_started", url=url, path=str(path))
        try:
            with self._client.stream("GET", url) as response:
                if not response.is_success:
                    raise _status_error(url, response.status_code)
                path.parent.mkdir(parents=True, exist_ok=True)
                size = 0
                with path.open("wb") as f:
                    for chunk in response.iter_bytes(self._settings.chunk_size):
                        f.write(chunk)
                        size += len(chunk)
        except httpx.HTTPError as exc:
            log.warning("file_download_failed", url=url, error=str(exc))
            raise FetchHashError(
                ErrorCode.DOWNLOAD_FAILED,
                f"Network error fetching {url}: {exc}",
                recoverable=True,
                details={"url": url},
            ) from exc
        except OSError as exc:
            raise io_error(exc, str(path)) from exc

        if not path.exists():
            raise FetchHashError(
                ErrorCode.DOWNLOADED_FILE_NOT_SEEN,
                f"Downloaded file not seen: {path}",
                details={"path": str(path), "url": url},
            )
        log.info("file_downloaded", url=url, path=str(path), size=size)


def _status_error(url: str, status_code: int) -> FetchHashError:
    log.warning("file_download_failed", url=url, status_code=status_code)
    return FetchHashError(
        ErrorCode.DOWNLOAD_FAILED,
        f"HTTP {status_code} fetching {url}",
        # Server errors, timeouts and rate limiting may clear up; a 404 will not
        recoverable=status_code >= 500 or status_code in _RETRYABLE_STATUS,
        details={"url": url, "status_code": str(status_code)},
    )


# ---------------------------------------------------------------------------
# One-off helpers
# ---------------------------------------------------------------------------


def download(url: str, path: str | os.PathLike[str]) -> None:
    """Download ``url`` to ``path`` with a short-lived client."""
    with build_http_client() as client:
        Fetcher(client).download(url, path)


def hash_download(url: str, path: str | os.PathLike[str]) -> str:
    """Download ``url`` to ``path`` unconditionally and return its hash."""
    download(url, path)
    return hash_file(path)


def fetch(url: str, hash: str, path: str | os.PathLike[str]) -> None:
    """Download ``url`` to ``path`` unless present, then verify its hash.

    A file that already exists with the right hash costs no network traffic.
    """
    if not Path(path).exists():
        download(url, path)
    actual = hash_file(path)
    if actual != hash:
        log.warning("file_hash_mismatch", path=str(path), expected=hash, actual=actual)
        raise wrong_hash(str(path), hash, actual)
