"""Error types raised by fetch-hash.

Every failure leaves the library as a ``FetchHashError``. The ``code`` field
identifies the failure kind; ``recoverable`` tells the caller whether the
same call may succeed if retried later (network hiccups, 5xx, 408 and 429
responses).
Underlying exceptions are chained via ``__cause__``.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    # Configuration
    REGISTRY_PROBLEM = "REGISTRY_PROBLEM"
    CANNOT_CREATE_CACHE_DIR = "CANNOT_CREATE_CACHE_DIR"
    INVALID_SETTINGS = "INVALID_SETTINGS"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    FETCH_HASH_NEW_FAILED = "FETCH_HASH_NEW_FAILED"
    # Lookup
    UNKNOWN_OR_BAD_FILE = "UNKNOWN_OR_BAD_FILE"
    # Transport
    DOWNLOAD_FAILED = "DOWNLOAD_FAILED"
    DOWNLOADED_FILE_NOT_SEEN = "DOWNLOADED_FILE_NOT_SEEN"
    # Integrity
    DOWNLOADED_FILE_WRONG_HASH = "DOWNLOADED_FILE_WRONG_HASH"
    # OS-level file and directory failures
    IO_ERROR = "IO_ERROR"


class FetchHashError(Exception):
    """Single exception type for every fetch-hash failure."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        recoverable: bool = False,
        details: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable
        self.details = details or {}

    def __repr__(self) -> str:
        return f"FetchHashError(code={self.code!s}, message={self.message!r})"


def unknown_or_bad_file(path: str) -> FetchHashError:
    return FetchHashError(
        ErrorCode.UNKNOWN_OR_BAD_FILE,
        f"Unknown or bad file '{path}'",
        details={"path": path},
    )


def wrong_hash(path: str, expected: str, actual: str) -> FetchHashError:
    return FetchHashError(
        ErrorCode.DOWNLOADED_FILE_WRONG_HASH,
        f"Downloaded file has wrong hash: {path}, expected: {expected}, actual: {actual}",
        details={"path": path, "expected": expected, "actual": actual},
    )


def io_error(exc: OSError, path: str | None = None) -> FetchHashError:
    """Wrap an ``OSError`` with the path being processed, if known."""
    details = {"path": path} if path is not None else {}
    return FetchHashError(ErrorCode.IO_ERROR, str(exc), details=details)
