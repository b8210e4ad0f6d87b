from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from fetch_hash.errors import io_error

if TYPE_CHECKING:
    import os


def hash_file(path: str | os.PathLike[str]) -> str:
    """Return the lowercase hex SHA-256 digest of a local file."""
    try:
        with open(path, "rb") as f:
            return hashlib.file_digest(f, "sha256").hexdigest()
    except OSError as exc:
        raise io_error(exc, str(path)) from exc
