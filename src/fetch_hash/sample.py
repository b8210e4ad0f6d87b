"""Process-wide sample ``FetchHash`` built from the packaged registry.

Applications should define their own module-level instance and
``sample_file``-style function for their own data files; this one exists as
a working example and for the test suite.
"""

from __future__ import annotations

from importlib.resources import files
from typing import TYPE_CHECKING

from fetch_hash.cache import FetchHash

if TYPE_CHECKING:
    import os
    from pathlib import Path

SAMPLE_URL_ROOT = "https://raw.githubusercontent.com/CarlKCarlK/fetch-data/main/tests/data/"
SAMPLE_ENV_KEY = "BAR_APP_DATA_DIR"

# Never raises; configuration problems surface on the first sample_file() call.
STATIC_FETCH_HASH = FetchHash(
    files("fetch_hash").joinpath("registry.txt").read_text(encoding="utf-8"),
    SAMPLE_URL_ROOT,
    SAMPLE_ENV_KEY,
    "com",
    "Foo Corp",
    "Bar App",
)


def sample_file(path: str | os.PathLike[str]) -> Path:
    """Return the local path of a sample data file, downloading it if needed."""
    return STATIC_FETCH_HASH.fetch_file(path)
