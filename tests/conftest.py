"""Shared fixtures: registry text, served file contents, isolated cache dirs.

No test touches the real network or the real per-user cache directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers import ENV_KEY, SMALL_BIM, SMALL_FAM, sha256_hex

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def files() -> dict[str, bytes]:
    """Remote files served under URL_ROOT, keyed by logical path."""
    return {"small.fam": SMALL_FAM, "small.bim": SMALL_BIM}


@pytest.fixture()
def registry_text(files: dict[str, bytes]) -> str:
    return "".join(f"{name} {sha256_hex(data)}\n" for name, data in files.items())


@pytest.fixture()
def cache_root(tmp_path: Path) -> Path:
    """Cache directory override; deliberately not created up front."""
    return tmp_path / "cache" / "fetch-hash"


@pytest.fixture()
def environ(cache_root: Path) -> dict[str, str]:
    return {ENV_KEY: str(cache_root)}
