"""Integration test fixtures.

Provides a ``FetchHash`` wired to an isolated cache directory via the
override mapping. HTTP is mocked per test with respx.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from fetch_hash.cache import FetchHash
from tests.helpers import ENV_KEY, URL_ROOT

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture()
def make_fetch_hash(environ: dict[str, str]):
    """Factory for FetchHash instances; closes them after the test."""
    created: list[FetchHash] = []

    def _make(registry_contents: str, url_root: str = URL_ROOT, **kwargs) -> FetchHash:
        kwargs.setdefault("environ", environ)
        fetch_hash = FetchHash(
            registry_contents, url_root, ENV_KEY, "com", "Foo Corp", "Bar App", **kwargs
        )
        created.append(fetch_hash)
        return fetch_hash

    yield _make
    for fetch_hash in created:
        fetch_hash.close()


@pytest.fixture()
def fetch_hash(make_fetch_hash: Callable[..., FetchHash], registry_text: str) -> FetchHash:
    return make_fetch_hash(registry_text)
