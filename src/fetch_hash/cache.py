"""Hash-verified local cache of remote data files.

``FetchHash`` maps logical file names to local paths. A file is downloaded
from ``url_root + name`` only when it is missing from the cache directory,
and every lookup re-hashes the local copy against the registry before
returning it. A stale or tampered file is reported, never returned and never
deleted.

Construction never raises, so an instance can live in a module-level
constant. Configuration problems (bad registry text, no usable cache
directory) are stored and re-raised as ``FETCH_HASH_NEW_FAILED`` on every
later call.

One lock per instance guards every operation for its whole duration: two
threads asking the same instance for different files still run one after
the other. ``threading.Lock`` is released when an exception leaves the
``with`` block, so a failing call never blocks later callers.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from pathlib import Path, PurePath, PurePosixPath
from types import MappingProxyType
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from fetch_hash.cache_dir import resolve_cache_dir
from fetch_hash.config import Settings
from fetch_hash.errors import ErrorCode, FetchHashError, unknown_or_bad_file, wrong_hash
from fetch_hash.fetcher import Fetcher, build_http_client
from fetch_hash.hashing import hash_file
from fetch_hash.models.registry import RegistryEntry, is_registry_token
from fetch_hash.registry import parse_registry

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    import httpx

log = structlog.get_logger()


@dataclass(frozen=True)
class _Internals:
    registry: Mapping[str, str]
    cache_dir: Path
    url_root: str
    fetcher: Fetcher
    owns_client: bool


class FetchHash:
    """Fetch data files from a URL root if needed; verify contents by SHA-256.

    Args:
        registry_contents: Whitespace-delimited ``<path> <hash>`` lines.
        url_root: Prefix prepended verbatim to each path to form its URL.
        env_key: Environment variable that may hold the cache directory.
        qualifier: Reverse-domain qualifier, e.g. ``"com"``.
        organization: Organization name, e.g. ``"Foo Corp"``.
        application: Application name, e.g. ``"Bar App"``.
        settings: Overrides settings loaded from env vars / fetch_hash.yaml.
        client: HTTP client to use instead of one built from settings.
        environ: Mapping consulted for ``env_key`` instead of ``os.environ``.
    """

    def __init__(
        self,
        registry_contents: str,
        url_root: str,
        env_key: str,
        qualifier: str,
        organization: str,
        application: str,
        *,
        settings: Settings | None = None,
        client: httpx.Client | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._state: _Internals | FetchHashError
        try:
            self._state = self._build(
                registry_contents,
                url_root,
                env_key,
                qualifier,
                organization,
                application,
                settings,
                client,
                environ,
            )
        except FetchHashError as exc:
            log.warning("fetch_hash_new_failed", code=exc.code, error=exc.message)
            self._state = exc
        except Exception as exc:
            # Anything else comes from arguments of the wrong type
            log.warning(
                "fetch_hash_new_failed", code=ErrorCode.INVALID_ARGUMENTS, error=repr(exc)
            )
            error = FetchHashError(ErrorCode.INVALID_ARGUMENTS, f"Invalid arguments: {exc!r}")
            error.__cause__ = exc
            self._state = error

    @staticmethod
    def _build(
        registry_contents: str,
        url_root: str,
        env_key: str,
        qualifier: str,
        organization: str,
        application: str,
        settings: Settings | None,
        client: httpx.Client | None,
        environ: Mapping[str, str] | None,
    ) -> _Internals:
        if settings is None:
            try:
                settings = Settings()
            except ValidationError as exc:
                raise FetchHashError(
                    ErrorCode.INVALID_SETTINGS, f"Invalid settings: {exc}"
                ) from exc
        cache_dir = resolve_cache_dir(env_key, qualifier, organization, application, environ)
        registry = parse_registry(registry_contents)
        owns_client = client is None
        if client is None:
            client = build_http_client(settings.fetcher)
        return _Internals(
            registry=MappingProxyType(registry),
            cache_dir=cache_dir,
            url_root=str(url_root),
            fetcher=Fetcher(client, settings.fetcher),
            owns_client=owns_client,
        )

    def __enter__(self) -> FetchHash:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        with self._lock:
            if isinstance(self._state, _Internals) and self._state.owns_client:
                self._state.fetcher.close()

    def _internals(self) -> _Internals:
        # Caller must hold self._lock.
        state = self._state
        if isinstance(state, FetchHashError):
            raise FetchHashError(
                ErrorCode.FETCH_HASH_NEW_FAILED,
                f"FetchHash new failed with error: {state.message}",
                details={"cause_code": str(state.code), **state.details},
            ) from state
        return state

    # ------------------------------------------------------------------
    # Ensure operations
    # ------------------------------------------------------------------

    def fetch_file(self, path: str | os.PathLike[str]) -> Path:
        """Return the local path of one registered file, downloading it if needed.

        Example::

            fetch_hash = FetchHash(
                "small.fam 36e0086c0353ff336d0533330dbacb12c75e37dc3cba174313635b98dfe86ed2",
                "https://raw.githubusercontent.com/CarlKCarlK/fetch-data/main/tests/data/",
                "BAR_APP_DATA_DIR",
                "com",
                "Foo Corp",
                "Bar App",
            )
            local_path = fetch_hash.fetch_file("small.fam")
        """
        return self.fetch_files([path])[0]

    def fetch_files(self, paths: Iterable[str | os.PathLike[str]]) -> list[Path]:
        """Return local paths for registered files, in input order.

        Fails fast: the first unknown, undownloadable or mismatching file
        raises, and no partial list is returned. Files fetched before the
        failure stay in the cache.
        """
        with self._lock:
            internals = self._internals()
            local_paths: list[Path] = []
            for path in paths:
                key = _registry_key(path)
                expected = internals.registry.get(key)
                if expected is None:
                    raise unknown_or_bad_file(key)

                local_path = _local_path(internals.cache_dir, key)
                if not local_path.exists():
                    internals.fetcher.download(internals.url_root + key, local_path)

                actual = hash_file(local_path)
                if actual != expected:
                    log.warning(
                        "file_hash_mismatch", path=key, expected=expected, actual=actual
                    )
                    raise wrong_hash(key, expected, actual)
                local_paths.append(local_path)
            return local_paths

    # ------------------------------------------------------------------
    # Registry generation
    # ------------------------------------------------------------------

    def gen_registry_contents(self, paths: Iterable[str | os.PathLike[str]]) -> str:
        """Download every path (even if cached), hash it, and return registry text.

        The registry given at construction is ignored, so an instance built
        with empty registry contents works. Hashes describe the downloaded
        bytes, not any local originals.
        """
        with self._lock:
            internals = self._internals()
            lines: list[str] = []
            for path in paths:
                key = _registry_key(path)
                if not is_registry_token(key):
                    # Could never be written back as a registry line
                    raise unknown_or_bad_file(key)
                local_path = _local_path(internals.cache_dir, key)
                internals.fetcher.download(internals.url_root + key, local_path)
                entry = RegistryEntry(path=key, hash=hash_file(local_path))
                log.debug("registry_entry_generated", path=key, hash=entry.hash)
                lines.append(entry.to_line())
            return "".join(lines)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def cache_dir(self) -> Path:
        """Return the local cache directory."""
        with self._lock:
            return self._internals().cache_dir

    @property
    def registry(self) -> Mapping[str, str]:
        """Read-only view of the parsed registry."""
        with self._lock:
            return self._internals().registry

    @property
    def url_root(self) -> str:
        with self._lock:
            return self._internals().url_root


def _registry_key(path: object) -> str:
    """Convert a caller-supplied path to its registry key."""
    if isinstance(path, str):
        key = path
    elif isinstance(path, os.PathLike):
        try:
            raw = os.fspath(path)
        except TypeError:
            raise unknown_or_bad_file("???") from None
        if not isinstance(raw, str):
            raise unknown_or_bad_file("???")
        key = PurePath(raw).as_posix()
    else:
        raise unknown_or_bad_file("???")
    try:
        key.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates from undecodable file names
        raise unknown_or_bad_file("???") from None
    return key


def _local_path(cache_dir: Path, key: str) -> Path:
    """Join a registry key onto the cache directory, refusing to leave it."""
    relative = PurePosixPath(key)
    if relative.is_absolute() or ".." in relative.parts or PurePath(key).anchor:
        raise unknown_or_bad_file(key)
    return cache_dir.joinpath(*relative.parts)
