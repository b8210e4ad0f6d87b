"""Cache-directory resolution.

An explicit override (normally an environment variable) wins. Otherwise the
directory is the per-user cache directory of the application, named the way
each platform names application directories:

  macOS    ~/Library/Caches/com.Foo-Corp.Bar-App
  Windows  %LOCALAPPDATA%\\Foo Corp\\Bar App\\cache
  others   $XDG_CACHE_HOME/barapp
"""

from __future__ import annotations

import os
import re
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import platformdirs
import structlog

from fetch_hash.errors import ErrorCode, FetchHashError, io_error

if TYPE_CHECKING:
    from collections.abc import Mapping

log = structlog.get_logger()


def project_cache_dir(qualifier: str, organization: str, application: str) -> Path | None:
    """Platform-convention cache directory, or None if none can be derived."""
    if sys.platform == "darwin":
        parts = (re.sub(r"\s+", "-", p.strip()) for p in (qualifier, organization, application))
        bundle_id = ".".join(p for p in parts if p)
        if not bundle_id:
            return None
        path = Path(platformdirs.user_cache_dir(bundle_id))
    elif sys.platform == "win32":
        if not application.strip():
            return None
        path = Path(
            platformdirs.user_cache_dir(
                application.strip(), organization.strip() or False, opinion=False
            )
        ) / "cache"
    else:
        name = "".join(application.split()).lower()
        if not name:
            return None
        path = Path(platformdirs.user_cache_dir(name))

    # platformdirs leaves "~" unexpanded when there is no home directory
    if not path.is_absolute():
        return None
    return path


def resolve_cache_dir(
    env_key: str,
    qualifier: str,
    organization: str,
    application: str,
    environ: Mapping[str, str] | None = None,
) -> Path:
    """Return the cache directory, creating it and its ancestors if missing."""
    environ = os.environ if environ is None else environ
    override = environ.get(env_key, "") if env_key else ""

    if override:
        cache_dir = Path(override)
    else:
        try:
            derived = project_cache_dir(qualifier, organization, application)
        except RuntimeError as exc:
            # Path.home() and friends raise RuntimeError when HOME is unknown
            raise FetchHashError(
                ErrorCode.CANNOT_CREATE_CACHE_DIR, "Cannot create cache directory"
            ) from exc
        if derived is None:
            raise FetchHashError(ErrorCode.CANNOT_CREATE_CACHE_DIR, "Cannot create cache directory")
        cache_dir = derived

    if not cache_dir.exists():
        try:
            cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise io_error(exc, str(cache_dir)) from exc
        log.info("cache_dir_created", cache_dir=str(cache_dir))
    return cache_dir
