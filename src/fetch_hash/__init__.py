from __future__ import annotations

from fetch_hash.cache import FetchHash
from fetch_hash.cache_dir import resolve_cache_dir
from fetch_hash.config import FetcherSettings, LoggingSettings, Settings
from fetch_hash.errors import ErrorCode, FetchHashError
from fetch_hash.fetcher import Fetcher, build_http_client, download, fetch, hash_download
from fetch_hash.hashing import hash_file
from fetch_hash.logging_config import configure_logging
from fetch_hash.registry import dir_to_file_list, parse_registry

__all__ = [
    # core
    "FetchHash",
    # errors
    "ErrorCode",
    "FetchHashError",
    # config
    "Settings",
    "FetcherSettings",
    "LoggingSettings",
    "configure_logging",
    # utilities
    "Fetcher",
    "build_http_client",
    "download",
    "fetch",
    "hash_download",
    "hash_file",
    "parse_registry",
    "dir_to_file_list",
    "resolve_cache_dir",
]
