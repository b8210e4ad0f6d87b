from __future__ import annotations

from fetch_hash.models.registry import RegistryEntry

__all__ = [
    "RegistryEntry",
]
