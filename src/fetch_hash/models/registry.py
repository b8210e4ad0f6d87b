from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator


def is_registry_token(value: str) -> bool:
    """True if ``value`` fits in one whitespace-delimited registry column."""
    return bool(value) and not any(c.isspace() for c in value)


class RegistryEntry(BaseModel):
    """Single ``<path> <hash>`` line of registry text."""

    model_config = ConfigDict(frozen=True)

    path: str  # Logical path, also the cache-relative file name
    hash: str  # Lowercase hex SHA-256

    @field_validator("path", "hash")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if not is_registry_token(v):
            raise ValueError(f"Invalid registry token: {v!r}")
        return v

    def to_line(self) -> str:
        return f"{self.path} {self.hash}\n"
