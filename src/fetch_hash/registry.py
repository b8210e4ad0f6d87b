"""Registry text parsing and registry-generation helpers.

Registry text is one ``<relative-path> <hex-hash>`` pair per line, fields
separated by any run of whitespace. Blank lines are skipped. There are no
comments and no quoting, so paths cannot contain whitespace.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from pydantic import ValidationError

from fetch_hash.errors import ErrorCode, FetchHashError, io_error
from fetch_hash.models.registry import RegistryEntry

if TYPE_CHECKING:
    from collections.abc import Iterator


def _registry_problem(line_number: int, line: str) -> FetchHashError:
    return FetchHashError(
        ErrorCode.REGISTRY_PROBLEM,
        "The registry of files is invalid",
        details={"line_number": str(line_number), "line": line.strip()},
    )


def iter_registry_entries(registry_contents: str) -> Iterator[RegistryEntry]:
    """Yield one entry per non-blank line; raise on the first malformed line."""
    for line_number, line in enumerate(registry_contents.splitlines(), start=1):
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) != 2:
            raise _registry_problem(line_number, line)
        try:
            yield RegistryEntry(path=tokens[0], hash=tokens[1])
        except ValidationError as exc:
            raise _registry_problem(line_number, line) from exc


def parse_registry(registry_contents: str) -> dict[str, str]:
    """Parse registry text into ``{path: hash}``.

    All-or-nothing: one malformed line fails the whole parse. A path listed
    twice keeps its last hash.
    """
    return {entry.path: entry.hash for entry in iter_registry_entries(registry_contents)}


def dir_to_file_list(path: str | os.PathLike[str]) -> list[str]:
    """Return the sorted entry names of a local directory.

    Feed the result to ``FetchHash.gen_registry_contents`` to build registry
    text for a directory of data files that has been published at a URL root.
    """
    try:
        return sorted(os.listdir(path))
    except OSError as exc:
        raise io_error(exc, str(path)) from exc
