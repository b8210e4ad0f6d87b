"""Constants and small helpers shared by unit and integration tests."""

from __future__ import annotations

import hashlib

URL_ROOT = "https://example.test/data/"
ENV_KEY = "TEST_APP_DATA_DIR"

SMALL_FAM = (
    b"1 1 0 0 0 -9\n"
    b"2 2 0 0 0 -9\n"
    b"3 3 0 0 0 -9\n"
)
SMALL_BIM = (
    b"1\t1:1:A:C\t0.0\t1\tA\tC\n"
    b"1\t1:2:G:T\t0.0\t2\tG\tT\n"
)

# Well-known SHA-256 vectors
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ABC_SHA256 = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()
