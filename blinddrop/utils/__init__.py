"""
blinddrop.utils
---------------

Byte/hex helpers and hashing primitives shared by the commitment store, the
seed finalizer and the generator. Standard library only.
"""

from __future__ import annotations

from .bytes import as_bytes, consteq, ensure_len, from_hex, is_hex, to_hex, xor_bytes
from .hash import sha3_256, shake_256_stream, u64_be

__all__ = [
    "as_bytes",
    "consteq",
    "ensure_len",
    "from_hex",
    "is_hex",
    "to_hex",
    "xor_bytes",
    "sha3_256",
    "shake_256_stream",
    "u64_be",
]
