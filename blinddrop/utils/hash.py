# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
blinddrop.utils.hash
====================

Thin hashing helpers on top of stdlib :mod:`hashlib`.

- :func:`sha3_256` — one-shot digest used for commitments and dev block hashes.
- :func:`shake_256_stream` — an incremental XOF reader over a domain-separated
  transcript. The generator reads each token's attribute stream from it.
- :func:`u64_be` — fixed-width integer encoding for transcripts.
"""

from __future__ import annotations

from hashlib import sha3_256 as _sha3_256
from hashlib import shake_256 as _shake_256
from typing import Iterable

__all__ = ["sha3_256", "shake_256_stream", "u64_be", "XofReader"]


def sha3_256(data: bytes) -> bytes:
    """Return SHA3-256(data)."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError("sha3_256 expects a bytes-like object")
    return _sha3_256(bytes(data)).digest()


def u64_be(n: int) -> bytes:
    """8-byte big-endian encoding of a non-negative integer."""
    if n < 0 or n >= 1 << 64:
        raise ValueError("u64 out of range")
    return int(n).to_bytes(8, "big")


class XofReader:
    """
    Sequential reader over a SHAKE-256 output.

    SHAKE's ``digest(n)`` is a prefix of ``digest(m)`` for ``n < m``, so we
    grow the materialized buffer geometrically and hand out slices in order.
    """

    __slots__ = ("_shake", "_buf", "_pos")

    _INITIAL = 256

    def __init__(self, parts: Iterable[bytes]):
        self._shake = _shake_256()
        for p in parts:
            self._shake.update(p)
        self._buf = self._shake.digest(self._INITIAL)
        self._pos = 0

    def read(self, n: int) -> bytes:
        if n <= 0:
            raise ValueError("n must be positive")
        end = self._pos + n
        if end > len(self._buf):
            size = len(self._buf)
            while size < end:
                size *= 2
            self._buf = self._shake.digest(size)
        out = self._buf[self._pos:end]
        self._pos = end
        return out

    @property
    def position(self) -> int:
        return self._pos


def shake_256_stream(domain: bytes, *parts: bytes) -> XofReader:
    """
    Open a SHAKE-256 stream over ``domain || u32(len(part)) || part ...``.

    Length prefixes keep adjacent parts from being ambiguous.
    """
    absorbed = [domain]
    for p in parts:
        absorbed.append(len(p).to_bytes(4, "big"))
        absorbed.append(bytes(p))
    return XofReader(absorbed)
