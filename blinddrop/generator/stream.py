# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Per-token pseudorandom stream.

Each token's attributes are read from a SHAKE-256 stream:

    SHAKE-256( DOMAIN_TOKEN_STREAM || u32(32) || final_seed || u32(8) || u64(token_id) )

Anyone holding the public final seed can recompute the stream for any token,
which is what makes the rendered metadata verifiable.

Bounded integers are drawn by rejection sampling 64-bit words, so table
lookups carry no modulo bias.
"""

from __future__ import annotations

from blinddrop.constants import DOMAIN_TOKEN_STREAM, SEED_LEN
from blinddrop.utils.bytes import ensure_len
from blinddrop.utils.hash import XofReader, shake_256_stream, u64_be

_WORD = 8
_WORD_SPACE = 1 << 64


class TokenStream:
    """Sequential draws from one token's stream."""

    __slots__ = ("token_id", "_xof", "draws")

    def __init__(self, final_seed: bytes, token_id: int) -> None:
        seed = ensure_len(final_seed, SEED_LEN, name="final_seed")
        if token_id < 1:
            raise ValueError("token_id must be >= 1")
        self.token_id = int(token_id)
        self._xof: XofReader = shake_256_stream(DOMAIN_TOKEN_STREAM, seed, u64_be(token_id))
        self.draws = 0

    def read(self, n: int) -> bytes:
        return self._xof.read(n)

    def word(self) -> int:
        return int.from_bytes(self._xof.read(_WORD), "big")

    def uniform(self, bound: int) -> int:
        """Uniform integer in ``[0, bound)``."""
        if bound <= 0:
            raise ValueError("bound must be positive")
        limit = _WORD_SPACE - (_WORD_SPACE % bound)
        while True:
            x = self.word()
            if x < limit:
                self.draws += 1
                return x % bound


__all__ = ["TokenStream"]
