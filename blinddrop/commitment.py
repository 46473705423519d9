# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Guardian seed commitment.

Definition
----------
C = SHA3-256( guardian_seed )

- ``guardian_seed`` is a 32-byte secret chosen by the guardian before the drop
  is constructed. It MUST be fresh for every drop.
- ``C`` is stored at construction time and never changes afterwards.

After the automatic seed is fixed, the guardian reveals ``guardian_seed``; the
reveal is accepted only if it hashes to ``C`` (constant-time comparison).

This module exposes:
- :func:`build_commitment` / :func:`build_commitment_hex`
- :func:`normalize_commitment` to turn hex/bytes into 32 raw bytes
- :func:`generate_guardian_seed` for tooling (fresh ``secrets`` bytes)
- :class:`Commitment`, the immutable store held by the drop
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Union

from blinddrop.constants import COMMITMENT_LEN, SEED_LEN
from blinddrop.utils.bytes import BytesLike, as_bytes, consteq, ensure_len, from_hex, to_hex
from blinddrop.utils.hash import sha3_256


def build_commitment(guardian_seed: BytesLike) -> bytes:
    """Compute the 32-byte commitment to a 32-byte guardian seed."""
    seed = ensure_len(guardian_seed, SEED_LEN, name="guardian_seed")
    return sha3_256(seed)


def build_commitment_hex(guardian_seed: BytesLike) -> str:
    """Hex-encoded convenience wrapper for :func:`build_commitment`."""
    return to_hex(build_commitment(guardian_seed))


def normalize_commitment(commitment: Union[BytesLike, str]) -> bytes:
    """
    Normalize a commitment into 32 raw bytes.

    Accepts bytes-like values or a hex string with/without ``0x``.
    """
    c = from_hex(commitment) if isinstance(commitment, str) else as_bytes(commitment)
    if len(c) != COMMITMENT_LEN:
        raise ValueError(f"commitment must be exactly {COMMITMENT_LEN} bytes")
    return c


def generate_guardian_seed() -> bytes:
    """Fresh uniformly random guardian seed. Keep it secret until the reveal."""
    return secrets.token_bytes(SEED_LEN)


@dataclass(frozen=True, slots=True)
class Commitment:
    """Immutable commitment to the guardian seed, fixed at construction."""

    digest: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.digest, (bytes, bytearray)):
            raise TypeError("digest must be bytes")
        if len(self.digest) != COMMITMENT_LEN:
            raise ValueError(f"digest must be exactly {COMMITMENT_LEN} bytes")

    @classmethod
    def parse(cls, value: Union[BytesLike, str]) -> "Commitment":
        return cls(normalize_commitment(value))

    @classmethod
    def for_seed(cls, guardian_seed: BytesLike) -> "Commitment":
        return cls(build_commitment(guardian_seed))

    def matches(self, candidate: BytesLike) -> bool:
        """True iff SHA3-256(candidate) equals the stored digest."""
        cand = as_bytes(candidate)
        if len(cand) != SEED_LEN:
            return False
        return consteq(sha3_256(cand), self.digest)

    @property
    def hex(self) -> str:
        return to_hex(self.digest)


__all__ = [
    "Commitment",
    "build_commitment",
    "build_commitment_hex",
    "normalize_commitment",
    "generate_guardian_seed",
]
