from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NewType, Union

"""
Core typed primitives for the blind drop.

These are intentionally minimal and free of heavy dependencies so they can be
shared across submodules (allocation, seed finalization, generator, CLI and
tests).

Types provided:
  • TokenId     — integer-typed token identifier (1-based, sequential)
  • BlockIndex  — integer-typed block index
  • Owner       — opaque owner handle (string address in the dev ledger)
  • EventName   — names of the observable events
  • SeedEvent   — a revealed seed value, recoverable even after its source
                  block hash is pruned
  • TransferEvent — registry mint/transfer record
"""

# ---- Simple newtypes ---------------------------------------------------------

TokenId = NewType("TokenId", int)
BlockIndex = NewType("BlockIndex", int)
Owner = str

# Internal constants (kept local to avoid import cycles)
_SEED32 = 32
ZERO_OWNER: Owner = "0x" + "00" * 20


def _require_len(name: str, b: bytes, n: int) -> None:
    if len(b) != n:
        raise ValueError(f"{name} must be exactly {n} bytes (got {len(b)})")


def _require_nonneg(name: str, v: int) -> None:
    if v < 0:
        raise ValueError(f"{name} must be non-negative (got {v})")


class EventName(str, Enum):
    AUTOMATIC_SEED_SET = "AutomaticSeedSet"
    GUARDIAN_SEED_SET = "GuardianSeedSet"
    FALLBACK_SEED_SET = "FallbackSeedSet"
    TRANSFER = "Transfer"


# ---- Events ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SeedEvent:
    """
    A seed revealed by one of the finalization steps.

    Fields:
      name        — which step produced the seed
      seed        — the 32-byte seed value
      block_index — block index current when the event was emitted
      timestamp   — environment time when the event was emitted
    """

    name: EventName
    seed: bytes
    block_index: BlockIndex
    timestamp: int

    def __post_init__(self) -> None:  # type: ignore[override]
        if self.name not in (
            EventName.AUTOMATIC_SEED_SET,
            EventName.GUARDIAN_SEED_SET,
            EventName.FALLBACK_SEED_SET,
        ):
            raise ValueError(f"not a seed event: {self.name!r}")
        if not isinstance(self.seed, (bytes, bytearray)):
            raise TypeError("seed must be bytes")
        _require_len("seed", self.seed, _SEED32)
        _require_nonneg("block_index", int(self.block_index))
        _require_nonneg("timestamp", int(self.timestamp))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name.value,
            "seed": "0x" + bytes(self.seed).hex(),
            "block_index": int(self.block_index),
            "timestamp": int(self.timestamp),
        }


@dataclass(frozen=True, slots=True)
class TransferEvent:
    """
    Ownership change recorded by the registry. Mints use ``ZERO_OWNER`` as sender.
    """

    sender: Owner
    to: Owner
    token_id: TokenId

    @property
    def name(self) -> EventName:
        return EventName.TRANSFER

    def __post_init__(self) -> None:  # type: ignore[override]
        if not isinstance(self.token_id, int):
            raise TypeError("token_id must be an int (TokenId)")
        if int(self.token_id) < 1:
            raise ValueError("token_id must be >= 1")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": EventName.TRANSFER.value,
            "from": self.sender,
            "to": self.to,
            "token_id": int(self.token_id),
        }


Event = Union[SeedEvent, TransferEvent]


__all__ = [
    "TokenId",
    "BlockIndex",
    "Owner",
    "ZERO_OWNER",
    "EventName",
    "SeedEvent",
    "TransferEvent",
    "Event",
]
