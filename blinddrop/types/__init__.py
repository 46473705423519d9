"""
blinddrop.types
---------------

Shared record types. Seed-state types live in :mod:`blinddrop.seed.state`.
"""

from __future__ import annotations

from .core import (
    ZERO_OWNER,
    BlockIndex,
    Event,
    EventName,
    Owner,
    SeedEvent,
    TokenId,
    TransferEvent,
)

__all__ = [
    "ZERO_OWNER",
    "BlockIndex",
    "Event",
    "EventName",
    "Owner",
    "SeedEvent",
    "TokenId",
    "TransferEvent",
]
