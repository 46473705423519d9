# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Blind-drop errors.

Every precondition violation in the drop (claim gating, seed finalization,
metadata queries, registry lookups) is surfaced synchronously as a subclass of
:class:`DropError`. Each subclass carries:

- ``reason``    — a stable, human-readable string (safe to match on);
- ``retryable`` — True when the blocking condition can change later (wait for a
  block, wait for the guardian window), False when the precondition is
  permanently violated (e.g. a set-once field is already set).

Optional context fields (block indexes, timestamps) are included in ``str(e)``
but never in ``reason``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from typing import ClassVar, Optional


class DropError(Exception):
    """Base class for all blind-drop errors."""

    reason: ClassVar[str] = "blind drop error"
    retryable: ClassVar[bool] = False

    def context(self) -> dict:
        if not is_dataclass(self):
            return {}
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def __str__(self) -> str:
        ctx = self.context()
        if not ctx:
            return self.reason
        detail = " ".join(f"{k}={v}" for k, v in ctx.items())
        return f"{self.reason} ({detail})"


# ---------------------------------------------------------------------------
# Allocation gate
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class DistributionClosed(DropError):
    """Claim attempted after the distribution's time bound."""

    reason: ClassVar[str] = "Distribution has ended"
    now: Optional[int] = None
    ends_at: Optional[int] = None


@dataclass(eq=False)
class SupplyExhausted(DropError):
    """Claim attempted after the max supply was minted."""

    reason: ClassVar[str] = "Max supply exceeded"
    max_supply: Optional[int] = None


# ---------------------------------------------------------------------------
# Seed finalization
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class DistributionNotOver(DropError):
    reason: ClassVar[str] = "Distribution not over"
    retryable: ClassVar[bool] = True
    now: Optional[int] = None
    ends_at: Optional[int] = None


@dataclass(eq=False)
class SeedBlockAlreadySet(DropError):
    reason: ClassVar[str] = "Seed block number already set"
    block_index: Optional[int] = None


@dataclass(eq=False)
class SeedBlockNotSet(DropError):
    reason: ClassVar[str] = "Block number not set"
    retryable: ClassVar[bool] = True


@dataclass(eq=False)
class BlockNotMined(DropError):
    """The recorded seed block is not yet part of the chain."""

    reason: ClassVar[str] = "Block number not mined"
    retryable: ClassVar[bool] = True
    block_index: Optional[int] = None
    current_index: Optional[int] = None


@dataclass(eq=False)
class AutomaticSeedAlreadySet(DropError):
    reason: ClassVar[str] = "Automatic seed already set"


@dataclass(eq=False)
class AutomaticSeedNotSet(DropError):
    reason: ClassVar[str] = "Automatic seed not set"
    retryable: ClassVar[bool] = True


@dataclass(eq=False)
class SeedAlreadySet(DropError):
    """The guardian or fallback branch was already taken."""

    reason: ClassVar[str] = "Seed already set"
    path: Optional[str] = None


@dataclass(eq=False)
class GuardianWindowElapsed(DropError):
    reason: ClassVar[str] = "Guardian window elapsed"
    now: Optional[int] = None
    deadline: Optional[int] = None


@dataclass(eq=False)
class GuardianWindowNotEnded(DropError):
    reason: ClassVar[str] = "Guardian window has not ended"
    retryable: ClassVar[bool] = True
    now: Optional[int] = None
    deadline: Optional[int] = None


@dataclass(eq=False)
class GuardianSeedInvalid(DropError):
    """The candidate guardian seed does not hash to the stored commitment."""

    reason: ClassVar[str] = "Guardian seed invalid"
    expected_commitment_hex: Optional[str] = None
    got_commitment_hex: Optional[str] = None


@dataclass(eq=False)
class SeedsNotSet(DropError):
    reason: ClassVar[str] = "Guardian/fallback seed not set"
    retryable: ClassVar[bool] = True


@dataclass(eq=False)
class FinalSeedAlreadySet(DropError):
    reason: ClassVar[str] = "Final seed already set"


@dataclass(eq=False)
class FinalSeedNotSet(DropError):
    reason: ClassVar[str] = "Final seed not set"
    retryable: ClassVar[bool] = True


@dataclass(eq=False)
class SetOnceViolation(DropError):
    """A set-once field was written twice. Indicates a missing guard upstream."""

    reason: ClassVar[str] = "Set-once field already set"
    field_name: Optional[str] = None


# ---------------------------------------------------------------------------
# Metadata / registry
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class UnknownIdentifier(DropError):
    reason: ClassVar[str] = "Nonexistent token"
    token_id: Optional[int] = None


@dataclass(eq=False)
class TokenNotFound(DropError):
    reason: ClassVar[str] = "Owner query for nonexistent token"
    token_id: Optional[int] = None


@dataclass(eq=False)
class IndexOutOfRange(DropError):
    reason: ClassVar[str] = "Index out of bounds"
    index: Optional[int] = None
    size: Optional[int] = None


@dataclass(eq=False)
class NotTokenOwner(DropError):
    reason: ClassVar[str] = "Transfer from incorrect owner"
    token_id: Optional[int] = None


__all__ = [
    "DropError",
    "DistributionClosed",
    "SupplyExhausted",
    "DistributionNotOver",
    "SeedBlockAlreadySet",
    "SeedBlockNotSet",
    "BlockNotMined",
    "AutomaticSeedAlreadySet",
    "AutomaticSeedNotSet",
    "SeedAlreadySet",
    "GuardianWindowElapsed",
    "GuardianWindowNotEnded",
    "GuardianSeedInvalid",
    "SeedsNotSet",
    "FinalSeedAlreadySet",
    "FinalSeedNotSet",
    "SetOnceViolation",
    "UnknownIdentifier",
    "TokenNotFound",
    "IndexOutOfRange",
    "NotTokenOwner",
]
