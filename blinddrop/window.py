# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Distribution window: time and supply caps for claiming.

The window is anchored at the drop's construction time and closes when
EITHER bound is hit, whichever comes first:

    closed_by_time(now)  ⇔  now >= start_time + max_duration_s
    closed_by_supply()   ⇔  minted_count == max_supply

Layout (all times in integer seconds, as read from the ledger clock):

    [start_time, ends_at) → OPEN (unless supply exhausted)
    [ends_at, ∞)          → CLOSED

Notes
-----
- Helpers are time-passive: the caller passes ``now`` so unit tests stay
  deterministic.
- ``minted_count`` only moves through :meth:`DistributionWindow.record_claim`,
  which refuses to exceed ``max_supply``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional

from blinddrop.errors import DistributionClosed, SupplyExhausted


class WindowStatus(Enum):
    """High-level state of the distribution."""
    OPEN = auto()
    CLOSED_BY_TIME = auto()
    CLOSED_BY_SUPPLY = auto()


@dataclass(slots=True)
class DistributionWindow:
    start_time: int
    max_duration_s: int
    max_supply: int
    minted_count: int = 0

    def __post_init__(self) -> None:
        if self.start_time < 0:
            raise ValueError("start_time must be non-negative")
        if self.max_duration_s <= 0:
            raise ValueError("max_duration_s must be positive")
        if self.max_supply <= 0:
            raise ValueError("max_supply must be positive")
        if not (0 <= self.minted_count <= self.max_supply):
            raise ValueError("minted_count must be in [0, max_supply]")

    # ---- Boundaries ----

    @property
    def ends_at(self) -> int:
        return self.start_time + self.max_duration_s

    @property
    def remaining_supply(self) -> int:
        return self.max_supply - self.minted_count

    def time_remaining(self, now_s: int) -> int:
        """Seconds until the time bound (0 once passed)."""
        return max(0, self.ends_at - now_s)

    # ---- Status ----

    def closed_by_time(self, now_s: int) -> bool:
        return now_s >= self.ends_at

    def closed_by_supply(self) -> bool:
        return self.minted_count >= self.max_supply

    def is_closed(self, now_s: int) -> bool:
        return self.closed_by_time(now_s) or self.closed_by_supply()

    def status(self, now_s: int) -> WindowStatus:
        # Supply takes precedence: once sold out the time bound is irrelevant.
        if self.closed_by_supply():
            return WindowStatus.CLOSED_BY_SUPPLY
        if self.closed_by_time(now_s):
            return WindowStatus.CLOSED_BY_TIME
        return WindowStatus.OPEN

    # ---- Enforcement ----

    def enforce_claim(self, now_s: int) -> None:
        """
        Raise if a claim is not allowed at ``now_s``.

        Raises:
            DistributionClosed: the time bound has passed.
            SupplyExhausted: the max supply has been minted.
        """
        if self.closed_by_time(now_s):
            raise DistributionClosed(now=now_s, ends_at=self.ends_at)
        if self.closed_by_supply():
            raise SupplyExhausted(max_supply=self.max_supply)

    def record_claim(self, now_s: int) -> int:
        """Consume one unit of supply; returns the new minted count (1-based id)."""
        self.enforce_claim(now_s)
        self.minted_count += 1
        return self.minted_count

    # ---- Convenience ----

    def to_dict(self, now_s: Optional[int] = None) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "start_time": self.start_time,
            "ends_at": self.ends_at,
            "max_duration_s": self.max_duration_s,
            "max_supply": self.max_supply,
            "minted_count": self.minted_count,
        }
        if now_s is not None:
            out["status"] = self.status(now_s).name.lower()
            out["time_remaining_s"] = self.time_remaining(now_s)
        return out

    def describe(self, now_s: int) -> str:
        """Human-readable summary for diagnostics and logs."""
        return (
            f"window: start={self.start_time}, ends_at={self.ends_at}, "
            f"minted={self.minted_count}/{self.max_supply}, "
            f"status={self.status(now_s).name}"
        )


__all__ = ["DistributionWindow", "WindowStatus"]
