# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
BlindDrop: the single aggregate owning a drop's state.

Lifecycle
---------
    claim(owner)*                          while the window is open
    set_automatic_seed_block_number()      window closed (time or supply)
    set_automatic_seed()                   block mined
    set_guardian_seed(seed)                within the guardian window
      | set_fallback_seed_block_number()   after it, if the guardian is silent
        set_fallback_seed()
    set_final_seed()
    render(id) / token_uri(id)             final seed set, id allocated

Every public operation runs under one re-entrant lock, so preconditions are
re-checked and the effect applied atomically even when callers share the
instance across threads. Failed operations change nothing.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional

from blinddrop.allocation import AllocationGate
from blinddrop.commitment import Commitment
from blinddrop.config import DropConfig
from blinddrop.generator import AttributeSet, ProceduralGenerator, SlotAttribute
from blinddrop.ledger.dev import DevLedger, EventLog
from blinddrop.ledger.oracle import BlockOracle, Clock, EventSink
from blinddrop.metrics import METRICS, Metrics
from blinddrop.registry import TokenRegistry
from blinddrop.seed.finalizer import SeedFinalizer
from blinddrop.seed.state import SeedPhase
from blinddrop.types.core import BlockIndex, Owner, TokenId
from blinddrop.utils.bytes import BytesLike
from blinddrop.version import __version__
from blinddrop.window import DistributionWindow

logger = logging.getLogger(__name__)


class BlindDrop:
    """
    A fixed-supply, time-bounded drop with commit-reveal metadata.

    Args:
        config: validated construction parameters.
        oracle: block index/hash source.
        clock: time source; the window starts at ``clock.now()``.
        events: event sink for seed and transfer events.
        metrics: optional metrics container (defaults to the module singleton).
    """

    def __init__(
        self,
        config: DropConfig,
        *,
        oracle: BlockOracle,
        clock: Clock,
        events: EventSink,
        metrics: Optional[Metrics] = None,
    ) -> None:
        config.validate()
        self.config = config
        self._lock = threading.RLock()
        self._clock = clock
        self._events = events
        self._metrics = metrics or METRICS

        self.window = DistributionWindow(
            start_time=int(clock.now()),
            max_duration_s=config.max_distribution_s,
            max_supply=config.max_supply,
        )
        self.registry = TokenRegistry(events=events)
        self._gate = AllocationGate(
            window=self.window, registry=self.registry, clock=clock, metrics=self._metrics
        )
        self.finalizer = SeedFinalizer(
            commitment=config.commitment(),
            guardian_window_s=config.guardian_window_s,
            oracle=oracle,
            clock=clock,
            events=events,
            distribution_closed=lambda: self.window.is_closed(self._clock.now()),
            metrics=self._metrics,
        )
        self._generator = ProceduralGenerator(
            seed_source=self.finalizer.get_final_seed,
            exists=self.registry.exists,
            collection_name=config.collection_name,
            description=config.description,
            metrics=self._metrics,
        )
        logger.info("blind drop created: %s", self.window.describe(self.window.start_time))

    @classmethod
    def local(
        cls,
        config: DropConfig,
        *,
        ledger: Optional[DevLedger] = None,
        metrics: Optional[Metrics] = None,
    ) -> "BlindDrop":
        """Drop wired to a :class:`DevLedger` (oracle, clock and events in one)."""
        if ledger is None:
            ledger = DevLedger(lookback=config.block_hash_lookback)
        return cls(config, oracle=ledger, clock=ledger, events=ledger, metrics=metrics)

    # ---- Allocation ----

    def claim(self, owner: Owner) -> TokenId:
        with self._lock:
            return self._gate.claim(owner)

    def is_distribution_closed(self) -> bool:
        with self._lock:
            return self.window.is_closed(self._clock.now())

    # ---- Seed finalization ----

    def set_automatic_seed_block_number(self) -> BlockIndex:
        with self._lock:
            return self.finalizer.set_automatic_seed_block_number()

    def set_automatic_seed(self) -> bytes:
        with self._lock:
            return self.finalizer.set_automatic_seed()

    def set_guardian_seed(self, seed: BytesLike) -> bytes:
        with self._lock:
            return self.finalizer.set_guardian_seed(seed)

    def set_fallback_seed_block_number(self) -> BlockIndex:
        with self._lock:
            return self.finalizer.set_fallback_seed_block_number()

    def set_fallback_seed(self) -> bytes:
        with self._lock:
            return self.finalizer.set_fallback_seed()

    def set_final_seed(self) -> bytes:
        with self._lock:
            return self.finalizer.set_final_seed()

    def get_final_seed(self) -> bytes:
        with self._lock:
            return self.finalizer.get_final_seed()

    def compute_final_seed(self) -> bytes:
        with self._lock:
            return self.finalizer.compute_final_seed()

    @property
    def phase(self) -> SeedPhase:
        with self._lock:
            return self.finalizer.phase

    @property
    def commitment(self) -> Commitment:
        return self.finalizer.commitment

    @property
    def guardian_window_deadline(self) -> Optional[int]:
        with self._lock:
            return self.finalizer.guardian_window_deadline

    # ---- Metadata ----

    def render(self, token_id: int) -> tuple[AttributeSet, str]:
        with self._lock:
            return self._generator.render(token_id)

    def token_uri(self, token_id: int) -> str:
        with self._lock:
            return self._generator.token_uri(token_id)

    def slot(self, token_id: int, name: str) -> SlotAttribute:
        """One slot of a token (e.g. ``"weapon"``); KeyError for an unknown slot name."""
        attrs, _ = self.render(token_id)
        return attrs.get(name)

    # ---- Registry ----

    def owner_of(self, token_id: int) -> Owner:
        with self._lock:
            return self.registry.owner_of(token_id)

    def balance_of(self, owner: Owner) -> int:
        with self._lock:
            return self.registry.balance_of(owner)

    def total_supply(self) -> int:
        with self._lock:
            return self.registry.total_supply()

    def token_by_index(self, index: int) -> TokenId:
        with self._lock:
            return self.registry.token_by_index(index)

    def token_of_owner_by_index(self, owner: Owner, index: int) -> TokenId:
        with self._lock:
            return self.registry.token_of_owner_by_index(owner, index)

    def transfer(self, sender: Owner, to: Owner, token_id: int) -> None:
        with self._lock:
            self.registry.transfer(sender, to, token_id)

    # ---- Diagnostics ----

    @property
    def events(self) -> Optional[EventLog]:
        """The event log when the sink exposes one (e.g. a DevLedger)."""
        if isinstance(self._events, EventLog):
            return self._events
        return getattr(self._events, "log", None)

    def snapshot(self) -> Dict[str, Any]:
        """JSON-friendly view of the whole drop."""
        with self._lock:
            now = self._clock.now()
            owners: Dict[str, List[int]] = {}
            for i in range(self.registry.total_supply()):
                tid = int(self.registry.token_by_index(i))
                owners.setdefault(self.registry.owner_of(tid), []).append(tid)
            return {
                "version": __version__,
                "now": now,
                "commitment": self.commitment.hex,
                "window": self.window.to_dict(now),
                "seed": self.finalizer.state.to_dict(),
                "tokens": {"total_supply": self.registry.total_supply(), "owners": owners},
            }


__all__ = ["BlindDrop"]
