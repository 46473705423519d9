# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Allocation gate: turns claims into sequential token ids.

A claim succeeds only while the :class:`~blinddrop.window.DistributionWindow`
is open. On success the window's minted count moves by one and the registry
mints the next id to the claimer; the two counters always agree
(``token_id == minted_count``).

Failures (no state change):
    DistributionClosed — the time bound has passed
    SupplyExhausted    — the max supply has been minted
"""

from __future__ import annotations

import logging
from typing import Optional

from blinddrop.errors import DistributionClosed, SupplyExhausted
from blinddrop.ledger.oracle import Clock
from blinddrop.metrics import METRICS, Metrics
from blinddrop.registry import TokenRegistry
from blinddrop.types.core import Owner, TokenId
from blinddrop.window import DistributionWindow

logger = logging.getLogger(__name__)


class AllocationGate:
    def __init__(
        self,
        *,
        window: DistributionWindow,
        registry: TokenRegistry,
        clock: Clock,
        metrics: Optional[Metrics] = None,
    ) -> None:
        if registry.total_supply() != window.minted_count:
            raise ValueError("registry supply and window minted count disagree")
        self._window = window
        self._registry = registry
        self._clock = clock
        self._metrics = metrics or METRICS

    def claim(self, owner: Owner) -> TokenId:
        """Claim the next token for ``owner``; returns its id."""
        now = self._clock.now()
        try:
            self._window.enforce_claim(now)
        except DistributionClosed:
            self._metrics.record_claim("distribution_closed")
            raise
        except SupplyExhausted:
            self._metrics.record_claim("supply_exhausted")
            raise
        token_id = self._registry.mint(owner)
        minted = self._window.record_claim(now)
        if int(token_id) != minted:
            raise RuntimeError(f"token id {token_id} != minted count {minted}")
        self._metrics.record_claim("ok")
        logger.debug("claimed token %d for %s (%d left)", token_id, owner, self._window.remaining_supply)
        if self._window.closed_by_supply():
            logger.info("max supply of %d reached; distribution closed", self._window.max_supply)
        return token_id


__all__ = ["AllocationGate"]
