# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Seed finalization for the blind drop.

Protocol
--------
Once the distribution window is closed the final seed is produced in steps,
each of which can happen exactly once:

    1. set_automatic_seed_block_number()  record B_a = head + 1 (a future block)
    2. set_automatic_seed()               S_a = hash(B_a) once B_a is mined;
                                          opens the guardian window
    3a. set_guardian_seed(s)              S_r = s, if SHA3-256(s) == commitment
                                          and the guardian window is open
    3b. set_fallback_seed_block_number()  after the guardian window: B_f = head + 1
        set_fallback_seed()               S_r = hash(B_f) once B_f is mined
    4. set_final_seed()                   S = S_a XOR S_r

Bias resistance
---------------
Both block-derived seeds are bound to a block index chosen *before* its hash
exists. The guardian's seed is hidden behind the commitment until after S_a is
fixed, and S_a is unknown when the commitment is made, so neither party alone
controls S. The fallback branch keeps the drop live if the guardian never
reveals; its seed is still unknown until after the guardian window closes.

Timing
------
- Guardian reveal accepted while ``now <= deadline`` (inclusive).
- Fallback block accepted once ``now > deadline``.
- ``deadline = automatic_seed_set_at + guardian_window_s``.

All helpers read block indexes/hashes from a :class:`BlockOracle` and time
from a :class:`Clock`; nothing here blocks or retries. Every failure raises a
:class:`~blinddrop.errors.DropError` subclass *before* any state is written.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from blinddrop.commitment import Commitment
from blinddrop.constants import SEED_LEN
from blinddrop.errors import (
    AutomaticSeedAlreadySet,
    AutomaticSeedNotSet,
    BlockNotMined,
    DistributionNotOver,
    DropError,
    FinalSeedAlreadySet,
    FinalSeedNotSet,
    GuardianSeedInvalid,
    GuardianWindowElapsed,
    GuardianWindowNotEnded,
    SeedAlreadySet,
    SeedBlockAlreadySet,
    SeedBlockNotSet,
    SeedsNotSet,
)
from blinddrop.ledger.oracle import BlockOracle, Clock, EventSink
from blinddrop.metrics import METRICS, Metrics
from blinddrop.seed.state import FallbackReveal, GuardianReveal, SeedPhase, SeedState
from blinddrop.types.core import BlockIndex, EventName, SeedEvent
from blinddrop.utils.bytes import as_bytes, ensure_len, to_hex
from blinddrop.utils.hash import sha3_256

logger = logging.getLogger(__name__)


class SeedFinalizer:
    """
    Drives :class:`SeedState` through the finalization protocol.

    Args:
        commitment: the guardian seed commitment fixed at construction.
        guardian_window_s: how long the guardian has to reveal after S_a is set.
        oracle: block index / hash source.
        clock: time source.
        events: sink for the seed-revealing events.
        distribution_closed: callback telling whether claiming is over.
        metrics: optional metrics container (defaults to the module singleton).
    """

    def __init__(
        self,
        *,
        commitment: Commitment,
        guardian_window_s: int,
        oracle: BlockOracle,
        clock: Clock,
        events: EventSink,
        distribution_closed: Callable[[], bool],
        metrics: Optional[Metrics] = None,
    ) -> None:
        if guardian_window_s <= 0:
            raise ValueError("guardian_window_s must be positive")
        self._commitment = commitment
        self._oracle = oracle
        self._clock = clock
        self._events = events
        self._distribution_closed = distribution_closed
        self._metrics = metrics or METRICS
        self.state = SeedState(guardian_window_s=int(guardian_window_s))

    # ---- Queries ----

    @property
    def phase(self) -> SeedPhase:
        return self.state.phase

    @property
    def commitment(self) -> Commitment:
        return self._commitment

    @property
    def guardian_window_deadline(self) -> Optional[int]:
        return self.state.guardian_window_deadline

    def get_final_seed(self) -> bytes:
        """The materialized final seed; raises FinalSeedNotSet before step 4."""
        seed = self.state.final_seed.get()
        if seed is None:
            raise FinalSeedNotSet()
        return seed

    def compute_final_seed(self) -> bytes:
        """S_a XOR S_r without writing state; raises SeedsNotSet if unavailable."""
        seed = self.state.final_seed.get()
        if seed is not None:
            return seed
        derived = self.state.derive_final_seed()
        if derived is None:
            raise SeedsNotSet()
        return derived

    # ---- Step 1 ----

    def set_automatic_seed_block_number(self) -> BlockIndex:
        with self._step("set_automatic_seed_block_number"):
            if not self._distribution_closed():
                raise DistributionNotOver(now=self._clock.now())
            if self.state.automatic_block.is_set:
                raise SeedBlockAlreadySet(block_index=self.state.automatic_block.value)
            block = BlockIndex(self._oracle.current_index() + 1)
            self.state.automatic_block.set(block)
            logger.info("automatic seed block recorded: %d", block)
            return block

    # ---- Step 2 ----

    def set_automatic_seed(self) -> bytes:
        with self._step("set_automatic_seed"):
            block = self.state.automatic_block.get()
            if block is None:
                raise SeedBlockNotSet()
            if self.state.automatic_seed.is_set:
                raise AutomaticSeedAlreadySet()
            seed = self._read_block_seed(block)
            now = self._clock.now()
            self.state.automatic_seed.set(seed)
            self.state.automatic_seed_set_at.set(now)
            self._emit(EventName.AUTOMATIC_SEED_SET, seed, now)
            logger.info(
                "automatic seed set from block %d; guardian window open until %d",
                block,
                self.state.guardian_window_deadline,
            )
            return seed

    # ---- Step 3a ----

    def set_guardian_seed(self, candidate: bytes) -> bytes:
        with self._step("set_guardian_seed"):
            cand = as_bytes(candidate)
            if not self.state.automatic_seed.is_set:
                raise AutomaticSeedNotSet()
            if not self.state.reveal_pending:
                raise SeedAlreadySet(path=self.state.reveal.kind)
            now = self._clock.now()
            deadline = self.state.guardian_window_deadline
            if now > deadline:
                raise GuardianWindowElapsed(now=now, deadline=deadline)
            if not self._commitment.matches(cand):
                got = to_hex(sha3_256(cand)) if len(cand) == SEED_LEN else None
                raise GuardianSeedInvalid(
                    expected_commitment_hex=self._commitment.hex,
                    got_commitment_hex=got,
                )
            self.state.take_reveal(GuardianReveal(cand))
            self._emit(EventName.GUARDIAN_SEED_SET, cand, now)
            logger.info("guardian seed revealed at t=%d (deadline %d)", now, deadline)
            return cand

    # ---- Step 3b ----

    def set_fallback_seed_block_number(self) -> BlockIndex:
        with self._step("set_fallback_seed_block_number"):
            if not self.state.automatic_seed.is_set:
                raise AutomaticSeedNotSet()
            now = self._clock.now()
            deadline = self.state.guardian_window_deadline
            if now <= deadline:
                raise GuardianWindowNotEnded(now=now, deadline=deadline)
            if not self.state.reveal_pending:
                raise SeedAlreadySet(path=self.state.reveal.kind)
            if self.state.fallback_block.is_set:
                raise SeedBlockAlreadySet(block_index=self.state.fallback_block.value)
            block = BlockIndex(self._oracle.current_index() + 1)
            self.state.fallback_block.set(block)
            logger.warning(
                "guardian window elapsed without reveal; fallback seed block recorded: %d",
                block,
            )
            return block

    def set_fallback_seed(self) -> bytes:
        with self._step("set_fallback_seed"):
            block = self.state.fallback_block.get()
            if block is None:
                raise SeedBlockNotSet()
            if not self.state.reveal_pending:
                raise SeedAlreadySet(path=self.state.reveal.kind)
            seed = self._read_block_seed(block)
            now = self._clock.now()
            self.state.take_reveal(FallbackReveal(seed))
            self._emit(EventName.FALLBACK_SEED_SET, seed, now)
            logger.info("fallback seed set from block %d", block)
            return seed

    # ---- Step 4 ----

    def set_final_seed(self) -> bytes:
        with self._step("set_final_seed"):
            derived = self.state.derive_final_seed()
            if derived is None:
                raise SeedsNotSet()
            if self.state.final_seed.is_set:
                raise FinalSeedAlreadySet()
            self.state.final_seed.set(derived)
            logger.info("final seed set via %s path: %s", self.state.reveal.kind, to_hex(derived))
            return derived

    # ---- Internals ----

    def _read_block_seed(self, block: int) -> bytes:
        """
        Hash of a recorded block, once mined.

        If the block is mined but already outside the oracle's look-back, the
        most recent mined block's hash is used instead; that block is still
        later than the recorded one, so it was unknown when the index was fixed.
        """
        head = self._oracle.current_index()
        if head < block:
            raise BlockNotMined(block_index=block, current_index=head)
        h = self._oracle.hash_of(block)
        if h is None:
            logger.warning(
                "hash of block %d is no longer available (head=%d); using block %d",
                block,
                head,
                head,
            )
            h = self._oracle.hash_of(head)
            if h is None:
                raise BlockNotMined(block_index=head, current_index=head)
        return ensure_len(h, SEED_LEN, name="block hash")

    def _emit(self, name: EventName, seed: bytes, now: int) -> None:
        self._events.emit(
            SeedEvent(name=name, seed=seed, block_index=BlockIndex(self._oracle.current_index()), timestamp=now)
        )

    @contextmanager
    def _step(self, step: str) -> Iterator[None]:
        try:
            yield
        except DropError as e:
            logger.debug("%s rejected: %s", step, e)
            self._metrics.record_transition(step, type(e).__name__)
            raise
        self._metrics.record_transition(step, "ok")


__all__ = ["SeedFinalizer"]
