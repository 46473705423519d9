# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Deterministic in-process ledger for local runs and tests.

:class:`DevLedger` satisfies :class:`~blinddrop.ledger.oracle.BlockOracle`,
:class:`~blinddrop.ledger.oracle.Clock` and
:class:`~blinddrop.ledger.oracle.EventSink` at once.

Block model
-----------
- ``current_index()`` is the index of the latest *mined* block. Block 0 (the
  genesis) exists from construction.
- Block hashes are either scripted (``scripted_hashes=[...]`` consumed in order
  as blocks are mined) or derived as
  ``SHA3-256(DOMAIN_DEV_BLOCK || salt || u64(index))``.
- ``hash_of(i)`` returns ``None`` for ``i > current_index()`` (not mined) and
  for ``i <= current_index() - lookback`` (pruned), mirroring a chain that only
  serves recent block hashes.

Time model
----------
``now()`` only moves when a test/operator calls :meth:`advance_time` or
:meth:`set_time`; mining does not advance the clock unless ``block_time_s`` is
set.

Usage
-----
    ledger = DevLedger(start_time=1_700_000_000)
    ledger.mine()               # block 1
    ledger.advance_time(3600)   # one hour later
    ledger.hash_of(1)           # 32 bytes
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional, Sequence

from blinddrop.constants import DEFAULT_BLOCK_HASH_LOOKBACK, DOMAIN_DEV_BLOCK
from blinddrop.types.core import Event, EventName
from blinddrop.utils.bytes import ensure_len
from blinddrop.utils.hash import sha3_256, u64_be

logger = logging.getLogger(__name__)


class EventLog:
    """Append-only, ordered event log."""

    __slots__ = ("_events",)

    def __init__(self) -> None:
        self._events: List[Event] = []

    def emit(self, event: Event) -> None:
        self._events.append(event)
        logger.debug("event %s", event.name.value)

    def events(self, name: Optional[EventName] = None) -> List[Event]:
        if name is None:
            return list(self._events)
        return [e for e in self._events if e.name == name]

    def last(self, name: EventName) -> Optional[Event]:
        for e in reversed(self._events):
            if e.name == name:
                return e
        return None

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(list(self._events))


class DevLedger:
    """Scriptable block oracle + clock + event log."""

    def __init__(
        self,
        *,
        start_time: int = 1_700_000_000,
        lookback: int = DEFAULT_BLOCK_HASH_LOOKBACK,
        salt: bytes = b"",
        scripted_hashes: Optional[Sequence[bytes]] = None,
        block_time_s: int = 0,
    ) -> None:
        if lookback < 1:
            raise ValueError("lookback must be >= 1")
        if start_time < 0:
            raise ValueError("start_time must be non-negative")
        if block_time_s < 0:
            raise ValueError("block_time_s must be non-negative")
        self._now = int(start_time)
        self._lookback = int(lookback)
        self._salt = bytes(salt)
        self._block_time_s = int(block_time_s)
        self._scripted: List[bytes] = [
            ensure_len(h, 32, name="scripted hash") for h in (scripted_hashes or ())
        ]
        self._hashes: List[bytes] = []
        self._timestamps: List[int] = []
        self.log = EventLog()
        self._append_block()  # genesis

    # ---- BlockOracle ----

    def current_index(self) -> int:
        return len(self._hashes) - 1

    def hash_of(self, index: int) -> Optional[bytes]:
        head = self.current_index()
        if index < 0 or index > head:
            return None
        if index <= head - self._lookback:
            return None
        return self._hashes[index]

    # ---- Clock ----

    def now(self) -> int:
        return self._now

    # ---- EventSink ----

    def emit(self, event: Event) -> None:
        self.log.emit(event)

    # ---- Scripting ----

    def mine(self, count: int = 1) -> int:
        """Mine ``count`` blocks; returns the new head index."""
        if count < 1:
            raise ValueError("count must be >= 1")
        for _ in range(count):
            if self._block_time_s:
                self._now += self._block_time_s
            self._append_block()
        logger.debug("mined %d block(s); head=%d", count, self.current_index())
        return self.current_index()

    def advance_time(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("time cannot go backwards")
        self._now += int(seconds)
        return self._now

    def set_time(self, ts: int) -> int:
        if ts < self._now:
            raise ValueError("time cannot go backwards")
        self._now = int(ts)
        return self._now

    def block_timestamp(self, index: int) -> Optional[int]:
        if 0 <= index <= self.current_index():
            return self._timestamps[index]
        return None

    def script_hashes(self, hashes: Iterable[bytes]) -> None:
        """Queue hashes for the next mined blocks."""
        self._scripted.extend(ensure_len(h, 32, name="scripted hash") for h in hashes)

    @property
    def lookback(self) -> int:
        return self._lookback

    def _append_block(self) -> None:
        index = len(self._hashes)
        if self._scripted:
            h = self._scripted.pop(0)
        else:
            h = sha3_256(DOMAIN_DEV_BLOCK + self._salt + u64_be(index))
        self._hashes.append(h)
        self._timestamps.append(self._now)


__all__ = ["DevLedger", "EventLog"]
