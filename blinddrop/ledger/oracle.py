# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
Ledger-facing capability interfaces.

The drop never talks to a chain directly. It consumes three small
capabilities, each a :class:`typing.Protocol` so a real node binding, the
in-process :class:`~blinddrop.ledger.dev.DevLedger`, or a test double can be
substituted freely:

- :class:`BlockOracle` — current block index and hashes of *past* blocks.
- :class:`Clock`       — the environment's timestamp (seconds).
- :class:`EventSink`   — append-only sink for observable events.

Semantics
---------
``hash_of(index)`` returns ``None`` for blocks that are not yet mined
(``index > current_index()``) and for blocks older than the oracle's
look-back window. Callers must distinguish the two via ``current_index()``.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from blinddrop.types.core import Event


@runtime_checkable
class BlockOracle(Protocol):
    """Read-only access to block indexes and hashes."""

    def current_index(self) -> int: ...

    def hash_of(self, index: int) -> Optional[bytes]: ...


@runtime_checkable
class Clock(Protocol):
    """Monotonic, environment-provided time in integer seconds."""

    def now(self) -> int: ...


@runtime_checkable
class EventSink(Protocol):
    def emit(self, event: Event) -> None: ...


__all__ = ["BlockOracle", "Clock", "EventSink"]
