"""
blinddrop.ledger
----------------

Capabilities the drop consumes from its hosting ledger (block oracle, clock,
event sink) and a deterministic in-process implementation for local use.
"""

from __future__ import annotations

from .dev import DevLedger, EventLog
from .oracle import BlockOracle, Clock, EventSink

__all__ = ["BlockOracle", "Clock", "EventSink", "DevLedger", "EventLog"]
