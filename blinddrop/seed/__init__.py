"""
blinddrop.seed
--------------

Commit-reveal seed finalization: the set-once state record and the state
machine that drives it.
"""

from __future__ import annotations

from .finalizer import SeedFinalizer
from .state import (
    FallbackReveal,
    GuardianReveal,
    Pending,
    RevealPath,
    SeedPhase,
    SeedState,
    SetOnce,
)

__all__ = [
    "SeedFinalizer",
    "SeedState",
    "SeedPhase",
    "SetOnce",
    "Pending",
    "GuardianReveal",
    "FallbackReveal",
    "RevealPath",
]
