"""
Seed finalization state.

Every field of the finalization record is written at most once. Rather than
optional fields with sentinel values, we use:

* :class:`SetOnce` — a slot that is either unset or holds one value forever.
  Writing an already-set slot raises :class:`~blinddrop.errors.SetOnceViolation`.
* ``RevealPath`` — a single value that is one of :class:`Pending`,
  :class:`GuardianReveal` or :class:`FallbackReveal`. Because the guardian and
  fallback branches share this one slot, taking either branch makes the other
  unreachable without any cross-field checks.

:class:`SeedState` bundles the slots and derives the current :class:`SeedPhase`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from blinddrop.errors import SetOnceViolation
from blinddrop.utils.bytes import xor_bytes

T = TypeVar("T")

_UNSET = object()


class SetOnce(Generic[T]):
    """A write-once slot: Unset → Set(value), never back, never replaced."""

    __slots__ = ("name", "_value")

    def __init__(self, name: str) -> None:
        self.name = name
        self._value: Any = _UNSET

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def get(self) -> Optional[T]:
        return None if self._value is _UNSET else self._value

    @property
    def value(self) -> T:
        if self._value is _UNSET:
            raise LookupError(f"{self.name} is not set")
        return self._value

    def set(self, value: T) -> T:
        if value is None:
            raise ValueError(f"{self.name} cannot be set to None")
        if self._value is not _UNSET:
            raise SetOnceViolation(field_name=self.name)
        self._value = value
        return value

    def __repr__(self) -> str:
        return f"SetOnce({self.name}={'<unset>' if not self.is_set else self._value!r})"


# ---- Reveal path --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Pending:
    """Neither the guardian nor the fallback seed has been revealed."""

    kind = "pending"


@dataclass(frozen=True, slots=True)
class GuardianReveal:
    seed: bytes
    kind = "guardian"


@dataclass(frozen=True, slots=True)
class FallbackReveal:
    seed: bytes
    kind = "fallback"


RevealPath = Union[Pending, GuardianReveal, FallbackReveal]


class SeedPhase(str, Enum):
    """Furthest point the finalization has reached."""

    IDLE = "idle"
    AUTOMATIC_BLOCK_SET = "automatic_block_set"
    AUTOMATIC_SEED_SET = "automatic_seed_set"
    FALLBACK_BLOCK_SET = "fallback_block_set"
    GUARDIAN_SEED_SET = "guardian_seed_set"
    FALLBACK_SEED_SET = "fallback_seed_set"
    FINAL_SEED_SET = "final_seed_set"


@dataclass(slots=True)
class SeedState:
    """
    Finalization record.

    Tracks:
      • automatic_block        — block index whose hash becomes the automatic seed
      • automatic_seed         — that block's hash
      • automatic_seed_set_at  — time the automatic seed was set (guardian window anchor)
      • fallback_block         — block index whose hash becomes the fallback seed
      • reveal                 — Pending | GuardianReveal | FallbackReveal
      • final_seed             — automatic_seed XOR revealed seed, once materialized
    """

    guardian_window_s: int
    automatic_block: SetOnce[int] = field(default_factory=lambda: SetOnce("automatic_block"))
    automatic_seed: SetOnce[bytes] = field(default_factory=lambda: SetOnce("automatic_seed"))
    automatic_seed_set_at: SetOnce[int] = field(
        default_factory=lambda: SetOnce("automatic_seed_set_at")
    )
    fallback_block: SetOnce[int] = field(default_factory=lambda: SetOnce("fallback_block"))
    reveal: RevealPath = field(default_factory=Pending)
    final_seed: SetOnce[bytes] = field(default_factory=lambda: SetOnce("final_seed"))

    # ---------- Reveal path ----------------------------------------------------

    @property
    def reveal_pending(self) -> bool:
        return isinstance(self.reveal, Pending)

    def take_reveal(self, path: Union[GuardianReveal, FallbackReveal]) -> None:
        """Move the reveal path out of Pending. Only ever happens once."""
        if not isinstance(self.reveal, Pending):
            raise SetOnceViolation(field_name="reveal")
        self.reveal = path

    @property
    def revealed_seed(self) -> Optional[bytes]:
        if isinstance(self.reveal, (GuardianReveal, FallbackReveal)):
            return self.reveal.seed
        return None

    # ---------- Derived values -------------------------------------------------

    @property
    def guardian_window_deadline(self) -> Optional[int]:
        """Last second (inclusive) at which the guardian may reveal."""
        set_at = self.automatic_seed_set_at.get()
        if set_at is None:
            return None
        return set_at + self.guardian_window_s

    def derive_final_seed(self) -> Optional[bytes]:
        """automatic XOR revealed, or None while either is missing."""
        auto = self.automatic_seed.get()
        revealed = self.revealed_seed
        if auto is None or revealed is None:
            return None
        return xor_bytes(auto, revealed)

    @property
    def phase(self) -> SeedPhase:
        if self.final_seed.is_set:
            return SeedPhase.FINAL_SEED_SET
        if isinstance(self.reveal, GuardianReveal):
            return SeedPhase.GUARDIAN_SEED_SET
        if isinstance(self.reveal, FallbackReveal):
            return SeedPhase.FALLBACK_SEED_SET
        if self.fallback_block.is_set:
            return SeedPhase.FALLBACK_BLOCK_SET
        if self.automatic_seed.is_set:
            return SeedPhase.AUTOMATIC_SEED_SET
        if self.automatic_block.is_set:
            return SeedPhase.AUTOMATIC_BLOCK_SET
        return SeedPhase.IDLE

    # ---------- Convenience ----------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly snapshot for instrumentation/logging and the CLI."""

        def _hex(b: Optional[bytes]) -> Optional[str]:
            return None if b is None else "0x" + b.hex()

        return {
            "phase": self.phase.value,
            "automatic_block": self.automatic_block.get(),
            "automatic_seed": _hex(self.automatic_seed.get()),
            "automatic_seed_set_at": self.automatic_seed_set_at.get(),
            "guardian_window_deadline": self.guardian_window_deadline,
            "fallback_block": self.fallback_block.get(),
            "reveal_path": self.reveal.kind,
            "revealed_seed": _hex(self.revealed_seed),
            "final_seed": _hex(self.final_seed.get()),
        }


__all__ = [
    "SetOnce",
    "Pending",
    "GuardianReveal",
    "FallbackReveal",
    "RevealPath",
    "SeedPhase",
    "SeedState",
]
