"""
blinddrop.tests
---------------
Test package for the blind drop.

Registers Hypothesis profiles (dev/ci/fast) on import and picks one from
HYPOTHESIS_PROFILE, else "ci" when CI is set, else "dev".
"""
from __future__ import annotations

import os
from typing import Final

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

settings.register_profile(
    "dev",
    settings(
        max_examples=100,
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow,),
    ),
)
settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow,),
        derandomize=True,
    ),
)
settings.register_profile("fast", settings(max_examples=25, deadline=None))


def _env_truthy(name: str) -> bool:
    return (os.getenv(name) or "").lower() not in ("", "0", "false", "no", "off")


_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(_active)


GUARDIAN_SEED = bytes(range(32))
START = 1_700_000_000


def owner(n: int) -> str:
    """Deterministic 20-byte hex owner address."""
    return "0x" + f"{n:040x}"


def sample(metrics, name: str, **labels) -> float:
    """Current value of a drop metric (0 when never observed)."""
    v = metrics.registry.get_sample_value(f"blinddrop_drop_{name}", labels)
    return v or 0.0


def seeds():
    """32-byte seeds."""
    return st.binary(min_size=32, max_size=32)


__all__ = ["st", "given", "seeds", "sample", "owner", "GUARDIAN_SEED", "START"]
