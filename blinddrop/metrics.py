"""
Prometheus metrics for the blind drop.

This module defines counters and histograms for the drop's lifecycle:
  • claims                — claim attempts per outcome
  • seed_transitions      — finalization step attempts per (step, outcome)
  • render_seconds        — time spent rendering a token (attributes + SVG)

Design notes
------------
- Label cardinality is intentionally low: outcomes come from a small, finite
  vocabulary and steps are the six finalization operations. Token ids are
  never used as labels.

Usage
-----
    from blinddrop.metrics import METRICS

    METRICS.record_claim("ok")
    METRICS.record_transition("set_guardian_seed", "GuardianSeedInvalid")
    with METRICS.render_timer():
        render(...)

If you need a custom Prometheus registry or different namespace/subsystem,
construct your own `Metrics` instance.
"""

from __future__ import annotations

from contextlib import contextmanager
from time import perf_counter
from typing import Iterable

from prometheus_client import REGISTRY, Counter, Histogram

# --------- Vocabularies (kept small for bounded cardinality) ---------

_CLAIM_OUTCOMES = (
    "ok",
    "distribution_closed",
    "supply_exhausted",
    "invalid",
)

_STEPS = (
    "set_automatic_seed_block_number",
    "set_automatic_seed",
    "set_guardian_seed",
    "set_fallback_seed_block_number",
    "set_fallback_seed",
    "set_final_seed",
)

# Render latency buckets (seconds)
_RENDER_BUCKETS = (
    0.0005, 0.001, 0.0025, 0.005,
    0.01, 0.025, 0.05, 0.1, 0.25,
)


class Metrics:
    """
    Container for all blind-drop Prometheus instruments.

    Args:
        namespace: Prometheus metric namespace (prefix).
        subsystem: Prometheus metric subsystem.
        registry:  Prometheus registry to register the metrics with.
    """

    def __init__(
        self,
        *,
        namespace: str = "blinddrop",
        subsystem: str = "drop",
        registry=REGISTRY,
        render_buckets: Iterable[float] = _RENDER_BUCKETS,
    ) -> None:
        self.registry = registry
        self.claims_total = Counter(
            "claims_total",
            "Number of claim attempts processed, labeled by outcome.",
            labelnames=("outcome",),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.seed_transitions_total = Counter(
            "seed_transitions_total",
            "Seed finalization step attempts, labeled by step and outcome "
            "(ok or the failure class name).",
            labelnames=("step", "outcome"),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )
        self.render_seconds = Histogram(
            "render_seconds",
            "Time spent deriving attributes and rendering a token image (seconds).",
            buckets=tuple(render_buckets),
            namespace=namespace,
            subsystem=subsystem,
            registry=registry,
        )

    # ----- Recording helpers -------------------------------------------------

    def record_claim(self, outcome: str) -> None:
        if outcome not in _CLAIM_OUTCOMES:
            outcome = "invalid"
        self.claims_total.labels(outcome=outcome).inc()

    def record_transition(self, step: str, outcome: str) -> None:
        if step not in _STEPS:
            raise ValueError(f"unknown finalization step: {step!r}")
        self.seed_transitions_total.labels(step=step, outcome=outcome).inc()

    def observe_render(self, seconds: float) -> None:
        self.render_seconds.observe(float(seconds))

    # ----- Context managers --------------------------------------------------

    @contextmanager
    def render_timer(self):
        start = perf_counter()
        try:
            yield
        finally:
            self.observe_render(perf_counter() - start)


# Singleton used by most components
METRICS = Metrics()

__all__ = [
    "Metrics",
    "METRICS",
    "_CLAIM_OUTCOMES",
    "_STEPS",
]
