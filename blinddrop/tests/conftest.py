from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from blinddrop.commitment import build_commitment_hex
from blinddrop.config import DropConfig
from blinddrop.drop import BlindDrop
from blinddrop.ledger.dev import DevLedger
from blinddrop.metrics import Metrics
from blinddrop.tests import GUARDIAN_SEED, START


@pytest.fixture
def metrics() -> Metrics:
    return Metrics(registry=CollectorRegistry())


@pytest.fixture
def ledger() -> DevLedger:
    return DevLedger(start_time=START)


@pytest.fixture
def guardian_seed() -> bytes:
    return GUARDIAN_SEED


@pytest.fixture
def make_drop(ledger, metrics, guardian_seed):
    def _make(**overrides) -> BlindDrop:
        overrides.setdefault("guardian_commitment", build_commitment_hex(guardian_seed))
        return BlindDrop.local(DropConfig(**overrides), ledger=ledger, metrics=metrics)

    return _make
