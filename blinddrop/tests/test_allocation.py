import pytest

from blinddrop.allocation import AllocationGate
from blinddrop.errors import DistributionClosed, SupplyExhausted
from blinddrop.ledger.dev import DevLedger
from blinddrop.registry import TokenRegistry
from blinddrop.tests import START, owner, sample
from blinddrop.window import DistributionWindow


def mk_gate(metrics, supply=3, duration=3600):
    ledger = DevLedger(start_time=START)
    window = DistributionWindow(start_time=START, max_duration_s=duration, max_supply=supply)
    registry = TokenRegistry(events=ledger)
    gate = AllocationGate(window=window, registry=registry, clock=ledger, metrics=metrics)
    return gate, window, registry, ledger


def claims(metrics, outcome):
    return sample(metrics, "claims_total", outcome=outcome)


def test_ids_track_minted_count(metrics):
    gate, window, registry, _ = mk_gate(metrics)
    for i in range(1, 4):
        assert gate.claim(owner(i)) == i
        assert window.minted_count == i
        assert registry.owner_of(i) == owner(i)
    assert claims(metrics, "ok") == 3


def test_claim_after_supply_exhausted(metrics):
    gate, window, registry, _ = mk_gate(metrics, supply=1)
    gate.claim(owner(1))
    with pytest.raises(SupplyExhausted) as ei:
        gate.claim(owner(2))
    assert ei.value.reason == "Max supply exceeded"
    assert window.minted_count == registry.total_supply() == 1
    assert claims(metrics, "supply_exhausted") == 1


def test_claim_after_time_bound(metrics):
    gate, window, _, ledger = mk_gate(metrics, duration=10)
    ledger.advance_time(9)
    assert gate.claim(owner(1)) == 1
    ledger.advance_time(1)
    with pytest.raises(DistributionClosed) as ei:
        gate.claim(owner(1))
    assert ei.value.reason == "Distribution has ended"
    assert not ei.value.retryable
    assert window.minted_count == 1
    assert claims(metrics, "distribution_closed") == 1


def test_same_owner_may_claim_repeatedly(metrics):
    gate, _, registry, _ = mk_gate(metrics)
    gate.claim(owner(7))
    gate.claim(owner(7))
    assert registry.balance_of(owner(7)) == 2


def test_gate_rejects_disagreeing_counters(metrics):
    window = DistributionWindow(start_time=START, max_duration_s=10, max_supply=3, minted_count=1)
    with pytest.raises(ValueError):
        AllocationGate(window=window, registry=TokenRegistry(), clock=DevLedger(start_time=START), metrics=metrics)


def test_claim_detects_counters_drifting_apart(metrics):
    gate, _, registry, _ = mk_gate(metrics)
    registry.mint(owner(9))
    with pytest.raises(RuntimeError):
        gate.claim(owner(1))
