import pytest

from blinddrop.errors import BlockNotMined, DropError, SeedAlreadySet, SetOnceViolation
from blinddrop.ledger import BlockOracle, Clock, DevLedger, EventSink
from blinddrop.seed.state import SetOnce
from blinddrop.tests import START


def test_dev_ledger_satisfies_protocols():
    ledger = DevLedger()
    assert isinstance(ledger, BlockOracle)
    assert isinstance(ledger, Clock)
    assert isinstance(ledger, EventSink)


def test_block_hashes_mined_and_pruned():
    ledger = DevLedger(start_time=START, lookback=3)
    assert ledger.current_index() == 0
    assert ledger.hash_of(1) is None
    assert ledger.mine(5) == 5
    assert ledger.hash_of(2) is None  # 2 <= 5 - 3
    assert all(len(ledger.hash_of(i)) == 32 for i in (3, 4, 5))
    assert len({ledger.hash_of(i) for i in (3, 4, 5)}) == 3


def test_scripted_hashes_and_salt():
    scripted = [b"\x01" * 32, b"\x02" * 32]
    ledger = DevLedger(scripted_hashes=scripted)
    assert ledger.hash_of(0) == scripted[0]
    ledger.mine()
    assert ledger.hash_of(1) == scripted[1]
    assert DevLedger(salt=b"a").hash_of(0) != DevLedger(salt=b"b").hash_of(0)


def test_clock_is_monotonic():
    ledger = DevLedger(start_time=START, block_time_s=12)
    ledger.mine(2)
    assert ledger.now() == START + 24
    assert ledger.block_timestamp(1) == START + 12
    with pytest.raises(ValueError):
        ledger.set_time(START)
    with pytest.raises(ValueError):
        ledger.advance_time(-1)


def test_error_reasons_and_context():
    e = BlockNotMined(block_index=7, current_index=6)
    assert isinstance(e, DropError)
    assert e.reason == "Block number not mined"
    assert str(e) == "Block number not mined (block_index=7 current_index=6)"
    assert str(SeedAlreadySet()) == "Seed already set"
    assert not SeedAlreadySet.retryable


def test_set_once():
    slot = SetOnce("x")
    assert not slot.is_set and slot.get() is None
    with pytest.raises(LookupError):
        slot.value
    slot.set(1)
    with pytest.raises(SetOnceViolation):
        slot.set(2)
    assert slot.value == 1
