import threading

import pytest
from prometheus_client import CollectorRegistry

from blinddrop.commitment import build_commitment_hex
from blinddrop.config import DropConfig
from blinddrop.drop import BlindDrop
from blinddrop.errors import (
    BlockNotMined,
    DistributionClosed,
    DistributionNotOver,
    DropError,
    FinalSeedAlreadySet,
    FinalSeedNotSet,
    GuardianSeedInvalid,
    GuardianWindowElapsed,
    SeedAlreadySet,
    SeedBlockAlreadySet,
    SupplyExhausted,
    UnknownIdentifier,
)
from blinddrop.generator import render_with_seed
from blinddrop.ledger.dev import DevLedger
from blinddrop.metrics import Metrics
from blinddrop.seed import SeedPhase
from blinddrop.tests import GUARDIAN_SEED, START, given, owner, st
from blinddrop.types.core import EventName
from blinddrop.utils.bytes import xor_bytes


def test_end_to_end_max_supply_three(make_drop, ledger):
    drop = make_drop(max_supply=3)
    assert [drop.claim(owner(i)) for i in (1, 2, 3)] == [1, 2, 3]
    with pytest.raises(SupplyExhausted):
        drop.claim(owner(4))
    assert drop.window.minted_count == 3

    drop.set_automatic_seed_block_number()
    with pytest.raises(BlockNotMined):
        drop.set_automatic_seed()
    ledger.mine()
    auto = drop.set_automatic_seed()

    with pytest.raises(GuardianSeedInvalid):
        drop.set_guardian_seed(b"\xff" * 32)
    drop.set_guardian_seed(GUARDIAN_SEED)

    with pytest.raises(FinalSeedNotSet):
        drop.render(1)
    final = drop.set_final_seed()
    with pytest.raises(FinalSeedAlreadySet):
        drop.set_final_seed()
    assert drop.get_final_seed() == final == xor_bytes(auto, GUARDIAN_SEED)

    assert drop.render(2) == drop.render(2) == render_with_seed(final, 2)
    assert drop.render(1)[0] != drop.render(2)[0]
    with pytest.raises(UnknownIdentifier):
        drop.render(4)
    assert drop.token_uri(3).startswith("data:application/json;base64,")


def test_fallback_scenario(make_drop, ledger):
    drop = make_drop(max_supply=5, max_distribution_s=100)
    drop.claim(owner(1))
    with pytest.raises(DistributionNotOver):
        drop.set_automatic_seed_block_number()
    ledger.advance_time(100)
    with pytest.raises(DistributionClosed):
        drop.claim(owner(2))

    drop.set_automatic_seed_block_number()
    ledger.mine()
    auto = drop.set_automatic_seed()
    ledger.advance_time(drop.config.guardian_window_s + 1)
    with pytest.raises(GuardianWindowElapsed):
        drop.set_guardian_seed(GUARDIAN_SEED)

    drop.set_fallback_seed_block_number()
    with pytest.raises(SeedBlockAlreadySet):
        drop.set_fallback_seed_block_number()
    ledger.mine()
    fallback = drop.set_fallback_seed()
    with pytest.raises(SeedAlreadySet):
        drop.set_fallback_seed()
    with pytest.raises(SeedAlreadySet):
        drop.set_guardian_seed(GUARDIAN_SEED)

    assert drop.set_final_seed() == xor_bytes(auto, fallback)
    names = [e.name for e in ledger.log if e.name is not EventName.TRANSFER]
    assert names == [EventName.AUTOMATIC_SEED_SET, EventName.FALLBACK_SEED_SET]


def test_registry_passthrough_and_snapshot(make_drop, ledger):
    drop = make_drop(max_supply=4)
    for i in (1, 1, 2):
        drop.claim(owner(i))
    drop.transfer(owner(1), owner(3), 1)
    assert drop.owner_of(1) == owner(3)
    assert drop.balance_of(owner(1)) == 1
    assert drop.token_of_owner_by_index(owner(1), 0) == 2
    assert drop.token_by_index(2) == 3
    assert drop.total_supply() == 3

    snap = drop.snapshot()
    assert snap["window"]["minted_count"] == 3
    assert snap["window"]["status"] == "open"
    assert snap["seed"]["phase"] == SeedPhase.IDLE.value
    assert snap["commitment"] == build_commitment_hex(GUARDIAN_SEED)
    assert snap["tokens"]["owners"] == {owner(3): [1], owner(1): [2], owner(2): [3]}
    assert drop.events is ledger.log


def test_concurrent_claims_never_exceed_supply(make_drop):
    drop = make_drop(max_supply=50)
    issued, failures = [], []
    lock = threading.Lock()

    def worker(n):
        for _ in range(10):
            try:
                tid = drop.claim(owner(n))
            except SupplyExhausted:
                with lock:
                    failures.append(n)
            else:
                with lock:
                    issued.append(int(tid))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 9)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(issued) == list(range(1, 51))
    assert len(failures) == 80 - 50
    assert drop.window.minted_count == drop.total_supply() == 50


@given(st.lists(st.integers(min_value=0, max_value=40), max_size=30))
def test_claim_ids_are_gapless(advances):
    ledger = DevLedger(start_time=START)
    cfg = DropConfig(guardian_commitment=build_commitment_hex(GUARDIAN_SEED), max_supply=10, max_distribution_s=200)
    drop = BlindDrop.local(cfg, ledger=ledger, metrics=Metrics(registry=CollectorRegistry()))
    issued = []
    for step in advances:
        ledger.advance_time(step)
        try:
            issued.append(int(drop.claim(owner(1))))
        except (SupplyExhausted, DistributionClosed):
            assert drop.is_distribution_closed()
    assert issued == list(range(1, len(issued) + 1))
    assert drop.window.minted_count == len(issued) <= cfg.max_supply


_OPS = (
    "mine",
    "tick",
    "leap",
    "set_automatic_seed_block_number",
    "set_automatic_seed",
    "guardian",
    "set_fallback_seed_block_number",
    "set_fallback_seed",
    "set_final_seed",
)


@given(st.lists(st.sampled_from(_OPS), max_size=40))
def test_reveal_paths_are_mutually_exclusive(ops):
    ledger = DevLedger(start_time=START)
    cfg = DropConfig(
        guardian_commitment=build_commitment_hex(GUARDIAN_SEED),
        max_supply=1,
        guardian_window_s=50,
    )
    drop = BlindDrop.local(cfg, ledger=ledger, metrics=Metrics(registry=CollectorRegistry()))
    drop.claim(owner(1))
    for op in ops:
        try:
            if op == "mine":
                ledger.mine()
            elif op == "tick":
                ledger.advance_time(10)
            elif op == "leap":
                ledger.advance_time(60)
            elif op == "guardian":
                drop.set_guardian_seed(GUARDIAN_SEED)
            else:
                getattr(drop, op)()
        except DropError:
            pass
    names = {e.name for e in ledger.log}
    assert not (EventName.GUARDIAN_SEED_SET in names and EventName.FALLBACK_SEED_SET in names)
    state = drop.finalizer.state
    if state.final_seed.is_set:
        assert drop.get_final_seed() == xor_bytes(state.automatic_seed.value, state.revealed_seed)


def test_slot_queries_follow_render(make_drop, ledger):
    drop = make_drop(max_supply=2)
    drop.claim(owner(1))
    drop.claim(owner(2))
    with pytest.raises(FinalSeedNotSet):
        drop.slot(1, "weapon")
    drop.set_automatic_seed_block_number()
    ledger.mine()
    drop.set_automatic_seed()
    drop.set_guardian_seed(GUARDIAN_SEED)
    drop.set_final_seed()

    attrs, _ = drop.render(2)
    for name, line in zip(["Weapon", "chest", "HEAD", "waist", "foot", "hand", "neck", "ring"], attrs.lines()):
        assert drop.slot(2, name).display == line
    with pytest.raises(UnknownIdentifier):
        drop.slot(3, "weapon")
    with pytest.raises(KeyError):
        drop.slot(2, "cape")
