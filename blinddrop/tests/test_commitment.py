import hashlib

import pytest

from blinddrop.commitment import (
    Commitment,
    build_commitment,
    build_commitment_hex,
    generate_guardian_seed,
    normalize_commitment,
)
from blinddrop.tests import GUARDIAN_SEED, given, seeds, st


def test_commitment_is_sha3_256_of_seed():
    assert build_commitment(GUARDIAN_SEED) == hashlib.sha3_256(GUARDIAN_SEED).digest()
    assert build_commitment_hex(GUARDIAN_SEED) == "0x" + hashlib.sha3_256(GUARDIAN_SEED).hexdigest()


@pytest.mark.parametrize("size", [0, 31, 33, 64])
def test_seed_must_be_32_bytes(size):
    with pytest.raises(ValueError):
        build_commitment(b"\x01" * size)


def test_normalize_accepts_hex_with_and_without_prefix():
    digest = build_commitment(GUARDIAN_SEED)
    assert normalize_commitment(digest.hex()) == digest
    assert normalize_commitment("0x" + digest.hex()) == digest
    assert normalize_commitment(bytearray(digest)) == digest


@pytest.mark.parametrize("bad", ["0x1234", "zz" * 32, "0x" + "0" * 63])
def test_normalize_rejects_malformed(bad):
    with pytest.raises(ValueError):
        normalize_commitment(bad)


def test_commitment_type_checks():
    with pytest.raises(TypeError):
        Commitment("00" * 32)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        Commitment(b"\x00" * 31)


def test_matches_only_the_committed_seed():
    c = Commitment.for_seed(GUARDIAN_SEED)
    assert c.matches(GUARDIAN_SEED)
    assert not c.matches(bytes(32))
    assert not c.matches(GUARDIAN_SEED[:31])
    assert not c.matches(GUARDIAN_SEED + b"\x00")
    assert Commitment.parse(c.hex) == c


def test_generated_seeds_are_fresh():
    a, b = generate_guardian_seed(), generate_guardian_seed()
    assert len(a) == len(b) == 32
    assert a != b


@given(seeds(), st.integers(min_value=0, max_value=31), st.integers(min_value=1, max_value=255))
def test_any_single_byte_change_breaks_the_match(seed, pos, delta):
    c = Commitment.for_seed(seed)
    assert c.matches(seed)
    tampered = bytearray(seed)
    tampered[pos] = (tampered[pos] + delta) % 256
    assert not c.matches(bytes(tampered))
