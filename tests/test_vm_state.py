import json

import pytest

from w3.vm_state import (
    ForkAccount,
    ForkState,
    parse_uint256_or_hash,
    read_testdata_state,
    write_testdata_state,
)

ADDR1 = b"\x01" + bytes(19)
ADDR2 = b"\x02" + bytes(19)
HASH1 = b"\x01" + bytes(31)
HASH2 = b"\x02" + bytes(31)

ENC = '{"nonce":"0x1","balance":"0x1","code":"0xc0fe","storage":{"0x0":"0x1"}}'


def _account():
    return ForkAccount(nonce=1, balance=1, code=b"\xc0\xfe", storage={0: 1})


def test_account_marshal():
    got = json.dumps(_account().to_json(), separators=(",", ":"))
    assert got == ENC


def test_account_unmarshal():
    assert ForkAccount.from_json(ENC) == _account()


def test_account_round_trip():
    acc = ForkAccount(nonce=7, balance=2**255, code=b"\x60\x00", storage={1: 2, 16: 3})
    assert ForkAccount.from_json(acc.to_json()) == acc


def test_account_unmarshal_rejects_non_object():
    with pytest.raises(ValueError):
        ForkAccount.from_json("[1, 2]")


@pytest.mark.parametrize(
    "text, want",
    [
        ("0x0000000000000000000000000000000000000000000000000000000000000042", 0x42),
        ("0x1", 1),
        ("0X0f", 15),
        ("ff", 255),
        ("0x", 0),
        ("0x01" + "00" * 32, 0),
    ],
)
def test_parse_uint256_or_hash(text, want):
    assert parse_uint256_or_hash(text) == want


def test_parse_uint256_or_hash_invalid():
    with pytest.raises(ValueError):
        parse_uint256_or_hash("0xzz")


def test_read_non_existent(tmp_path):
    got = read_testdata_state(tmp_path / "1_0.json")
    assert got == ForkState()


def test_read(tmp_path):
    fp = tmp_path / "1_0.json"
    fp.write_text('{"accounts":{"0x0100000000000000000000000000000000000000":{"balance":"0x1"}}}')
    got = read_testdata_state(fp)
    assert got == ForkState(accounts={ADDR1: ForkAccount(balance=1)})


def test_write_non_existent(tmp_path):
    fp = tmp_path / "sub" / "1_0.json"
    want = ForkState(accounts={ADDR1: ForkAccount(balance=1)})
    write_testdata_state(fp, want)
    assert read_testdata_state(fp) == want
    assert ForkState.from_json(fp.read_text()) == want


def test_write(tmp_path):
    fp = tmp_path / "1_0.json"
    write_testdata_state(fp, ForkState(accounts={ADDR1: ForkAccount(balance=1)}))
    write_testdata_state(fp, ForkState(accounts={ADDR2: ForkAccount(balance=2)}))
    want = ForkState(
        accounts={ADDR1: ForkAccount(balance=1), ADDR2: ForkAccount(balance=2)}
    )
    assert read_testdata_state(fp) == want
    assert ForkState.from_json(fp.read_text()) == want


def test_state_json_round_trip():
    state = ForkState(
        accounts={ADDR1: ForkAccount(nonce=3, balance=5, storage={1: 1})},
        header_hashes={1: HASH1, 16: HASH2},
    )
    encoded = state.to_json()
    assert encoded["headerHashes"]["0x10"] == "0x" + HASH2.hex()
    assert ForkState.from_json(json.dumps(encoded)) == state


def test_clone_is_independent_mapping():
    state = ForkState(header_hashes={1: HASH1})
    copy = state.clone()
    copy.header_hashes[2] = HASH2
    assert state.header_hashes == {1: HASH1}


@pytest.mark.parametrize(
    "s1, s2, want, want_changed",
    [
        (ForkState(), ForkState(), ForkState(), False),
        (
            ForkState(header_hashes={1: HASH1}),
            ForkState(),
            ForkState(header_hashes={1: HASH1}),
            False,
        ),
        (
            ForkState(),
            ForkState(header_hashes={1: HASH1}),
            ForkState(header_hashes={1: HASH1}),
            True,
        ),
        (
            ForkState(header_hashes={1: HASH1}),
            ForkState(header_hashes={1: HASH1}),
            ForkState(header_hashes={1: HASH1}),
            False,
        ),
        (
            ForkState(header_hashes={1: HASH1}),
            ForkState(header_hashes={2: HASH2}),
            ForkState(header_hashes={1: HASH1, 2: HASH2}),
            True,
        ),
        (
            ForkState(accounts={ADDR1: ForkAccount(balance=1)}),
            ForkState(accounts={ADDR1: ForkAccount(balance=2)}),
            ForkState(accounts={ADDR1: ForkAccount(balance=1)}),
            False,
        ),
        (
            ForkState(accounts={ADDR1: ForkAccount()}),
            ForkState(accounts={ADDR1: ForkAccount(storage={1: 1})}),
            ForkState(accounts={ADDR1: ForkAccount(storage={1: 1})}),
            True,
        ),
        (
            ForkState(accounts={ADDR1: ForkAccount(storage={1: 1})}),
            ForkState(accounts={ADDR1: ForkAccount()}),
            ForkState(accounts={ADDR1: ForkAccount(storage={1: 1})}),
            False,
        ),
        (
            ForkState(accounts={ADDR1: ForkAccount(storage={1: 1})}),
            ForkState(accounts={ADDR1: ForkAccount(storage={2: 2})}),
            ForkState(accounts={ADDR1: ForkAccount(storage={1: 1, 2: 2})}),
            True,
        ),
    ],
)
def test_fork_state_merge(s1, s2, want, want_changed):
    assert s1.merge(s2) is want_changed
    assert s1 == want


def test_merge_none():
    state = ForkState(header_hashes={1: HASH1})
    assert state.merge(None) is False
    assert state == ForkState(header_hashes={1: HASH1})