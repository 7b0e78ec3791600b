import pytest

from w3.hexutil import A, H
from w3.slots import rand_a, slot, slot2, weth_allowance_slot, weth_balance_slot


@pytest.mark.parametrize(
    "addr, want",
    [
        (
            "0x000000000000000000000000000000000000dEaD",
            "0x262bb27bbdd95c1cdc8e16957e36e38579ea44f7f6413dd7a9c75939def06b2c",
        ),
        (
            "0x000000000000000000000000000000000000c0Fe",
            "0xf68b260b81af177c0bf1a03b5d62b15aea1b486f8df26c77f33aed7538cfeb2c",
        ),
    ],
)
def test_weth_balance_slot(addr, want):
    assert weth_balance_slot(A(addr)) == H(want)


def test_weth_allowance_slot():
    got = weth_allowance_slot(
        A("0x000000000000000000000000000000000000dEaD"),
        A("0x000000000000000000000000000000000000c0Fe"),
    )
    assert got == H("0xea3c5e9cf6f5b7aba5d41ca731cf1f8cb1373e841a1cb336cc4bfeddc27c7f8b")


def test_weth_balance_slot_matches_slot_at_position_three():
    addr = A("0x000000000000000000000000000000000000c0Fe")
    pos = (3).to_bytes(32, "big")
    key = bytes(12) + addr
    assert weth_balance_slot(addr) == slot(pos, key)


def test_slot2_is_nested_slot():
    pos = (4).to_bytes(32, "big")
    key = bytes(31) + b"\x01"
    key2 = bytes(31) + b"\x02"
    assert slot2(pos, key, key2) == slot(slot(pos, key), key2)


def test_slot_pads_short_keys():
    pos = (3).to_bytes(32, "big")
    addr = A("0x000000000000000000000000000000000000dEaD")
    assert slot(pos, addr) == slot(pos, bytes(12) + addr)
    assert len(slot(pos, addr)) == 32


def test_rand_a():
    first = rand_a()
    second = rand_a()
    assert len(first) == 20
    assert len(second) == 20
    assert first != second