"""Storage slot computation for Solidity mappings, and random addresses."""

from __future__ import annotations

import os

from w3.types import keccak256

_WORD = 32


def _to_word(value: bytes | int) -> bytes:
    """Left-pad bytes, or encode an integer big-endian, to a 32-byte word."""
    if isinstance(value, int):
        return value.to_bytes(_WORD, "big")
    data = bytes(value)
    if len(data) > _WORD:
        return data[-_WORD:]
    return data.rjust(_WORD, b"\x00")


_WETH9_BALANCE_POS = _to_word(3)
_WETH9_ALLOWANCE_POS = _to_word(4)


def slot(pos: bytes, key: bytes) -> bytes:
    """Return the storage slot of a mapping at position pos for the given key."""
    return keccak256(_to_word(key), _to_word(pos))


def slot2(pos: bytes, key: bytes, key2: bytes) -> bytes:
    """Return the storage slot of a double mapping at position pos for the given keys."""
    return keccak256(_to_word(key2), keccak256(_to_word(key), _to_word(pos)))


def weth_balance_slot(addr: bytes) -> bytes:
    """Return the storage slot holding the WETH balance of addr."""
    return slot(_WETH9_BALANCE_POS, _to_word(addr))


def weth_allowance_slot(owner: bytes, spender: bytes) -> bytes:
    """Return the storage slot holding the WETH allowance of owner for spender."""
    return slot2(_WETH9_ALLOWANCE_POS, _to_word(owner), _to_word(spender))


def rand_a() -> bytes:
    """Return a random 20-byte address."""
    return os.urandom(20)