"""Account state fetched from a chain, and its on-disk cache of fork state."""

from __future__ import annotations

import json
import string
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from w3.types import _decode_data, _decode_fixed, _decode_quantity, _encode_data, _load

_HEX_CHARS = frozenset(string.hexdigits)
_UINT256_BYTES = 32


class Fetcher(ABC):
    """Access to the account state of a blockchain."""

    @abstractmethod
    def nonce(self, addr: bytes) -> int:
        """Return the nonce of the given address."""

    @abstractmethod
    def balance(self, addr: bytes) -> int:
        """Return the balance of the given address."""

    @abstractmethod
    def code(self, addr: bytes) -> bytes:
        """Return the code of the given address."""

    @abstractmethod
    def storage_at(self, addr: bytes, slot: bytes) -> bytes:
        """Return the 32-byte value of the given address at the given storage slot."""

    @abstractmethod
    def header_hash(self, block_number: int) -> bytes:
        """Return the hash of the header with the given number."""


def parse_uint256_or_hash(text: str | bytes) -> int:
    """Parse a 256-bit unsigned integer from hex that may carry leading zeros.

    The "0x" prefix is optional and odd-length digits are padded. Only the
    last 32 bytes are kept.
    """
    if isinstance(text, bytes):
        text = text.decode("ascii", "replace")
    if not isinstance(text, str):
        raise ValueError(f"cannot decode {type(text).__name__} as hex string")
    if len(text) >= 2 and text[0] == "0" and text[1] in "xX":
        text = text[2:]
    if not set(text) <= _HEX_CHARS:
        raise ValueError(f"invalid hex string {text!r}")
    if len(text) % 2:
        text = "0" + text
    data = bytes.fromhex(text)[-_UINT256_BYTES:]
    return int.from_bytes(data, "big")


def _hex_key_sorted(mapping: dict, encode) -> list:
    return sorted(((encode(key), value) for key, value in mapping.items()), key=lambda kv: kv[0])


@dataclass
class ForkAccount:
    """Cached state of an account: nonce, balance, code and fetched storage slots."""

    nonce: int = 0
    balance: int = 0
    code: bytes = b""
    storage: dict[int, int] = field(default_factory=dict)

    def to_json(self) -> dict:
        """Return the JSON object form of the account."""
        out: dict[str, Any] = {
            "nonce": hex(self.nonce),
            "balance": hex(self.balance),
            "code": _encode_data(self.code),
        }
        if self.storage:
            out["storage"] = {key: hex(val) for key, val in _hex_key_sorted(self.storage, hex)}
        return out

    @classmethod
    def from_json(cls, data: Any) -> ForkAccount:
        """Build an account from its JSON object form (dict or JSON text)."""
        obj = _load(data)
        if not isinstance(obj, dict):
            raise ValueError("account must be a JSON object")

        nonce = obj.get("nonce")
        balance = obj.get("balance")
        code = obj.get("code")
        storage = obj.get("storage") or {}
        if not isinstance(storage, dict):
            raise ValueError("account storage must be a JSON object")
        if balance is not None and not isinstance(balance, str):
            raise ValueError("account balance must be a hex string")
        return cls(
            nonce=0 if nonce is None else _decode_quantity(nonce, 64),
            balance=0 if balance is None else parse_uint256_or_hash(balance),
            code=b"" if code is None else _decode_data(code),
            storage={
                parse_uint256_or_hash(slot): parse_uint256_or_hash(_require_str(val))
                for slot, val in storage.items()
            },
        )


def _require_str(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"cannot decode {type(value).__name__} as hex string")
    return value


@dataclass
class ForkState:
    """Accounts and header hashes fetched for one chain at one block."""

    accounts: dict[bytes, ForkAccount] = field(default_factory=dict)
    header_hashes: dict[int, bytes] = field(default_factory=dict)

    def clone(self) -> ForkState:
        """Return a shallow copy; the account objects are shared."""
        return ForkState(accounts=dict(self.accounts), header_hashes=dict(self.header_hashes))

    def merge(self, other: ForkState | None) -> bool:
        """Add what other has and self lacks; return whether self changed.

        Values already present in self are never overwritten.
        """
        if other is None or (not other.accounts and not other.header_hashes):
            return False

        changed = False
        for addr, other_acc in other.accounts.items():
            acc = self.accounts.get(addr)
            if acc is None:
                self.accounts[addr] = other_acc
                changed = True
                continue
            for slot, val in other_acc.storage.items():
                if slot not in acc.storage:
                    acc.storage[slot] = val
                    changed = True

        for number, block_hash in other.header_hashes.items():
            if number not in self.header_hashes:
                self.header_hashes[number] = block_hash
                changed = True
        return changed

    def to_json(self) -> dict:
        """Return the JSON object form of the state."""
        out: dict[str, Any] = {}
        if self.accounts:
            out["accounts"] = {
                key: acc.to_json() for key, acc in _hex_key_sorted(self.accounts, _encode_data)
            }
        if self.header_hashes:
            out["headerHashes"] = {
                key: _encode_data(value) for key, value in _hex_key_sorted(self.header_hashes, hex)
            }
        return out

    @classmethod
    def from_json(cls, data: Any) -> ForkState:
        """Build a state from its JSON object form (dict or JSON text)."""
        obj = _load(data)
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise ValueError("fork state must be a JSON object")
        accounts = obj.get("accounts") or {}
        header_hashes = obj.get("headerHashes") or {}
        if not isinstance(accounts, dict) or not isinstance(header_hashes, dict):
            raise ValueError("fork state fields must be JSON objects")
        return cls(
            accounts={
                _decode_fixed(addr, 20, "address"): ForkAccount.from_json(acc)
                for addr, acc in accounts.items()
            },
            header_hashes={
                _decode_quantity(number, 64): _decode_fixed(block_hash, 32, "hash")
                for number, block_hash in header_hashes.items()
            },
        )


_cache: dict[str, ForkState] = {}
_cache_lock = threading.Lock()
_read_lock = threading.Lock()
_write_lock = threading.Lock()


def _cache_key(path: str | Path) -> str:
    return str(Path(path))


def read_testdata_state(path: str | Path) -> ForkState:
    """Return the fork state stored at path; an empty state if the file does not exist."""
    key = _cache_key(path)
    with _read_lock:
        with _cache_lock:
            cached = _cache.get(key)
        if cached is not None:
            return cached.clone()

        try:
            with open(path, "rb") as f:
                state = ForkState.from_json(json.load(f))
        except FileNotFoundError:
            return ForkState()

        with _cache_lock:
            _cache[key] = state
        return state.clone()


def write_testdata_state(path: str | Path, state: ForkState) -> None:
    """Merge state into the fork state stored at path and persist it if it changed."""
    key = _cache_key(path)
    with _write_lock:
        stored = read_testdata_state(path)
        if not stored.merge(state):
            return

        Path(path).parent.mkdir(mode=0o775, parents=True, exist_ok=True)

        with _cache_lock:
            _cache[key] = stored

        with open(path, "w", encoding="utf-8") as f:
            json.dump(stored.to_json(), f, indent="\t")
            f.write("\n")