"""Common types: RPC batch elements, ABI function and caller interfaces, messages and state."""

from __future__ import annotations

import json
import string
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from Crypto.Hash import keccak

_ZERO_ADDRESS = bytes(20)
_HEX_CHARS = frozenset(string.hexdigits)


def keccak256(*args: bytes) -> bytes:
    """Return the Keccak-256 hash of the concatenation of the given byte strings."""
    hasher = keccak.new(digest_bits=256)
    for data in args:
        hasher.update(bytes(data))
    return hasher.digest()


_EMPTY_CODE_HASH = keccak256(b"")


def _encode_data(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def _strip_prefix(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"cannot decode {type(value).__name__} as hex string")
    if not (len(value) >= 2 and value[0] == "0" and value[1] in "xX"):
        raise ValueError("hex string without 0x prefix")
    return value[2:]


def _decode_quantity(value: Any, bits: int) -> int:
    digits = _strip_prefix(value)
    if not digits:
        raise ValueError('hex string "0x"')
    if len(digits) > 1 and digits[0] == "0":
        raise ValueError("hex number with leading zero digits")
    if not set(digits) <= _HEX_CHARS:
        raise ValueError("invalid hex string")
    number = int(digits, 16)
    if number.bit_length() > bits:
        raise ValueError(f"hex number > {bits} bits")
    return number


def _decode_data(value: Any) -> bytes:
    digits = _strip_prefix(value)
    if len(digits) % 2:
        raise ValueError("hex string of odd length")
    if not set(digits) <= _HEX_CHARS:
        raise ValueError("invalid hex string")
    return bytes.fromhex(digits)


def _decode_fixed(value: Any, size: int, kind: str) -> bytes:
    data = _decode_data(value)
    if len(data) != size:
        raise ValueError(f"hex string has length {2 * len(data)}, want {2 * size} for {kind}")
    return data


def _load(data: Any) -> Any:
    if isinstance(data, (str, bytes, bytearray)):
        return json.loads(data)
    return data


@dataclass
class BatchElem:
    """A single JSON-RPC request and the place its result or error ends up."""

    method: str
    args: list = field(default_factory=list)
    result: Any = None
    error: Exception | None = None


class Func(ABC):
    """ABI encoding and decoding of a contract function."""

    @abstractmethod
    def encode_args(self, *args: Any) -> bytes:
        """ABI-encode args and prepend the 4-byte selector."""

    @abstractmethod
    def decode_args(self, input: bytes) -> tuple:
        """ABI-decode the arguments from input."""

    @abstractmethod
    def decode_returns(self, output: bytes) -> tuple:
        """ABI-decode the return values from output."""


class Caller(ABC):
    """Creates an RPC request and handles its response."""

    @abstractmethod
    def create_request(self) -> BatchElem:
        """Return the request to send."""

    @abstractmethod
    def handle_response(self, elem: BatchElem) -> None:
        """Process the answered request; raise on error."""


AccessList = list[tuple[bytes, list[bytes]]]


def _encode_access_list(access_list: AccessList) -> list[dict]:
    return [
        {"address": _encode_data(address), "storageKeys": [_encode_data(key) for key in keys]}
        for address, keys in access_list
    ]


def _decode_access_list(value: Any) -> AccessList:
    if value is None:
        return []
    return [
        (
            _decode_fixed(entry["address"], 20, "address"),
            [_decode_fixed(key, 32, "hash") for key in entry.get("storageKeys") or []],
        )
        for entry in value
    ]


@dataclass
class Message:
    """A transaction without signature.

    If input is None but func is set, the input is encoded from func and args
    by the code that consumes the message.
    """

    sender: bytes = _ZERO_ADDRESS
    to: bytes | None = None
    nonce: int = 0
    gas_price: int | None = None
    gas_fee_cap: int | None = None
    gas_tip_cap: int | None = None
    gas: int = 0
    value: int | None = None
    input: bytes | None = None
    access_list: AccessList = field(default_factory=list)
    func: Func | None = None
    args: tuple = ()

    def to_json(self) -> dict:
        """Return the JSON-RPC object form of the message."""
        out: dict[str, Any] = {}
        if bytes(self.sender) != _ZERO_ADDRESS:
            out["from"] = _encode_data(self.sender)
        if self.to is not None:
            out["to"] = _encode_data(self.to)
        if self.nonce:
            out["nonce"] = hex(self.nonce)
        if self.gas_price is not None:
            out["gasPrice"] = hex(self.gas_price)
        if self.gas_fee_cap is not None:
            out["gasFeeCap"] = hex(self.gas_fee_cap)
        if self.gas_tip_cap is not None:
            out["gasTipCap"] = hex(self.gas_tip_cap)
        if self.gas:
            out["gas"] = hex(self.gas)
        if self.value is not None:
            out["value"] = hex(self.value)
        if self.input:
            out["data"] = _encode_data(self.input)
        if self.access_list:
            out["accessList"] = _encode_access_list(self.access_list)
        return out

    @classmethod
    def from_json(cls, data: Any) -> Message:
        """Build a message from its JSON-RPC object form (dict or JSON text)."""
        obj = _load(data)
        if not isinstance(obj, dict):
            raise ValueError("message must be a JSON object")

        def big(key: str) -> int | None:
            value = obj.get(key)
            return None if value is None else _decode_quantity(value, 256)

        def uint64(key: str) -> int:
            value = obj.get(key)
            return 0 if value is None else _decode_quantity(value, 64)

        sender = obj.get("from")
        to = obj.get("to")
        data_field = obj.get("data")
        input_bytes = _decode_data(data_field) if data_field is not None else b""
        access_list = _decode_access_list(obj.get("accessList"))
        return cls(
            sender=_decode_fixed(sender, 20, "address") if sender is not None else _ZERO_ADDRESS,
            to=_decode_fixed(to, 20, "address") if to is not None else None,
            nonce=uint64("nonce"),
            gas_price=big("gasPrice"),
            gas_fee_cap=big("gasFeeCap"),
            gas_tip_cap=big("gasTipCap"),
            gas=uint64("gas"),
            value=big("value"),
            input=input_bytes or None,
            access_list=access_list,
        )


@dataclass
class Account:
    """Account state used for state overrides and VM pre-state."""

    nonce: int = 0
    balance: int | None = None
    code: bytes = b""
    storage: dict[bytes, bytes] = field(default_factory=dict)
    _code_hash: bytes | None = field(default=None, init=False, repr=False, compare=False)

    def code_hash(self) -> bytes:
        """Return the Keccak-256 hash of the code; cached after first computation."""
        if self._code_hash is not None:
            return self._code_hash
        if not self.code:
            return _EMPTY_CODE_HASH
        self._code_hash = keccak256(self.code)
        return self._code_hash

    def to_json(self) -> dict:
        """Return the JSON state-override form of the account."""
        out: dict[str, Any] = {}
        if self.nonce > 0:
            out["nonce"] = hex(self.nonce)
        if self.balance is not None:
            out["balance"] = hex(self.balance)
        if self.code:
            out["code"] = _encode_data(self.code)
        if self.storage:
            out["stateDiff"] = {
                _encode_data(slot): _encode_data(self.storage[slot]) for slot in sorted(self.storage)
            }
        return out


class State(dict):
    """Mapping of 20-byte addresses to accounts."""

    def to_json(self) -> dict:
        """Return the JSON form with addresses as sorted hex keys."""
        return {_encode_data(address): self[address].to_json() for address in sorted(self)}