"""Types for the "debug" namespace: trace configuration, traces and call traces."""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import Any

from w3.types import (
    Message,
    State,
    _decode_data,
    _decode_fixed,
    _decode_quantity,
    _load,
)

_HASH_LENGTH = 32
_HEX_CHARS = frozenset(string.hexdigits)
_MAX_UINT256 = (1 << 256) - 1
_MAX_UINT64 = (1 << 64) - 1
_MISSING = object()


def _get(obj: dict, name: str) -> Any:
    """Look up a JSON field by exact name, falling back to a case-insensitive match."""
    if name in obj:
        return obj[name]
    lowered = name.lower()
    for key, value in obj.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return _MISSING


def _object(data: Any, kind: str) -> dict:
    obj = _load(data)
    if not isinstance(obj, dict):
        raise ValueError(f"{kind} must be a JSON object")
    return obj


def _json_uint(value: Any, kind: str, maximum: int = _MAX_UINT64) -> int:
    if value is _MISSING or value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{kind} must be a non-negative integer")
    if not 0 <= value <= maximum:
        raise ValueError(f"{kind} out of range: {value}")
    return value


def _hex_uint64(value: Any) -> int:
    return 0 if value is _MISSING else _decode_quantity(value, 64)


def _hex_bytes(value: Any) -> bytes:
    if value is _MISSING or value is None:
        return b""
    return _decode_data(value)


def _parse_uint256(value: Any) -> int:
    if not isinstance(value, str):
        raise ValueError(f"cannot decode {type(value).__name__} as uint256")
    if len(value) >= 2 and value[0] == "0" and value[1] in "xX":
        return _decode_quantity(value, 256)
    if not value or not value.isascii() or not value.isdigit():
        raise ValueError(f"invalid uint256 {value!r}")
    number = int(value)
    if number > _MAX_UINT256:
        raise ValueError("uint256 overflow")
    return number


def parse_optional_prefixed_hash(text: str | bytes) -> bytes:
    """Decode a 32-byte hash given as 64 hex digits, with or without "0x" prefix."""
    if isinstance(text, bytes):
        text = text.decode("ascii", "replace")
    if not isinstance(text, str):
        raise ValueError(f"cannot decode {type(text).__name__} as hash")
    if len(text) > 2 and text[0] == "0" and text[1] in "xX":
        text = text[2:]
    if len(text) != 2 * _HASH_LENGTH:
        raise ValueError(f"hex string has length {len(text)}, want 64")
    if not set(text) <= _HEX_CHARS:
        raise ValueError(f"invalid hex string {text!r}")
    return bytes.fromhex(text)


def _decode_unprefixed_or_prefixed(value: Any) -> bytes:
    if value is _MISSING or value is None:
        return b""
    if not isinstance(value, str):
        raise ValueError(f"cannot decode {type(value).__name__} as hex string")
    digits = value[2:] if len(value) >= 2 and value[0] == "0" and value[1] in "xX" else value
    if len(digits) % 2 or not set(digits) <= _HEX_CHARS:
        raise ValueError(f"invalid hex string {value!r}")
    return bytes.fromhex(digits)


def with_encoded_input(msg: Message) -> Message:
    """Fill in msg.input from msg.func and msg.args when input is missing; return msg."""
    if msg.input is not None or msg.func is None:
        return msg
    msg.input = msg.func.encode_args(*msg.args)
    return msg


@dataclass
class TraceConfig:
    """Options of the struct-log tracer."""

    overrides: State | None = None
    enable_stack: bool = False
    enable_memory: bool = False
    enable_storage: bool = False
    limit: int = 0

    def to_json(self) -> dict:
        """Return the JSON-RPC trace configuration object."""
        out: dict[str, Any] = {}
        if self.overrides:
            out["stateOverrides"] = self.overrides.to_json()
        if not self.enable_storage:
            out["disableStorage"] = True
        if not self.enable_stack:
            out["disableStack"] = True
        if self.enable_memory:
            out["enableMemory"] = True
        out["enableReturnData"] = True
        if self.limit:
            out["limit"] = self.limit
        return out


@dataclass
class StructLog:
    """One executed EVM step."""

    pc: int = 0
    depth: int = 0
    gas: int = 0
    gas_cost: int = 0
    op: str = ""
    stack: list[int] = field(default_factory=list)
    memory: bytes = b""
    storage: dict[bytes, bytes] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Any) -> StructLog:
        """Build a struct log from its JSON object form (dict or JSON text)."""
        obj = _object(data, "struct log")

        op = _get(obj, "op")
        if op is _MISSING or op is None:
            op = ""
        elif not isinstance(op, str):
            raise ValueError("struct log op must be a string")

        stack = _get(obj, "stack")
        if stack is _MISSING or stack is None:
            stack = []
        elif not isinstance(stack, list):
            raise ValueError("struct log stack must be a JSON array")

        memory = _get(obj, "memory")
        if memory is _MISSING or memory is None:
            memory = []
        elif not isinstance(memory, list):
            raise ValueError("struct log memory must be a JSON array")

        storage = _get(obj, "storage")
        if storage is _MISSING or storage is None:
            storage = {}
        elif not isinstance(storage, dict):
            raise ValueError("struct log storage must be a JSON object")

        return cls(
            pc=_json_uint(_get(obj, "pc"), "pc"),
            depth=_json_uint(_get(obj, "depth"), "depth"),
            gas=_json_uint(_get(obj, "gas"), "gas"),
            gas_cost=_json_uint(_get(obj, "gasCost"), "gasCost"),
            op=op,
            stack=[_parse_uint256(item) for item in stack],
            memory=b"".join(parse_optional_prefixed_hash(word) for word in memory),
            storage={
                parse_optional_prefixed_hash(key): parse_optional_prefixed_hash(value)
                for key, value in storage.items()
            },
        )


@dataclass
class Trace:
    """Result of a struct-log trace."""

    gas: int = 0
    failed: bool = False
    output: bytes = b""
    struct_logs: list[StructLog] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> Trace:
        """Build a trace from its JSON object form (dict or JSON text)."""
        obj = _object(data, "trace")

        failed = _get(obj, "failed")
        if failed is _MISSING or failed is None:
            failed = False
        elif not isinstance(failed, bool):
            raise ValueError("trace failed must be a boolean")

        logs = _get(obj, "structLogs")
        if logs is _MISSING or logs is None:
            logs = []
        elif not isinstance(logs, list):
            raise ValueError("trace structLogs must be a JSON array")

        return cls(
            gas=_json_uint(_get(obj, "gas"), "gas"),
            failed=failed,
            output=_decode_unprefixed_or_prefixed(_get(obj, "returnValue")),
            struct_logs=[StructLog.from_json(log) for log in logs],
        )


@dataclass
class CallTrace:
    """A call frame of the call tracer, with its nested calls."""

    sender: bytes = bytes(20)
    to: bytes = bytes(20)
    type: str = ""
    gas: int = 0
    gas_used: int = 0
    value: int | None = None
    input: bytes = b""
    output: bytes = b""
    error: str = ""
    calls: list[CallTrace] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> CallTrace:
        """Build a call trace from its JSON object form (dict or JSON text)."""
        obj = _object(data, "call trace")

        def address(name: str) -> bytes:
            value = _get(obj, name)
            if value is _MISSING or value is None:
                return bytes(20)
            return _decode_fixed(value, 20, "address")

        def text(name: str) -> str:
            value = _get(obj, name)
            if value is _MISSING or value is None:
                return ""
            if not isinstance(value, str):
                raise ValueError(f"call trace {name} must be a string")
            return value

        value = _get(obj, "value")
        calls = _get(obj, "calls")
        if calls is _MISSING or calls is None:
            calls = []
        elif not isinstance(calls, list):
            raise ValueError("call trace calls must be a JSON array")

        return cls(
            sender=address("from"),
            to=address("to"),
            type=text("type"),
            gas=_hex_uint64(_get(obj, "gas")),
            gas_used=_hex_uint64(_get(obj, "gasUsed")),
            value=None if value is _MISSING or value is None else _decode_quantity(value, 256),
            input=_hex_bytes(_get(obj, "input")),
            output=_hex_bytes(_get(obj, "output")),
            error=text("error"),
            calls=[CallTrace.from_json(call) for call in calls],
        )