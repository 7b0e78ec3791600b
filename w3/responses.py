"""Response types of the "eth" access-list and "txpool" status requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from w3.types import AccessList, _decode_access_list, _decode_quantity, _load

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


def _hex_uint(obj: dict, name: str) -> int:
    value = _get(obj, name)
    return 0 if value is _MISSING else _decode_quantity(value, 64)


@dataclass
class AccessListResponse:
    """The access list of a message and the gas it uses with that list."""

    access_list: AccessList = field(default_factory=list)
    gas_used: int = 0

    @classmethod
    def from_json(cls, data: Any) -> AccessListResponse:
        """Build the response from its JSON object form (dict or JSON text)."""
        obj = _object(data, "access list response")
        access_list = _get(obj, "accessList")
        return cls(
            access_list=_decode_access_list(None if access_list is _MISSING else access_list),
            gas_used=_hex_uint(obj, "gasUsed"),
        )


@dataclass
class StatusResponse:
    """Number of pending and queued transactions in the transaction pool."""

    pending: int = 0
    queued: int = 0

    @classmethod
    def from_json(cls, data: Any) -> StatusResponse:
        """Build the response from its JSON object form (dict or JSON text)."""
        obj = _object(data, "status response")
        return cls(pending=_hex_uint(obj, "pending"), queued=_hex_uint(obj, "queued"))