"""Parse hex strings and decimal amounts into addresses, hashes, bytes and integers."""

from __future__ import annotations

import json
import re

_GWEI = 10**9
_ETHER = 10**18

_HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")
_HEX_INT = re.compile(r"[+-]?[0-9a-fA-F]+")
_DEC_INT = re.compile(r"[+-]?[0-9]+")

_UNITS = {
    "ether": (_ETHER, 18),
    "eth": (_ETHER, 18),
    "gwei": (_GWEI, 9),
}


def _has_0x_prefix(text: str) -> bool:
    return len(text) >= 2 and text[0] == "0" and text[1] in "xX"


def _strip_0x(text: str) -> str:
    return text[2:] if _has_0x_prefix(text) else text


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _format_byte(value: int) -> str:
    char = chr(value)
    if char.isprintable():
        return f"U+{value:04X} '{char}'"
    return f"U+{value:04X}"


def _decode_hex(text: str) -> bytes:
    """Decode hex digits without prefix, reporting errors like a strict hex decoder."""
    raw = text.encode("utf-8")
    for value in raw:
        if value not in _HEX_DIGITS:
            raise ValueError(f"encoding/hex: invalid byte: {_format_byte(value)}")
    if len(raw) % 2:
        raise ValueError("encoding/hex: odd length hex string")
    return bytes.fromhex(text)


def _decode_fixed(text: str, size: int, kind: str) -> bytes:
    digits = _strip_0x(text)
    try:
        data = _decode_hex(digits)
    except ValueError as err:
        raise ValueError(f"invalid {kind} {_quote(digits)}: {err}") from None
    if len(data) != size:
        raise ValueError(f"invalid {kind} {_quote(digits)}: must have {size} bytes")
    return data


def A(hex_address: str) -> bytes:
    """Return the 20-byte address encoded by a hex string, or raise ValueError."""
    return _decode_fixed(hex_address, 20, "address")


def H(hex_hash: str) -> bytes:
    """Return the 32-byte hash encoded by a hex string, or raise ValueError."""
    return _decode_fixed(hex_hash, 32, "hash")


def B(*args: str) -> bytes:
    """Return the concatenation of the bytes encoded by the given hex strings."""
    chunks = []
    for text in args:
        digits = _strip_0x(text)
        try:
            chunks.append(_decode_hex(digits))
        except ValueError as err:
            raise ValueError(f"invalid bytes {_quote(digits)}: {err}") from None
    return b"".join(chunks)


def _parse_int(text: str, pattern: re.Pattern, base: int) -> int | None:
    if not pattern.fullmatch(text):
        return None
    return int(text, base)


def I(str_int: str) -> int:
    """Parse a hex string ("0x...") or a decimal string with optional unit.

    Supported units are "ether"/"eth" and "gwei". Fractional digits beyond the
    unit's precision are rejected.
    """
    if _has_0x_prefix(str_int):
        digits = str_int[2:]
        value = _parse_int(digits, _HEX_INT, 16)
        if value is None:
            raise ValueError(f"invalid hex big {_quote('0x' + digits)}")
        return value
    return _parse_decimal(str_int)


def _parse_decimal(text: str) -> int:
    number, has_unit, unit = text.partition(" ")
    integer_part, has_dot, fraction_part = number.partition(".")

    integer = _parse_int(integer_part, _DEC_INT, 10)
    if integer is None:
        raise ValueError(f"str big {_quote(text)} must be number")

    if not has_unit:
        if has_dot:
            raise ValueError(f"str big {_quote(text)} without unit must be integer")
        return integer

    unit = unit.lower()
    if unit not in _UNITS:
        raise ValueError(f"str big {_quote(text)} has invalid unit {_quote(unit)}")
    scale, precision = _UNITS[unit]
    integer *= scale

    if not has_dot:
        return integer

    fraction = _parse_int(fraction_part, _DEC_INT, 10)
    if fraction is None:
        raise ValueError(f"str big {_quote(text)} must be number")
    if fraction >= scale:
        raise ValueError(f"str big {_quote(text)} exceeds precision")

    exponent = precision - len(fraction_part)
    if exponent > 0:
        fraction *= 10**exponent
    return integer + fraction


def from_wei(wei: int | None, decimals: int) -> str:
    """Return wei as a decimal string with the given number of decimals."""
    if wei is None:
        return "<nil>"
    if not 0 <= decimals <= 255:
        raise ValueError(f"decimals must be in [0, 255], got {decimals}")

    sign = "-" if wei < 0 else ""
    whole, rest = divmod(abs(wei), 10**decimals)
    if rest == 0:
        return f"{sign}{whole}"
    fraction = str(rest).rjust(decimals, "0").rstrip("0")
    return f"{sign}{whole}.{fraction}"