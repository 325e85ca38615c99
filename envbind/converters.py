"""
String-to-value converters, one per supported destination type.

Lookup is a single ordered table keyed by the declared type. Specially
recognized types (durations) come first, then the primitive kinds. Parsers
raise ValueError on bad input; convert() turns a missing
table entry into UnsupportedTypeError.
"""

import math
import re
import struct
from datetime import timedelta
from typing import Any, Callable

from envbind.errors import UnsupportedTypeError
from envbind.types import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# Nanoseconds per duration unit.
_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_PART = re.compile(r"(?P<int>[0-9]*)(?:\.(?P<frac>[0-9]*))?(?P<unit>[^0-9.]*)")
_MAX_NANOS = 2**63 - 1


def parse_duration(s: str) -> timedelta:
    """
    Parse a duration such as "300ms", "-1.5h" or "2h45m".

    Valid units are ns, us (or µs), ms, s, m, h. A bare "0" is allowed;
    any other number needs a unit. Sub-microsecond parts are truncated.
    """
    orig = s
    negative = False
    if s[:1] in ("+", "-"):
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"time: invalid duration {orig!r}")

    total = 0
    pos = 0
    while pos < len(s):
        m = _DURATION_PART.match(s, pos)
        whole, frac, unit = m.group("int"), m.group("frac"), m.group("unit")
        if not whole and not frac:
            raise ValueError(f"time: invalid duration {orig!r}")
        if not unit:
            raise ValueError(f"time: missing unit in duration {orig!r}")
        if unit not in _UNITS:
            raise ValueError(f"time: unknown unit {unit!r} in duration {orig!r}")
        scale = _UNITS[unit]
        total += int(whole or "0") * scale
        if frac:
            total += int(frac) * scale // 10 ** len(frac)
        if total > _MAX_NANOS + (1 if negative else 0):
            raise ValueError(f"time: invalid duration {orig!r}")
        pos = m.end()

    micros = total // 1_000
    return timedelta(microseconds=-micros if negative else micros)


def parse_bool(s: str) -> bool:
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"parsing {s!r}: invalid syntax")


def _signed(bits: int) -> Callable[[str], int]:
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    def parse(s: str) -> int:
        if not _SIGNED.fullmatch(s):
            raise ValueError(f"parsing {s!r}: invalid syntax")
        value = int(s)
        if not low <= value <= high:
            raise ValueError(f"parsing {s!r}: value out of range")
        return value

    return parse


def _unsigned(bits: int) -> Callable[[str], int]:
    high = (1 << bits) - 1

    def parse(s: str) -> int:
        if not _UNSIGNED.fullmatch(s):
            raise ValueError(f"parsing {s!r}: invalid syntax")
        value = int(s)
        if value > high:
            raise ValueError(f"parsing {s!r}: value out of range")
        return value

    return parse


def parse_float64(s: str) -> float:
    if not s or not s.isascii() or s != s.strip() or "_" in s:
        raise ValueError(f"parsing {s!r}: invalid syntax")
    body = s[1:] if s[0] in "+-" else s
    try:
        if body[:2].lower() == "0x":
            # Hex mantissa needs a binary exponent.
            if "p" not in body.lower():
                raise ValueError
            value = float.fromhex(s)
        else:
            value = float(s)
    except ValueError:
        raise ValueError(f"parsing {s!r}: invalid syntax") from None
    if math.isinf(value) and not body.lower().startswith("inf"):
        raise ValueError(f"parsing {s!r}: value out of range")
    return value


def parse_float32(s: str) -> float:
    value = parse_float64(s)
    try:
        result = struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        result = math.inf
    if math.isinf(result) and not math.isinf(value):
        raise ValueError(f"parsing {s!r}: value out of range")
    return result


def _identity(s: str) -> str:
    return s


# (declared type, parser); tried in order, matched by identity.
CONVERTERS: list[tuple[Any, Callable[[str], Any]]] = [
    (timedelta, parse_duration),
    (int, _signed(64)),
    (Uint, _unsigned(32)),
    (Int8, _signed(8)),
    (Int16, _signed(16)),
    (Int32, _signed(32)),
    (Int64, _signed(64)),
    (Uint8, _unsigned(8)),
    (Uint16, _unsigned(16)),
    (Uint32, _unsigned(32)),
    (Uint64, _unsigned(64)),
    (str, _identity),
    (bool, parse_bool),
    (Float32, parse_float32),
    (float, parse_float64),
    (Float64, parse_float64),
]


def type_name(hint: Any) -> str:
    return getattr(hint, "__name__", None) or repr(hint)


def find_converter(hint: Any) -> Callable[[str], Any] | None:
    for typ, parser in CONVERTERS:
        if hint is typ:
            return parser
    return None


def convert(raw: str, hint: Any, name: str = "") -> Any:
    """Convert `raw` to the declared type `hint`; `name` only labels errors."""
    parser = find_converter(hint)
    if parser is None:
        raise UnsupportedTypeError(type_name(hint), raw, name)
    return parser(raw)
