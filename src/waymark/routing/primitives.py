"""Built-in primitive segments.

Each primitive consumes exactly one path fragment. Numbers must match their
canonical lexical form: ASCII digits only, no surrounding whitespace, no
digit separators. Integers longer than the interpreter's conversion limit
do not match. Booleans are read case-insensitively (``"True"`` and
``"TRUE"`` both parse) and always written lowercase. ``Decimal`` NaN and
infinities are written with ``str`` but never parsed back, so they do not
round-trip.
"""

import re
from collections.abc import Callable, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, NewType

from waymark.routing.segment import ParseResult, Segment

# Fixed-width integer annotations, range-checked on parse
Int8 = NewType("Int8", int)
UInt8 = NewType("UInt8", int)
Int16 = NewType("Int16", int)
UInt16 = NewType("UInt16", int)
Int32 = NewType("Int32", int)
UInt32 = NewType("UInt32", int)
Int64 = NewType("Int64", int)
UInt64 = NewType("UInt64", int)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FLOAT_SPECIAL = frozenset({"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity", "nan"})


def primitive_segment(
    convert: Callable[[str], Any | None],
    formatter: Callable[[Any], str] = str,
) -> Segment:
    """Build a one-fragment segment from a converter and a formatter.

    *convert* returns ``None`` when the fragment is not a valid value.
    """

    def parse(parts: Sequence[str], index: int) -> ParseResult:
        if index >= len(parts):
            return None
        value = convert(parts[index])
        if value is None:
            return None
        return value, index + 1

    def write(value: Any) -> list[str]:
        return [formatter(value)]

    return Segment(parse=parse, write=write)


def _to_str(text: str) -> str:
    return text


def _to_bool(text: str) -> bool | None:
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def _format_bool(value: Any) -> str:
    return "true" if value else "false"


def _int_converter(low: int | None = None, high: int | None = None) -> Callable[[str], int | None]:
    def convert(text: str) -> int | None:
        if not _INT_RE.fullmatch(text):
            return None
        try:
            value = int(text)
        except ValueError:
            # Past sys.get_int_max_str_digits()
            return None
        if (low is not None and value < low) or (high is not None and value > high):
            return None
        return value

    return convert


def _to_float(text: str) -> float | None:
    if not (_DECIMAL_RE.fullmatch(text) or text.lower() in _FLOAT_SPECIAL):
        return None
    return float(text)


def _to_decimal(text: str) -> Decimal | None:
    if not _DECIMAL_RE.fullmatch(text):
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def _sized(bits: int, *, signed: bool) -> Segment:
    if signed:
        bound = 1 << (bits - 1)
        return primitive_segment(_int_converter(-bound, bound - 1))
    return primitive_segment(_int_converter(0, (1 << bits) - 1))


PRIMITIVES: dict[Any, Segment] = {
    str: primitive_segment(_to_str),
    bool: primitive_segment(_to_bool, _format_bool),
    int: primitive_segment(_int_converter()),
    Int8: _sized(8, signed=True),
    UInt8: _sized(8, signed=False),
    Int16: _sized(16, signed=True),
    UInt16: _sized(16, signed=False),
    Int32: _sized(32, signed=True),
    UInt32: _sized(32, signed=False),
    Int64: _sized(64, signed=True),
    UInt64: _sized(64, signed=False),
    float: primitive_segment(_to_float, repr),
    Decimal: primitive_segment(_to_decimal),
}
