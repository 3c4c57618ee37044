"""Segments for sequences and fixed-arity products.

A sequence is written as its length followed by each item's fragments, so
it can be followed by more fragments::

    [3, 4] -> ["2", "3", "4"]

A product (tuple, dataclass, NamedTuple) is the concatenation of its fields
in declaration order. Field names never appear in the path.
"""

import re
from collections.abc import Callable, Sequence
from typing import Any

from waymark.routing.segment import ParseResult, Segment

_COUNT_RE = re.compile(r"[0-9]+")


def sequence_segment(item: Segment, build: Callable[[list[Any]], Any]) -> Segment:
    """Length-prefixed sequence of *item*; *build* makes the container from a list.

    Every item must consume at least one fragment, so a count larger than
    the remaining input never matches and parsing is bounded by the path.
    """

    def parse(parts: Sequence[str], index: int) -> ParseResult:
        if index >= len(parts) or not _COUNT_RE.fullmatch(parts[index]):
            return None
        try:
            count = int(parts[index])
        except ValueError:
            # Past sys.get_int_max_str_digits()
            return None
        index += 1
        if count > len(parts) - index:
            return None
        items: list[Any] = []
        for _ in range(count):
            result = item.parse(parts, index)
            if result is None or result[1] <= index:
                return None
            value, index = result
            items.append(value)
        return build(items), index

    def write(value: Any) -> list[str]:
        items = list(value)
        out = [str(len(items))]
        for x in items:
            out.extend(item.write(x))
        return out

    return Segment(parse=parse, write=write)


def product_segment(
    fields: Sequence[Segment],
    construct: Callable[[Sequence[Any]], Any],
    deconstruct: Callable[[Any], Sequence[Any]],
) -> Segment:
    """Positional concatenation of *fields*."""
    fields = tuple(fields)

    def parse(parts: Sequence[str], index: int) -> ParseResult:
        values: list[Any] = []
        for field in fields:
            result = field.parse(parts, index)
            if result is None:
                return None
            value, index = result
            values.append(value)
        return construct(values), index

    def write(value: Any) -> list[str]:
        out: list[str] = []
        for field, x in zip(fields, deconstruct(value), strict=True):
            out.extend(field.write(x))
        return out

    return Segment(parse=parse, write=write)

