"""Segment — a bidirectional codec between a value and path fragments.

``parse(parts, index)`` reads fragments starting at ``parts[index]`` and
returns ``(value, next_index)``, or ``None`` when the fragments don't match.
It never raises for malformed input. ``write(value)`` returns the fragments
that parse back to an equal value.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

ParseResult: TypeAlias = tuple[Any, int] | None
Parser: TypeAlias = Callable[[Sequence[str], int], ParseResult]
Writer: TypeAlias = Callable[[Any], list[str]]


@dataclass(frozen=True, slots=True)
class Segment:
    """A parse/write pair for one type. Immutable once built."""

    parse: Parser
    write: Writer


class SegmentHandle:
    """Forward reference to a segment that is still being built.

    Installed in the cache before a type's sub-shapes are visited, so a
    self-referential type resolves to this handle instead of recursing.
    ``resolve()`` is called exactly once, when the real segment is ready;
    parsing or writing through an unresolved handle is a bug and raises.
    """

    __slots__ = ("_annotation", "_target", "segment")

    def __init__(self, annotation: Any) -> None:
        self._annotation = annotation
        self._target: Segment | None = None
        self.segment = Segment(parse=self._parse, write=self._write)

    @property
    def resolved(self) -> bool:
        return self._target is not None

    def resolve(self, target: Segment) -> None:
        if self._target is not None:
            msg = f"Segment for {self._annotation!r} is already resolved."
            raise RuntimeError(msg)
        self._target = target

    def _get(self) -> Segment:
        if self._target is None:
            msg = f"Segment for {self._annotation!r} used before construction finished."
            raise RuntimeError(msg)
        return self._target

    def _parse(self, parts: Sequence[str], index: int) -> ParseResult:
        return self._get().parse(parts, index)

    def _write(self, value: Any) -> list[str]:
        return self._get().write(value)
