"""Segment cache — one segment per annotation, built on first use.

Construction is two-phase so recursive types terminate: a ``SegmentHandle``
is installed for the annotation before its sub-shapes are visited, and is
resolved to the real segment once that segment is built. Segments that
refer back to a type still under construction hold its handle and go
through it at parse/write time, when it is always resolved.

Construction is serialized by a re-entrant lock. Everything built during
one outermost ``get()`` is published together when it returns, so readers
on other threads never see a segment whose handles are still unresolved.
After that, lookups are lock-free dict reads.
"""

import logging
import threading
from collections.abc import Mapping
from typing import Any

from waymark.errors import UnsupportedTypeError
from waymark.routing.decision import sum_segment
from waymark.routing.primitives import PRIMITIVES
from waymark.routing.segment import Segment, SegmentHandle
from waymark.routing.structural import product_segment, sequence_segment
from waymark.shapes import PrimitiveShape, ProductShape, SequenceShape, SumShape, describe

logger = logging.getLogger("waymark.routing")


class SegmentCache:
    """Builds and memoizes segments by annotation.

    Usage::

        cache = SegmentCache()
        segment = cache.get(Page)
        segment.write(Article(id=3))  # ["article", "3"]
    """

    __slots__ = ("_depth", "_lock", "_pending", "_primitives", "_segments")

    def __init__(self, primitives: Mapping[Any, Segment] | None = None) -> None:
        self._primitives: dict[Any, Segment] = {**PRIMITIVES, **(primitives or {})}
        # Published segments, safe to read without the lock
        self._segments: dict[Any, Segment] = dict(self._primitives)
        # Segments and handles of the construction in progress
        self._pending: dict[Any, Segment] = {}
        self._depth = 0
        self._lock = threading.RLock()

    def __contains__(self, annotation: object) -> bool:
        return annotation in self._segments

    def get(self, annotation: Any) -> Segment:
        """Return the segment for *annotation*, building it if needed.

        Raises ``ConfigurationError`` (or a subclass) when the type or one
        of its templates is invalid; nothing from a failed construction is
        kept.
        """
        try:
            segment = self._segments.get(annotation)
        except TypeError as exc:
            raise UnsupportedTypeError(annotation, "annotation is not hashable") from exc
        if segment is not None:
            return segment

        with self._lock:
            segment = self._segments.get(annotation) or self._pending.get(annotation)
            if segment is not None:
                return segment

            self._depth += 1
            try:
                segment = self._build(annotation)
            except BaseException:
                if self._depth == 1:
                    self._pending.clear()
                raise
            finally:
                self._depth -= 1

            if self._depth == 0:
                self._segments.update(self._pending)
                self._pending.clear()
            return segment

    def _build(self, annotation: Any) -> Segment:
        handle = SegmentHandle(annotation)
        self._pending[annotation] = handle.segment

        shape = describe(annotation, self._primitives)
        logger.debug("Building segment for %r (%s)", annotation, type(shape).__name__)

        if isinstance(shape, PrimitiveShape):
            segment = self._primitives[shape.annotation]
        elif isinstance(shape, SequenceShape):
            segment = sequence_segment(self.get(shape.element), shape.build)
        elif isinstance(shape, ProductShape):
            segment = product_segment(
                [self.get(f.annotation) for f in shape.fields],
                shape.construct,
                shape.deconstruct,
            )
        elif isinstance(shape, SumShape):
            segment = sum_segment(shape, self.get)
        else:  # pragma: no cover - describe() returns one of the four shapes
            msg = f"Unknown shape {shape!r}"
            raise TypeError(msg)

        handle.resolve(segment)
        self._pending[annotation] = segment
        return segment
