"""Routers — bind an application's state to a URL path.

A router turns the current model into a path (``encode``) and a navigated
path into a message for the application (``decode``). ``infer`` derives
one from an endpoint type::

    type Page = Home | Article | Files

    router = infer(Page, make_message=SetPage, get_endpoint=lambda m: m.page)
    router.encode(model)            # "article/42"
    router.decode("files/a/b")      # SetPage(Files(path=["a", "b"]))
    router.decode("nowhere/at/all") # None
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from waymark.config import RouterConfig
from waymark.routing.cache import SegmentCache
from waymark.routing.decision import DecisionNode, SumSegment
from waymark.routing.segment import Segment

logger = logging.getLogger("waymark.router")


class Router[Model, Msg](Protocol):
    """Anything that can map a model to a path and a path to a message."""

    def encode(self, model: Model) -> str: ...

    def decode(self, path: str) -> Msg | None: ...


@dataclass(frozen=True, slots=True)
class SimpleRouter:
    """A hand-written router made of two functions.

    Usage::

        router = SimpleRouter(
            encode=lambda model: f"page/{model.page}",
            decode=lambda path: SetPage(int(path.rpartition("/")[2])),
        )
    """

    encode: Callable[[Any], str]
    decode: Callable[[str], Any]


def split_path(path: str) -> list[str]:
    """Split *path* into fragments. One leading ``/`` is ignored; ``""`` has none."""
    path = path.removeprefix("/")
    if not path:
        return []
    return path.split("/")


class EndpointRouter[Endpoint, Model, Msg]:
    """Router inferred from an endpoint type.

    The endpoint segment is built once, when the router is created, so any
    error in the endpoint type or its templates surfaces immediately as a
    ``ConfigurationError``.
    """

    __slots__ = ("_config", "_get_endpoint", "_make_message", "_segment", "endpoint_type")

    def __init__(
        self,
        endpoint_type: Any,
        make_message: Callable[[Endpoint], Msg],
        get_endpoint: Callable[[Model], Endpoint],
        *,
        config: RouterConfig | None = None,
        cache: SegmentCache | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        if cache is None:
            cache = SegmentCache(self._config.primitives)
        self.endpoint_type = endpoint_type
        self._make_message = make_message
        self._get_endpoint = get_endpoint
        self._segment: Segment = cache.get(endpoint_type)
        logger.debug("Router built for %r", endpoint_type)

    @property
    def segment(self) -> Segment:
        return self._segment

    @property
    def routes(self) -> list[tuple[str, str]]:
        """``(variant name, template)`` for each variant, in declaration order.

        Empty when the endpoint type is not a sum.
        """
        if isinstance(self._segment, SumSegment):
            return list(self._segment.templates)
        return []

    @property
    def tree(self) -> DecisionNode | None:
        """Root of the merged decision tree, or ``None`` for non-sum endpoints."""
        if isinstance(self._segment, SumSegment):
            return self._segment.root
        return None

    def link(self, endpoint: Endpoint) -> str:
        """Return the path of *endpoint*."""
        path = "/".join(self._segment.write(endpoint))
        if self._config.leading_slash:
            return f"/{path}"
        return path

    def encode(self, model: Model) -> str:
        """Return the path for the endpoint of *model*."""
        return self.link(self._get_endpoint(model))

    def parse(self, path: str) -> Endpoint | None:
        """Decode *path* into an endpoint value, or ``None`` if nothing matches.

        The whole path must be consumed; a matching prefix is not enough.
        """
        return self.parse_fragments(split_path(path))

    def parse_fragments(self, parts: Sequence[str]) -> Endpoint | None:
        if isinstance(self._segment, SumSegment):
            result = self._segment.parse_all(parts)
        else:
            result = self._segment.parse(parts, 0)
        if result is None or result[1] != len(parts):
            logger.debug("No route matches %r", "/".join(parts))
            return None
        return result[0]

    def decode(self, path: str) -> Msg | None:
        """Return the message for navigating to *path*, or ``None`` if nothing matches."""
        endpoint = self.parse(path)
        if endpoint is None:
            return None
        return self._make_message(endpoint)


def _identity(value: Any) -> Any:
    return value


def infer[Endpoint, Model, Msg](
    endpoint_type: Any,
    make_message: Callable[[Endpoint], Msg] = _identity,
    get_endpoint: Callable[[Model], Endpoint] = _identity,
    *,
    config: RouterConfig | None = None,
) -> EndpointRouter[Endpoint, Model, Msg]:
    """Infer a router for *endpoint_type*.

    *endpoint_type* is usually a union of ``@endpoint``-decorated
    dataclasses (or a ``type`` alias of one). *make_message* wraps a
    decoded endpoint into the message sent to the application;
    *get_endpoint* extracts the endpoint from the model for ``encode``.
    Both default to the identity.

    Raises ``ConfigurationError`` if the type cannot be routed.
    """
    return EndpointRouter(endpoint_type, make_message, get_endpoint, config=config)
