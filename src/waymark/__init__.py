"""Waymark — typed, bidirectional URL routing.

Derives a path codec from an endpoint type: a union of dataclasses, each
declaring the path it lives at. The same definition encodes a value into a
path and decodes a path back into a value.

Basic usage::

    from dataclasses import dataclass
    from waymark import endpoint, infer

    @endpoint("/")
    @dataclass(frozen=True, slots=True)
    class Home:
        pass

    @endpoint("/article/{id}")
    @dataclass(frozen=True, slots=True)
    class Article:
        id: int

    type Page = Home | Article

    router = infer(Page)
    router.link(Article(42))      # "article/42"
    router.decode("article/42")   # Article(id=42)
    router.decode("article/x")    # None
"""

__version__ = "0.1.0-dev"
__all__ = [
    "AmbiguousEndpointError",
    "ConfigurationError",
    "EndpointDefinitionError",
    "EndpointRouter",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Router",
    "RouterConfig",
    "Segment",
    "SegmentCache",
    "SimpleRouter",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "UnsupportedTypeError",
    "WaymarkError",
    "endpoint",
    "infer",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "AmbiguousEndpointError": "waymark.errors",
    "ConfigurationError": "waymark.errors",
    "EndpointDefinitionError": "waymark.errors",
    "UnsupportedTypeError": "waymark.errors",
    "WaymarkError": "waymark.errors",
    "EndpointRouter": "waymark.router",
    "Router": "waymark.router",
    "SimpleRouter": "waymark.router",
    "infer": "waymark.router",
    "RouterConfig": "waymark.config",
    "Segment": "waymark.routing.segment",
    "SegmentCache": "waymark.routing.cache",
    "endpoint": "waymark.declaration",
    "Int8": "waymark.routing.primitives",
    "Int16": "waymark.routing.primitives",
    "Int32": "waymark.routing.primitives",
    "Int64": "waymark.routing.primitives",
    "UInt8": "waymark.routing.primitives",
    "UInt16": "waymark.routing.primitives",
    "UInt32": "waymark.routing.primitives",
    "UInt64": "waymark.routing.primitives",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import waymark`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
