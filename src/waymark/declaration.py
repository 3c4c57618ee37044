"""The ``@endpoint`` declaration.

Attaches a path template to a variant class::

    @endpoint("/article/{id}")
    @dataclass(frozen=True, slots=True)
    class Article:
        id: int

Template fragments are literals, ``{field}`` (one value) or ``{*field}``
(the rest of the path, bound to a ``list``/``tuple``/``str`` field). The
template is validated when a router is built, not here.
"""

from collections.abc import Callable
from typing import Any

_ENDPOINT_ATTR = "__waymark_endpoint__"


def endpoint[T](path: str) -> Callable[[type[T]], type[T]]:
    """Declare the path template of a variant class."""

    def decorator(cls: type[T]) -> type[T]:
        # Stored in the class dict so subclasses don't inherit it
        setattr(cls, _ENDPOINT_ATTR, path)
        return cls

    return decorator


def endpoint_path(cls: Any) -> str | None:
    """Return the template declared on *cls*, or ``None``."""
    return vars(cls).get(_ENDPOINT_ATTR) if isinstance(cls, type) else None
