"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation and read once
when a router is inferred.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from waymark.routing.segment import Segment


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(leading_slash=True, primitives={UUID: uuid_segment})
    """

    # Prefix encoded paths with "/" (decode accepts either form)
    leading_slash: bool = False

    # Extra single-fragment segments keyed by annotation; override built-ins
    primitives: Mapping[Any, Segment] = field(default_factory=dict)
