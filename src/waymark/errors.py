"""Waymark exception hierarchy.

Every build-time failure is a ``ConfigurationError``: it means the endpoint
type or one of its path templates is broken, and it surfaces when the router
is constructed. Decoding a path never raises; a path that matches nothing
decodes to ``None``.
"""


class WaymarkError(Exception):
    """Base for all waymark-specific errors."""


class ConfigurationError(WaymarkError):
    """Raised when an endpoint type cannot be turned into a router.

    Typically raised from ``infer()`` at startup.
    """


class UnsupportedTypeError(ConfigurationError):
    """A type annotation has no segment (not a primitive, sequence, product or sum)."""

    def __init__(self, annotation: object, detail: str = "") -> None:
        self.annotation = annotation
        name = annotation.__qualname__ if isinstance(annotation, type) else repr(annotation)
        msg = f"Type {name} cannot be routed"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class EndpointDefinitionError(ConfigurationError):
    """A variant's path template does not match its fields.

    Carries the owning type and the variant name so the message points at
    the declaration that needs fixing.
    """

    def __init__(self, owner: str, variant: str, detail: str) -> None:
        self.owner = owner
        self.variant = variant
        self.detail = detail
        super().__init__(f"Endpoint {owner}.{variant}: {detail}")


class AmbiguousEndpointError(EndpointDefinitionError):
    """Two variants claim the same path, or disagree on a shared parameter."""
