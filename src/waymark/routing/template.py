"""Path templates — how a variant's declared path binds to its fields.

A template is a ``/``-separated string. Each fragment is a literal, a
``{name}`` parameter (one value of field ``name``) or a ``{*name}`` rest
parameter (every remaining fragment, collected into field ``name``)::

    "/article/{id}"       -> [Constant("article"), Parameter(id)]
    "/files/{*segments}"  -> [Constant("files"), Parameter(segments, REST)]

Without a declaration, a variant ``Article(id, lang)`` uses
``Article/{id}/{lang}``. A declaration made of a single literal (or of no
fragment at all, ``"/"``) is followed by every field in declaration order.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, get_args, get_origin

from waymark.errors import EndpointDefinitionError
from waymark.routing.segment import Segment
from waymark.shapes import VariantShape

_PARAMETER_RE = re.compile(r"^\{([?*]?)([a-zA-Z0-9_]+)\}$")


class Modifier(Enum):
    BASIC = "basic"
    REST = "rest"


@dataclass(frozen=True, slots=True)
class FieldSlot:
    """Field *index* of the variant at position *variant* in its sum."""

    variant: int
    index: int


@dataclass(frozen=True, slots=True)
class RestCodec:
    """How a rest field maps to and from its items."""

    element: Any
    build: Callable[[list[Any]], Any]
    items: Callable[[Any], Iterable[Any]]


@dataclass(frozen=True, slots=True)
class Constant:
    value: str


@dataclass(frozen=True, slots=True)
class Parameter:
    """A parametric fragment.

    *slots* lists every variant field this fragment feeds; it holds a single
    slot until sibling variants are merged onto a shared fragment.
    *segment* is the field's segment for ``BASIC`` and the element segment
    for ``REST``.
    """

    slots: tuple[FieldSlot, ...]
    annotation: Any
    segment: Segment
    modifier: Modifier
    rest: RestCodec | None = None


type Fragment = Constant | Parameter


def split_template(path: str) -> list[str]:
    """Split a declared path into raw fragments; ``"/"`` and ``""`` give none."""
    stripped = path.strip("/")
    if not stripped:
        return []
    return stripped.split("/")


def is_constant(fragment: str) -> bool:
    return "{" not in fragment


def rest_codec(annotation: Any) -> RestCodec | None:
    """Return the rest codec for a ``list``/``tuple[X, ...]``/``str`` field, else ``None``."""
    if annotation is str:
        return RestCodec(element=str, build="/".join, items=lambda value: value.split("/"))
    origin = get_origin(annotation)
    args = get_args(annotation)
    if origin is list and len(args) == 1:
        return RestCodec(element=args[0], build=list, items=iter)
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return RestCodec(element=args[0], build=tuple, items=iter)
    return None


def variant_fragments(
    variant: VariantShape,
    position: int,
    get_segment: Callable[[Any], Segment],
    *,
    owner: str,
) -> list[Fragment]:
    """Resolve *variant*'s template into fragments bound to its fields.

    Raises ``EndpointDefinitionError`` when the template references an
    unknown field, references a field twice, binds only some fields, uses
    an unknown modifier, or misplaces a rest parameter.
    """

    def fail(detail: str) -> EndpointDefinitionError:
        return EndpointDefinitionError(owner, variant.name, detail)

    def basic(index: int) -> Parameter:
        annotation = variant.fields[index].annotation
        return Parameter(
            slots=(FieldSlot(position, index),),
            annotation=annotation,
            segment=get_segment(annotation),
            modifier=Modifier.BASIC,
        )

    def defaults() -> list[Fragment]:
        return [basic(i) for i in range(len(variant.fields))]

    if variant.path is None:
        return [Constant(variant.name), *defaults()]

    raw = split_template(variant.path)
    if not raw:
        return defaults()
    if len(raw) == 1 and is_constant(raw[0]):
        return [Constant(raw[0]), *defaults()]

    names = [f.name for f in variant.fields]
    unbound = set(names)
    fragments: list[Fragment] = []
    for raw_fragment in raw:
        if fragments and _is_rest(fragments[-1]):
            if raw_fragment.startswith("{*"):
                raise fail("more than one rest parameter")
            raise fail(f"rest parameter must be the last fragment, found {raw_fragment!r} after it")
        if is_constant(raw_fragment):
            fragments.append(Constant(raw_fragment))
            continue

        m = _PARAMETER_RE.match(raw_fragment)
        if m is None:
            raise fail(f"invalid path fragment {raw_fragment!r}")
        prefix, name = m.groups()
        if name not in names:
            raise fail(f"undefined field {name!r}")
        if name not in unbound:
            raise fail(f"duplicate field {name!r}")
        unbound.discard(name)

        index = names.index(name)
        if prefix == "":
            fragments.append(basic(index))
        elif prefix == "*":
            annotation = variant.fields[index].annotation
            codec = rest_codec(annotation)
            if codec is None:
                raise fail(
                    f"rest parameter {name!r} must be a list, tuple[X, ...] or str, "
                    f"not {annotation!r}"
                )
            fragments.append(
                Parameter(
                    slots=(FieldSlot(position, index),),
                    annotation=annotation,
                    segment=get_segment(codec.element),
                    modifier=Modifier.REST,
                    rest=codec,
                )
            )
        else:
            raise fail(f"invalid parameter modifier {prefix!r} in {raw_fragment!r}")

    if unbound:
        missing = ", ".join(n for n in names if n in unbound)
        raise fail(f"template binds some but not all fields (missing: {missing})")
    return fragments


def render_template(fragments: Sequence[Fragment], variant: VariantShape) -> str:
    """Format resolved fragments back into template syntax, e.g. ``"files/{*segments}"``."""
    out: list[str] = []
    for fragment in fragments:
        if isinstance(fragment, Constant):
            out.append(fragment.value)
            continue
        name = variant.fields[fragment.slots[0].index].name
        out.append(f"{{*{name}}}" if fragment.modifier is Modifier.REST else f"{{{name}}}")
    return "/".join(out)


def _is_rest(fragment: Fragment) -> bool:
    return isinstance(fragment, Parameter) and fragment.modifier is Modifier.REST
