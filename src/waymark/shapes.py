"""Type shapes — the structural view of an endpoint type.

Reads Python type hints and classifies an annotation as one of four shapes:

- **primitive**: a key of the primitive table (one path fragment)
- **sequence**: ``list[X]`` or ``tuple[X, ...]``
- **product**: a fixed-arity ``tuple[A, B]``, a dataclass or a ``NamedTuple``
- **sum**: a union of dataclasses/NamedTuples (member unions and their
  aliases are flattened), or a single class carrying
  an ``@endpoint`` declaration

Shapes are shallow: field annotations are kept as annotations and only
described when the segment cache asks for them, so self-referential types
never recurse here.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from collections.abc import Callable, Container, Sequence
from dataclasses import dataclass
from typing import Any, get_args, get_origin

from waymark.declaration import endpoint_path
from waymark.errors import ConfigurationError, UnsupportedTypeError


@dataclass(frozen=True, slots=True)
class Field:
    """A named, annotated field of a product or variant."""

    name: str
    annotation: Any


@dataclass(frozen=True, slots=True)
class PrimitiveShape:
    annotation: Any


@dataclass(frozen=True, slots=True)
class SequenceShape:
    """A variable-length sequence; *build* turns a list of items into the container."""

    annotation: Any
    element: Any
    build: Callable[[list[Any]], Any]


@dataclass(frozen=True, slots=True)
class ProductShape:
    """Fixed-arity record or tuple. Fields are encoded positionally."""

    annotation: Any
    fields: tuple[Field, ...]
    construct: Callable[[Sequence[Any]], Any]
    deconstruct: Callable[[Any], Sequence[Any]]


@dataclass(frozen=True, slots=True)
class VariantShape:
    """One case of a sum: a class, its fields and its declared template."""

    name: str
    cls: type
    fields: tuple[Field, ...]
    path: str | None
    construct: Callable[[Sequence[Any]], Any]
    deconstruct: Callable[[Any], Sequence[Any]]


@dataclass(frozen=True, slots=True)
class SumShape:
    annotation: Any
    variants: tuple[VariantShape, ...]

    @property
    def name(self) -> str:
        return _type_name(self.annotation)


type Shape = PrimitiveShape | SequenceShape | ProductShape | SumShape


def describe(annotation: Any, primitives: Container[Any]) -> Shape:
    """Classify *annotation* into a shape.

    Raises ``UnsupportedTypeError`` when the annotation is none of the
    supported forms.
    """
    if _is_hashable(annotation) and annotation in primitives:
        return PrimitiveShape(annotation)

    if isinstance(annotation, typing.TypeAliasType):
        shape = describe(annotation.__value__, primitives)
        if isinstance(shape, SumShape):
            # Keep the alias so messages and introspection use its name
            return dataclasses.replace(shape, annotation=annotation)
        return shape

    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is list:
        if len(args) != 1:
            raise UnsupportedTypeError(annotation, "list needs an element type")
        return SequenceShape(annotation, args[0], list)

    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return SequenceShape(annotation, args[0], tuple)
        if args == ((),):
            args = ()
        fields = tuple(Field(f"item{i}", arg) for i, arg in enumerate(args))
        return ProductShape(annotation, fields, tuple, tuple)

    if origin is typing.Union or origin is types.UnionType:
        members = _union_members(args)
        return SumShape(annotation, tuple(_variant(member, annotation) for member in members))

    if isinstance(annotation, type):
        fields = class_fields(annotation)
        if fields is None:
            raise UnsupportedTypeError(
                annotation, "expected a primitive, list, tuple, dataclass, NamedTuple or union"
            )
        if endpoint_path(annotation) is not None:
            return SumShape(annotation, (_variant(annotation, annotation),))
        return ProductShape(
            annotation,
            fields,
            _constructor(annotation, fields),
            _reader(fields),
        )

    raise UnsupportedTypeError(annotation)


def class_fields(cls: type) -> tuple[Field, ...] | None:
    """Return the constructor fields of a dataclass or NamedTuple class.

    Returns ``None`` for any other class. String annotations are resolved
    against the class's module.
    """
    if dataclasses.is_dataclass(cls):
        names = [f.name for f in dataclasses.fields(cls) if f.init]
    elif issubclass(cls, tuple) and hasattr(cls, "_fields"):
        names = list(cls._fields)
    else:
        return None

    try:
        hints = typing.get_type_hints(cls)
    except NameError as exc:
        msg = f"Cannot resolve annotations of {cls.__qualname__}: {exc}"
        raise ConfigurationError(msg) from exc

    return tuple(Field(name, hints[name]) for name in names)


def _variant(member: Any, owner: Any) -> VariantShape:
    if not isinstance(member, type):
        raise UnsupportedTypeError(
            owner, f"union member {member!r} must be a dataclass or NamedTuple"
        )
    fields = class_fields(member)
    if fields is None:
        raise UnsupportedTypeError(
            owner, f"union member {member.__qualname__} must be a dataclass or NamedTuple"
        )
    return VariantShape(
        name=member.__name__,
        cls=member,
        fields=fields,
        path=endpoint_path(member),
        construct=_constructor(member, fields),
        deconstruct=_reader(fields),
    )


def _constructor(cls: type, fields: tuple[Field, ...]) -> Callable[[Sequence[Any]], Any]:
    names = [f.name for f in fields]

    def construct(values: Sequence[Any]) -> Any:
        return cls(**dict(zip(names, values, strict=True)))

    return construct


def _reader(fields: tuple[Field, ...]) -> Callable[[Any], Sequence[Any]]:
    names = [f.name for f in fields]

    def deconstruct(value: Any) -> tuple[Any, ...]:
        return tuple(getattr(value, name) for name in names)

    return deconstruct


def _union_members(args: Sequence[Any]) -> list[Any]:
    """Flatten union members, expanding members that are themselves unions."""
    members: list[Any] = []
    for arg in args:
        arg = _unalias(arg)
        origin = get_origin(arg)
        if origin is typing.Union or origin is types.UnionType:
            nested = _union_members(get_args(arg))
        else:
            nested = [arg]
        for member in nested:
            if member not in members:
                members.append(member)
    return members


def _unalias(annotation: Any) -> Any:
    while isinstance(annotation, typing.TypeAliasType):
        annotation = annotation.__value__
    return annotation


def _is_hashable(annotation: Any) -> bool:
    try:
        hash(annotation)
    except TypeError:
        return False
    return True


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__qualname__
    if isinstance(annotation, typing.TypeAliasType):
        return annotation.__name__
    return repr(annotation)
