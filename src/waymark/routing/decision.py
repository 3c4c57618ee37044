"""Decision tree for sum types.

The templates of all variants are merged into one tree, keyed by fragment,
so variants sharing a prefix share the nodes for it::

    Home            ""
    Article         "article/{id}"
    ArticleEdit     "article/{id}/edit"

    root (terminal: Home)
     └── "article"
          └── {id: int} (terminal: Article)
               └── "edit" (terminal: ArticleEdit)

Each node has any number of constant children (one per literal), at most
one parameter child, and at most one terminal variant. Two variants ending
on the same node, or disagreeing on a shared parameter, are rejected when
the tree is built.

Matching tries the constant child for the next fragment, then the
parameter child, then the node's own terminal variant. A branch that
fails falls back to the next option. Matching is recursive (depth =
template length).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

from waymark.errors import AmbiguousEndpointError
from waymark.routing.segment import ParseResult, Segment
from waymark.routing.template import (
    Constant,
    FieldSlot,
    Fragment,
    Modifier,
    Parameter,
    render_template,
    variant_fragments,
)
from waymark.shapes import SumShape, VariantShape


class DecisionNode:
    """A node in the merged tree. Mutable during construction only."""

    __slots__ = ("constants", "head", "parameter", "terminal")

    def __init__(self, head: Constant | Parameter | None = None) -> None:
        # Fragment this node consumes (None at the root)
        self.head = head
        # Literal children: "article" -> node
        self.constants: dict[str, DecisionNode] = {}
        # Single parameter child (merged across variants)
        self.parameter: DecisionNode | None = None
        # Variant whose template ends here, with its position in the sum
        self.terminal: tuple[int, VariantShape] | None = None

    @property
    def children(self) -> list[DecisionNode]:
        children = list(self.constants.values())
        if self.parameter is not None:
            children.append(self.parameter)
        return children


@dataclass(frozen=True, slots=True)
class SumSegment(Segment):
    """Segment of a sum type, keeping its tree and templates for introspection."""

    root: DecisionNode = field(default_factory=DecisionNode)
    templates: tuple[tuple[str, str], ...] = ()

    def parse_all(self, parts: Sequence[str]) -> ParseResult:
        """Parse *parts* as a whole path; a match must consume every fragment."""
        return match(self.root, parts, 0, complete=True)


type Case = tuple[int, VariantShape, Sequence[Fragment]]


def build_decision_tree(cases: Sequence[Case], *, owner: str) -> DecisionNode:
    """Merge the fragment lists of every variant into one tree.

    Raises ``AmbiguousEndpointError`` when two variants terminate on the
    same node or a shared parameter position has conflicting types or
    modifiers.
    """
    return _merge(None, cases, owner)


def _merge(head: Constant | Parameter | None, cases: Sequence[Case], owner: str) -> DecisionNode:
    node = DecisionNode(head)
    constant_groups: dict[str, list[Case]] = {}
    parameter: Parameter | None = None
    parameter_cases: list[Case] = []

    for position, variant, fragments in cases:
        if not fragments:
            if node.terminal is not None:
                other = node.terminal[1].name
                raise AmbiguousEndpointError(owner, variant.name, f"same path as {other}")
            node.terminal = (position, variant)
            continue

        first, rest = fragments[0], fragments[1:]
        if isinstance(first, Constant):
            constant_groups.setdefault(first.value, []).append((position, variant, rest))
            continue

        if parameter is None:
            parameter = first
        elif first.annotation != parameter.annotation:
            raise AmbiguousEndpointError(
                owner,
                variant.name,
                f"parameter type {first.annotation!r} conflicts with {parameter.annotation!r} "
                "at the same position in another variant",
            )
        elif first.modifier is not parameter.modifier:
            raise AmbiguousEndpointError(
                owner,
                variant.name,
                f"{first.modifier.value} parameter conflicts with {parameter.modifier.value} "
                "parameter at the same position in another variant",
            )
        else:
            parameter = replace(parameter, slots=parameter.slots + first.slots)
        parameter_cases.append((position, variant, rest))

    for value, group in constant_groups.items():
        node.constants[value] = _merge(Constant(value), group, owner)
    if parameter is not None:
        node.parameter = _merge(parameter, parameter_cases, owner)
    return node


def match(
    node: DecisionNode,
    parts: Sequence[str],
    index: int,
    *,
    complete: bool = False,
) -> ParseResult:
    """Match *parts* from *index* against the tree rooted at *node*.

    With *complete*, a variant is only accepted once every fragment is
    consumed, so a shorter variant matching a prefix does not hide a longer
    one reached through a parameter branch.
    """
    return _match_node(node, parts, index, {}, complete)


def _match_node(
    node: DecisionNode,
    parts: Sequence[str],
    index: int,
    values: dict[FieldSlot, Any],
    complete: bool,
) -> ParseResult:
    # 1. Literal child for the next fragment
    if index < len(parts):
        child = node.constants.get(parts[index])
        if child is not None:
            result = _match_node(child, parts, index + 1, values, complete)
            if result is not None:
                return result

    # 2. Parameter child
    if node.parameter is not None:
        result = _match_parameter(node.parameter, parts, index, values, complete)
        if result is not None:
            return result

    # 3. A variant ends here; leftovers are the caller's unless *complete*
    if node.terminal is not None and (not complete or index == len(parts)):
        position, variant = node.terminal
        args = [values[FieldSlot(position, i)] for i in range(len(variant.fields))]
        return variant.construct(args), index

    return None


def _match_parameter(
    node: DecisionNode,
    parts: Sequence[str],
    index: int,
    values: dict[FieldSlot, Any],
    complete: bool,
) -> ParseResult:
    head = node.head
    assert isinstance(head, Parameter)

    if head.modifier is Modifier.BASIC:
        result = head.segment.parse(parts, index)
        if result is None:
            return None
        value, index = result
    else:
        assert head.rest is not None
        items: list[Any] = []
        while index < len(parts):
            result = head.segment.parse(parts, index)
            # Every item must consume input, or the loop would never end
            if result is None or result[1] <= index:
                return None
            item, index = result
            items.append(item)
        value = head.rest.build(items)

    values = {**values, **dict.fromkeys(head.slots, value)}
    return _match_node(node, parts, index, values, complete)


def variant_writer(variant: VariantShape, fragments: Sequence[Fragment]) -> Callable[[Any], list[str]]:
    """Writer emitting *variant*'s fragments in template order."""

    def write(value: Any) -> list[str]:
        values = variant.deconstruct(value)
        out: list[str] = []
        for fragment in fragments:
            if isinstance(fragment, Constant):
                out.append(fragment.value)
                continue
            field_value = values[fragment.slots[0].index]
            if fragment.rest is None:
                out.extend(fragment.segment.write(field_value))
            else:
                for item in fragment.rest.items(field_value):
                    out.extend(fragment.segment.write(item))
        return out

    return write


def sum_segment(shape: SumShape, get_segment: Callable[[Any], Segment]) -> SumSegment:
    """Build the segment of a sum type from its variants' templates."""
    owner = shape.name
    cases: list[Case] = [
        (position, variant, variant_fragments(variant, position, get_segment, owner=owner))
        for position, variant in enumerate(shape.variants)
    ]
    root = build_decision_tree(cases, owner=owner)

    writers = {variant.cls: variant_writer(variant, fragments) for _, variant, fragments in cases}

    def parse(parts: Sequence[str], index: int) -> ParseResult:
        return match(root, parts, index)

    def write(value: Any) -> list[str]:
        writer = writers.get(type(value))
        if writer is None:
            msg = f"{type(value).__qualname__} is not a variant of {owner}"
            raise TypeError(msg)
        return writer(value)

    return SumSegment(
        parse=parse,
        write=write,
        root=root,
        templates=tuple(
            (variant.name, render_template(fragments, variant)) for _, variant, fragments in cases
        ),
    )
