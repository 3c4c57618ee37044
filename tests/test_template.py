"""Tests for waymark.routing.template — binding templates to variant fields."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import pytest

from waymark.declaration import endpoint
from waymark.errors import EndpointDefinitionError
from waymark.routing.cache import SegmentCache
from waymark.routing.template import (
    Constant,
    FieldSlot,
    Modifier,
    Parameter,
    render_template,
    rest_codec,
    split_template,
    variant_fragments,
)
from waymark.shapes import VariantShape, describe

_cache = SegmentCache()


def _variant(cls: type) -> VariantShape:
    shape = describe(cls, {})
    return shape.variants[0]  # type: ignore[union-attr]


def _fragments(cls: type, position: int = 0) -> list[Any]:
    return variant_fragments(_variant(cls), position, _cache.get, owner="Page")


@endpoint("/article/{id}/{lang}")
@dataclass
class Article:
    id: int
    lang: str


@endpoint("/search/{*terms}")
@dataclass
class Search:
    terms: list[str]


@endpoint("/blog")
@dataclass
class Blog:
    year: int
    slug: str


@endpoint("/")
@dataclass
class Home:
    pass


@dataclass
class Profile:
    user: str
    tab: int


@endpoint("/{lang}/home")
@dataclass
class LocalHome:
    lang: str


class TestSplitTemplate:
    def test_strips_slashes(self) -> None:
        assert split_template("/a/b/") == ["a", "b"]

    def test_root(self) -> None:
        assert split_template("/") == []
        assert split_template("") == []


class TestVariantFragments:
    def test_constants_and_parameters(self) -> None:
        frags = _fragments(Article, position=2)
        assert frags[0] == Constant("article")
        assert isinstance(frags[1], Parameter)
        assert frags[1].slots == (FieldSlot(2, 0),)
        assert frags[1].annotation is int
        assert frags[1].modifier is Modifier.BASIC
        assert frags[2].slots == (FieldSlot(2, 1),)

    def test_rest_parameter(self) -> None:
        [const, rest] = _fragments(Search)
        assert const == Constant("search")
        assert rest.modifier is Modifier.REST
        assert rest.annotation == list[str]
        assert rest.rest is not None
        assert rest.rest.element is str

    def test_single_constant_appends_fields(self) -> None:
        frags = _fragments(Blog)
        assert frags[0] == Constant("blog")
        assert [f.slots[0].index for f in frags[1:]] == [0, 1]

    def test_root_template_is_empty(self) -> None:
        assert _fragments(Home) == []

    def test_parameter_first(self) -> None:
        frags = _fragments(LocalHome)
        assert isinstance(frags[0], Parameter)
        assert frags[1] == Constant("home")

    def test_default_template_uses_tag_name(self) -> None:
        variant = describe(Profile | Home, {}).variants[0]  # type: ignore[union-attr]
        frags = variant_fragments(variant, 0, _cache.get, owner="Page")
        assert frags[0] == Constant("Profile")
        assert [f.annotation for f in frags[1:]] == [str, int]


@endpoint("/a/{missing}")
@dataclass
class UnknownField:
    id: int


@endpoint("/a/{id}/{id}")
@dataclass
class DuplicateField:
    id: int


@endpoint("/a/{id}")
@dataclass
class PartialBinding:
    id: int
    name: str


@endpoint("/a/{*rest}/b")
@dataclass
class RestNotLast:
    rest: list[str]


@endpoint("/a/{*one}/{*two}")
@dataclass
class TwoRests:
    one: list[str]
    two: list[str]


@endpoint("/a/{*count}")
@dataclass
class RestOnInt:
    count: int


@endpoint("/a/{?id}")
@dataclass
class OptionalModifier:
    id: int


@endpoint("/a/{id:int}")
@dataclass
class TypedSyntax:
    id: int


@endpoint("/a/pre{id}")
@dataclass
class MixedFragment:
    id: int


class TestDefinitionErrors:
    @pytest.mark.parametrize(
        ("cls", "message"),
        [
            (UnknownField, "undefined field 'missing'"),
            (DuplicateField, "duplicate field 'id'"),
            (PartialBinding, "some but not all fields"),
            (RestNotLast, "must be the last fragment"),
            (TwoRests, "more than one rest parameter"),
            (RestOnInt, "must be a list, tuple"),
            (OptionalModifier, "invalid parameter modifier '?'"),
            (TypedSyntax, "invalid path fragment"),
            (MixedFragment, "invalid path fragment"),
        ],
    )
    def test_rejected(self, cls: type, message: str) -> None:
        with pytest.raises(EndpointDefinitionError, match=re.escape(message)) as exc_info:
            _fragments(cls)
        assert exc_info.value.variant == cls.__name__
        assert exc_info.value.owner == "Page"


class TestRestCodec:
    def test_string(self) -> None:
        codec = rest_codec(str)
        assert codec is not None
        assert codec.build(["a", "b"]) == "a/b"
        assert list(codec.items("a/b")) == ["a", "b"]

    def test_list_and_tuple(self) -> None:
        assert rest_codec(list[int]).build([1]) == [1]  # type: ignore[union-attr]
        assert rest_codec(tuple[int, ...]).build([1]) == (1,)  # type: ignore[union-attr]

    def test_unsupported(self) -> None:
        assert rest_codec(int) is None
        assert rest_codec(tuple[int, str]) is None


class TestRenderTemplate:
    def test_round_trips_declaration(self) -> None:
        assert render_template(_fragments(Article), _variant(Article)) == "article/{id}/{lang}"
        assert render_template(_fragments(Search), _variant(Search)) == "search/{*terms}"

    def test_default_fields_shown(self) -> None:
        assert render_template(_fragments(Blog), _variant(Blog)) == "blog/{year}/{slug}"
