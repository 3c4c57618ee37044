"""Tests for waymark.routing.primitives — single-fragment segments."""

from decimal import Decimal

import pytest

from waymark.routing.primitives import (
    PRIMITIVES,
    Int8,
    Int16,
    Int32,
    Int64,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    primitive_segment,
)


def _parse(annotation: object, *parts: str) -> object:
    result = PRIMITIVES[annotation].parse(list(parts), 0)
    return None if result is None else result[0]


class TestTable:
    def test_all_types_registered(self) -> None:
        assert set(PRIMITIVES) == {
            str, bool, int, float, Decimal,
            Int8, UInt8, Int16, UInt16, Int32, UInt32, Int64, UInt64,
        }


class TestString:
    def test_consumes_one_fragment(self) -> None:
        assert PRIMITIVES[str].parse(["a", "b"], 0) == ("a", 1)

    def test_empty_fragment(self) -> None:
        assert PRIMITIVES[str].parse([""], 0) == ("", 1)

    def test_exhausted_input_fails(self) -> None:
        assert PRIMITIVES[str].parse(["a"], 1) is None

    def test_write(self) -> None:
        assert PRIMITIVES[str].write("hello") == ["hello"]


class TestBool:
    def test_write_is_lowercase(self) -> None:
        assert PRIMITIVES[bool].write(True) == ["true"]
        assert PRIMITIVES[bool].write(False) == ["false"]

    def test_parse_lowercase(self) -> None:
        assert _parse(bool, "true") is True
        assert _parse(bool, "false") is False

    def test_parse_is_case_insensitive(self) -> None:
        assert _parse(bool, "True") is True
        assert _parse(bool, "TRUE") is True
        assert _parse(bool, "FaLsE") is False

    def test_rejects_other_words(self) -> None:
        assert _parse(bool, "yes") is None
        assert _parse(bool, "1") is None
        assert _parse(bool, " true") is None


class TestInt:
    def test_parse(self) -> None:
        assert _parse(int, "42") == 42
        assert _parse(int, "-7") == -7
        assert _parse(int, "+3") == 3

    def test_rejects_non_canonical(self) -> None:
        assert _parse(int, "1_000") is None
        assert _parse(int, " 42") is None
        assert _parse(int, "4.2") is None
        assert _parse(int, "abc") is None
        assert _parse(int, "") is None

    def test_unbounded(self) -> None:
        assert _parse(int, str(2**80)) == 2**80

    def test_too_many_digits_is_no_match(self) -> None:
        assert _parse(int, "1" * 5000) is None
        assert _parse(Int64, "9" * 5000) is None

    def test_rejects_non_ascii_digits(self) -> None:
        assert _parse(int, "\u0661\u0662") is None  # Arabic-Indic "12"
        assert _parse(int, "\uff13") is None  # fullwidth "3"

    def test_write(self) -> None:
        assert PRIMITIVES[int].write(-12) == ["-12"]


class TestSizedInt:
    @pytest.mark.parametrize(
        ("annotation", "low", "high"),
        [
            (Int8, -128, 127),
            (UInt8, 0, 255),
            (Int16, -32768, 32767),
            (UInt16, 0, 65535),
            (Int32, -(2**31), 2**31 - 1),
            (UInt32, 0, 2**32 - 1),
            (Int64, -(2**63), 2**63 - 1),
            (UInt64, 0, 2**64 - 1),
        ],
    )
    def test_range(self, annotation: object, low: int, high: int) -> None:
        assert _parse(annotation, str(low)) == low
        assert _parse(annotation, str(high)) == high
        assert _parse(annotation, str(low - 1)) is None
        assert _parse(annotation, str(high + 1)) is None


class TestFloat:
    def test_parse(self) -> None:
        assert _parse(float, "3.14") == pytest.approx(3.14)
        assert _parse(float, "10") == 10.0
        assert _parse(float, "1e3") == 1000.0
        assert _parse(float, ".5") == 0.5

    def test_special_values(self) -> None:
        assert _parse(float, "inf") == float("inf")
        assert _parse(float, "-Infinity") == float("-inf")

    def test_rejects_garbage(self) -> None:
        assert _parse(float, "abc") is None
        assert _parse(float, "1_0.5") is None
        assert _parse(float, "") is None
        assert _parse(float, "\u0661.5") is None

    def test_write_round_trips(self) -> None:
        value = 0.1 + 0.2
        [text] = PRIMITIVES[float].write(value)
        assert _parse(float, text) == value


class TestDecimal:
    def test_parse(self) -> None:
        assert _parse(Decimal, "19.99") == Decimal("19.99")
        assert _parse(Decimal, "-1E+3") == Decimal("-1E+3")

    def test_rejects_nan(self) -> None:
        assert _parse(Decimal, "NaN") is None

    def test_nan_and_infinity_write_but_do_not_parse(self) -> None:
        for value in (Decimal("NaN"), Decimal("Infinity")):
            [text] = PRIMITIVES[Decimal].write(value)
            assert _parse(Decimal, text) is None

    def test_rejects_non_ascii_digits(self) -> None:
        assert _parse(Decimal, "\u0661\u0662.5") is None

    def test_write_keeps_exponent(self) -> None:
        [text] = PRIMITIVES[Decimal].write(Decimal("1E+3"))
        assert _parse(Decimal, text) == Decimal("1E+3")


class TestPrimitiveSegment:
    def test_custom_converter(self) -> None:
        hexint = primitive_segment(
            lambda s: int(s, 16) if s and all(c in "0123456789abcdef" for c in s) else None,
            lambda v: format(v, "x"),
        )
        assert hexint.parse(["ff"], 0) == (255, 1)
        assert hexint.parse(["zz"], 0) is None
        assert hexint.write(255) == ["ff"]
