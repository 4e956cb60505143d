"""Tests for gridcalc.calc formula evaluation."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from gridcalc.calc._errors import (
    CellError,
    DivideByZero,
    FormulaError,
    InvalidCharacter,
    InvalidValue,
    MalformedExpression,
    NumericOverflow,
    ReferencedCellError,
    is_error,
)
from gridcalc.calc._evaluator import evaluate


def _resolver(values: dict[str, object]) -> Callable[[str], object]:
    """Resolver over a plain dict; missing refs read as 0."""
    return lambda ref: values.get(ref, 0)


NO_REFS = _resolver({})


class TestLiteralText:
    def test_number_text(self) -> None:
        assert evaluate("42", NO_REFS) == 42

    def test_decimal_text(self) -> None:
        assert evaluate("2.5", NO_REFS) == 2.5

    def test_plain_text_is_not_an_error(self) -> None:
        assert evaluate("hello", NO_REFS) == "hello"

    def test_blank(self) -> None:
        assert evaluate("", NO_REFS) == ""


class TestArithmetic:
    @pytest.mark.parametrize(
        ("formula", "expected"),
        [
            ("=1+2", 3),
            ("=7-10", -3),
            ("=6*7", 42),
            ("=9/4", 2.25),
            ("=2+3*4", 14),
            ("=(2+3)*4", 20),
            ("=20-5-3", 12),
            ("=64/8/2", 4),
            ("=1.5*2", 3.0),
            ("= 1 + ( 2 * ( 3 + 4 ) )", 15),
        ],
    )
    def test_expressions(self, formula: str, expected: float) -> None:
        assert evaluate(formula, NO_REFS) == expected

    def test_literal_formula(self) -> None:
        assert evaluate("=42", NO_REFS) == 42


class TestReferences:
    def test_direct_ref(self) -> None:
        assert evaluate("=A1", _resolver({"A1": 100})) == 100

    def test_binary_with_refs(self) -> None:
        resolve = _resolver({"A1": 10, "A2": 3})
        assert evaluate("=A1+A2", resolve) == 13
        assert evaluate("=A1-A2", resolve) == 7
        assert evaluate("=A1*A2", resolve) == 30
        assert evaluate("=A1/A2", resolve) == pytest.approx(10 / 3)

    def test_lowercase_refs(self) -> None:
        assert evaluate("=a1*2", _resolver({"A1": 4})) == 8

    def test_numeric_text_is_coerced(self) -> None:
        assert evaluate("=A1+1", _resolver({"A1": "41"})) == 42

    def test_missing_ref_is_zero(self) -> None:
        assert evaluate("=ZZ999+1", NO_REFS) == 1

    def test_resolver_sees_each_ref(self) -> None:
        seen: list[str] = []

        def resolve(ref: str) -> int:
            seen.append(ref)
            return 1

        evaluate("=A1+B2*A1", resolve)
        assert seen == ["A1", "B2", "A1"]


class TestErrors:
    def test_divide_by_zero(self) -> None:
        with pytest.raises(DivideByZero) as exc:
            evaluate("=A1/0", _resolver({"A1": 10}))
        assert exc.value.error == "#DIV/0!"

    def test_divide_by_zero_ref(self) -> None:
        with pytest.raises(DivideByZero):
            evaluate("=1/A1", NO_REFS)

    def test_non_numeric_ref(self) -> None:
        with pytest.raises(InvalidValue) as exc:
            evaluate("=A1+1", _resolver({"A1": "abc"}))
        assert exc.value.error == "#VALUE!"

    def test_referenced_error_propagates(self) -> None:
        with pytest.raises(ReferencedCellError) as exc:
            evaluate("=A1+1", _resolver({"A1": CellError.DIV0}))
        assert exc.value.error is CellError.DIV0
        assert exc.value.cell_id == "A1"

    def test_unary_minus_not_supported(self) -> None:
        with pytest.raises(MalformedExpression):
            evaluate("=-1", NO_REFS)

    def test_invalid_character(self) -> None:
        with pytest.raises(InvalidCharacter) as exc:
            evaluate("=1%2", NO_REFS)
        assert exc.value.error == "#ERROR"

    @pytest.mark.parametrize("formula", ["=", "=()", "=1+", "=1 2", "=A1 B1", "=(1+2", "=1+2)"])
    def test_malformed(self, formula: str) -> None:
        with pytest.raises(MalformedExpression) as exc:
            evaluate(formula, NO_REFS)
        assert exc.value.error == CellError.ERROR

    def test_overflow(self) -> None:
        with pytest.raises(NumericOverflow) as exc:
            evaluate("=" + "9" * 400 + "/3", NO_REFS)
        assert exc.value.error == "#ERROR"

    def test_overflow_from_ref(self) -> None:
        with pytest.raises(NumericOverflow):
            evaluate("=A1+0.5", _resolver({"A1": 10**400}))

    def test_big_integers_multiply_exactly(self) -> None:
        assert evaluate("=A1*2", _resolver({"A1": 10**30})) == 2 * 10**30

    def test_all_errors_share_base(self) -> None:
        for formula in ("=1/0", "=1$", "=*"):
            with pytest.raises(FormulaError):
                evaluate(formula, NO_REFS)


class TestCellError:
    def test_singletons(self) -> None:
        assert CellError.of("#div/0!") is CellError.DIV0

    def test_equal_to_code(self) -> None:
        assert CellError.CIRCULAR == "#CIRCULAR"
        assert CellError.VALUE != "#ERROR"
        assert str(CellError.ERROR) == "#ERROR"

    def test_is_error(self) -> None:
        assert is_error(CellError.VALUE)
        assert not is_error("#VALUE!")
        assert not is_error(0)
