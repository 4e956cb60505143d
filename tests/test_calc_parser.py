"""Tests for gridcalc.calc formula lexer, parser and reference extraction."""

from __future__ import annotations

import pytest

from gridcalc.calc._errors import InvalidCharacter, MalformedExpression
from gridcalc.calc._parser import (
    LPAREN,
    NUMBER,
    OPERATOR,
    REF,
    RPAREN,
    Token,
    extract_refs,
    is_formula,
    parse_literal,
    parse_number,
    to_postfix,
    tokenize,
)


def _texts(tokens: list[Token]) -> list[str]:
    return [t.text for t in tokens]


class TestTokenize:
    def test_simple_expression(self) -> None:
        tokens = tokenize("A1+2")
        assert [t.kind for t in tokens] == [REF, OPERATOR, NUMBER]
        assert _texts(tokens) == ["A1", "+", "2"]

    def test_case_folded(self) -> None:
        assert _texts(tokenize("a1*bc12")) == ["A1", "*", "BC12"]

    def test_whitespace_skipped(self) -> None:
        assert _texts(tokenize("  A1 +\t3 ")) == ["A1", "+", "3"]

    def test_parentheses(self) -> None:
        tokens = tokenize("(A1)")
        assert [t.kind for t in tokens] == [LPAREN, REF, RPAREN]

    def test_decimal_literal(self) -> None:
        assert _texts(tokenize("1.25+.5")) == ["1.25", "+", ".5"]

    def test_second_decimal_point_starts_new_literal(self) -> None:
        assert _texts(tokenize("1.2.3")) == ["1.2", ".3"]

    def test_leading_minus_is_an_operator(self) -> None:
        tokens = tokenize("-1")
        assert [t.kind for t in tokens] == [OPERATOR, NUMBER]

    def test_invalid_character(self) -> None:
        with pytest.raises(InvalidCharacter, match="'&'"):
            tokenize("A1&B1")

    def test_letters_without_row_are_invalid(self) -> None:
        with pytest.raises(InvalidCharacter, match="SUM"):
            tokenize("SUM(A1)")

    def test_bare_decimal_point(self) -> None:
        with pytest.raises(MalformedExpression):
            tokenize("1+.")

    def test_positions_recorded(self) -> None:
        tokens = tokenize("A1 + 22")
        assert [t.pos for t in tokens] == [0, 3, 5]


class TestToPostfix:
    @pytest.mark.parametrize(
        ("body", "expected"),
        [
            ("1+2", ["1", "2", "+"]),
            ("1+2*3", ["1", "2", "3", "*", "+"]),
            ("(1+2)*3", ["1", "2", "+", "3", "*"]),
            ("8-4-2", ["8", "4", "-", "2", "-"]),
            ("8/4/2", ["8", "4", "/", "2", "/"]),
            ("A1*(B1-C1)/2", ["A1", "B1", "C1", "-", "*", "2", "/"]),
        ],
    )
    def test_precedence_and_associativity(self, body: str, expected: list[str]) -> None:
        assert _texts(to_postfix(tokenize(body))) == expected

    def test_unbalanced_close(self) -> None:
        with pytest.raises(MalformedExpression, match=r"Unbalanced '\)'"):
            to_postfix(tokenize("1+2)"))

    def test_unbalanced_open(self) -> None:
        with pytest.raises(MalformedExpression, match=r"Unbalanced '\('"):
            to_postfix(tokenize("(1+2"))

    def test_empty(self) -> None:
        assert to_postfix([]) == []


class TestExtractRefs:
    def test_simple_refs(self) -> None:
        assert extract_refs("=A1+B2") == ["A1", "B2"]

    def test_non_formula_has_no_refs(self) -> None:
        assert extract_refs("A1+B2") == []
        assert extract_refs("") == []

    def test_lowercase_normalized(self) -> None:
        assert extract_refs("=a1+b2") == ["A1", "B2"]

    def test_duplicates_kept(self) -> None:
        assert extract_refs("=A1+A1*A1") == ["A1", "A1", "A1"]

    def test_broken_operators_still_yield_refs(self) -> None:
        assert extract_refs("=A1++*B2)(") == ["A1", "B2"]

    def test_invalid_characters_do_not_raise(self) -> None:
        assert extract_refs("=A1&SUM(B2)#C3") == ["A1", "B2", "C3"]

    def test_out_of_range_refs_kept(self) -> None:
        assert extract_refs("=ZZ999+A1") == ["ZZ999", "A1"]


class TestLiterals:
    def test_is_formula(self) -> None:
        assert is_formula("=1")
        assert not is_formula(" =1")
        assert not is_formula("")

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("5", 5), ("-3", -3), ("2.5", 2.5), (".5", 0.5), ("1e3", 1000.0), (" 7 ", 7)],
    )
    def test_parse_number(self, text: str, expected: float) -> None:
        assert parse_number(text) == expected

    def test_integer_text_stays_int(self) -> None:
        assert isinstance(parse_number("42"), int)

    def test_integer_past_digit_limit_becomes_float(self) -> None:
        assert parse_number("9" * 5000) == float("inf")

    @pytest.mark.parametrize("text", ["", "abc", "12abc", "1.2.3", "nan", "inf", "1_000"])
    def test_not_a_number(self, text: str) -> None:
        assert parse_number(text) is None

    def test_parse_literal_keeps_text(self) -> None:
        assert parse_literal("hello") == "hello"
        assert parse_literal("") == ""
        assert parse_literal("10") == 10
