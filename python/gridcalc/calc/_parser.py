"""Formula lexer and shunting-yard parser, plus static reference extraction."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from gridcalc.calc._errors import InvalidCharacter, MalformedExpression

FORMULA_MARKER = "="

NUMBER = "number"
REF = "ref"
OPERATOR = "operator"
LPAREN = "lparen"
RPAREN = "rparen"
INVALID = "invalid"

PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2}

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# At most one decimal point per literal; no exponent, no sign.
_NUMBER_RE = re.compile(r"[0-9]+\.?[0-9]*|\.[0-9]*")
# Column letters followed by row digits; bounds are not checked here.
_REF_RE = re.compile(r"[A-Z]+[0-9]+")
_LETTERS_RE = re.compile(r"[A-Z]+")

# Plain numeric text typed into a non-formula cell.
_LITERAL_NUMBER_RE = re.compile(r"^\s*[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\s*$")
_LITERAL_INT_RE = re.compile(r"^\s*[+-]?[0-9]+\s*$")


@dataclass(frozen=True)
class Token:
    """A single lexical token of a formula body."""

    kind: str
    text: str
    pos: int = 0


def is_formula(text: str) -> bool:
    return text.startswith(FORMULA_MARKER)


def parse_number(text: str) -> int | float | None:
    """Parse plain numeric text, or return None when *text* is not a number.

    Integer literals stay ``int``; everything else becomes ``float``, as do
    integers too long for ``int()`` to convert.
    """
    if not _LITERAL_NUMBER_RE.match(text):
        return None
    if _LITERAL_INT_RE.match(text):
        try:
            return int(text)
        except ValueError:
            # Past the interpreter's int digit limit.
            pass
    return float(text)


def parse_literal(text: str) -> int | float | str:
    """Value of non-formula text: its number when numeric, otherwise the text."""
    num = parse_number(text)
    return text if num is None else num


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------


def _scan(expr: str) -> Iterator[Token]:
    """Yield tokens for an upper-cased formula body without raising.

    Characters the language does not know come out as ``INVALID`` tokens so
    that callers can decide whether to fail or skip them.
    """
    i = 0
    length = len(expr)
    while i < length:
        ch = expr[i]
        if ch.isspace():
            i += 1
            continue
        if ch in PRECEDENCE:
            yield Token(OPERATOR, ch, i)
            i += 1
            continue
        if ch == "(":
            yield Token(LPAREN, ch, i)
            i += 1
            continue
        if ch == ")":
            yield Token(RPAREN, ch, i)
            i += 1
            continue

        m = _NUMBER_RE.match(expr, i)
        if m:
            yield Token(NUMBER, m.group(), i)
            i = m.end()
            continue

        m = _REF_RE.match(expr, i)
        if m:
            yield Token(REF, m.group(), i)
            i = m.end()
            continue

        # Letters without a row number, or anything else.
        m = _LETTERS_RE.match(expr, i)
        end = m.end() if m else i + 1
        yield Token(INVALID, expr[i:end], i)
        i = end


def tokenize(body: str) -> list[Token]:
    """Tokenize a formula body (the text after ``=``).

    Raises InvalidCharacter for anything outside the formula language and
    MalformedExpression for a bare decimal point.
    """
    tokens: list[Token] = []
    for tok in _scan(body.upper()):
        if tok.kind == INVALID:
            raise InvalidCharacter(f"Invalid character {tok.text!r} at position {tok.pos}")
        if tok.kind == NUMBER and tok.text == ".":
            raise MalformedExpression(f"Bare decimal point at position {tok.pos}")
        tokens.append(tok)
    return tokens


# ---------------------------------------------------------------------------
# Parser (shunting-yard)
# ---------------------------------------------------------------------------


def to_postfix(tokens: list[Token]) -> list[Token]:
    """Convert infix tokens to reverse-Polish order.

    ``+``/``-`` bind looser than ``*``/``/``; all four are left-associative.
    """
    output: list[Token] = []
    ops: list[Token] = []

    for tok in tokens:
        if tok.kind in (NUMBER, REF):
            output.append(tok)
        elif tok.kind == LPAREN:
            ops.append(tok)
        elif tok.kind == RPAREN:
            while ops and ops[-1].kind != LPAREN:
                output.append(ops.pop())
            if not ops:
                raise MalformedExpression(f"Unbalanced ')' at position {tok.pos}")
            ops.pop()
        else:
            while (
                ops
                and ops[-1].kind == OPERATOR
                and PRECEDENCE[ops[-1].text] >= PRECEDENCE[tok.text]
            ):
                output.append(ops.pop())
            ops.append(tok)

    while ops:
        tok = ops.pop()
        if tok.kind == LPAREN:
            raise MalformedExpression(f"Unbalanced '(' at position {tok.pos}")
        output.append(tok)

    return output


# ---------------------------------------------------------------------------
# Reference extraction
# ---------------------------------------------------------------------------


def extract_refs(text: str) -> list[str]:
    """Cell ids referenced by *text*, in order of appearance.

    Empty for non-formula text. Never raises: operator syntax is not checked
    and unknown characters are skipped. Duplicates are kept.
    """
    if not is_formula(text):
        return []
    body = text[len(FORMULA_MARKER):].upper()
    return [tok.text for tok in _scan(body) if tok.kind == REF]
