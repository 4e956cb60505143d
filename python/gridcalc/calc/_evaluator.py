"""Postfix evaluation of arithmetic formulas.

A formula body is tokenized, converted to reverse-Polish order by
:func:`~gridcalc.calc._parser.to_postfix`, then evaluated on a numeric stack.
Cell references are resolved through a caller-supplied callback, so this
module knows nothing about grids or dependency graphs.

The resolver returns the referenced value, or a :class:`CellError` when the
referenced cell is itself in error; the evaluator converts that value into a
:class:`ReferencedCellError` carrying the same code.
"""

from __future__ import annotations

from collections.abc import Callable

from gridcalc.calc._errors import (
    CellError,
    DivideByZero,
    InvalidValue,
    MalformedExpression,
    NumericOverflow,
    ReferencedCellError,
    is_error,
)
from gridcalc.calc._parser import (
    FORMULA_MARKER,
    NUMBER,
    REF,
    Token,
    is_formula,
    parse_literal,
    parse_number,
    to_postfix,
    tokenize,
)

Number = int | float
Resolver = Callable[[str], int | float | str | CellError]


def _literal_value(text: str) -> Number:
    num = parse_number(text)
    if num is None:
        raise MalformedExpression(f"Invalid number {text!r}")
    return num


def _resolve_operand(ref: str, resolve: Resolver) -> Number:
    """Resolve *ref* to a number, coercing numeric text."""
    val = resolve(ref)
    if is_error(val):
        raise ReferencedCellError(ref, val)
    if isinstance(val, (int, float)) and not isinstance(val, bool):
        return val
    num = parse_number(str(val))
    if num is None:
        raise InvalidValue(f"{ref} holds non-numeric value {val!r}")
    return num


def _apply(op: str, a: Number, b: Number) -> Number:
    try:
        if op == "+":
            return a + b
        if op == "-":
            return a - b
        if op == "*":
            return a * b
        if b == 0:
            raise DivideByZero("Division by zero")
        return a / b
    except OverflowError as e:
        raise NumericOverflow(f"Result of {op!r} is out of range: {e}") from e


def evaluate_postfix(postfix: list[Token], resolve: Resolver) -> Number:
    """Evaluate reverse-Polish tokens.

    Operators pop ``b`` then ``a`` and push ``a op b``. The stack must end
    with exactly one value.
    """
    stack: list[Number] = []
    for tok in postfix:
        if tok.kind == NUMBER:
            stack.append(_literal_value(tok.text))
        elif tok.kind == REF:
            stack.append(_resolve_operand(tok.text, resolve))
        else:
            if len(stack) < 2:
                raise MalformedExpression(
                    f"Operator {tok.text!r} at position {tok.pos} is missing an operand"
                )
            b = stack.pop()
            a = stack.pop()
            stack.append(_apply(tok.text, a, b))

    if len(stack) != 1:
        raise MalformedExpression(f"Expression left {len(stack)} values on the stack")
    return stack[0]


def evaluate(text: str, resolve: Resolver) -> Number | str:
    """Evaluate raw cell text.

    Non-formula text yields its number when numeric, otherwise the text
    itself. Formula text (leading ``=``) is evaluated; failures raise a
    :class:`~gridcalc.calc._errors.FormulaError` subclass whose ``error``
    is the code to store on the cell.

    Unary minus is not part of the language: ``=-1`` is malformed.
    """
    if not is_formula(text):
        return parse_literal(text)
    tokens = tokenize(text[len(FORMULA_MARKER):])
    return evaluate_postfix(to_postfix(tokens), resolve)
