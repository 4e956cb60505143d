"""gridcalc.calc - Formula evaluation and incremental recalculation."""

from gridcalc.calc._engine import recalc, recalculate
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
from gridcalc.calc._evaluator import evaluate, evaluate_postfix
from gridcalc.calc._graph import (
    DependencyGraph,
    build_graph,
    find_affected,
    find_cycle_members,
    reverse_graph,
    topological_order,
)
from gridcalc.calc._parser import Token, extract_refs, is_formula, parse_literal, to_postfix, tokenize
from gridcalc.calc._protocol import CellDelta, RecalcResult

__all__ = [
    "CellDelta",
    "CellError",
    "DependencyGraph",
    "DivideByZero",
    "FormulaError",
    "InvalidCharacter",
    "InvalidValue",
    "MalformedExpression",
    "NumericOverflow",
    "RecalcResult",
    "ReferencedCellError",
    "Token",
    "build_graph",
    "evaluate",
    "evaluate_postfix",
    "extract_refs",
    "find_affected",
    "find_cycle_members",
    "is_error",
    "is_formula",
    "parse_literal",
    "recalc",
    "recalculate",
    "reverse_graph",
    "to_postfix",
    "tokenize",
    "topological_order",
]
