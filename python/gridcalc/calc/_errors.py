"""Cell error values and the exceptions raised while evaluating formulas."""

from __future__ import annotations

from typing import TypeGuard


# ---------------------------------------------------------------------------
# CellError: error codes stored on cells
# ---------------------------------------------------------------------------


class CellError:
    """Error value stored on a cell.

    Use ``CellError.of(code)`` to get a cached singleton for each error code.
    Errors compare equal to their string code (e.g., ``CellError.DIV0 == "#DIV/0!"``).
    """

    __slots__ = ("code",)
    _cache: dict[str, CellError] = {}

    CIRCULAR: CellError
    DIV0: CellError
    VALUE: CellError
    ERROR: CellError

    def __init__(self, code: str) -> None:
        self.code = code

    @classmethod
    def of(cls, code: str) -> CellError:
        canon = code.upper()
        if canon not in cls._cache:
            cls._cache[canon] = cls(canon)
        return cls._cache[canon]

    def __repr__(self) -> str:
        return self.code

    def __str__(self) -> str:
        return self.code

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CellError):
            return self.code == other.code
        if isinstance(other, str):
            return self.code == other.upper()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.code)


# Singletons
CellError.CIRCULAR = CellError.of("#CIRCULAR")
CellError.DIV0 = CellError.of("#DIV/0!")
CellError.VALUE = CellError.of("#VALUE!")
CellError.ERROR = CellError.of("#ERROR")


def is_error(val: object) -> TypeGuard[CellError]:
    """Return True if *val* is a CellError instance."""
    return isinstance(val, CellError)


# ---------------------------------------------------------------------------
# FormulaError hierarchy
# ---------------------------------------------------------------------------


class FormulaError(Exception):
    """Base for evaluation failures. ``error`` is the code stored on the cell."""

    error: CellError = CellError.ERROR

    def __init__(self, message: str = "", error: CellError | None = None) -> None:
        super().__init__(message or str(error or self.error))
        if error is not None:
            self.error = error


class InvalidCharacter(FormulaError):
    pass


class MalformedExpression(FormulaError):
    pass


class DivideByZero(FormulaError):
    error = CellError.DIV0


class InvalidValue(FormulaError):
    """A referenced value could not be coerced to a number."""

    error = CellError.VALUE


class ReferencedCellError(FormulaError):
    """A referenced cell holds an error; its code is carried over as-is."""

    def __init__(self, cell_id: str, error: CellError) -> None:
        super().__init__(f"{cell_id} holds {error}", error)
        self.cell_id = cell_id


class NumericOverflow(FormulaError):
    """An arithmetic result does not fit in a float."""
