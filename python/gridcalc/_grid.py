"""Cells and immutable grid snapshots."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace

from gridcalc._utils import MAX_COLS, MAX_ROWS, MIN_COLS, MIN_ROWS, column_label, make_cell_id
from gridcalc.calc._errors import CellError
from gridcalc.calc._parser import is_formula

CellValue = int | float | str

DEFAULT_ROWS = 20
DEFAULT_COLS = 20


@dataclass(frozen=True)
class Cell:
    """One grid position: what the user typed and what it computes to.

    When ``error`` is set, ``value`` holds the same code for display.
    """

    raw: str = ""
    value: CellValue = ""
    error: CellError | None = None

    @property
    def display(self) -> CellValue:
        """What a renderer shows: the error code if any, else the value."""
        if self.error is not None:
            return self.error.code
        return self.value

    @property
    def is_formula(self) -> bool:
        return is_formula(self.raw)

    def with_raw(self, raw: str) -> Cell:
        """New raw text; the computed value is left for recalculation."""
        return replace(self, raw=raw, error=None)

    def with_value(self, value: CellValue) -> Cell:
        return replace(self, value=value, error=None)

    def with_error(self, error: CellError) -> Cell:
        return replace(self, value=error.code, error=error)


BLANK = Cell()


class Grid(Mapping[str, Cell]):
    """Fixed-size, immutable mapping of cell id to :class:`Cell`.

    Ids are kept in row-major generation order (A1, B1, ..., A2, ...).
    :meth:`replace` returns a new grid that shares every untouched cell.
    """

    __slots__ = ("_cells", "_rows", "_cols")

    def __init__(self, cells: Mapping[str, Cell], rows: int, cols: int) -> None:
        self._cells: dict[str, Cell] = dict(cells)
        self._rows = rows
        self._cols = cols

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def column_labels(self) -> list[str]:
        return [column_label(c) for c in range(self._cols)]

    def __getitem__(self, cell_id: str) -> Cell:
        return self._cells[cell_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return (
            self._rows == other._rows
            and self._cols == other._cols
            and self._cells == other._cells
        )

    __hash__ = None  # type: ignore[assignment]

    def replace(self, updates: Mapping[str, Cell]) -> Grid:
        """Return a copy with *updates* applied. Unknown ids raise KeyError."""
        for cell_id in updates:
            if cell_id not in self._cells:
                raise KeyError(f"Cell '{cell_id}' is outside the {self._rows}x{self._cols} grid")
        cells = dict(self._cells)
        cells.update(updates)
        return Grid(cells, self._rows, self._cols)

    def display_rows(self) -> list[list[CellValue]]:
        """Display values laid out row by row."""
        return [
            [self._cells[make_cell_id(r, c)].display for c in range(self._cols)]
            for r in range(1, self._rows + 1)
        ]

    def __repr__(self) -> str:
        filled = sum(1 for cell in self._cells.values() if cell.raw)
        return f"<Grid {self._rows}x{self._cols} filled={filled}>"


def create_grid(rows: int = DEFAULT_ROWS, cols: int = DEFAULT_COLS) -> Grid:
    """Blank grid with every coordinate present.

    Dimensions outside 5..100 rows and 5..52 columns raise ValueError; use
    :func:`~gridcalc._utils.clamp_dimensions` to clamp them first.
    """
    if not MIN_ROWS <= rows <= MAX_ROWS:
        raise ValueError(f"rows must be in [{MIN_ROWS}, {MAX_ROWS}], got {rows}")
    if not MIN_COLS <= cols <= MAX_COLS:
        raise ValueError(f"cols must be in [{MIN_COLS}, {MAX_COLS}], got {cols}")
    labels = [column_label(c) for c in range(cols)]
    cells = {f"{label}{r}": BLANK for r in range(1, rows + 1) for label in labels}
    return Grid(cells, rows, cols)
