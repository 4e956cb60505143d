"""gridcalc - spreadsheet calculation kernel with incremental recalculation.

Usage::

    from gridcalc import new_sheet, edit_cell, undo

    state = new_sheet(rows=10, cols=5)
    state = edit_cell(state, "A1", "5")
    state = edit_cell(state, "B1", "=A1*2")
    print(state.grid["B1"].value)      # 10

    state = edit_cell(state, "A1", "=B1")
    print(state.grid["A1"].display)    # #CIRCULAR

    state = undo(state)
    print(state.grid["A1"].value)      # 5
"""

from gridcalc._grid import DEFAULT_COLS, DEFAULT_ROWS, Cell, Grid, create_grid
from gridcalc._history import HISTORY_LIMIT, History
from gridcalc._sheet import SheetState, Spreadsheet, edit_cell, new_sheet, redo, resize, undo
from gridcalc._utils import (
    MAX_COLS,
    MAX_ROWS,
    MIN_COLS,
    MIN_ROWS,
    clamp_dimensions,
    column_index,
    column_label,
    is_cell_id,
    make_cell_id,
    split_cell_id,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Cell",
    "DEFAULT_COLS",
    "DEFAULT_ROWS",
    "Grid",
    "HISTORY_LIMIT",
    "History",
    "MAX_COLS",
    "MAX_ROWS",
    "MIN_COLS",
    "MIN_ROWS",
    "SheetState",
    "Spreadsheet",
    "clamp_dimensions",
    "column_index",
    "column_label",
    "create_grid",
    "edit_cell",
    "is_cell_id",
    "make_cell_id",
    "new_sheet",
    "redo",
    "resize",
    "split_cell_id",
    "undo",
]
