"""Sheet state: the current grid plus its undo history.

Two equivalent surfaces are offered. The functions (:func:`edit_cell`,
:func:`undo`, :func:`redo`, :func:`resize`) take a :class:`SheetState` and
return a new one without touching the old. :class:`Spreadsheet` holds a
state and swaps it on every call, for callers that want an object::

    sheet = Spreadsheet(rows=10, cols=5)
    sheet["A1"] = "5"
    sheet["B1"] = "=A1*2"
    sheet["B1"].value   # 10
    sheet.undo()
    sheet["B1"].value   # ""
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any

from gridcalc._grid import DEFAULT_COLS, DEFAULT_ROWS, Cell, CellValue, Grid, create_grid
from gridcalc._history import HISTORY_LIMIT, History
from gridcalc.calc._engine import recalc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheetState:
    """The grid shown to the user and the history it came from."""

    grid: Grid
    history: History

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo


def new_sheet(
    rows: int = DEFAULT_ROWS,
    cols: int = DEFAULT_COLS,
    history_limit: int = HISTORY_LIMIT,
) -> SheetState:
    grid = create_grid(rows, cols)
    return SheetState(grid=grid, history=History.start(grid, limit=history_limit))


def edit_cell(
    state: SheetState,
    cell_id: str,
    raw: str,
    *,
    suppress_recording: bool = False,
) -> SheetState:
    """Set a cell's raw text, recalculate, and record a history entry.

    Returns *state* itself when *raw* equals the cell's current text. With
    ``suppress_recording`` the grid is recalculated but history is left
    as is. Formula problems end up on cells, never raised; an id outside
    the grid raises KeyError.
    """
    cell_id = cell_id.upper()
    grid = state.grid
    if cell_id not in grid:
        raise KeyError(f"Cell '{cell_id}' is outside the {grid.rows}x{grid.cols} grid")
    current = grid[cell_id]
    if current.raw == raw:
        logger.debug("Edit to %s leaves raw text unchanged", cell_id)
        return state

    edited = grid.replace({cell_id: current.with_raw(raw)})
    new_grid = recalc(edited, cell_id)
    if suppress_recording:
        return replace(state, grid=new_grid)
    return SheetState(grid=new_grid, history=state.history.record(new_grid))


def undo(state: SheetState) -> SheetState:
    history = state.history.undo()
    if history is state.history:
        return state
    return SheetState(grid=history.current, history=history)


def redo(state: SheetState) -> SheetState:
    history = state.history.redo()
    if history is state.history:
        return state
    return SheetState(grid=history.current, history=history)


def resize(state: SheetState, rows: int, cols: int) -> SheetState:
    """Start over on a blank grid of the new size, with fresh history."""
    if (rows, cols) == (state.rows, state.cols):
        return state
    logger.info(
        "Resizing grid %dx%d -> %dx%d; history reset",
        state.rows, state.cols, rows, cols,
    )
    return new_sheet(rows, cols, history_limit=state.history.limit)


class Spreadsheet:
    """Mutable holder for a :class:`SheetState`."""

    __slots__ = ("_state",)

    def __init__(
        self,
        rows: int = DEFAULT_ROWS,
        cols: int = DEFAULT_COLS,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        self._state = new_sheet(rows, cols, history_limit=history_limit)

    @property
    def state(self) -> SheetState:
        return self._state

    @property
    def grid(self) -> Grid:
        return self._state.grid

    @property
    def rows(self) -> int:
        return self._state.rows

    @property
    def cols(self) -> int:
        return self._state.cols

    @property
    def can_undo(self) -> bool:
        return self._state.can_undo

    @property
    def can_redo(self) -> bool:
        return self._state.can_redo

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def __getitem__(self, key: str) -> Cell:
        """``sheet['A1']`` -> Cell."""
        return self._state.grid[key.upper()]

    def __setitem__(self, key: str, value: Any) -> None:
        """``sheet['A1'] = '=B1+1'``; non-string values are converted with str()."""
        self.edit(key, value if isinstance(value, str) else str(value))

    def display(self, key: str) -> CellValue:
        return self[key].display

    # ------------------------------------------------------------------
    # Edits and history
    # ------------------------------------------------------------------

    def edit(self, cell_id: str, raw: str, *, suppress_recording: bool = False) -> None:
        self._state = edit_cell(
            self._state, cell_id, raw, suppress_recording=suppress_recording,
        )

    def undo(self) -> None:
        self._state = undo(self._state)

    def redo(self) -> None:
        self._state = redo(self._state)

    def resize(self, rows: int, cols: int) -> None:
        self._state = resize(self._state, rows, cols)

    def __repr__(self) -> str:
        h = self._state.history
        return (
            f"<Spreadsheet {self.rows}x{self.cols} "
            f"history={h.cursor + 1}/{len(h)}>"
        )
