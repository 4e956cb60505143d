"""Recalculation result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gridcalc._grid import Grid

CellValue = int | float | str


@dataclass(frozen=True)
class CellDelta:
    """A single cell's display change from recalculation."""

    cell_id: str
    old_value: CellValue
    new_value: CellValue
    raw: str = ""  # the text that produced new_value


@dataclass(frozen=True)
class RecalcResult:
    """Outcome of recalculating the cells affected by one edit."""

    grid: Grid
    changed: str
    order: tuple[str, ...]  # cells in the order they were recalculated
    cycles: frozenset[str] = frozenset()
    deltas: tuple[CellDelta, ...] = ()

    @property
    def circular(self) -> bool:
        """True when the edited cell sits on or reaches a cycle."""
        return self.changed in self.cycles

    @property
    def propagated_cells(self) -> int:
        return len(self.deltas)
