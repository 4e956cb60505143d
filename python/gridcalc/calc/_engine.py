"""Incremental recalculation of a grid after a single cell edit."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from gridcalc.calc._errors import CellError, FormulaError
from gridcalc.calc._evaluator import Resolver, evaluate
from gridcalc.calc._graph import DependencyGraph
from gridcalc.calc._parser import parse_literal
from gridcalc.calc._protocol import CellDelta, RecalcResult

if TYPE_CHECKING:
    from gridcalc._grid import Cell, Grid

logger = logging.getLogger(__name__)


def _make_resolver(working: Mapping[str, Cell]) -> Resolver:
    """Resolver over the working copy.

    Missing and blank cells read as 0; a cell in error hands back its
    :class:`CellError` instead of a value.
    """

    def resolve(ref: str) -> int | float | str | CellError:
        cell = working.get(ref)
        if cell is None:
            return 0
        if cell.error is not None:
            return cell.error
        if cell.value == "":
            return 0
        return cell.value

    return resolve


def _compute(cell_id: str, cell: Cell, resolve: Resolver) -> Cell:
    if not cell.is_formula:
        return cell.with_value(parse_literal(cell.raw))
    try:
        value = evaluate(cell.raw, resolve)
    except FormulaError as e:
        logger.debug("Cannot evaluate formula %r in %s: %s", cell.raw, cell_id, e)
        return cell.with_error(e.error)
    return cell.with_value(value)


def recalculate(grid: Grid, changed_id: str) -> RecalcResult:
    """Recompute *changed_id* and everything that transitively reads it.

    The input grid is not modified. Cells outside the affected set keep the
    same :class:`Cell` objects in the returned grid.
    """
    if changed_id not in grid:
        raise KeyError(f"Cell '{changed_id}' is not in the grid")

    graph = DependencyGraph.from_grid(grid)
    cycles = graph.cycle_members()
    working: dict[str, Cell] = dict(grid)

    if changed_id in cycles:
        # Every dependent of a cycle member is a member too; nothing here
        # can be evaluated, so mark without scheduling.
        order = graph.affected_cells(changed_id)
        logger.debug("%s is circular; marking %d cells", changed_id, len(order))
        for cell_id in order:
            working[cell_id] = working[cell_id].with_error(CellError.CIRCULAR)
    else:
        order = graph.topological_order(graph.affected_cells(changed_id))
        logger.debug("Recalculating %d cells after edit to %s", len(order), changed_id)
        resolve = _make_resolver(working)
        for cell_id in order:
            cell = working[cell_id]
            if cell_id in cycles:
                working[cell_id] = cell.with_error(CellError.CIRCULAR)
            else:
                working[cell_id] = _compute(cell_id, cell, resolve)

    updates: dict[str, Cell] = {}
    deltas: list[CellDelta] = []
    for cell_id in order:
        old, new = grid[cell_id], working[cell_id]
        if new == old and type(new.value) is type(old.value):
            continue
        updates[cell_id] = new
        if new.display != old.display:
            deltas.append(CellDelta(
                cell_id=cell_id,
                old_value=old.display,
                new_value=new.display,
                raw=new.raw,
            ))

    return RecalcResult(
        grid=grid.replace(updates),
        changed=changed_id,
        order=tuple(order),
        cycles=frozenset(cycles),
        deltas=tuple(deltas),
    )


def recalc(grid: Grid, changed_id: str) -> Grid:
    """Grid after recalculating the cells affected by *changed_id*."""
    return recalculate(grid, changed_id).grid
