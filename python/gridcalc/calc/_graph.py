"""Dependency graph over cell ids: cycle detection, affected sets, ordering."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING

from gridcalc.calc._parser import extract_refs

if TYPE_CHECKING:
    from gridcalc._grid import Cell

# cell -> cells it reads from, in reference order (duplicates allowed)
Graph = dict[str, list[str]]


def build_graph(grid: Mapping[str, Cell]) -> Graph:
    """Scan every cell's raw text for references, in grid order."""
    return {cell_id: extract_refs(cell.raw) for cell_id, cell in grid.items()}


def reverse_graph(graph: Graph) -> Graph:
    """Invert edges: ``reverse[dep]`` lists every cell that reads ``dep``."""
    reverse: Graph = {node: [] for node in graph}
    for node, deps in graph.items():
        for dep in deps:
            reverse.setdefault(dep, []).append(node)
    return reverse


def _neighbors(graph: Graph, node: str) -> Iterator[str]:
    return iter(graph.get(node, ()))


def find_cycle_members(graph: Graph) -> set[str]:
    """Cells on a cycle, plus every cell that reaches one.

    Iterative DFS with an on-stack marker. A node seen again while still on
    the stack is a cycle member; membership then spreads to each ancestor on
    the current path as the stack unwinds, and to any later node whose
    neighbor is an already-flagged member. Self-loops and references to ids
    missing from *graph* are handled.
    """
    visited: set[str] = set()
    on_stack: set[str] = set()
    members: set[str] = set()

    for root in graph:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        stack: list[tuple[str, Iterator[str]]] = [(root, _neighbors(graph, root))]

        while stack:
            node, neighbors = stack[-1]
            for nb in neighbors:
                if nb in on_stack:
                    members.add(nb)
                    members.add(node)
                elif nb in visited:
                    if nb in members:
                        members.add(node)
                else:
                    visited.add(nb)
                    on_stack.add(nb)
                    stack.append((nb, _neighbors(graph, nb)))
                    break
            else:
                stack.pop()
                on_stack.discard(node)
                if stack and node in members:
                    members.add(stack[-1][0])

    return members


def find_affected(changed_id: str, reverse: Graph) -> list[str]:
    """BFS over dependents of *changed_id*, which always comes first.

    Returned in discovery order so that scheduling is reproducible.
    """
    affected = [changed_id]
    seen = {changed_id}
    queue: deque[str] = deque([changed_id])

    while queue:
        cell = queue.popleft()
        for dep in reverse.get(cell, ()):
            if dep not in seen:
                seen.add(dep)
                affected.append(dep)
                queue.append(dep)

    return affected


def topological_order(graph: Graph, subset: Iterable[str]) -> list[str]:
    """Order *subset* so every cell follows the in-subset cells it reads.

    Depth-first post-order. Cells outside *subset* are walked through but
    not emitted. Ties follow *subset* order, then reference order.
    """
    subset = list(subset)
    members = set(subset)
    visited: set[str] = set()
    order: list[str] = []

    for root in subset:
        if root in visited:
            continue
        visited.add(root)
        stack: list[tuple[str, Iterator[str]]] = [(root, _neighbors(graph, root))]

        while stack:
            node, deps = stack[-1]
            for dep in deps:
                if dep not in visited:
                    visited.add(dep)
                    stack.append((dep, _neighbors(graph, dep)))
                    break
            else:
                stack.pop()
                if node in members:
                    order.append(node)

    return order


class DependencyGraph:
    """Forward and reverse edges for one grid snapshot.

    All cell references use plain "A1" ids.
    """

    __slots__ = ("dependencies", "dependents")

    def __init__(self, dependencies: Graph | None = None) -> None:
        # cell -> cells it reads from
        self.dependencies: Graph = dependencies if dependencies is not None else {}
        # cell -> cells that read from it
        self.dependents: Graph = reverse_graph(self.dependencies)

    @classmethod
    def from_grid(cls, grid: Mapping[str, Cell]) -> DependencyGraph:
        return cls(build_graph(grid))

    def precedents(self, cell_id: str) -> list[str]:
        """Cells directly referenced by *cell_id*."""
        return list(self.dependencies.get(cell_id, ()))

    def cycle_members(self) -> set[str]:
        return find_cycle_members(self.dependencies)

    def affected_cells(self, changed_id: str) -> list[str]:
        return find_affected(changed_id, self.dependents)

    def topological_order(self, subset: Iterable[str]) -> list[str]:
        return topological_order(self.dependencies, subset)

    def __len__(self) -> int:
        return len(self.dependencies)

    def __repr__(self) -> str:
        edges = sum(len(deps) for deps in self.dependencies.values())
        return f"<DependencyGraph cells={len(self.dependencies)} edges={edges}>"
