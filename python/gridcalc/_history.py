"""Bounded linear undo/redo history over grid snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field

from gridcalc._grid import Grid

HISTORY_LIMIT = 50


@dataclass(frozen=True)
class History:
    """Snapshots plus a cursor; every operation returns a new History.

    ``cursor`` always indexes a snapshot. Recording past ``limit`` snapshots
    evicts the oldest one.
    """

    snapshots: tuple[Grid, ...]
    cursor: int = 0
    limit: int = field(default=HISTORY_LIMIT, compare=False)

    def __post_init__(self) -> None:
        if not self.snapshots:
            raise ValueError("History needs at least one snapshot")
        if self.limit < 1:
            raise ValueError(f"History limit must be >= 1, got {self.limit}")
        if not 0 <= self.cursor < len(self.snapshots):
            raise ValueError(
                f"Cursor {self.cursor} out of range for {len(self.snapshots)} snapshots"
            )

    @classmethod
    def start(cls, grid: Grid, limit: int = HISTORY_LIMIT) -> History:
        return cls(snapshots=(grid,), cursor=0, limit=limit)

    @property
    def current(self) -> Grid:
        return self.snapshots[self.cursor]

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.snapshots) - 1

    def record(self, grid: Grid) -> History:
        """Drop any redo tail, append *grid* and move the cursor onto it."""
        snapshots = self.snapshots[: self.cursor + 1] + (grid,)
        if len(snapshots) > self.limit:
            snapshots = snapshots[len(snapshots) - self.limit:]
        return History(snapshots=snapshots, cursor=len(snapshots) - 1, limit=self.limit)

    def undo(self) -> History:
        if not self.can_undo:
            return self
        return History(snapshots=self.snapshots, cursor=self.cursor - 1, limit=self.limit)

    def redo(self) -> History:
        if not self.can_redo:
            return self
        return History(snapshots=self.snapshots, cursor=self.cursor + 1, limit=self.limit)

    def __len__(self) -> int:
        return len(self.snapshots)
