"""Cell identifier helpers: column labels and A1-style ids."""

from __future__ import annotations

import re

MIN_ROWS = 5
MAX_ROWS = 100
MIN_COLS = 5
# Two-letter labels stop at AZ.
MAX_COLS = 52

_CELL_ID_RE = re.compile(r"^([A-Z]+)([1-9]\d*)$")


def column_label(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA, 27 -> AB (bijective base-26)."""
    if index < 0:
        raise ValueError(f"Column index must be >= 0, got {index}")
    label = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        label = chr(ord("A") + rem) + label
    return label


def column_index(label: str) -> int:
    """Inverse of :func:`column_label`: A -> 0, AA -> 26."""
    if not label or not label.isalpha():
        raise ValueError(f"Invalid column label: {label!r}")
    n = 0
    for ch in label.upper():
        n = n * 26 + (ord(ch) - ord("A") + 1)
    return n - 1


def is_cell_id(text: str) -> bool:
    return _CELL_ID_RE.match(text) is not None


def split_cell_id(cell_id: str) -> tuple[int, int]:
    """Split ``"B3"`` into ``(3, 1)``: 1-based row, 0-based column."""
    m = _CELL_ID_RE.match(cell_id.upper())
    if not m:
        raise ValueError(f"Invalid cell id: {cell_id!r}")
    return int(m.group(2)), column_index(m.group(1))


def make_cell_id(row: int, col: int) -> str:
    """Build an id from a 1-based row and a 0-based column."""
    if row < 1:
        raise ValueError(f"Row must be >= 1, got {row}")
    return f"{column_label(col)}{row}"


def clamp_dimensions(rows: int, cols: int) -> tuple[int, int]:
    """Clamp requested grid dimensions into the supported range."""
    rows = max(MIN_ROWS, min(MAX_ROWS, rows))
    cols = max(MIN_COLS, min(MAX_COLS, cols))
    return rows, cols
