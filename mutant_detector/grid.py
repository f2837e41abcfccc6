"""
Grid utilities for the mutant detector.

This module defines the DNA alphabet and the conversions between the row
strings received from callers and the 2D numpy arrays the scanner works on.
Cells are stored as the ASCII code of their base, so an array's raw bytes are
exactly the concatenation of its rows.
"""

from __future__ import annotations

import numpy as np
from typing import Any, List, Tuple


# Type alias for clarity. DNA grids are small square arrays of ASCII codes.
Array = np.ndarray

BASES = "ATCG"
VALID_BASES = frozenset(BASES)
RUN_LENGTH = 4
MIN_SIZE = RUN_LENGTH

__all__ = [
    "Array",
    "BASES",
    "VALID_BASES",
    "RUN_LENGTH",
    "MIN_SIZE",
    "to_array",
    "to_rows",
    "base_at",
    "in_bounds",
]


def to_array(grid: Any) -> Array:
    """Convert row strings (or an existing code array) into a uint8 array.

    The input is expected to be validated already; ragged rows are rejected
    with an assertion just like any other malformed array.
    """
    if isinstance(grid, np.ndarray):
        a = grid.astype(np.uint8, copy=False)
    else:
        rows = [row.encode("ascii") for row in grid]
        width = len(rows[0]) if rows else 0
        assert all(len(row) == width for row in rows), "DNA rows must have equal length"
        a = np.frombuffer(b"".join(rows), dtype=np.uint8).reshape(len(rows), width)

    assert a.ndim == 2, f"DNA grid must be 2-D, got {a.ndim}D shape={a.shape}"
    return np.ascontiguousarray(a)


def to_rows(arr: Array) -> List[str]:
    """Convert a code array back into a list of row strings."""
    return [row.tobytes().decode("ascii") for row in arr.astype(np.uint8)]


def base_at(arr: Array, row: int, col: int) -> str:
    """Return the base stored at ``(row, col)`` as a one-character string."""
    return chr(int(arr[row, col]))


def in_bounds(n: int, coord: Tuple[int, int]) -> bool:
    r, c = coord
    return 0 <= r < n and 0 <= c < n
