"""Run detection over DNA grids.

A run is ``RUN_LENGTH`` identical bases starting at some cell and stepping in
one of four directions. Windows that overlap still count separately, so five
equal bases in a row contribute two horizontal runs. A grid is mutant once a
second run turns up anywhere; scanning stops at that point.

[S:ALG v1] scan=horizontal,vertical,descending,ascending stop=second_run pass
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import islice
import logging
from typing import Any, Iterator, List, MutableMapping, Optional, Tuple

import numpy as np

from .grid import Array, RUN_LENGTH, base_at, in_bounds, to_array

logger = logging.getLogger("mutant_detector.scanner")
logger.addHandler(logging.NullHandler())

Coord = Tuple[int, int]
Direction = Tuple[int, int]

MUTANT_THRESHOLD = 2

# Scan order is fixed so that runs are reported deterministically.
DIRECTIONS: Tuple[Tuple[str, Direction], ...] = (
    ("horizontal", (0, 1)),
    ("vertical", (1, 0)),
    ("descending", (1, 1)),
    ("ascending", (-1, 1)),
)

_STEPS = np.arange(RUN_LENGTH)


@dataclass(frozen=True)
class Run:
    """A qualifying window: its start cell, direction name and base."""

    row: int
    col: int
    direction: str
    base: str


def _metric_inc(metrics: Optional[MutableMapping[str, int]], key: str, amount: int = 1) -> None:
    if metrics is not None:
        metrics[key] = metrics.get(key, 0) + amount


def start_cells(n: int, direction: Direction) -> Iterator[Coord]:
    """Yield row-major start cells whose whole window fits inside an ``n x n`` grid."""
    dr, dc = direction
    span = RUN_LENGTH - 1
    for r in range(n):
        for c in range(n):
            if in_bounds(n, (r + dr * span, c + dc * span)):
                yield r, c


def iter_runs(grid: Any, metrics: Optional[MutableMapping[str, int]] = None) -> Iterator[Run]:
    """Lazily yield every run in ``grid``, direction by direction.

    Each inspected window bumps ``metrics["windows_checked"]``; the generator
    does no work beyond what its consumer pulls.
    """
    arr: Array = to_array(grid)
    n = arr.shape[0]
    for name, (dr, dc) in DIRECTIONS:
        for r, c in start_cells(n, (dr, dc)):
            _metric_inc(metrics, "windows_checked")
            cells = arr[r + dr * _STEPS, c + dc * _STEPS]
            if (cells == cells[0]).all():
                yield Run(r, c, name, base_at(arr, r, c))


def count_runs(grid: Any, limit: Optional[int] = None) -> List[Run]:
    """Return the runs in ``grid`` in scan order, at most ``limit`` of them."""
    return list(islice(iter_runs(grid), limit))


def is_mutant(grid: Any, metrics: Optional[MutableMapping[str, int]] = None) -> bool:
    """Return ``True`` when ``grid`` holds more than one run.

    The scan ends as soon as the second run is found, whichever directions
    the two runs lie in.
    """
    found = 0
    for run in iter_runs(grid, metrics):
        found += 1
        logger.debug("run_found", extra={"run": run})
        if found >= MUTANT_THRESHOLD:
            break
    if metrics is not None:
        metrics["runs_found"] = found
    return found >= MUTANT_THRESHOLD


__all__ = [
    "DIRECTIONS",
    "MUTANT_THRESHOLD",
    "Run",
    "start_cells",
    "iter_runs",
    "count_runs",
    "is_mutant",
]
