"""Aggregate mutant/human statistics."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Dict, Union

if TYPE_CHECKING:
    from .store import ResultStore

logger = logging.getLogger("mutant_detector.stats")
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class DnaStats:
    """Totals over the distinct grids classified so far."""

    mutant_count: int = 0
    human_count: int = 0

    @property
    def total(self) -> int:
        return self.mutant_count + self.human_count

    @property
    def ratio(self) -> float:
        """Share of mutants among all classified grids, ``0.0`` when empty."""
        if self.total == 0:
            return 0.0
        return self.mutant_count / self.total

    def as_dict(self) -> Dict[str, Union[int, float]]:
        return {
            "count_mutant_dna": self.mutant_count,
            "count_human_dna": self.human_count,
            "ratio": self.ratio,
        }


class StatisticsAggregator:
    """Read-only view over a store's counters."""

    def __init__(self, store: "ResultStore") -> None:
        self._store = store

    def counts(self) -> DnaStats:
        stats = self._store.counts()
        logger.debug(
            "stats_read",
            extra={"mutants": stats.mutant_count, "humans": stats.human_count},
        )
        return stats

    def ratio(self) -> float:
        return self.counts().ratio

    def snapshot(self) -> Dict[str, Union[int, float]]:
        return self.counts().as_dict()


__all__ = ["DnaStats", "StatisticsAggregator"]
