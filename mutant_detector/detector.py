"""Mutant classification service.

``MutantDetector`` ties the pieces together: the grid is validated,
fingerprinted and looked up in the result cache; only a miss runs the scanner,
and the verdict is stored together with its statistics increment. Statistics
reads go straight to the store and never trigger a scan.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional, Sequence, Union

from .cache import ResultCache
from .config import DetectorSettings, build_settings, build_store
from .fingerprint import FingerprintError, fingerprint
from .grid import Array, to_array
from .scanner import is_mutant as scan_is_mutant
from .stats import DnaStats, StatisticsAggregator
from .store import ResultStore
from .validation import (
    DnaValidationError,
    internal_error,
    raise_for_error,
    validate_dna,
)

_default_logger = logging.getLogger("mutant_detector.detector")
_default_logger.addHandler(logging.NullHandler())

Scanner = Callable[[Array], bool]
Verdict = Union[bool, DnaValidationError]


class MutantDetector:
    """Classify DNA grids with content-addressed caching."""

    def __init__(
        self,
        store: Optional[ResultStore] = None,
        settings: Optional[DetectorSettings] = None,
        scanner: Optional[Scanner] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings or build_settings()
        self.store = store if store is not None else build_store(self.settings)
        self.cache = ResultCache(self.store)
        self.aggregator = StatisticsAggregator(self.store)
        self._scanner = scanner or scan_is_mutant
        self.logger = logger or _default_logger
        # Per-instance request telemetry, separate from the stored statistics.
        self.metrics: Dict[str, int] = {
            "requests": 0,
            "cache_hits": 0,
            "scans": 0,
            "invalid": 0,
        }
        self._metrics_lock = threading.Lock()

    def _metric_inc(self, key: str) -> None:
        with self._metrics_lock:
            self.metrics[key] = self.metrics.get(key, 0) + 1

    def _scan(self, rows: Sequence[str]) -> bool:
        self._metric_inc("scans")
        return self._scanner(to_array(rows))

    def classify(self, rows: Optional[Sequence[Any]]) -> Verdict:
        """Return ``True`` for mutant, ``False`` for human, or the rejection.

        Rejections are never stored and never move the statistics.
        """
        self._metric_inc("requests")
        error = validate_dna(rows)
        if error is not None:
            self._metric_inc("invalid")
            self.logger.warning("Invalid DNA: %s", error.message)
            return error

        try:
            dna_hash = fingerprint(rows, self.settings.hash_algorithm)
        except FingerprintError:
            self.logger.exception("Could not fingerprint DNA sample")
            return internal_error()
        self.logger.debug("DNA hash: %s", dna_hash)

        record, computed = self.cache.get_or_compute(dna_hash, lambda: self._scan(rows))
        if computed:
            self.logger.info(
                "DNA analysis result: %s", "MUTANT" if record.is_mutant else "HUMAN"
            )
        else:
            self._metric_inc("cache_hits")
            self.logger.info("DNA found in cache, returning cached result")
        return record.is_mutant

    def is_mutant(self, rows: Optional[Sequence[Any]]) -> bool:
        """Like :meth:`classify` but raise instead of returning a rejection."""
        verdict = self.classify(rows)
        if isinstance(verdict, DnaValidationError):
            if verdict.is_internal:
                raise RuntimeError(verdict.message)
            raise_for_error(verdict)
        return bool(verdict)

    def statistics(self) -> DnaStats:
        stats = self.aggregator.counts()
        self.logger.debug(
            "Stats - mutants: %d, humans: %d, ratio: %.4f",
            stats.mutant_count,
            stats.human_count,
            stats.ratio,
        )
        return stats


__all__ = ["MutantDetector", "Scanner", "Verdict"]
