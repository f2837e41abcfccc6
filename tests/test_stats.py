"""Tests for statistics aggregation."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest
from hypothesis import given, strategies as st

from mutant_detector.stats import DnaStats, StatisticsAggregator
from mutant_detector.store import DnaRecord, InMemoryResultStore


def _filled_store(mutants: int, humans: int) -> InMemoryResultStore:
    store = InMemoryResultStore()
    for i in range(mutants):
        store.insert_if_absent(DnaRecord(f"m{i}", True))
    for i in range(humans):
        store.insert_if_absent(DnaRecord(f"h{i}", False))
    return store


def test_forty_mutants_hundred_humans() -> None:
    aggregator = StatisticsAggregator(_filled_store(40, 100))
    stats = aggregator.counts()
    assert stats.mutant_count == 40
    assert stats.human_count == 100
    assert aggregator.ratio() == pytest.approx(40 / 140)
    assert aggregator.ratio() == pytest.approx(0.2857142857142857)


def test_empty_ratio_is_zero() -> None:
    aggregator = StatisticsAggregator(InMemoryResultStore())
    assert aggregator.counts() == DnaStats(0, 0)
    assert aggregator.ratio() == 0.0


@pytest.mark.parametrize(
    "mutants,humans,expected",
    [(5, 0, 1.0), (0, 7, 0.0), (1, 1, 0.5), (3, 7, 0.3), (1, 999, 0.001)],
)
def test_ratio_table(mutants: int, humans: int, expected: float) -> None:
    assert DnaStats(mutants, humans).ratio == pytest.approx(expected)


@given(st.integers(min_value=0, max_value=10**12), st.integers(min_value=0, max_value=10**12))
def test_ratio_bounds(mutants: int, humans: int) -> None:
    ratio = DnaStats(mutants, humans).ratio
    assert 0.0 <= ratio <= 1.0


def test_snapshot_uses_service_field_names() -> None:
    snapshot = StatisticsAggregator(_filled_store(1, 3)).snapshot()
    assert snapshot == {"count_mutant_dna": 1, "count_human_dna": 3, "ratio": 0.25}
