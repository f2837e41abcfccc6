"""Fingerprint-keyed result cache with single-flight computation.

Concurrent misses for the same fingerprint elect one leader that runs the
computation and inserts the record; the other callers wait for it and reuse
its record. The in-flight table belongs to the store, so every cache built on
one store shares it. Its lock is only held long enough to pick a leader,
never across store access or the computation itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import threading
import weakref
from typing import Callable, Dict, Optional, Tuple

from .store import DnaRecord, ResultStore

logger = logging.getLogger("mutant_detector.cache")
logger.addHandler(logging.NullHandler())


@dataclass
class _Flight:
    done: threading.Event = field(default_factory=threading.Event)
    record: Optional[DnaRecord] = None


@dataclass
class _FlightTable:
    lock: threading.Lock = field(default_factory=threading.Lock)
    pending: Dict[str, _Flight] = field(default_factory=dict)


_tables: "weakref.WeakKeyDictionary[ResultStore, _FlightTable]" = weakref.WeakKeyDictionary()
_tables_lock = threading.Lock()


def _flight_table(store: ResultStore) -> _FlightTable:
    with _tables_lock:
        table = _tables.get(store)
        if table is None:
            table = _FlightTable()
            _tables[store] = table
        return table


class ResultCache:
    """Front the store so that each fingerprint is computed at most once."""

    def __init__(self, store: ResultStore) -> None:
        self.store = store
        self._flights = _flight_table(store)

    def lookup(self, dna_hash: str) -> Optional[DnaRecord]:
        return self.store.get(dna_hash)

    def get_or_compute(self, dna_hash: str, compute: Callable[[], bool]) -> Tuple[DnaRecord, bool]:
        """Return the record for ``dna_hash``, computing it on a miss.

        The second element is ``True`` only for the call whose result was
        inserted into the store. If the leader's ``compute`` raises, the
        exception reaches the leader and waiting callers retry.
        """
        while True:
            record = self.store.get(dna_hash)
            if record is not None:
                return record, False

            with self._flights.lock:
                flight = self._flights.pending.get(dna_hash)
                leader = flight is None
                if leader:
                    flight = _Flight()
                    self._flights.pending[dna_hash] = flight

            if not leader:
                logger.debug("cache_wait", extra={"dna_hash": dna_hash})
                flight.done.wait()
                if flight.record is not None:
                    return flight.record, False
                continue

            try:
                # Another leader may have finished between the lookup and the election.
                record = self.store.get(dna_hash)
                if record is not None:
                    flight.record = record
                    return record, False
                verdict = bool(compute())
                record, inserted = self.store.insert_if_absent(DnaRecord(dna_hash, verdict))
                flight.record = record
                return record, inserted
            finally:
                with self._flights.lock:
                    del self._flights.pending[dna_hash]
                flight.done.set()

    def __len__(self) -> int:
        return len(self.store)


__all__ = ["ResultCache"]
