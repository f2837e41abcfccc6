"""Classification record storage.

A store maps a grid fingerprint to its verdict and keeps the mutant/human
counters. Inserting a new record and bumping the matching counter happen in
one atomic step, so the counters always equal the number of distinct
fingerprints stored.

Backends:
- in memory (default, process lifetime)
- JSON-lines file (single process, survives restarts)
- SQLite (shared between processes)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
import sqlite3
import threading
from typing import Any, Dict, Optional, Tuple

from .stats import DnaStats

logger = logging.getLogger("mutant_detector.store")
logger.addHandler(logging.NullHandler())


@dataclass(frozen=True)
class DnaRecord:
    """Verdict for one distinct grid content."""

    dna_hash: str
    is_mutant: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"dna_hash": self.dna_hash, "is_mutant": self.is_mutant}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DnaRecord":
        return cls(dna_hash=str(data["dna_hash"]), is_mutant=bool(data["is_mutant"]))


class ResultStore(ABC):
    """Abstract key-value store with insert-once semantics and counters."""

    @abstractmethod
    def get(self, dna_hash: str) -> Optional[DnaRecord]:
        """Return the record stored for ``dna_hash``, if any."""

    @abstractmethod
    def insert_if_absent(self, record: DnaRecord) -> Tuple[DnaRecord, bool]:
        """Store ``record`` unless its hash is known.

        Returns the record now held for the hash and whether this call
        inserted it. The counter for the verdict moves only when it did.
        """

    @abstractmethod
    def counts(self) -> DnaStats:
        """Return the current mutant and human totals."""

    @abstractmethod
    def __len__(self) -> int:
        ...


class InMemoryResultStore(ResultStore):
    """Dictionary-backed store guarded by a single lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[str, DnaRecord] = {}
        self._mutant_count = 0
        self._human_count = 0

    def get(self, dna_hash: str) -> Optional[DnaRecord]:
        with self._lock:
            return self._records.get(dna_hash)

    def insert_if_absent(self, record: DnaRecord) -> Tuple[DnaRecord, bool]:
        with self._lock:
            existing = self._records.get(record.dna_hash)
            if existing is not None:
                return existing, False
            self._records[record.dna_hash] = record
            self._count(record)
            try:
                self._after_insert(record)
            except Exception:
                del self._records[record.dna_hash]
                self._count(record, -1)
                raise
            return record, True

    def counts(self) -> DnaStats:
        with self._lock:
            return DnaStats(self._mutant_count, self._human_count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _count(self, record: DnaRecord, amount: int = 1) -> None:
        if record.is_mutant:
            self._mutant_count += amount
        else:
            self._human_count += amount

    def _after_insert(self, record: DnaRecord) -> None:
        """Hook run under the lock once ``record`` is in place."""


class JsonResultStore(InMemoryResultStore):
    """In-memory store backed by a JSON-lines log, one record per line.

    Each insert appends a single line, so a write costs the same no matter how
    many records are stored. Counters are rebuilt from the log on load.
    """

    def __init__(self, storage_path: str | os.PathLike[str]) -> None:
        super().__init__()
        self.storage = Path(storage_path)
        self.storage.parent.mkdir(parents=True, exist_ok=True)
        self._torn_tail = False
        self._load()

    def _load(self) -> None:
        if not self.storage.exists():
            return
        with open(self.storage, "r") as f:
            for lineno, line in enumerate(f, start=1):
                self._torn_tail = not line.endswith("\n")
                if not line.strip():
                    continue
                try:
                    record = DnaRecord.from_dict(json.loads(line))
                except (ValueError, KeyError) as exc:
                    # A write interrupted by a crash leaves a torn line.
                    logger.warning(
                        "Skipping unreadable record at %s:%d (%s)", self.storage, lineno, exc
                    )
                    continue
                if record.dna_hash in self._records:
                    continue
                self._records[record.dna_hash] = record
                self._count(record)
        logger.debug(
            "store_loaded",
            extra={"path": str(self.storage), "records": len(self._records)},
        )

    def _after_insert(self, record: DnaRecord) -> None:
        line = json.dumps(record.to_dict()) + "\n"
        if self._torn_tail:
            line = "\n" + line
        with open(self.storage, "a") as f:
            start = f.tell()
            try:
                f.write(line)
                f.flush()
            except OSError:
                f.truncate(start)
                raise
        self._torn_tail = False


class SQLiteResultStore(ResultStore):
    """SQLite-backed store, safe to share between threads and processes."""

    def __init__(self, db_path: str | os.PathLike[str]) -> None:
        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            with conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS dna_record (
                        dna_hash TEXT PRIMARY KEY,
                        is_mutant INTEGER NOT NULL
                    )
                """)
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS dna_stats (
                        is_mutant INTEGER PRIMARY KEY,
                        total INTEGER NOT NULL
                    )
                """)
                conn.execute(
                    "INSERT OR IGNORE INTO dna_stats (is_mutant, total) VALUES (0, 0), (1, 0)"
                )
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(str(self.db_path), timeout=30.0)

    def get(self, dna_hash: str) -> Optional[DnaRecord]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT dna_hash, is_mutant FROM dna_record WHERE dna_hash = ?",
                (dna_hash,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return DnaRecord(row[0], bool(row[1]))

    def insert_if_absent(self, record: DnaRecord) -> Tuple[DnaRecord, bool]:
        conn = self._connect()
        try:
            with conn:
                cursor = conn.execute(
                    "INSERT OR IGNORE INTO dna_record (dna_hash, is_mutant) VALUES (?, ?)",
                    (record.dna_hash, int(record.is_mutant)),
                )
                if cursor.rowcount == 1:
                    conn.execute(
                        "UPDATE dna_stats SET total = total + 1 WHERE is_mutant = ?",
                        (int(record.is_mutant),),
                    )
                    return record, True
                row = conn.execute(
                    "SELECT is_mutant FROM dna_record WHERE dna_hash = ?",
                    (record.dna_hash,),
                ).fetchone()
            return DnaRecord(record.dna_hash, bool(row[0])), False
        finally:
            conn.close()

    def counts(self) -> DnaStats:
        conn = self._connect()
        try:
            totals = dict(conn.execute("SELECT is_mutant, total FROM dna_stats").fetchall())
        finally:
            conn.close()
        return DnaStats(int(totals.get(1, 0)), int(totals.get(0, 0)))

    def __len__(self) -> int:
        conn = self._connect()
        try:
            (total,) = conn.execute("SELECT COUNT(*) FROM dna_record").fetchone()
        finally:
            conn.close()
        return int(total)


__all__ = [
    "DnaRecord",
    "ResultStore",
    "InMemoryResultStore",
    "JsonResultStore",
    "SQLiteResultStore",
]
