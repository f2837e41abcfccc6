"""Mutant DNA detector package.

This package exposes :class:`MutantDetector` alongside the building blocks it
is made of: grid validation, the four-direction run scanner, content
fingerprints and the result stores that back the cache and statistics.
"""

from .detector import MutantDetector
from .grid import Array
from .scanner import count_runs, is_mutant
from .stats import DnaStats
from .store import InMemoryResultStore, JsonResultStore, SQLiteResultStore
from .validation import DnaValidationError, ErrorKind, InvalidDnaError, validate_dna

__all__ = [
    "MutantDetector",
    "Array",
    "count_runs",
    "is_mutant",
    "DnaStats",
    "InMemoryResultStore",
    "JsonResultStore",
    "SQLiteResultStore",
    "DnaValidationError",
    "ErrorKind",
    "InvalidDnaError",
    "validate_dna",
]
