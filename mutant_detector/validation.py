"""Structural validation of candidate DNA grids.

Validation failures are returned as :class:`DnaValidationError` values rather
than raised, so callers can branch on ``error.kind`` without an exception
hierarchy. Rows are checked in order and the first violation wins, which keeps
error messages stable for a given input.
"""

from __future__ import annotations

from collections import abc
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from .grid import MIN_SIZE, VALID_BASES


class ErrorKind(str, Enum):
    """Closed set of classification failure kinds."""

    NULL_OR_EMPTY = "NullOrEmpty"
    TOO_SMALL = "TooSmall"
    NOT_SQUARE = "NotSquare"
    INVALID_SYMBOL = "InvalidSymbol"
    INTERNAL = "Internal"


@dataclass(frozen=True)
class DnaValidationError:
    """Structured description of why a grid was rejected."""

    kind: ErrorKind
    message: str
    row: Optional[int] = None
    column: Optional[int] = None
    symbol: Optional[str] = None
    expected: Optional[int] = None
    actual: Optional[int] = None

    @property
    def is_internal(self) -> bool:
        return self.kind is ErrorKind.INTERNAL

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict, omitting unset location fields."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        data["kind"] = self.kind.value
        return data


class InvalidDnaError(ValueError):
    """Raised by callers that prefer exceptions over returned errors."""

    def __init__(self, error: DnaValidationError) -> None:
        super().__init__(error.message)
        self.error = error


def internal_error() -> DnaValidationError:
    """Generic failure surfaced to callers when the core itself breaks."""
    return DnaValidationError(
        ErrorKind.INTERNAL,
        "An unexpected error occurred while classifying the DNA sample.",
    )


def validate_dna(rows: Optional[Sequence[Any]]) -> Optional[DnaValidationError]:
    """Return the first rule ``rows`` violates, or ``None`` when it is valid.

    Parameters
    ----------
    rows:
        Candidate grid as an ordered sequence of row strings.

    Returns
    -------
    Optional[DnaValidationError]
        ``None`` for an ``N x N`` grid with ``N >= 4`` over ``A, T, C, G``.
    """
    if rows is not None and (
        isinstance(rows, (str, bytes)) or not isinstance(rows, abc.Sequence)
    ):
        return DnaValidationError(
            ErrorKind.NULL_OR_EMPTY,
            f"DNA must be a sequence of row strings, got {type(rows).__name__}",
        )
    if rows is None or len(rows) == 0:
        return DnaValidationError(
            ErrorKind.NULL_OR_EMPTY, "DNA array must not be null or empty"
        )

    n = len(rows)
    if n < MIN_SIZE:
        return DnaValidationError(
            ErrorKind.TOO_SMALL,
            f"DNA matrix must be at least {MIN_SIZE}x{MIN_SIZE}, got {n} rows",
            expected=MIN_SIZE,
            actual=n,
        )

    for i, row in enumerate(rows):
        if not isinstance(row, str):
            return DnaValidationError(
                ErrorKind.NULL_OR_EMPTY,
                f"DNA sequence at index {i} is null or not a string",
                row=i,
            )

        if len(row) != n:
            return DnaValidationError(
                ErrorKind.NOT_SQUARE,
                f"DNA must be an NxN matrix. Expected length {n} but got {len(row)} at index {i}",
                row=i,
                expected=n,
                actual=len(row),
            )

        for j, base in enumerate(row):
            if base not in VALID_BASES:
                return DnaValidationError(
                    ErrorKind.INVALID_SYMBOL,
                    f"Invalid DNA base '{base}' at position [{i},{j}]. Only A, T, C, G are allowed",
                    row=i,
                    column=j,
                    symbol=base,
                )

    return None


def raise_for_error(error: Optional[DnaValidationError]) -> None:
    """Raise :class:`InvalidDnaError` when ``error`` is set."""
    if error is not None:
        raise InvalidDnaError(error)


__all__ = [
    "ErrorKind",
    "DnaValidationError",
    "InvalidDnaError",
    "internal_error",
    "validate_dna",
    "raise_for_error",
]
