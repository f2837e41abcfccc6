"""Content fingerprints used as cache keys."""

from __future__ import annotations

import hashlib
from typing import Any

import numpy as np

from .grid import to_array

DEFAULT_ALGORITHM = "sha256"


class FingerprintError(RuntimeError):
    """The digest could not be computed (e.g. unknown hash algorithm)."""


def fingerprint(grid: Any, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Return the lowercase hex digest of the grid's rows concatenated in order.

    For a validated ``N x N`` grid the stream is ``N * N`` bytes long, so the
    row boundaries are implied by its length and no separator is needed.
    """
    if isinstance(grid, np.ndarray):
        payload = to_array(grid).tobytes()
    else:
        payload = "".join(grid).encode("utf-8")
    try:
        hasher = hashlib.new(algorithm)
        hasher.update(payload)
        # Variable-length digests (shake_*) need a length and are not usable as keys.
        return hasher.hexdigest()
    except (ValueError, TypeError) as exc:
        raise FingerprintError(f"cannot fingerprint with hash algorithm {algorithm!r}") from exc


__all__ = ["DEFAULT_ALGORITHM", "FingerprintError", "fingerprint"]
