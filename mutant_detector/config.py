"""Environment-backed settings for the detector."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Dict, Optional

from .fingerprint import DEFAULT_ALGORITHM
from .store import InMemoryResultStore, JsonResultStore, ResultStore, SQLiteResultStore

ENV_PREFIX = "MUTANT_"
DETECTOR_DEFAULTS: Dict[str, str] = {
    "STORE": "memory",
    "STORE_PATH": "",
    "HASH_ALGORITHM": DEFAULT_ALGORITHM,
    "LOG_LEVEL": "INFO",
}
STORE_BACKENDS = ("memory", "json", "sqlite")


@dataclass(frozen=True)
class DetectorSettings:
    """Resolved configuration for a :class:`MutantDetector`."""

    store: str = "memory"
    store_path: Optional[str] = None
    hash_algorithm: str = DEFAULT_ALGORITHM
    log_level: str = "INFO"


def build_settings(overrides: Optional[Dict[str, Optional[str]]] = None) -> DetectorSettings:
    """Return settings from defaults, ``MUTANT_*`` variables and ``overrides``.

    Override keys use the upper-case default names (``STORE``,
    ``STORE_PATH``...); ``None`` values are ignored.
    """
    params = dict(DETECTOR_DEFAULTS)
    for key in DETECTOR_DEFAULTS:
        value = os.environ.get(ENV_PREFIX + key)
        if value is not None:
            params[key] = value
    if overrides:
        params.update({k.upper(): v for k, v in overrides.items() if v is not None})

    return DetectorSettings(
        store=params["STORE"].strip().lower(),
        store_path=params["STORE_PATH"] or None,
        hash_algorithm=params["HASH_ALGORITHM"].strip().lower(),
        log_level=params["LOG_LEVEL"].strip().upper(),
    )


def build_store(settings: Optional[DetectorSettings] = None) -> ResultStore:
    """Instantiate the store backend named by ``settings``."""
    settings = settings or build_settings()
    if settings.store not in STORE_BACKENDS:
        raise ValueError(
            f"unknown store backend {settings.store!r}; expected one of {', '.join(STORE_BACKENDS)}"
        )
    if settings.store == "memory":
        return InMemoryResultStore()
    if not settings.store_path:
        raise ValueError(f"store backend {settings.store!r} requires a store path")
    if settings.store == "json":
        return JsonResultStore(settings.store_path)
    return SQLiteResultStore(settings.store_path)


__all__ = [
    "ENV_PREFIX",
    "DETECTOR_DEFAULTS",
    "STORE_BACKENDS",
    "DetectorSettings",
    "build_settings",
    "build_store",
]
