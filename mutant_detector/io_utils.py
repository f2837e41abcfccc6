"""
Input/output helpers for batch classification.

Grids are read from JSON in any of the shapes the service accepted: a single
``{"dna": [...]}`` request, a list of such requests, a list of row lists, or a
bare list of rows. Reports are written back as indented JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List


def _as_grid(item: Any) -> Any:
    if isinstance(item, dict):
        if "dna" not in item:
            raise ValueError("DNA request objects must contain a 'dna' field")
        return item["dna"]
    return item


def parse_dna_payload(payload: Any) -> List[Any]:
    """Normalise a decoded JSON payload into a list of candidate grids.

    Grid contents are not checked here; that is left to the validator so that
    malformed grids still produce structured errors.
    """
    if isinstance(payload, dict):
        return [_as_grid(payload)]
    if not isinstance(payload, list):
        raise ValueError(f"unsupported DNA payload of type {type(payload).__name__}")
    if payload and all(isinstance(item, str) for item in payload):
        return [payload]
    return [_as_grid(item) for item in payload]


def load_dna_json(path: str) -> List[Any]:
    """Load the candidate grids stored in the JSON file at ``path``."""
    with open(path, "r") as f:
        return parse_dna_payload(json.load(f))


def save_report(report: Dict[str, Any], out_path: str = "dna_report.json") -> Path:
    """Dump a batch report (per-grid verdicts plus statistics) as indented JSON.

    Missing parent directories are created.
    """
    path = Path(out_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report, indent=2) + "\n")
    return path


__all__ = ["parse_dna_payload", "load_dna_json", "save_report"]
