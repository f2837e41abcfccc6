"""Tests for environment-backed settings and payload parsing."""

from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from mutant_detector.config import DetectorSettings, build_settings, build_store
from mutant_detector.io_utils import load_dna_json, parse_dna_payload, save_report
from mutant_detector.store import InMemoryResultStore, JsonResultStore, SQLiteResultStore

HUMAN = ["ATCG", "CGAT", "TACG", "GCTA"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("STORE", "STORE_PATH", "HASH_ALGORITHM", "LOG_LEVEL"):
        monkeypatch.delenv(f"MUTANT_{key}", raising=False)


def test_defaults() -> None:
    assert build_settings() == DetectorSettings()


def test_environment_then_overrides(monkeypatch) -> None:
    monkeypatch.setenv("MUTANT_STORE", " SQLite ")
    monkeypatch.setenv("MUTANT_STORE_PATH", "/tmp/a.db")
    monkeypatch.setenv("MUTANT_LOG_LEVEL", "debug")
    settings = build_settings({"store_path": "/tmp/b.db", "HASH_ALGORITHM": None})
    assert settings.store == "sqlite"
    assert settings.store_path == "/tmp/b.db"
    assert settings.hash_algorithm == "sha256"
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "backend,filename,expected",
    [
        ("memory", None, InMemoryResultStore),
        ("json", "r.json", JsonResultStore),
        ("sqlite", "r.db", SQLiteResultStore),
    ],
)
def test_build_store(backend, filename, expected, tmp_path: Path) -> None:
    path = str(tmp_path / filename) if filename else None
    store = build_store(DetectorSettings(store=backend, store_path=path))
    assert isinstance(store, expected)


@pytest.mark.parametrize(
    "settings",
    [
        DetectorSettings(store="redis"),
        DetectorSettings(store="json"),
        DetectorSettings(store="sqlite", store_path=""),
    ],
)
def test_build_store_rejects_bad_settings(settings) -> None:
    with pytest.raises(ValueError):
        build_store(settings)


@pytest.mark.parametrize(
    "payload,expected",
    [
        ({"dna": HUMAN}, [HUMAN]),
        ([{"dna": HUMAN}, {"dna": None}], [HUMAN, None]),
        ([HUMAN, HUMAN[:2]], [HUMAN, HUMAN[:2]]),
        (HUMAN, [HUMAN]),
        ([], []),
    ],
)
def test_parse_dna_payload(payload, expected) -> None:
    assert parse_dna_payload(payload) == expected


@pytest.mark.parametrize("payload", [{"rows": HUMAN}, "ATCG", 42])
def test_parse_dna_payload_rejects(payload) -> None:
    with pytest.raises(ValueError):
        parse_dna_payload(payload)


def test_load_and_save(tmp_path: Path) -> None:
    path = tmp_path / "in.json"
    path.write_text(json.dumps({"dna": HUMAN}))
    assert load_dna_json(str(path)) == [HUMAN]

    out = save_report({"ok": True}, str(tmp_path / "reports" / "out.json"))
    assert out == tmp_path / "reports" / "out.json"
    assert json.loads(out.read_text()) == {"ok": True}
