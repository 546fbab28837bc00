"""Tests for the offline snapshot matching tool."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pace_match.tools.match_snapshot import main

from conftest import METRES_PER_DEGREE

NOW_MS = 1748772000000


def _write_pool(tmp_path: Path) -> Path:
    records = {
        "me": {"lat": 0.0, "lng": 0.0, "activity": "running", "pace": 5.0, "timestamp": NOW_MS},
        "buddy": {
            "lat": 120.0 / METRES_PER_DEGREE,
            "lng": 0.0,
            "activity": "running",
            "pace": 5.2,
            "timestamp": NOW_MS - 60_000,
        },
        "ghost": {"lat": 0.0, "lng": 0.0, "activity": "running", "timestamp": NOW_MS - 600_000},
    }
    path = tmp_path / "pool.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_prints_ranked_matches(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_pool(tmp_path)

    code = main([str(path), "--user", "me", "--now", "2025-06-01T10:00:00Z"])

    out = capsys.readouterr().out
    assert code == 0
    assert "live=1" in out
    assert "1. buddy" in out
    assert "distance=   120m" in out
    assert "ghost" not in out


def test_unknown_user(tmp_path: Path) -> None:
    path = _write_pool(tmp_path)
    assert main([str(path), "--user", "nobody"]) == 1


def test_missing_file(tmp_path: Path) -> None:
    assert main([str(tmp_path / "missing.json"), "--user", "me"]) == 2


def test_invalid_now(tmp_path: Path) -> None:
    path = _write_pool(tmp_path)
    assert main([str(path), "--user", "me", "--now", "yesterday"]) == 2
