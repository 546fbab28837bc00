"""Tests for timestamp parsing helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pace_match.utils import coerce_float, parse_timestamp

NOW = datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "value",
    [
        1748772000,
        1748772000000,
        "1748772000000",
        "2025-06-01T10:00:00Z",
        "2025-06-01T12:00:00+02:00",
        datetime(2025, 6, 1, 10, 0),
    ],
)
def test_parse_timestamp_forms(value) -> None:
    assert parse_timestamp(value) == NOW


def test_parse_timestamp_converts_offsets_to_utc() -> None:
    parsed = parse_timestamp(NOW.astimezone(timezone(timedelta(hours=-5))))
    assert parsed.utcoffset() == timedelta(0)


@pytest.mark.parametrize("value", [None, True, "", "yesterday", -5, float("nan"), object()])
def test_parse_timestamp_rejects_garbage(value) -> None:
    assert parse_timestamp(value) is None


def test_coerce_float() -> None:
    assert coerce_float("4.5") == 4.5
    assert coerce_float("fast") is None
    assert coerce_float(False) is None
