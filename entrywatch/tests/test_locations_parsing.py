from __future__ import annotations

import logging

import pytest

from entrywatch.domain import LocationTarget
from entrywatch.locations import parse_locations


def _error_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.levelno == logging.ERROR and r.name == "entrywatch.locations"]


def test_parse_single_location() -> None:
    assert parse_locations("5140:JFK:2025-04-01") == [LocationTarget(id="5140", name="JFK", target_date="2025-04-01")]


def test_parse_keeps_valid_entries_and_logs_each_malformed_one(caplog: pytest.LogCaptureFixture) -> None:
    raw = "5140:JFK Terminal 4:2025-04-01, 5183:Newark:2025-05-01,bad,1:2:3:4,5444:Boston:2025-06-01"

    result = parse_locations(raw)

    assert [loc.id for loc in result] == ["5140", "5183", "5444"]
    assert result[0].name == "JFK Terminal 4"
    assert len(_error_records(caplog)) == 2


@pytest.mark.parametrize("raw", ["", None])
def test_parse_empty_input_returns_empty_list_and_logs(raw: str | None, caplog: pytest.LogCaptureFixture) -> None:
    assert parse_locations(raw) == []
    assert _error_records(caplog)


def test_parse_passes_duplicates_and_odd_dates_through() -> None:
    result = parse_locations("1:A:2025-04-01,1:A:2025-04-01,2:B:not-a-date")

    assert len(result) == 3
    assert result[0] == result[1]
    assert result[2].target_date == "not-a-date"
