"""Request parsing helpers shared by the blueprints."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from poupeja.blueprints.common import parse_datetime

SAO_PAULO = ZoneInfo("America/Sao_Paulo")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2024-02-01T02:00:00Z", datetime(2024, 1, 31, 23, 0)),
        ("2024-02-01T02:00:00+00:00", datetime(2024, 1, 31, 23, 0)),
        ("2024-03-10T12:00:00-03:00", datetime(2024, 3, 10, 12, 0)),
        ("2024-03-10T12:00:00", datetime(2024, 3, 10, 12, 0)),
        ("2024-03-10", datetime(2024, 3, 10)),
    ],
)
def test_parse_datetime_returns_local_naive(raw, expected):
    parsed = parse_datetime(raw, "date", tz=SAO_PAULO)
    assert parsed == expected
    assert parsed.tzinfo is None


def test_parse_datetime_converts_aware_datetime_objects():
    value = datetime(2024, 2, 1, 2, 0, tzinfo=timezone.utc)
    assert parse_datetime(value, "date", tz=SAO_PAULO) == datetime(2024, 1, 31, 23, 0)


def test_parse_datetime_uses_configured_zone(app):
    with app.app_context():
        assert parse_datetime("2024-06-01T12:00:00Z", "date") == datetime(2024, 6, 1, 9, 0)


def test_parse_datetime_rejects_garbage():
    with pytest.raises(ValueError, match="date must be a valid date"):
        parse_datetime("yesterday", "date", tz=SAO_PAULO)
    assert parse_datetime("", "date") is None
    with pytest.raises(ValueError, match="date is required"):
        parse_datetime(None, "date", required=True)
