from __future__ import annotations

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest


@pytest.fixture
def brussels():
    """Europe/Brussels zone (CET/CEST), skipping when tz data is unavailable."""
    try:
        return ZoneInfo("Europe/Brussels")
    except ZoneInfoNotFoundError:  # pragma: no cover - depends on host tz data
        pytest.skip("IANA time zone data not available")
