import logging
from datetime import datetime, timedelta, timezone

import pytest

from trenddelta.config import Settings
from trenddelta.core import TrendDeltaQuery, run_trend_delta
from trenddelta.ingest import (
    FileTrendProvider,
    InMemoryTrendProvider,
    ProviderFailure,
    TrendParseError,
    TrendProvider,
    provider_from_mapping,
)
from trenddelta.types import ALL_TIME, AbsoluteRange, ElementRef, IntervalRow, Sample


ELEMENT = ElementRef(1, 2)
NOW = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def utc_settings(**query):
    return Settings.model_validate({"calendar": {"timezone": "UTC"}, "query": query})


def hourly(start, count):
    return [Sample(start + timedelta(hours=i), float(i)) for i in range(count)]


class RecordingProvider:
    def __init__(self, samples):
        self.samples = samples
        self.calls = []

    def fetch(self, element, parameter_id, time_range):
        self.calls.append((element, parameter_id, time_range))
        return self.samples


def test_hourly_query_end_to_end():
    samples = [
        Sample(utc(2024, 1, 1, 0, 0), 10),
        Sample(utc(2024, 1, 1, 0, 30), 12),
        Sample(utc(2024, 1, 1, 1, 0), 15),
        Sample(utc(2024, 1, 1, 1, 30), 9),
    ]
    provider = provider_from_mapping({(1, 2, 3): samples})
    query = TrendDeltaQuery(ELEMENT, 3, time_range="All time", interval="Hour")
    table = run_trend_delta(query, provider, settings=utc_settings(), now=NOW)
    assert list(table) == [IntervalRow(utc(2024, 1, 1, 1), utc(2024, 1, 1, 2), 12.0, 9.0)]


def test_provider_called_once_with_resolved_range():
    provider = RecordingProvider([])
    query = TrendDeltaQuery(ELEMENT, 7, time_range="Last day", interval="Hour")
    table = run_trend_delta(query, provider, settings=utc_settings(), now=NOW)
    assert len(table) == 0
    assert provider.calls == [(ELEMENT, 7, AbsoluteRange(utc(2024, 3, 14), utc(2024, 3, 15)))]


def test_missing_payload_raises_provider_failure():
    provider = RecordingProvider(None)
    query = TrendDeltaQuery(ELEMENT, 3)
    with pytest.raises(ProviderFailure) as excinfo:
        run_trend_delta(query, provider, settings=utc_settings(), now=NOW)
    assert str(excinfo.value).startswith("Invalid trend data.")
    assert len(provider.calls) == 1
    assert excinfo.value.detail == "no response for parameter 3 on element 1/2"


def test_unknown_interval_behaves_like_day():
    samples = hourly(utc(2024, 1, 1), 72)
    provider = provider_from_mapping({(1, 2, 3): samples})
    settings = utc_settings()
    unknown = run_trend_delta(TrendDeltaQuery(ELEMENT, 3, interval="Fortnight"), provider, settings=settings, now=NOW)
    day = run_trend_delta(TrendDeltaQuery(ELEMENT, 3, interval="Day"), provider, settings=settings, now=NOW)
    assert list(unknown) == list(day)
    assert [row.start for row in day] == [utc(2024, 1, 2), utc(2024, 1, 3)]


def test_query_defaults_come_from_settings():
    samples = hourly(utc(2024, 1, 1), 5)
    provider = provider_from_mapping({(1, 2, 3): samples})
    table = run_trend_delta(
        TrendDeltaQuery(ELEMENT, 3),
        provider,
        settings=utc_settings(interval="Hour"),
        now=NOW,
    )
    assert [row.start.hour for row in table] == [1, 2, 3, 4]


def test_in_memory_provider_filters_to_range():
    provider = InMemoryTrendProvider()
    provider.add(ELEMENT, 3, hourly(utc(2024, 3, 13, 20), 40))
    samples = provider.fetch(ELEMENT, 3, AbsoluteRange(utc(2024, 3, 14), utc(2024, 3, 15)))
    assert len(samples) == 24
    assert samples[0].timestamp == utc(2024, 3, 14)
    assert samples[-1].timestamp == utc(2024, 3, 14, 23)
    assert isinstance(provider, TrendProvider)


def test_in_memory_provider_unknown_series():
    provider = InMemoryTrendProvider()
    with pytest.raises(ProviderFailure):
        provider.fetch(ELEMENT, 99, AbsoluteRange(utc(2024, 1, 1), utc(2024, 1, 2)))


def test_file_provider_reads_trend_file(tmp_path):
    lines = ["timestamp,average"]
    lines += [f"2024-01-01T{h:02d}:00:00Z,{h * 2}" for h in range(5)]
    (tmp_path / "1-2-3.csv").write_text("\n".join(lines) + "\n")
    settings = Settings.model_validate(
        {"calendar": {"timezone": "UTC"}, "provider": {"root": str(tmp_path)}}
    )
    provider = FileTrendProvider.from_settings(settings)
    assert provider.path_for(ELEMENT, 3) == tmp_path / "1-2-3.csv"

    query = TrendDeltaQuery(ELEMENT, 3, interval="Hour")
    table = run_trend_delta(query, provider, settings=settings, now=NOW)
    assert [(row.start_value, row.end_value) for row in table] == [(0.0, 2.0), (2.0, 4.0), (4.0, 6.0), (6.0, 8.0)]
    assert all(row.delta == 2.0 for row in table)


def test_file_provider_missing_file(tmp_path):
    provider = FileTrendProvider(tmp_path)
    with pytest.raises(ProviderFailure) as excinfo:
        run_trend_delta(TrendDeltaQuery(ELEMENT, 3), provider, settings=utc_settings(), now=NOW)
    assert "trend file not found" in str(excinfo.value)


def test_file_provider_wraps_parse_errors(tmp_path):
    (tmp_path / "1-2-3.csv").write_text("2024-01-01T02:00:00Z 1\n2024-01-01T01:00:00Z 2\n")
    provider = FileTrendProvider(tmp_path)
    with pytest.raises(ProviderFailure) as excinfo:
        provider.fetch(ELEMENT, 3, AbsoluteRange(utc(2024, 1, 1), utc(2024, 1, 2)))
    assert isinstance(excinfo.value.__cause__, TrendParseError)
    assert str(excinfo.value).startswith("Invalid trend data.")


def test_file_provider_wraps_undecodable_bytes(tmp_path):
    (tmp_path / "1-2-3.csv").write_bytes(b"timestamp,value\n2024-01-01T00:00:00Z,1\xff\n")
    provider = FileTrendProvider(tmp_path)
    with pytest.raises(ProviderFailure) as excinfo:
        provider.fetch(ELEMENT, 3, ALL_TIME)
    assert isinstance(excinfo.value.__cause__, TrendParseError)
    assert excinfo.value.__cause__.line is None
    assert "not valid" in str(excinfo.value)


def test_run_logs_interval_count(caplog):
    caplog.set_level(logging.INFO, logger="trenddelta")
    provider = provider_from_mapping({(1, 2, 3): hourly(utc(2024, 1, 1), 5)})
    run_trend_delta(TrendDeltaQuery(ELEMENT, 3, interval="Hour"), provider, settings=utc_settings(), now=NOW)
    assert "4 hour interval(s)" in caplog.text
