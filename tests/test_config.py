import json
import pytest
from datetime import timezone

from pydantic import ValidationError

from trenddelta.config import Settings, load_settings


def test_defaults():
    s = Settings()
    assert s.calendar.first_day_of_week == 0
    assert s.query.time_range == "All time"
    assert s.query.interval == "Day"
    assert s.provider.filename == "{dma_id}-{element_id}-{parameter_id}.csv"
    assert s.output.format == "table"


def test_from_env(monkeypatch):
    monkeypatch.setenv("TRENDDELTA_CALENDAR__FIRST_DAY_OF_WEEK", "sunday")
    monkeypatch.setenv("TRENDDELTA_CALENDAR__TIMEZONE", "UTC")
    s = Settings.from_env()
    assert s.calendar.first_day_of_week == 6
    assert s.calendar.tzinfo() is timezone.utc


def test_from_env_query_defaults(monkeypatch):
    monkeypatch.setenv("TRENDDELTA_QUERY__INTERVAL", "Week")
    monkeypatch.setenv("TRENDDELTA_OUTPUT__FORMAT", "JSON")
    s = Settings.from_env()
    assert s.query.interval == "Week"
    assert s.output.format == "json"


def test_load_settings_json(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"provider": {"root": "/data/trends"}, "logging": {"level": "debug"}}))
    s = load_settings(p)
    assert s.provider.root == "/data/trends"
    assert s.logging.level == "DEBUG"


def test_load_settings_yaml(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("calendar:\n  first_day_of_week: 6\nquery:\n  time_range: Last week\n")
    s = load_settings(p)
    assert s.calendar.first_day_of_week == 6
    assert s.query.time_range == "Last week"


def test_load_settings_rejects_non_mapping(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text("[1, 2]")
    with pytest.raises(TypeError):
        load_settings(p)


@pytest.mark.parametrize(
    "data",
    [
        {"calendar": {"timezone": "Mars/Olympus_Mons"}},
        {"calendar": {"first_day_of_week": 9}},
        {"output": {"format": "xlsx"}},
        {"logging": {"level": "chatty"}},
    ],
)
def test_invalid_values_rejected(data):
    with pytest.raises(ValidationError):
        Settings.model_validate(data)
