"""CLI offline smoke tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from fakes import FakeWeatherProvider, make_payload
from snap_weather import cli
from snap_weather.aggregator import WeatherAggregator
from snap_weather.weather.models import Location


class _ContextFakeProvider(FakeWeatherProvider):
    responses_for_next: dict[str, Any] = {}
    instances: list[_ContextFakeProvider] = []

    def __init__(self, settings: Any, logger: Any = None) -> None:
        super().__init__(self.responses_for_next)
        self.settings = settings
        self.instances.append(self)

    async def __aenter__(self) -> _ContextFakeProvider:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()


@pytest.fixture
def fake_provider(monkeypatch: pytest.MonkeyPatch) -> type[_ContextFakeProvider]:
    _ContextFakeProvider.responses_for_next = {}
    _ContextFakeProvider.instances = []
    monkeypatch.setattr(cli, "OpenWeatherProvider", _ContextFakeProvider)
    return _ContextFakeProvider


def _set_required_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OPENWEATHER_API_KEY", "test-key")
    monkeypatch.setenv("PREFERENCES_FILE", str(tmp_path / "prefs" / "preferences.json"))
    monkeypatch.setenv("JOURNAL_DIR", str(tmp_path / "journal"))
    monkeypatch.setenv("COLUMNS", "200")


def _event_types(tmp_path: Path) -> list[str]:
    journal_files = list((tmp_path / "journal").glob("*.jsonl"))
    assert journal_files
    lines = journal_files[0].read_text(encoding="utf-8").strip().splitlines()
    return [json.loads(line)["event_type"] for line in lines]


def _stored_preferences(tmp_path: Path) -> dict[str, Any]:
    return json.loads((tmp_path / "prefs" / "preferences.json").read_text(encoding="utf-8"))


def test_missing_api_key_is_config_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _set_required_env(monkeypatch, tmp_path)
    monkeypatch.delenv("OPENWEATHER_API_KEY")
    assert cli.main(["list"]) == 2


def test_list_shows_default_locations(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    assert cli.main(["list"]) == 0
    output = capsys.readouterr().out
    assert "San Francisco, CA" in output
    assert "New York, NY" in output
    assert "Salt Lake City, UT" in output


def test_fetch_prints_successes_and_journals_summary(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any, fake_provider: Any
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    fake_provider.responses_for_next = {
        "San Francisco,US": make_payload(name="San Francisco", temp=61.4),
        "New York,US": make_payload(
            name="New York",
            humidity=80,
            clouds=60,
            weather=[{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        ),
    }

    assert cli.main(["fetch"]) == 0

    output = capsys.readouterr().out
    assert "San Francisco, CA" in output
    assert "61°F" in output
    assert "New York, NY" in output
    assert "light rain" in output
    assert "High" in output
    assert "1 location(s) could not be fetched." in output

    event_types = _event_types(tmp_path)
    assert event_types[0] == "command_start"
    assert "weather_fetch_summary" in event_types
    assert event_types[-1] == "command_shutdown"
    assert fake_provider.instances[0].closed is True


def test_fetch_with_every_location_failing_exits_nonzero(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any, fake_provider: Any
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    assert cli.main(["fetch"]) == 4
    assert "No weather data available" in capsys.readouterr().out


def test_fetch_one_failure_exits_nonzero(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any, fake_provider: Any
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    assert cli.main(["fetch-one", "Atlantis", "XX"]) == 4
    assert "Weather fetch failed" in capsys.readouterr().out


def test_add_persists_location_after_successful_fetch(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any, fake_provider: Any
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    fake_provider.responses_for_next = {"Chicago,US": make_payload()}

    assert cli.main(["add", "Chicago", "IL"]) == 0
    assert "Now tracking Chicago, IL." in capsys.readouterr().out

    stored = _stored_preferences(tmp_path)["tracked_locations"]
    assert stored[-1] == {"name": "Chicago", "region": "IL"}
    assert len(stored) == 4


def test_add_unknown_location_does_not_persist(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any, fake_provider: Any
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    assert cli.main(["add", "Atlantis", "XX"]) == 4
    assert "Could not find weather data for Atlantis, XX." in capsys.readouterr().out
    assert not (tmp_path / "prefs" / "preferences.json").exists()


def test_remove_then_list(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any) -> None:
    _set_required_env(monkeypatch, tmp_path)
    assert cli.main(["remove", "New York", "NY"]) == 0
    assert cli.main(["remove", "New York", "NY"]) == 0
    output = capsys.readouterr().out
    assert "Stopped tracking New York, NY." in output
    assert "New York, NY was not tracked." in output

    assert cli.main(["list"]) == 0
    assert "New York, NY" not in capsys.readouterr().out
    assert "location_remove" in _event_types(tmp_path)


def test_unit_toggle_and_set(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any) -> None:
    _set_required_env(monkeypatch, tmp_path)
    assert cli.main(["unit"]) == 0
    assert "°F (imperial)" in capsys.readouterr().out

    assert cli.main(["unit", "--toggle"]) == 0
    assert "°C (metric)" in capsys.readouterr().out
    assert _stored_preferences(tmp_path)["temperature_unit"] == "METRIC"

    assert cli.main(["unit", "--set", "imperial"]) == 0
    assert _stored_preferences(tmp_path)["temperature_unit"] == "IMPERIAL"


def test_fetch_uses_stored_metric_unit(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any, fake_provider: Any
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    assert cli.main(["unit", "--set", "metric"]) == 0
    fake_provider.responses_for_next = {"Chicago,US": make_payload(temp=21.0)}

    assert cli.main(["fetch-one", "Chicago", "IL"]) == 0

    assert fake_provider.instances[0].calls == [("Chicago,US", "metric")]
    assert "21°C" in capsys.readouterr().out


def test_corrupt_preferences_file_exits_with_store_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    prefs = tmp_path / "prefs" / "preferences.json"
    prefs.parent.mkdir(parents=True)
    prefs.write_text("{broken", encoding="utf-8")
    assert cli.main(["list"]) == 3


def test_remove_goes_through_aggregator(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: Any
) -> None:
    _set_required_env(monkeypatch, tmp_path)
    removed: list[Location] = []
    original_remove = WeatherAggregator.remove_location

    def _recording_remove(self: WeatherAggregator, location: Location) -> None:
        removed.append(location)
        original_remove(self, location)

    monkeypatch.setattr(WeatherAggregator, "remove_location", _recording_remove)

    assert cli.main(["remove", "Salt Lake City", "UT"]) == 0

    assert removed == [Location(name="Salt Lake City", region="UT")]
    assert _stored_preferences(tmp_path)["tracked_locations"] == [
        {"name": "San Francisco", "region": "CA"},
        {"name": "New York", "region": "NY"},
    ]
    assert "Stopped tracking Salt Lake City, UT." in capsys.readouterr().out
