"""Key-value preference stores and the temperature unit preference."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .exceptions import PreferenceStoreError
from .weather.models import Location
from .weather.units import UnitSystem

KEY_TEMPERATURE_UNIT = "temperature_unit"
KEY_TRACKED_LOCATIONS = "tracked_locations"

_LOCATIONS_ADAPTER = TypeAdapter(list[Location])


class PreferenceStore(ABC):
    """String-keyed store for small JSON-compatible preference values."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value or `default`."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store `value` under `key`."""


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(initial or {})

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value


class JsonFilePreferenceStore(PreferenceStore):
    """Preferences persisted as one JSON object; every `set` rewrites the file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        values = self._read()
        values[key] = value
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("w", encoding="utf-8") as fh:
                json.dump(values, fh, ensure_ascii=False, indent=2)
                fh.write("\n")
            tmp_path.replace(self.path)
        except (OSError, TypeError, ValueError) as exc:
            raise PreferenceStoreError(f"Failed writing preferences to {self.path}: {exc}") from exc

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                values = json.load(fh)
        except (OSError, ValueError) as exc:
            raise PreferenceStoreError(f"Failed reading preferences from {self.path}: {exc}") from exc
        if not isinstance(values, dict):
            raise PreferenceStoreError(
                f"Preferences file {self.path} must contain a JSON object, "
                f"got {type(values).__name__}."
            )
        return values


class UnitPreference:
    """Active temperature unit, defaulting to Fahrenheit."""

    def __init__(self, store: PreferenceStore, logger: logging.Logger | None = None) -> None:
        self.store = store
        self.logger = logger or logging.getLogger("snap_weather.preferences")

    def get_current(self) -> UnitSystem:
        raw = self.store.get(KEY_TEMPERATURE_UNIT, UnitSystem.IMPERIAL.name)
        try:
            return UnitSystem[raw]
        except (KeyError, TypeError):
            self.logger.warning("Ignoring unknown stored temperature unit %r", raw)
            return UnitSystem.IMPERIAL

    def set_current(self, unit: UnitSystem) -> None:
        self.store.set(KEY_TEMPERATURE_UNIT, unit.name)

    def toggle(self) -> UnitSystem:
        """Flip between Fahrenheit and Celsius and return the new unit."""
        new_unit = self.get_current().other
        self.set_current(new_unit)
        return new_unit


def load_tracked_locations(store: PreferenceStore) -> list[Location] | None:
    """Return the stored tracked locations, or None when nothing was saved yet."""
    raw = store.get(KEY_TRACKED_LOCATIONS)
    if raw is None:
        return None
    try:
        return _LOCATIONS_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise PreferenceStoreError(f"Stored tracked locations are malformed: {exc}") from exc


def save_tracked_locations(store: PreferenceStore, locations: list[Location]) -> None:
    store.set(KEY_TRACKED_LOCATIONS, _LOCATIONS_ADAPTER.dump_python(locations, mode="json"))
