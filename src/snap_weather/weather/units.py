"""Temperature unit systems and conversion of snapshots between them."""

from __future__ import annotations

from enum import Enum

from .models import WeatherSnapshot


class UnitSystem(Enum):
    """Temperature unit with its display symbol and provider `units` code."""

    IMPERIAL = ("°F", "imperial")
    METRIC = ("°C", "metric")

    def __init__(self, symbol: str, provider_code: str) -> None:
        self.symbol = symbol
        self.provider_code = provider_code

    @property
    def other(self) -> UnitSystem:
        return UnitSystem.METRIC if self is UnitSystem.IMPERIAL else UnitSystem.IMPERIAL

    @classmethod
    def from_symbol(cls, symbol: str) -> UnitSystem | None:
        for unit in cls:
            if unit.symbol == symbol:
                return unit
        return None

    @classmethod
    def parse(cls, value: str) -> UnitSystem:
        """Resolve an enum name or provider code ("imperial", "METRIC", ...)."""
        candidate = value.strip()
        for unit in cls:
            if candidate.upper() == unit.name or candidate.lower() == unit.provider_code:
                return unit
        raise ValueError(f"Unknown unit system {value!r}; expected imperial or metric.")


def fahrenheit_to_celsius(value: float) -> float:
    return (value - 32.0) * 5.0 / 9.0


def celsius_to_fahrenheit(value: float) -> float:
    return value * 9.0 / 5.0 + 32.0


def convert_temperature(value: float, from_unit: UnitSystem, to_unit: UnitSystem) -> float:
    if from_unit is to_unit:
        return value
    if from_unit is UnitSystem.IMPERIAL:
        return fahrenheit_to_celsius(value)
    return celsius_to_fahrenheit(value)


def convert_snapshot(snapshot: WeatherSnapshot, target: UnitSystem) -> WeatherSnapshot:
    """Return a new snapshot with temperatures re-derived in `target` units.

    A snapshot already in `target` (or carrying an unrecognised symbol) is
    returned unchanged.
    """
    source = UnitSystem.from_symbol(snapshot.unit_symbol)
    if source is None or source is target:
        return snapshot
    return snapshot.model_copy(
        update={
            "current_temp": convert_temperature(snapshot.current_temp, source, target),
            "high_temp": convert_temperature(snapshot.high_temp, source, target),
            "low_temp": convert_temperature(snapshot.low_temp, source, target),
            "unit_symbol": target.symbol,
        }
    )
