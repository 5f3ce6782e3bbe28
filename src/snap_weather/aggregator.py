"""Concurrent current-weather aggregation over the tracked location set."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .exceptions import AggregationError, WeatherProviderError
from .preferences import UnitPreference
from .weather import precipitation
from .weather.base import WeatherProvider
from .weather.models import Location, RawWeatherPayload, WeatherSnapshot
from .weather.units import UnitSystem

DEFAULT_LOCATIONS: tuple[Location, ...] = (
    Location(name="San Francisco", region="CA"),
    Location(name="New York", region="NY"),
    Location(name="Salt Lake City", region="UT"),
)

FALLBACK_DESCRIPTION = "Unknown"
FALLBACK_ICON_CODE = "01d"


@dataclass(frozen=True, slots=True)
class FetchOutcome:
    """Success-or-failure result of a single-location fetch."""

    location: Location
    snapshot: WeatherSnapshot | None = None
    error: str | None = None
    cause: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.snapshot is not None


class WeatherAggregator:
    """Owns the tracked locations and turns provider payloads into snapshots.

    The tracked list is not locked; callers that mutate it from several tasks
    must synchronise externally.

    The unit is read from `unit_preference` once per location fetch. With a
    file-backed store that read is a small synchronous file read on the event
    loop thread.

    Without a provider the aggregator only manages the tracked set, and every
    fetch fails as a provider error.
    """

    def __init__(
        self,
        provider: WeatherProvider | None,
        unit_preference: UnitPreference,
        locations: Iterable[Location] | None = None,
        country_code: str = "US",
        logger: logging.Logger | None = None,
    ) -> None:
        self.provider = provider
        self.unit_preference = unit_preference
        self.country_code = country_code
        self.logger = logger or logging.getLogger("snap_weather.aggregator")
        self._locations: list[Location] = []
        for location in DEFAULT_LOCATIONS if locations is None else locations:
            self.add_location(location)

    def list_tracked_locations(self) -> list[Location]:
        return list(self._locations)

    def add_location(self, location: Location) -> None:
        if location not in self._locations:
            self._locations.append(location)

    def remove_location(self, location: Location) -> None:
        if location in self._locations:
            self._locations.remove(location)

    async def fetch_all(self) -> list[WeatherSnapshot]:
        """Fetch every tracked location concurrently, keeping only successes.

        Per-location failures are logged and dropped. The result order follows
        no contract; match snapshots by `location_display_label`.
        """
        locations = self.list_tracked_locations()
        if not locations:
            return []
        try:
            tasks = [asyncio.ensure_future(self._fetch_snapshot(loc)) for loc in locations]
        except Exception as exc:
            raise AggregationError(f"Could not dispatch weather fetches: {exc}") from exc

        results = await asyncio.gather(*tasks, return_exceptions=True)

        snapshots: list[WeatherSnapshot] = []
        for location, result in zip(locations, results):
            if isinstance(result, WeatherSnapshot):
                snapshots.append(result)
            elif isinstance(result, WeatherProviderError):
                self.logger.warning(
                    "Dropping weather for %s: %s", location.display_label, result
                )
            elif isinstance(result, Exception):
                self.logger.warning(
                    "Dropping weather for %s after unexpected %s: %s",
                    location.display_label,
                    type(result).__name__,
                    result,
                )
            elif isinstance(result, BaseException):
                raise result
        self.logger.info(
            "Fetched weather for %d of %d tracked locations", len(snapshots), len(locations)
        )
        return snapshots

    async def fetch_one(self, location: Location) -> FetchOutcome:
        """Fetch one location; provider failures come back as a failed outcome."""
        try:
            snapshot = await self._fetch_snapshot(location)
        except Exception as exc:
            self.logger.warning("Weather fetch failed for %s: %s", location.display_label, exc)
            message = str(exc) or type(exc).__name__
            return FetchOutcome(location=location, error=message, cause=exc)
        return FetchOutcome(location=location, snapshot=snapshot)

    async def _fetch_snapshot(self, location: Location) -> WeatherSnapshot:
        if self.provider is None:
            raise WeatherProviderError("No weather provider configured.")
        unit = self.unit_preference.get_current()
        payload = await self.provider.fetch_current(
            location.query(self.country_code), unit.provider_code
        )
        return self.map_payload(payload, location, unit)

    def map_payload(
        self, payload: RawWeatherPayload, location: Location, unit: UnitSystem
    ) -> WeatherSnapshot:
        """Map a provider payload onto the domain snapshot for `location`."""
        condition = payload.conditions[0] if payload.conditions else None
        description = condition.description if condition else FALLBACK_DESCRIPTION
        icon_code = condition.icon_code if condition else FALLBACK_ICON_CODE
        return WeatherSnapshot(
            location_display_label=location.display_label,
            current_temp=payload.main.current_temp,
            high_temp=payload.main.max_temp,
            low_temp=payload.main.min_temp,
            condition_description=description,
            icon_url=self.provider.icon_url_for(icon_code),
            humidity_pct=payload.main.humidity_pct,
            precipitation_likelihood=precipitation.estimate(
                description, payload.main.humidity_pct, payload.clouds.coverage_pct
            ),
            unit_symbol=unit.symbol,
        )
