"""Weather board: list-view state over the aggregator for a consuming UI."""

from __future__ import annotations

import logging
from enum import Enum

from .aggregator import FetchOutcome, WeatherAggregator
from .exceptions import AggregationError
from .preferences import UnitPreference
from .weather.models import Location, WeatherSnapshot
from .weather.units import UnitSystem, convert_snapshot

NO_DATA_MESSAGE = "No weather data available"


class BoardState(Enum):
    LOADING = "loading"
    EMPTY = "empty"
    SUCCESS = "success"
    ERROR = "error"


class WeatherBoard:
    """Holds the last fetched snapshots and the state a list screen renders.

    Toggling the unit re-derives cached temperatures instead of re-fetching.
    """

    def __init__(
        self,
        aggregator: WeatherAggregator,
        unit_preference: UnitPreference,
        logger: logging.Logger | None = None,
    ) -> None:
        self.aggregator = aggregator
        self.unit_preference = unit_preference
        self.logger = logger or logging.getLogger("snap_weather.board")
        self.state = BoardState.LOADING
        self.message: str | None = None
        self.snapshots: list[WeatherSnapshot] = []
        self.current_unit = unit_preference.get_current()

    async def load(self) -> BoardState:
        """Fetch all tracked locations and settle into a terminal state."""
        self._set(BoardState.LOADING)
        tracked = self.aggregator.list_tracked_locations()
        try:
            snapshots = await self.aggregator.fetch_all()
        except AggregationError as exc:
            self.logger.error("Weather load failed: %s", exc)
            return self._set(BoardState.ERROR, str(exc))

        self.current_unit = self.unit_preference.get_current()
        if not tracked:
            self.snapshots = []
            return self._set(BoardState.EMPTY)
        if not snapshots:
            return self._set(BoardState.ERROR, NO_DATA_MESSAGE)
        self.snapshots = self._in_tracked_order(snapshots, tracked)
        return self._set(BoardState.SUCCESS)

    def toggle_unit(self) -> UnitSystem:
        self.current_unit = self.unit_preference.toggle()
        self.snapshots = [convert_snapshot(item, self.current_unit) for item in self.snapshots]
        self._settle()
        return self.current_unit

    async def add_location(self, name: str, region: str) -> FetchOutcome:
        """Track a new location only once the provider has weather for it."""
        location = Location(name=name, region=region)
        self._set(BoardState.LOADING)
        outcome = await self.aggregator.fetch_one(location)
        if not outcome.ok or outcome.snapshot is None:
            self._set(
                BoardState.ERROR,
                f"Could not find weather data for {location.display_label}. "
                "Please check the city name and try again.",
            )
            return outcome

        already_tracked = location in self.aggregator.list_tracked_locations()
        self.aggregator.add_location(location)
        snapshot = convert_snapshot(outcome.snapshot, self.current_unit)
        if already_tracked:
            self.snapshots = [
                snapshot if item.location_display_label == location.display_label else item
                for item in self.snapshots
            ]
        else:
            self.snapshots = [*self.snapshots, snapshot]
        self._settle()
        return outcome

    def remove_location(self, location: Location) -> None:
        self.aggregator.remove_location(location)
        self.snapshots = [
            item for item in self.snapshots
            if item.location_display_label != location.display_label
        ]
        self._settle()

    def _settle(self) -> None:
        if self.snapshots:
            self._set(BoardState.SUCCESS)
        else:
            self._set(BoardState.EMPTY)

    def _set(self, state: BoardState, message: str | None = None) -> BoardState:
        self.state = state
        self.message = message
        return state

    @staticmethod
    def _in_tracked_order(
        snapshots: list[WeatherSnapshot], tracked: list[Location]
    ) -> list[WeatherSnapshot]:
        rank = {loc.display_label: index for index, loc in enumerate(tracked)}
        return sorted(snapshots, key=lambda item: rank.get(item.location_display_label, len(rank)))
