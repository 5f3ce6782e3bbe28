"""Track current weather for a handful of locations."""

from .aggregator import DEFAULT_LOCATIONS, FetchOutcome, WeatherAggregator
from .board import BoardState, WeatherBoard
from .preferences import InMemoryPreferenceStore, JsonFilePreferenceStore, UnitPreference
from .weather import (
    Location,
    OpenWeatherProvider,
    PrecipitationLikelihood,
    UnitSystem,
    WeatherProvider,
    WeatherSnapshot,
)

__all__ = [
    "DEFAULT_LOCATIONS",
    "BoardState",
    "FetchOutcome",
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "Location",
    "OpenWeatherProvider",
    "PrecipitationLikelihood",
    "UnitPreference",
    "UnitSystem",
    "WeatherAggregator",
    "WeatherBoard",
    "WeatherProvider",
    "WeatherSnapshot",
]
