"""Weather provider integration, payload models and derived metrics."""

from .base import WeatherProvider
from .models import (
    Location,
    PrecipitationLikelihood,
    RawWeatherPayload,
    WeatherCondition,
    WeatherSnapshot,
)
from .openweather import OpenWeatherProvider
from .units import UnitSystem, convert_snapshot

__all__ = [
    "Location",
    "OpenWeatherProvider",
    "PrecipitationLikelihood",
    "RawWeatherPayload",
    "UnitSystem",
    "WeatherCondition",
    "WeatherProvider",
    "WeatherSnapshot",
    "convert_snapshot",
]
