"""Provider-agnostic weather interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import RawWeatherPayload


class WeatherProvider(ABC):
    """Base contract for current-conditions providers used by the aggregator."""

    @abstractmethod
    async def fetch_current(self, location_query: str, unit_system_code: str) -> RawWeatherPayload:
        """Fetch current conditions, raising WeatherProviderError on any failure."""

    @abstractmethod
    def icon_url_for(self, icon_code: str) -> str:
        """Build the full icon URL for a provider icon code."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release provider resources."""
