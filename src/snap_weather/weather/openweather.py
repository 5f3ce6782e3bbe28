"""OpenWeatherMap current-weather provider implementation."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..config import Settings
from ..exceptions import LocationNotFoundError, WeatherProviderError
from ..redaction import sanitize_text
from .base import WeatherProvider
from .models import RawWeatherPayload


class OpenWeatherProvider(WeatherProvider):
    """Fetches current conditions from api.openweathermap.org (`/weather`)."""

    provider_name = "openweathermap"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger or logging.getLogger("snap_weather.weather.openweather")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.weather_timeout_seconds,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> OpenWeatherProvider:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def icon_url_for(self, icon_code: str) -> str:
        return f"{self.settings.icon_base_url}/{icon_code}@2x.png"

    async def fetch_current(self, location_query: str, unit_system_code: str) -> RawWeatherPayload:
        """Fetch and decode current conditions for a `"City,CC"` query."""
        url = f"{self.settings.base_url}/weather"
        params = {
            "q": location_query,
            "appid": self.settings.openweather_api_key,
            "units": unit_system_code,
        }
        payload = await self._request_json(url, params=params, query=location_query)
        return self._decode_payload(payload, query=location_query)

    async def _request_json(
        self, url: str, *, params: dict[str, str], query: str
    ) -> dict[str, Any]:
        try:
            response = await self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            if status == 404:
                raise LocationNotFoundError(
                    f"OpenWeatherMap has no location matching {query!r}."
                ) from exc
            raise WeatherProviderError(
                f"OpenWeatherMap request for {query!r} failed with status {status}: "
                f"{sanitize_text(exc.response.text[:300])}"
            ) from exc
        except httpx.HTTPError as exc:
            raise WeatherProviderError(
                f"OpenWeatherMap request for {query!r} failed "
                f"({type(exc).__name__}): {sanitize_text(str(exc))}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherProviderError(
                f"OpenWeatherMap returned non-JSON response for {query!r}."
            ) from exc

        if not isinstance(payload, dict):
            raise WeatherProviderError(
                f"OpenWeatherMap returned unexpected payload type "
                f"{type(payload).__name__} for {query!r}."
            )
        # The API reports some errors in the body with a 200 status.
        code = str(payload.get("cod", "200"))
        if code == "404":
            raise LocationNotFoundError(f"OpenWeatherMap has no location matching {query!r}.")
        if code != "200":
            message = sanitize_text(str(payload.get("message", "unknown error")))
            raise WeatherProviderError(
                f"OpenWeatherMap returned error code {code} for {query!r}: {message}"
            )
        return payload

    def _decode_payload(self, payload: dict[str, Any], *, query: str) -> RawWeatherPayload:
        try:
            return RawWeatherPayload.model_validate(payload)
        except ValidationError as exc:
            self.logger.debug("Payload for %s failed validation: %s", query, exc)
            raise WeatherProviderError(
                f"OpenWeatherMap payload for {query!r} did not match the expected shape: "
                f"{exc.error_count()} validation error(s)."
            ) from exc
