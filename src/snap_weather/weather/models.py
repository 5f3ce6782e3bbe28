"""Typed models for tracked locations, provider payloads and weather snapshots."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Location(BaseModel):
    """A tracked (name, region) pair, e.g. ("San Francisco", "CA")."""

    model_config = ConfigDict(frozen=True)

    name: str
    region: str

    @field_validator("name", "region")
    @classmethod
    def strip_required(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("must not be empty")
        return stripped

    @property
    def display_label(self) -> str:
        return f"{self.name}, {self.region}"

    def query(self, country_code: str = "US") -> str:
        """Provider query string; OpenWeatherMap expects a country, not a state."""
        return f"{self.name},{country_code}"


class WeatherCondition(BaseModel):
    """One entry of the provider's `weather` array."""

    code: int = Field(alias="id")
    group: str = Field(alias="main")
    description: str
    icon_code: str = Field(alias="icon")


class MainReadings(BaseModel):
    """Temperature and atmospheric block (`main`)."""

    current_temp: float = Field(alias="temp")
    min_temp: float = Field(alias="temp_min")
    max_temp: float = Field(alias="temp_max")
    humidity_pct: int = Field(alias="humidity")
    pressure: int | None = None


class CloudCover(BaseModel):
    coverage_pct: int = Field(default=0, alias="all")


class RawWeatherPayload(BaseModel):
    """Current-weather response body as decoded from the provider.

    Only the fields the mapping needs are declared; anything else in the body
    is ignored. The first element of `conditions` is authoritative.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    location_label: str = Field(alias="name")
    main: MainReadings
    conditions: list[WeatherCondition] = Field(default_factory=list, alias="weather")
    clouds: CloudCover = Field(default_factory=CloudCover)


class PrecipitationLikelihood(str, Enum):
    """Ordered precipitation buckets derived from a raw score."""

    VERY_LOW = "Very Low"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    VERY_HIGH = "Very High"


class WeatherSnapshot(BaseModel):
    """Domain weather data for one location from one fetch."""

    model_config = ConfigDict(frozen=True)

    location_display_label: str
    current_temp: float
    high_temp: float
    low_temp: float
    condition_description: str
    icon_url: str
    humidity_pct: int
    precipitation_likelihood: PrecipitationLikelihood
    unit_symbol: str
