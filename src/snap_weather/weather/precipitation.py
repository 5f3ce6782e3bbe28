"""Precipitation likelihood heuristic from condition text, humidity and cloud cover."""

from __future__ import annotations

import math

from .models import PrecipitationLikelihood

_WET_KEYWORDS = ("rain", "snow", "thunderstorm")

# Upper bounds (exclusive) for each bucket; anything above the last is VERY_HIGH.
_BUCKETS: tuple[tuple[int, PrecipitationLikelihood], ...] = (
    (20, PrecipitationLikelihood.VERY_LOW),
    (40, PrecipitationLikelihood.LOW),
    (60, PrecipitationLikelihood.MEDIUM),
    (80, PrecipitationLikelihood.HIGH),
)


def score(description: str, humidity_pct: int, cloud_coverage_pct: int) -> int:
    """Weighted score from cloud cover and humidity, adjusted by keywords.

    The result is not clamped to 0..100: a clear, dry reading can
    go negative and a saturated thunderstorm can exceed 100.
    """
    value = math.floor(0.3 * cloud_coverage_pct + 0.5 * humidity_pct)
    text = description.lower()
    if any(keyword in text for keyword in _WET_KEYWORDS):
        value += 20
    if "drizzle" in text:
        value += 10
    if "clear" in text:
        value -= 20
    return value


def bucket(value: int) -> PrecipitationLikelihood:
    for upper, likelihood in _BUCKETS:
        if value < upper:
            return likelihood
    return PrecipitationLikelihood.VERY_HIGH


def estimate(description: str, humidity_pct: int, cloud_coverage_pct: int) -> PrecipitationLikelihood:
    """Bucketed likelihood for one reading."""
    return bucket(score(description, humidity_pct, cloud_coverage_pct))
