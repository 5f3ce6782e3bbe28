"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherProviderError(Exception):
    """Raised when weather provider requests or payload decoding fail."""


class LocationNotFoundError(WeatherProviderError):
    """Raised when the provider answers but knows no matching location."""


class AggregationError(Exception):
    """Raised when a bulk weather fetch cannot be dispatched at all."""


class PreferenceStoreError(Exception):
    """Raised when reading or writing stored preferences fails."""


class JournalError(Exception):
    """Raised when writing to journal files fails."""
