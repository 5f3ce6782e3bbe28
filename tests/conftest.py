"""Pytest fixtures for snap_weather tests."""

from __future__ import annotations

from typing import Any

import pytest

from fakes import FakeWeatherProvider, make_payload


@pytest.fixture
def payload_factory() -> Any:
    return make_payload


@pytest.fixture
def fake_provider_factory() -> Any:
    return FakeWeatherProvider
