"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from dst800cal import CalibrationStore, MemoryBackend
from dst800cal.bus import MockBusDriver

DEVICE_ADDRESS = 35
FIXED_TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def device_address() -> int:
    """Bus address of the DST800 under test."""
    return DEVICE_ADDRESS


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_TIME."""
    return lambda: FIXED_TIME


@pytest.fixture
def bus() -> MockBusDriver:
    """Fresh recording bus."""
    return MockBusDriver()


@pytest.fixture
def make_store():
    """Factory for stores backed by an in-memory options document."""

    def _make(options: dict[str, Any] | None = None) -> CalibrationStore:
        return CalibrationStore(MemoryBackend(options))

    return _make
