"""Tests for the mock bus driver and session configuration."""

from __future__ import annotations

import logging

import pytest

from dst800cal.bus import BusDriver, MockBusDriver, SessionConfig


class TestSessionConfig:
    """Tests for SessionConfig validation."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = SessionConfig()

        assert config.settle_delay == 1.0
        assert config.await_unlock_ack is False
        assert config.priority == 3
        assert config.source_address == 0
        assert config.match_source is True

    def test_custom_config(self) -> None:
        """Test custom configuration."""
        config = SessionConfig(
            settle_delay=2.5,
            await_unlock_ack=True,
            priority=6,
            source_address=12,
            match_source=False,
        )

        assert config.settle_delay == 2.5
        assert config.await_unlock_ack is True
        assert config.priority == 6
        assert config.source_address == 12
        assert config.match_source is False

    def test_negative_delay_raises(self) -> None:
        """Test that a negative settle delay raises ValueError."""
        with pytest.raises(ValueError, match="settle_delay must be >= 0"):
            SessionConfig(settle_delay=-1.0)

    def test_invalid_priority_raises(self) -> None:
        """Test that priorities outside 0-7 raise ValueError."""
        with pytest.raises(ValueError, match="priority must be 0-7"):
            SessionConfig(priority=8)

        with pytest.raises(ValueError, match="priority must be 0-7"):
            SessionConfig(priority=-1)

    def test_invalid_source_raises(self) -> None:
        """Test that source addresses outside 0-255 raise ValueError."""
        with pytest.raises(ValueError, match="source_address must be 0-255"):
            SessionConfig(source_address=256)


class TestMockBusDriver:
    """Tests for MockBusDriver."""

    def test_is_bus_driver(self) -> None:
        """Test the mock implements the driver interface."""
        assert isinstance(MockBusDriver(), BusDriver)

    def test_records_sent_lines(self) -> None:
        """Test raw lines are recorded in order."""
        bus = MockBusDriver()
        bus.send_raw("2024-05-01T12:30:00.000Z,3,126208,0,35,3,01,02,03")
        bus.send_raw("2024-05-01T12:30:00.000Z,3,126208,0,35,1,ff")

        assert len(bus.sent) == 2
        assert bus.sent_payloads() == [["01", "02", "03"], ["ff"]]

    def test_records_signals(self, fixed_clock) -> None:
        """Test published signals are recorded."""
        bus = MockBusDriver()
        bus.publish_signal("navigation.speedSensorPulseRate", 12.5, fixed_clock())

        assert bus.signals == [("navigation.speedSensorPulseRate", 12.5, fixed_clock())]

    def test_deliver_to_callbacks(self) -> None:
        """Test inbound messages reach every attached callback."""
        bus = MockBusDriver()
        first, second = [], []
        bus.attach_rx_callback(first.append)
        bus.attach_rx_callback(second.append)

        bus.deliver({"pgn": 128267, "fields": {}})

        assert first == second == [{"pgn": 128267, "fields": {}}]

    def test_detach(self) -> None:
        """Test detached callbacks no longer receive messages."""
        bus = MockBusDriver()
        received = []
        bus.attach_rx_callback(received.append)
        bus.detach_rx_callback(received.append)
        bus.detach_rx_callback(received.append)

        bus.deliver({"pgn": 128267})

        assert received == []
        assert bus.rx_callbacks == []

    def test_failing_callback(self, caplog) -> None:
        """Test a failing callback is logged and does not stop delivery."""
        bus = MockBusDriver()
        received = []

        def broken(message) -> None:
            raise RuntimeError("callback broke")

        bus.attach_rx_callback(broken)
        bus.attach_rx_callback(received.append)

        with caplog.at_level(logging.ERROR, logger="dst800cal.bus.mock"):
            bus.deliver({"pgn": 65409})

        assert received == [{"pgn": 65409}]
        assert "RX callback error" in caplog.text
