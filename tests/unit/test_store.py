"""Unit tests for calibration state and its persistence."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from dst800cal import CalibrationParseError, CalibrationState, CalibrationStore, StoreError
from dst800cal.store import JsonFileBackend, MemoryBackend


class TestCalibrationState:
    """Test CalibrationState."""

    def test_defaults(self) -> None:
        """Test an empty options document gives no pending work."""
        state = CalibrationState.from_options(None)

        assert state.device_address is None
        assert state.depth_offset.set_value is False
        assert state.speed_pulse_count.enable is False
        assert state.speed_pulse_count.interval == 2.0
        assert state.speed_through_water.value is None
        assert state.temperature_offset.request_value is False

    def test_from_options(self) -> None:
        """Test nested option keys map onto sections."""
        state = CalibrationState.from_options(
            {
                "instance": 35,
                "depth_offset": {"set_value": True, "value": -1.5},
                "speed_through_water": {"set_value": True, "value": "10 1\n20 2"},
            }
        )

        assert state.device_address == 35
        assert state.depth_offset.value == -1.5
        assert state.speed_through_water.curve == [(10.0, 1.0), (20.0, 2.0)]

    def test_unknown_keys_preserved(self) -> None:
        """Test option keys this package does not know survive a round trip."""
        state = CalibrationState.from_options({"instance": 35, "enabled": True})

        assert state.to_options()["enabled"] is True

    def test_to_options_omits_unset_values(self) -> None:
        """Test None values are not written back."""
        options = CalibrationState.from_options({"instance": 35}).to_options()

        assert "value" not in options["depth_offset"]
        assert options["instance"] == 35

    def test_invalid_instance(self) -> None:
        """Test bus addresses are limited to 0-255."""
        with pytest.raises(ValidationError):
            CalibrationState.from_options({"instance": 300})

    def test_invalid_interval_loads(self) -> None:
        """Test a non-positive interval loads but cannot be used."""
        state = CalibrationState.from_options({"speed_pulse_count": {"interval": 0}})

        assert state.speed_pulse_count.interval == 0
        with pytest.raises(ValueError, match="must be positive"):
            state.speed_pulse_count.seconds

    def test_blank_interval_uses_default(self) -> None:
        """Test a blank interval falls back to two seconds."""
        state = CalibrationState.from_options({"speed_pulse_count": {"interval": ""}})

        assert state.speed_pulse_count.seconds == 2.0

    def test_values_keep_stored_type(self) -> None:
        """Test string and number values are kept as the host stored them."""
        state = CalibrationState.from_options(
            {
                "depth_offset": {"value": -1.5},
                "temperature_offset": {"value": "0.5"},
            }
        )

        assert state.depth_offset.value == -1.5
        assert state.temperature_offset.value == "0.5"
        assert state.temperature_offset.kelvin == 0.5

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_temperature_is_unset(self, value: str) -> None:
        """Test a blank temperature offset reads as not defined."""
        state = CalibrationState.from_options({"temperature_offset": {"value": value}})

        assert state.temperature_offset.kelvin is None

    @pytest.mark.parametrize("value", ["1,5", "warm", "nan"])
    def test_non_numeric_values_load(self, value) -> None:
        """Test a non-numeric value loads and fails only when converted."""
        state = CalibrationState.from_options(
            {"instance": 35, "temperature_offset": {"set_value": True, "value": value}}
        )

        assert state.temperature_offset.set_value is True
        with pytest.raises(ValueError, match="temperature_offset.value"):
            state.temperature_offset.kelvin

    def test_curve_missing(self) -> None:
        """Test an unset curve cannot be parsed."""
        with pytest.raises(CalibrationParseError):
            CalibrationState().speed_through_water.curve

    def test_set_curve(self) -> None:
        """Test points are stored as operator text."""
        state = CalibrationState()
        state.speed_through_water.set_curve([(2.5, 0.5), (10.0, 2.06)])

        assert state.speed_through_water.value == "2.5 0.5\n10 2.06"


class TestMemoryBackend:
    """Test MemoryBackend."""

    def test_copies(self) -> None:
        """Test loaded and saved documents are independent copies."""
        original = {"instance": 35, "depth_offset": {"value": 1.0}}
        backend = MemoryBackend(original)

        loaded = backend.load()
        loaded["depth_offset"]["value"] = 2.0

        assert backend.options["depth_offset"]["value"] == 1.0
        assert original["depth_offset"]["value"] == 1.0

    def test_save_count(self) -> None:
        """Test saves are counted."""
        backend = MemoryBackend()
        backend.save({"instance": 1})
        backend.save({"instance": 2})

        assert backend.save_count == 2
        assert backend.options == {"instance": 2}


class TestJsonFileBackend:
    """Test JsonFileBackend."""

    def test_missing_file(self, tmp_path) -> None:
        """Test a missing file loads as an empty document."""
        assert JsonFileBackend(tmp_path / "missing.json").load() == {}

    def test_save_and_load(self, tmp_path) -> None:
        """Test a saved document reads back unchanged."""
        path = tmp_path / "dst800.json"
        backend = JsonFileBackend(path)

        backend.save({"instance": 35, "depth_offset": {"value": -1.5}})

        assert json.loads(path.read_text()) == {"instance": 35, "depth_offset": {"value": -1.5}}
        assert backend.load() == {"instance": 35, "depth_offset": {"value": -1.5}}
        assert not (tmp_path / "dst800.json.tmp").exists()

    def test_invalid_json(self, tmp_path) -> None:
        """Test unreadable JSON raises StoreError."""
        path = tmp_path / "bad.json"
        path.write_text("{instance: 35")

        with pytest.raises(StoreError, match="Could not read"):
            JsonFileBackend(path).load()

    def test_not_an_object(self, tmp_path) -> None:
        """Test a JSON document that is not an object raises StoreError."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(StoreError, match="JSON object"):
            JsonFileBackend(path).load()


class TestCalibrationStore:
    """Test CalibrationStore."""

    def test_loads_from_backend(self, make_store) -> None:
        """Test state is built from the backend document."""
        store = make_store({"instance": 35})

        assert store.state.device_address == 35

    def test_invalid_options(self) -> None:
        """Test invalid options raise StoreError."""
        with pytest.raises(StoreError, match="Invalid calibration options"):
            CalibrationStore(MemoryBackend({"instance": "thirty-five"}))

    def test_mutate_saves(self, make_store) -> None:
        """Test leaving the mutate block saves the whole document."""
        store = make_store({"instance": 35, "depth_offset": {"set_value": True, "value": 1.0}})

        with store.mutate() as state:
            state.depth_offset.set_value = False

        assert store.backend.save_count == 1
        assert store.backend.options["depth_offset"]["set_value"] is False
        assert store.backend.options["depth_offset"]["value"] == 1.0

    def test_mutate_keeps_string_values(self, make_store) -> None:
        """Test a string temperature offset is saved back as the same string."""
        options = {"instance": 35, "temperature_offset": {"set_value": True, "value": "0.5"}}
        store = make_store(options)

        with store.mutate() as state:
            state.temperature_offset.set_value = False

        assert store.backend.options["temperature_offset"] == {
            "request_value": False,
            "set_value": False,
            "value": "0.5",
        }

    def test_mutate_not_saved_on_error(self, make_store) -> None:
        """Test nothing is saved when the block raises."""
        store = make_store({"instance": 35})

        with pytest.raises(RuntimeError):
            with store.mutate() as state:
                state.depth_offset.value = 2.0
                raise RuntimeError("boom")

        assert store.backend.save_count == 0

    def test_observers(self, make_store) -> None:
        """Test observers see each save."""
        store = make_store({"instance": 35})
        seen = []
        store.add_observer(lambda state: seen.append(state.depth_offset.value))

        with store.mutate() as state:
            state.depth_offset.value = 0.5

        assert seen == [0.5]

    def test_failing_observer(self, make_store, caplog) -> None:
        """Test a failing observer is logged and does not stop the others."""
        store = make_store({"instance": 35})
        seen = []

        def broken(state: CalibrationState) -> None:
            raise RuntimeError("observer broke")

        store.add_observer(broken)
        store.add_observer(seen.append)

        with caplog.at_level(logging.ERROR, logger="dst800cal.store"):
            store.save()

        assert seen == [store.state]
        assert "Store observer failed" in caplog.text

    def test_remove_observer(self, make_store) -> None:
        """Test removed observers are not called."""
        store = make_store({"instance": 35})
        seen = []
        store.add_observer(seen.append)
        store.remove_observer(seen.append)

        store.save()

        assert seen == []

    def test_persists_through_file(self, tmp_path) -> None:
        """Test a mutation reaches the JSON file."""
        path = tmp_path / "dst800.json"
        path.write_text(json.dumps({"instance": 35, "temperature_offset": {"set_value": True}}))
        store = CalibrationStore(JsonFileBackend(path))

        with store.mutate() as state:
            state.temperature_offset.set_value = False

        assert json.loads(path.read_text())["temperature_offset"]["set_value"] is False
