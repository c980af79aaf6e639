"""Encoders for DST800 calibration commands.

Each function builds one ProprietaryCommandMessage. All of them check the
device address first and raise MissingDeviceAddressError before anything is
built, so a failed call never leaves a partial message behind.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from ..exceptions import EncodeError, MissingDeviceAddressError
from ..models.command import FunctionCode, Parameter, ProprietaryCommandMessage
from .schema import (
    ACCESS_FORMAT,
    ACCESS_FORMAT_CODE,
    ACCESS_LEVEL,
    ACCESS_LEVEL_FIELD,
    ACCESS_SEED,
    ACCESS_SEED_FIELD,
    DEPTH_OFFSET,
    INDUSTRY_GROUP,
    INDUSTRY_MARINE,
    MANUFACTURER_AIRMAR,
    MANUFACTURER_CODE,
    PGN_ACCESS_LEVEL,
    PGN_AIRMAR_PROPRIETARY,
    PGN_SPEED_PULSE_COUNT,
    PGN_WATER_DEPTH,
    PROPRIETARY_ID,
    PROPRIETARY_ID_CALIBRATE_SPEED,
    PROPRIETARY_ID_CALIBRATE_TEMPERATURE,
    STW_FACTORY_DEFAULTS,
    STW_FIRST_POINT_INDEX,
    STW_FREQUENCY,
    STW_POINT_COUNT,
    STW_SPEED,
    TEMPERATURE_OFFSET,
    TEMPERATURE_SENSOR,
    TEMPERATURE_SENSOR_ONBOARD,
    ParameterField,
)

# Largest curve whose command still fits one fast-packet payload
MAX_STW_POINTS = 34


def _require_address(address: int | None, operation: str) -> int:
    if address is None:
        raise MissingDeviceAddressError(operation)
    return address


def _parameter(field: ParameterField, value: float) -> Parameter:
    return Parameter(
        index=field.index, data=field.encode(value), value=field.scaled(value), name=field.name
    )


def _airmar_envelope(*extra: Parameter) -> list[Parameter]:
    return [
        _parameter(MANUFACTURER_CODE, MANUFACTURER_AIRMAR),
        _parameter(INDUSTRY_GROUP, INDUSTRY_MARINE),
        *extra,
    ]


def encode_depth_offset(address: int | None, meters: float) -> ProprietaryCommandMessage:
    """Command PGN 128267 parameter 3 (Offset) to ``meters``.

    The offset goes out in millimeters as a signed 16-bit value.

    Args:
        address: Device bus address
        meters: Positive for water surface offset, negative for keel offset

    Raises:
        MissingDeviceAddressError: If address is None
        EncodeError: If the offset does not fit in 16 bits of mm
    """
    destination = _require_address(address, "set depth offset")
    return ProprietaryCommandMessage(
        destination=destination,
        function_code=FunctionCode.COMMAND,
        commanded_pgn=PGN_WATER_DEPTH,
        parameters=[_parameter(DEPTH_OFFSET, meters)],
    )


def encode_access_level_unlock(address: int | None) -> ProprietaryCommandMessage:
    """Command PGN 65287 to access level 1 with the fixed seed."""
    destination = _require_address(address, "unlock access level")
    return ProprietaryCommandMessage(
        destination=destination,
        function_code=FunctionCode.COMMAND,
        commanded_pgn=PGN_ACCESS_LEVEL,
        parameters=_airmar_envelope(
            _parameter(ACCESS_FORMAT, ACCESS_FORMAT_CODE),
            _parameter(ACCESS_LEVEL_FIELD, ACCESS_LEVEL),
            _parameter(ACCESS_SEED_FIELD, ACCESS_SEED),
        ),
    )


def encode_speed_pulse_request(
    address: int | None, interval_seconds: float
) -> ProprietaryCommandMessage:
    """Request PGN 65409 every ``interval_seconds``.

    Raises:
        MissingDeviceAddressError: If address is None
        EncodeError: If the interval is negative or too long
    """
    destination = _require_address(address, "enable speed pulse reporting")
    interval_ms = math.floor(interval_seconds * 1000 + 0.5)
    if interval_ms < 0 or interval_ms >= 0xFFFFFFFE:
        raise EncodeError(f"Transmission interval out of range: {interval_seconds}s")

    return ProprietaryCommandMessage(
        destination=destination,
        function_code=FunctionCode.REQUEST,
        commanded_pgn=PGN_SPEED_PULSE_COUNT,
        transmission_interval=interval_ms,
        transmission_interval_offset=0,
        parameters=_airmar_envelope(),
    )


def encode_stw_curve_request(address: int | None) -> ProprietaryCommandMessage:
    """Request the stored STW calibration curve (Proprietary ID 41)."""
    destination = _require_address(address, "request STW curve")
    return ProprietaryCommandMessage(
        destination=destination,
        function_code=FunctionCode.REQUEST,
        commanded_pgn=PGN_AIRMAR_PROPRIETARY,
        parameters=_airmar_envelope(_parameter(PROPRIETARY_ID, PROPRIETARY_ID_CALIBRATE_SPEED)),
    )


def encode_stw_curve(
    address: int | None, curve: Sequence[tuple[float, float]]
) -> ProprietaryCommandMessage:
    """Command a new STW calibration curve.

    Points are sent in the order given, each as a pair of parameters
    starting at index 6: frequency in 0.1 Hz, then speed in 0.01 m/s.

    Args:
        address: Device bus address
        curve: (pulse frequency Hz, speed m/s) pairs

    Raises:
        MissingDeviceAddressError: If address is None
        EncodeError: If the curve is empty, too long or has out-of-range values
    """
    destination = _require_address(address, "set STW curve")
    if not curve:
        raise EncodeError("STW calibration curve has no data points")
    if len(curve) > MAX_STW_POINTS:
        raise EncodeError(
            f"STW calibration curve has {len(curve)} points, at most {MAX_STW_POINTS} allowed"
        )

    data_points: list[Parameter] = []
    for i, (frequency, speed) in enumerate(curve):
        index = STW_FIRST_POINT_INDEX + 2 * i
        data_points.append(_parameter(STW_FREQUENCY.at(index), frequency))
        data_points.append(_parameter(STW_SPEED.at(index + 1), speed))

    parameters = _airmar_envelope(
        _parameter(PROPRIETARY_ID, PROPRIETARY_ID_CALIBRATE_SPEED),
        _parameter(STW_POINT_COUNT, len(curve)),
        *data_points,
    )
    return ProprietaryCommandMessage(
        destination=destination,
        function_code=FunctionCode.COMMAND,
        commanded_pgn=PGN_AIRMAR_PROPRIETARY,
        parameters=parameters,
    )


def encode_stw_restore_defaults(address: int | None) -> ProprietaryCommandMessage:
    """Command the factory default STW curve (point count 0xFE, no points)."""
    destination = _require_address(address, "restore STW defaults")
    return ProprietaryCommandMessage(
        destination=destination,
        function_code=FunctionCode.COMMAND,
        commanded_pgn=PGN_AIRMAR_PROPRIETARY,
        parameters=_airmar_envelope(
            _parameter(PROPRIETARY_ID, PROPRIETARY_ID_CALIBRATE_SPEED),
            _parameter(STW_POINT_COUNT, STW_FACTORY_DEFAULTS),
        ),
    )


def encode_temperature_offset_request(address: int | None) -> ProprietaryCommandMessage:
    """Request the onboard water temperature sensor calibration (Proprietary ID 42)."""
    destination = _require_address(address, "request temperature offset")
    return ProprietaryCommandMessage(
        destination=destination,
        function_code=FunctionCode.REQUEST,
        commanded_pgn=PGN_AIRMAR_PROPRIETARY,
        parameters=_airmar_envelope(
            _parameter(PROPRIETARY_ID, PROPRIETARY_ID_CALIBRATE_TEMPERATURE),
            _parameter(TEMPERATURE_SENSOR, TEMPERATURE_SENSOR_ONBOARD),
        ),
    )


def encode_temperature_offset(address: int | None, offset: float) -> ProprietaryCommandMessage:
    """Command the onboard water temperature offset, passed through unscaled."""
    destination = _require_address(address, "set temperature offset")
    return ProprietaryCommandMessage(
        destination=destination,
        function_code=FunctionCode.COMMAND,
        commanded_pgn=PGN_AIRMAR_PROPRIETARY,
        parameters=_airmar_envelope(
            _parameter(PROPRIETARY_ID, PROPRIETARY_ID_CALIBRATE_TEMPERATURE),
            _parameter(TEMPERATURE_SENSOR, TEMPERATURE_SENSOR_ONBOARD),
            _parameter(TEMPERATURE_OFFSET, offset),
        ),
    )
