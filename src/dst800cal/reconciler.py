"""Folding inbound DST800 traffic back into the calibration state.

ResponseReconciler.handle() is registered as the bus RX callback. It looks at
one message at a time and never depends on earlier messages; the only thing
it shares with the rest of the package is the CalibrationStore.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any

from .bus.driver import BusDriver
from .codec.curve import CurvePoint
from .codec.decoder import decode_inbound
from .codec.schema import CALIBRATE_DEPTH, CALIBRATE_SPEED, CALIBRATE_TEMPERATURE
from .models.base import InboundMessage
from .models.inbound import (
    AirmarProprietary,
    GroupFunction,
    SpeedCalibrationPoint,
    SpeedPulseCount,
    WaterDepth,
)
from .store import CalibrationStore

_logger = logging.getLogger(__name__)

PULSE_RATE_PATH = "navigation.speedSensorPulseRate"

AckObserver = Callable[[GroupFunction], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResponseReconciler:
    """Classifies inbound messages and applies them to the calibration state.

    Attributes:
        last_reports: Most recent Airmar calibration report per proprietary ID,
            kept for diagnostics only
    """

    def __init__(
        self,
        store: CalibrationStore,
        bus: BusDriver,
        *,
        match_source: bool = True,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.store = store
        self.bus = bus
        self._match_source = match_source
        self._clock = clock
        self._ack_observers: list[AckObserver] = []
        self.last_reports: dict[str, AirmarProprietary] = {}

    def add_ack_observer(self, observer: AckObserver) -> None:
        self._ack_observers.append(observer)

    def remove_ack_observer(self, observer: AckObserver) -> None:
        if observer in self._ack_observers:
            self._ack_observers.remove(observer)

    def handle(self, raw: Mapping[str, Any]) -> None:
        """Process one inbound message.

        Errors are logged and swallowed so one bad message cannot stop the
        listener.
        """
        try:
            message = decode_inbound(raw)
            if message is None or not self._from_device(message):
                return

            if isinstance(message, WaterDepth):
                self._on_water_depth(message)
            elif isinstance(message, SpeedPulseCount):
                self._on_speed_pulse_count(message)
            elif isinstance(message, GroupFunction):
                self._on_group_function(message)
            elif isinstance(message, AirmarProprietary):
                self._on_airmar_proprietary(message)
        except Exception:
            _logger.exception("Failed to handle inbound message: %r", raw)

    def _from_device(self, message: InboundMessage) -> bool:
        address = self.store.state.device_address
        if not self._match_source or address is None or message.src is None:
            return True
        return message.src == address

    def _on_water_depth(self, message: WaterDepth) -> None:
        # Depth is broadcast continuously; only the first one after a request counts
        if not self.store.state.depth_offset.request_value:
            return
        if message.offset is None:
            _logger.debug("Depth broadcast from %s carries no offset", message.src)
            return

        _logger.info("Reading depth offset: %s m", message.offset)
        with self.store.mutate() as state:
            state.depth_offset.value = message.offset
            state.depth_offset.request_value = False

    def _on_speed_pulse_count(self, message: SpeedPulseCount) -> None:
        self.bus.publish_signal(PULSE_RATE_PATH, message.pulse_rate, self._clock())

    def _on_group_function(self, message: GroupFunction) -> None:
        if not message.is_acknowledge:
            return

        _logger.debug(
            "Acknowledge Group Function for PGN %s: %s",
            message.commanded_pgn,
            message.model_dump(by_alias=True),
        )
        for observer in list(self._ack_observers):
            observer(message)

    def _on_airmar_proprietary(self, message: AirmarProprietary) -> None:
        if not message.is_airmar:
            return

        if message.proprietary_id == CALIBRATE_SPEED:
            self.last_reports[CALIBRATE_SPEED] = message
            points = [
                SpeedCalibrationPoint.model_validate(entry) for entry in message.parameters
            ]
            curve = [CurvePoint(p.frequency_hz, p.speed_mps) for p in points]
            _logger.info("Received STW calibration curve with %d points", len(curve))
            with self.store.mutate() as state:
                state.speed_through_water.set_curve(curve)
        elif message.proprietary_id in (CALIBRATE_DEPTH, CALIBRATE_TEMPERATURE):
            # Reported values are not written back into the settable fields
            self.last_reports[str(message.proprietary_id)] = message
            _logger.debug(
                "DST800 %s response: %s",
                message.proprietary_id,
                message.model_dump(by_alias=True),
            )
