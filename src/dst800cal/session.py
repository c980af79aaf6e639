"""Calibration session: runs pending calibration work against the device.

On start the session attaches a ResponseReconciler to the bus and then walks
the pending flags in a fixed order:

1. depth offset commit
2. speed pulse reporting enable
3. STW curve request
4. STW restore defaults
5. STW curve commit
6. temperature offset request
7. temperature offset commit

Anything touching STW or temperature calibration is preceded by an access
level unlock and a settling delay. Each completed step clears its flag and
saves the options straight away, so an interrupted start leaves at most one
stale flag behind. A step that cannot run (no device address, a missing or
non-numeric value, a malformed curve) is logged and skipped with its flag left
set; the remaining steps still run.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timezone

from .bus.config import SessionConfig
from .bus.driver import BusDriver
from .codec.encoder import (
    encode_access_level_unlock,
    encode_depth_offset,
    encode_speed_pulse_request,
    encode_stw_curve,
    encode_stw_curve_request,
    encode_stw_restore_defaults,
    encode_temperature_offset,
    encode_temperature_offset_request,
)
from .codec.schema import PGN_ACCESS_LEVEL
from .exceptions import CalibrationParseError, EncodeError
from .models.command import ProprietaryCommandMessage
from .models.inbound import GroupFunction
from .reconciler import ResponseReconciler
from .store import CalibrationStore

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CalibrationSession:
    """Owns the calibration state for the lifetime of the plugin.

    Examples:
        ```python
        store = CalibrationStore(JsonFileBackend("dst800.json"))
        session = CalibrationSession(bus, store)
        await session.start()   # runs pending work, keeps listening
        ...
        session.stop()
        ```
    """

    def __init__(
        self,
        bus: BusDriver,
        store: CalibrationStore,
        config: SessionConfig | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.bus = bus
        self.store = store
        self.config = config if config is not None else SessionConfig()
        self._clock = clock
        self.reconciler = ResponseReconciler(
            store, bus, match_source=self.config.match_source, clock=clock
        )
        self._listening = False

    async def start(self) -> None:
        """Start listening and run all pending calibration work once."""
        _logger.debug("DST800 calibration session started")
        _logger.debug("Options: %s", self.store.state.to_options())

        if not self._listening:
            self.bus.attach_rx_callback(self.reconciler.handle)
            self._listening = True

        await self.run_pending()

    def stop(self) -> None:
        """Stop listening to the bus. Pending work already sent is not undone."""
        if self._listening:
            self.bus.detach_rx_callback(self.reconciler.handle)
            self._listening = False
        _logger.debug("DST800 calibration session stopped")

    async def run_pending(self) -> None:
        state = self.store.state

        if state.depth_offset.set_value:
            self.commit_depth_offset()
        if state.speed_pulse_count.enable:
            self.enable_speed_pulse_reporting()
        if state.speed_through_water.request_value:
            await self.request_stw_curve()
        if state.speed_through_water.restore_defaults:
            await self.restore_stw_defaults()
        if state.speed_through_water.set_value:
            await self.commit_stw_curve()
        if state.temperature_offset.request_value:
            await self.request_temperature_offset()
        if state.temperature_offset.set_value:
            await self.commit_temperature_offset()

    def commit_depth_offset(self) -> bool:
        try:
            offset = self.store.state.depth_offset.meters
        except ValueError as e:
            _logger.error("Depth offset not sent: %s", e)
            return False
        if offset is None:
            _logger.error("Depth offset value is not defined; not sent")
            return False
        if not self._send_encoded(encode_depth_offset, offset):
            return False

        _logger.info("Depth offset set to %s m", offset)
        with self.store.mutate() as s:
            s.depth_offset.set_value = False
        return True

    def enable_speed_pulse_reporting(self) -> bool:
        # Standing setting: re-sent on every start, flag stays set
        try:
            interval = self.store.state.speed_pulse_count.seconds
        except ValueError as e:
            _logger.error("Speed pulse count reporting not enabled: %s", e)
            return False
        if not self._send_encoded(encode_speed_pulse_request, interval):
            return False
        _logger.info("Speed pulse count transmit interval set to %ss", interval)
        return True

    async def request_stw_curve(self) -> bool:
        if not await self._unlock_and_send(encode_stw_curve_request):
            return False
        _logger.info("Requested STW calibration curve")
        with self.store.mutate() as s:
            s.speed_through_water.request_value = False
        return True

    async def restore_stw_defaults(self) -> bool:
        if not await self._unlock_and_send(encode_stw_restore_defaults):
            return False
        _logger.info("Restored factory default STW calibration curve")
        with self.store.mutate() as s:
            s.speed_through_water.restore_defaults = False
        return True

    async def commit_stw_curve(self) -> bool:
        try:
            curve = self.store.state.speed_through_water.curve
        except CalibrationParseError as e:
            _logger.error("STW calibration curve not sent: %s", e)
            return False

        if not await self._unlock_and_send(encode_stw_curve, curve):
            return False
        _logger.info("STW calibration curve set with %d points", len(curve))
        with self.store.mutate() as s:
            s.speed_through_water.set_value = False
        return True

    async def request_temperature_offset(self) -> bool:
        if not await self._unlock_and_send(encode_temperature_offset_request):
            return False
        _logger.info("Requested temperature offset")
        with self.store.mutate() as s:
            s.temperature_offset.request_value = False
        return True

    async def commit_temperature_offset(self) -> bool:
        try:
            offset = self.store.state.temperature_offset.kelvin
        except ValueError as e:
            _logger.error("Temperature offset not sent: %s", e)
            return False
        if offset is None:
            _logger.error("Temperature offset value is not defined; not sent")
            return False

        if not await self._unlock_and_send(encode_temperature_offset, offset):
            return False
        _logger.info("Temperature offset set to %s K", offset)
        with self.store.mutate() as s:
            s.temperature_offset.set_value = False
        return True

    async def _unlock_and_send(
        self, encoder: Callable[..., ProprietaryCommandMessage], *args: object
    ) -> bool:
        """Unlock access level 1, let it settle, then send the dependent command.

        Both messages are encoded before anything goes out, so a command that
        cannot be built does not leave a lone unlock on the bus.
        """
        address = self.store.state.device_address
        try:
            unlock = encode_access_level_unlock(address)
            command = encoder(address, *args)
        except EncodeError as e:
            _logger.error("%s", e)
            return False

        _logger.debug("Setting DST800 access level to 1")
        if self.config.await_unlock_ack:
            acked = asyncio.Event()
            observer = self._unlock_ack_observer(acked)
            self.reconciler.add_ack_observer(observer)
            try:
                self._send(unlock)
                await self._settle(acked)
            finally:
                self.reconciler.remove_ack_observer(observer)
        else:
            self._send(unlock)
            await self._settle(None)

        self._send(command)
        return True

    def _unlock_ack_observer(self, acked: asyncio.Event) -> Callable[[GroupFunction], None]:
        address = self.store.state.device_address

        def observer(message: GroupFunction) -> None:
            if message.commanded_pgn == PGN_ACCESS_LEVEL and message.src in (None, address):
                if not message.pgn_accepted:
                    _logger.warning(
                        "DST800 rejected access level unlock: %s", message.pgn_error_code
                    )
                acked.set()

        return observer

    async def _settle(self, acked: asyncio.Event | None) -> None:
        delay = self.config.settle_delay
        if acked is None:
            await asyncio.sleep(delay)
            return

        try:
            await asyncio.wait_for(acked.wait(), timeout=delay)
            _logger.debug("Access level unlock acknowledged")
        except asyncio.TimeoutError:
            _logger.warning("No unlock acknowledgement within %ss; continuing", delay)

    def _send_encoded(
        self, encoder: Callable[..., ProprietaryCommandMessage], *args: object
    ) -> bool:
        try:
            message = encoder(self.store.state.device_address, *args)
        except EncodeError as e:
            _logger.error("%s", e)
            return False
        self._send(message)
        return True

    def _send(self, message: ProprietaryCommandMessage) -> None:
        message.priority = self.config.priority
        line = message.to_actisense(self._clock(), source=self.config.source_address)
        _logger.debug("Command message: %s", message.to_fields())
        _logger.debug("raw message: %s", line)
        self.bus.send_raw(line)
