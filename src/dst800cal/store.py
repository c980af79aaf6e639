"""Persistence of the calibration state.

CalibrationStore owns the single CalibrationState instance. Every change goes
through ``store.mutate()``, which saves the full options document as soon as
the block exits. Observers are notified after each save; they are informational
and their failures never affect the caller.
"""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .exceptions import StoreError
from .models.state import CalibrationState

_logger = logging.getLogger(__name__)

StoreObserver = Callable[[CalibrationState], None]


class OptionsBackend(ABC):
    """Where the host keeps the options document."""

    @abstractmethod
    def load(self) -> dict[str, Any]:
        pass

    @abstractmethod
    def save(self, options: dict[str, Any]) -> None:
        pass


class MemoryBackend(OptionsBackend):
    """Keeps the options document in memory."""

    def __init__(self, options: dict[str, Any] | None = None) -> None:
        self.options: dict[str, Any] = copy.deepcopy(options) if options else {}
        self.save_count = 0

    def load(self) -> dict[str, Any]:
        return copy.deepcopy(self.options)

    def save(self, options: dict[str, Any]) -> None:
        self.options = copy.deepcopy(options)
        self.save_count += 1


class JsonFileBackend(OptionsBackend):
    """Keeps the options document in a JSON file.

    A missing file loads as an empty document.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            options = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read options from {self.path}: {e}") from e
        if not isinstance(options, dict):
            raise StoreError(f"Options in {self.path} must be a JSON object")
        return options

    def save(self, options: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(options, indent=2) + "\n", encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise StoreError(f"Could not write options to {self.path}: {e}") from e


class CalibrationStore:
    """Holds the calibration state and persists it after every mutation.

    Example:
        >>> store = CalibrationStore(MemoryBackend({"instance": 35}))
        >>> with store.mutate() as state:
        ...     state.depth_offset.request_value = False
        >>> store.backend.save_count
        1
    """

    def __init__(self, backend: OptionsBackend, state: CalibrationState | None = None) -> None:
        self.backend = backend
        if state is None:
            try:
                state = CalibrationState.from_options(backend.load())
            except ValidationError as e:
                raise StoreError(f"Invalid calibration options: {e}") from e
        self._state = state
        self._observers: list[StoreObserver] = []

    @property
    def state(self) -> CalibrationState:
        """The live state. Read freely; change it only inside mutate()."""
        return self._state

    def add_observer(self, observer: StoreObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: StoreObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @contextmanager
    def mutate(self) -> Iterator[CalibrationState]:
        """Yield the state for modification and save it when the block exits.

        Nothing is saved if the block raises.
        """
        yield self._state
        self.save()

    def save(self) -> None:
        self.backend.save(self._state.to_options())
        _logger.debug("Calibration options saved")
        for observer in list(self._observers):
            try:
                observer(self._state)
            except Exception:
                _logger.exception("Store observer failed")
