"""Exception hierarchy for dst800cal.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from Dst800Error for easy catching of any dst800cal-specific error.
"""

from __future__ import annotations


class Dst800Error(Exception):
    """Base exception for all dst800cal errors."""

    pass


class EncodeError(Dst800Error):
    """Raised when building a proprietary command fails.

    Examples:
        - Parameter value does not fit its field
        - Too many calibration points for a single parameter list
        - Payload exceeds the fast-packet limit
    """

    pass


class MissingDeviceAddressError(EncodeError):
    """Raised when an encoder is invoked before the device address is configured.

    No message is built (and therefore nothing is emitted) when this is raised.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation}: device address (instance) is not defined")
        self.operation = operation


class DecodeError(Dst800Error):
    """Raised when an inbound bus message cannot be interpreted.

    Examples:
        - Message is not a mapping or has no PGN
        - Required field missing for a registered PGN
        - Field value of the wrong type
    """

    pass


class CalibrationParseError(Dst800Error):
    """Raised when STW calibration text is malformed.

    Attributes:
        line: The offending line, as it appeared in the input
    """

    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line


class StoreError(Dst800Error):
    """Raised when calibration options cannot be loaded or saved."""

    pass
