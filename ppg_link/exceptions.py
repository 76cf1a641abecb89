"""
exceptions.py

Error types raised by the PPG protocol layer, plus the table of negative
acknowledgement (NAK) codes a gauge can report.

Every failure is a subclass of GaugeError, so callers can catch the family
or handle each case on its own:
  - ParseError: the response frame is structurally invalid.
  - TransportError: the serial channel failed while writing or reading.
  - TextDecodeError: an ACK payload is not valid UTF-8.
  - NakError: the gauge rejected the request; `reason` tells why.
"""

from enum import Enum
from typing import Optional


class NakReason(Enum):
    """
    NAK codes reported by PPG gauges, keyed by the exact ASCII payload.
    """
    ZERO_ADJUST_PRESSURE_TOO_HIGH = "8"
    ATM_ADJUST_PRESSURE_TOO_LOW = "9"
    UNRECOGNIZED_MESSAGE = "160"
    INVALID_ARGUMENT = "169"
    VALUE_OUT_OF_RANGE = "172"
    INVALID_COMMAND_CHARACTER = "175"
    NOT_IN_SETUP_MODE = "180"

    @property
    def code(self) -> int:
        return int(self.value)

    @property
    def description(self) -> str:
        return _NAK_DESCRIPTIONS[self]

    @classmethod
    def from_payload(cls, payload: bytes) -> Optional["NakReason"]:
        """
        Looks up a NAK payload in the table.

        Args:
            payload (bytes): The bytes between "NAK" and ";FF".

        Returns:
            Optional[NakReason]: The matching reason, or None if the payload is not in the table.
        """
        for reason in cls:
            if payload == reason.value.encode("ascii"):
                return reason
        return None


_NAK_DESCRIPTIONS = {
    NakReason.ZERO_ADJUST_PRESSURE_TOO_HIGH: "Zero adjustment at too high pressure",
    NakReason.ATM_ADJUST_PRESSURE_TOO_LOW: "Atmospheric adjustment at too low pressure",
    NakReason.UNRECOGNIZED_MESSAGE: "Unrecognized message",
    NakReason.INVALID_ARGUMENT: "Invalid argument",
    NakReason.VALUE_OUT_OF_RANGE: "Value out of range",
    NakReason.INVALID_COMMAND_CHARACTER: "Command/query character invalid",
    NakReason.NOT_IN_SETUP_MODE: "Not in setup mode",
}


class GaugeError(Exception):
    """Base for all protocol-level failures."""


class ParseError(GaugeError):
    """
    Raised when a response frame is malformed.

    Attributes:
        frame: The raw bytes that failed to parse.
        payload: For an unknown NAK code, the payload that was not recognised.
    """

    def __init__(self, message: str, frame: bytes = b"", payload: Optional[bytes] = None):
        super().__init__(message)
        self.frame = frame
        self.payload = payload


class TransportError(GaugeError):
    """Raised when the underlying transport fails; the original error is chained."""


class TextDecodeError(GaugeError):
    def __init__(self, message: str, payload: bytes):
        super().__init__(message)
        self.payload = payload


class NakError(GaugeError):
    """
    Raised when the gauge answers with a negative acknowledgement.
    """

    def __init__(self, reason: NakReason):
        super().__init__(f"NAK {reason.value}: {reason.description}")
        self.reason = reason
