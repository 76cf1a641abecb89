"""
address.py

Defines how a gauge is identified on a shared RS232/RS485 line. A device is
either addressed individually by its numeric id (0-253) or through the
broadcast address 254, which every gauge on the line answers to.

Usage Example:
    addr = Unicast(7)
    addr.to_wire_field()   # "007"
    Broadcast().to_wire_field()  # "254"
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

BROADCAST_ID = 254
MAX_UNICAST_ID = 253


class Address(ABC):
    """
    Base class for gauge addresses.
    """

    @abstractmethod
    def to_wire_byte(self) -> int:
        """
        Returns the address byte: the device id, or 254 for broadcast.
        """
        pass

    def to_wire_field(self) -> str:
        """
        Renders the address as the fixed 3-digit decimal field used in frames.

        Returns:
            str: The zero-padded address, e.g. "007".
        """
        return f"{self.to_wire_byte():03d}"

    def matches_echo(self, field: bytes) -> bool:
        """
        Checks the address echoed back in a response against this target.

        Broadcast requests are answered by a gauge with its own address, so any
        echo is accepted for them.

        Args:
            field (bytes): The three ASCII digits following '@' in the response.

        Returns:
            bool: True if the echo is acceptable for this address.
        """
        return True


@dataclass(frozen=True)
class Unicast(Address):
    """
    A single gauge addressed by its id.
    """
    device_id: int

    def __post_init__(self):
        if isinstance(self.device_id, bool) or not isinstance(self.device_id, int):
            raise TypeError(f"Device id must be an int, got {type(self.device_id).__name__}")
        if not 0 <= self.device_id <= MAX_UNICAST_ID:
            raise ValueError(
                f"Unicast id must be between 0 and {MAX_UNICAST_ID}, got {self.device_id}"
            )

    def to_wire_byte(self) -> int:
        return self.device_id

    def matches_echo(self, field: bytes) -> bool:
        return field == self.to_wire_field().encode("ascii")


@dataclass(frozen=True)
class Broadcast(Address):
    """
    The broadcast address; every gauge on the line answers.
    """

    def to_wire_byte(self) -> int:
        return BROADCAST_ID


def parse_address(text: str) -> Address:
    """
    Converts user input into an Address.

    Args:
        text (str): "broadcast", "*" or a decimal id. "254" is read as broadcast.

    Returns:
        Address: The parsed address.

    Raises:
        ValueError: If the text is not a valid address.
    """
    value = text.strip().lower()
    if value in ("broadcast", "*"):
        return Broadcast()
    if not value.isdigit():
        raise ValueError(f"Invalid address: {text!r}")
    device_id = int(value)
    if device_id == BROADCAST_ID:
        return Broadcast()
    return Unicast(device_id)
