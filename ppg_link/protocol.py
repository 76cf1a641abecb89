"""
protocol.py

Implements the ASCII frame format spoken by PPG550/PPG570 MEMS Pirani & Piezo
gauges.

Request:  "@" + 3-digit address + message + ";FF"
Response: "@" + 3-digit address + ("ACK" | "NAK") + payload + ";FF"

There is no length prefix, escaping or checksum, so every check below is
positional. A truncated or noisy read is rejected instead of being read as a
different valid frame.

Usage Example:
    request = build_request(Broadcast(), "PR3?")   # b"@254PR3?;FF"
    value = parse_response(b"@254ACK1.23E-3;FF")   # "1.23E-3"
"""

import logging
from typing import Optional, Dict

from ppg_link.address import Address, Broadcast
from ppg_link.config import MAX_FRAME_SIZE, PPG_COMMANDS
from ppg_link.exceptions import NakError, NakReason, ParseError, TextDecodeError
from ppg_link.models import CommandDefinition, GaugeCommand

logger = logging.getLogger(__name__)

FRAME_START = b"@"
FRAME_END = b";FF"
ACK = b"ACK"
NAK = b"NAK"
MIN_FRAME_LENGTH = 10  # "@" + 3 address digits + status + ";FF"

QUERY_SUFFIX = "?"
COMMAND_SEPARATOR = "!"


def build_request(address: Address, message: str) -> bytes:
    """
    Frames a message for the given address.

    The message is not validated; it is sent exactly as given. Lone
    surrogates are passed through rather than rejected, so framing never fails.

    Args:
        address (Address): The target gauge.
        message (str): Command or query text, e.g. "PR3?".

    Returns:
        bytes: The complete request frame.
    """
    return FRAME_START + address.to_wire_field().encode("ascii") + message.encode("utf-8", "surrogatepass") + FRAME_END


def parse_response(data: bytes, expected: Optional[Address] = None) -> str:
    """
    Validates a response frame and extracts its payload.

    Args:
        data (bytes): The raw bytes of one response.
        expected (Optional[Address]): If a unicast address is given, the echoed
            address must match it.

    Returns:
        str: The ACK payload.

    Raises:
        ParseError: The frame is malformed, or the NAK code is not in the table.
        TextDecodeError: The ACK payload is not valid UTF-8.
        NakError: The gauge answered with a known NAK code.
    """
    data = bytes(data)
    if len(data) < MIN_FRAME_LENGTH:
        raise ParseError(f"Response too short ({len(data)} bytes)", frame=data)
    if data[:1] != FRAME_START:
        raise ParseError("Response does not start with '@'", frame=data)
    echoed = data[1:4]
    if not all(0x30 <= b <= 0x39 for b in echoed):
        raise ParseError("Response address is not three digits", frame=data)
    if data[-3:] != FRAME_END:
        raise ParseError("Response does not end with ';FF'", frame=data)
    if expected is not None and not expected.matches_echo(echoed):
        raise ParseError(
            f"Response from address {echoed.decode('ascii')}, expected {expected.to_wire_field()}",
            frame=data,
        )

    status = data[4:7]
    payload = data[7:-3]
    if status == ACK:
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TextDecodeError(f"ACK payload is not valid UTF-8: {e}", payload) from e
    if status == NAK:
        reason = NakReason.from_payload(payload)
        if reason is None:
            raise ParseError(f"Unknown NAK code {payload!r}", frame=data, payload=payload)
        raise NakError(reason)
    raise ParseError(f"Unknown status token {status!r}", frame=data)


def query_message(name: str) -> str:
    return f"{name}{QUERY_SUFFIX}"


def command_message(name: str, parameter: str) -> str:
    return f"{name}{COMMAND_SEPARATOR}{parameter}"


class PPGProtocol:
    """
    Builds frames for the named commands of a PPG550 or PPG570 gauge.
    """

    def __init__(self, address: Optional[Address] = None, gauge_type: str = "PPG550"):
        """
        Initializes the PPGProtocol.

        Args:
            address (Optional[Address]): The target gauge; broadcast if omitted.
            gauge_type (str): Either "PPG550" or "PPG570".
        """
        if gauge_type not in PPG_COMMANDS:
            raise ValueError(f"Unsupported gauge type: {gauge_type}")
        self.address = address if address is not None else Broadcast()
        self.gauge_type = gauge_type
        self._command_defs: Dict[str, CommandDefinition] = PPG_COMMANDS[gauge_type]
        logger.debug(f"Initialized {gauge_type} protocol for address {self.address.to_wire_field()}")

    @property
    def commands(self) -> Dict[str, CommandDefinition]:
        return dict(self._command_defs)

    def create_message(self, command: GaugeCommand) -> str:
        """
        Turns a named command into message text.
        Format: "<cmd>?" for reads, "<cmd>!<value>" for writes.

        Args:
            command (GaugeCommand): The command to serialize.

        Returns:
            str: The message body.

        Raises:
            ValueError: If the command is unknown or does not support the requested access.
        """
        cmd_def = self._command_defs.get(command.name)
        if not cmd_def:
            raise ValueError(f"Unknown command: {command.name}")
        if command.is_write:
            if not cmd_def.write:
                raise ValueError(f"Command {command.name} is read-only")
            value = (command.parameters or {}).get("value", "")
            return command_message(cmd_def.cmd, str(value))
        if not cmd_def.read:
            raise ValueError(f"Command {command.name} cannot be queried")
        return query_message(cmd_def.cmd)

    def create_command(self, command: GaugeCommand) -> bytes:
        frame = build_request(self.address, self.create_message(command))
        logger.debug(f"Created PPG command: {frame!r}")
        return frame

    def parse_response(self, response: bytes) -> str:
        return parse_response(response, expected=self.address)
