"""
session.py

Implements the GaugeSession class that sequences one request/response
exchange with a PPG gauge: build the frame, write it, perform a single
bounded read and parse the reply.

Usage Example:
    with SerialTransport("/dev/ttyUSB0") as transport:
        session = GaugeSession(transport, Unicast(1))
        print(session.query("PR3"))
"""

import logging
import threading
from typing import Optional

from ppg_link.address import Address, Broadcast
from ppg_link.exceptions import NakError, ParseError, TransportError
from ppg_link.formatting import format_bytes
from ppg_link.models import GaugeCommand
from ppg_link.protocol import (
    MAX_FRAME_SIZE,
    PPGProtocol,
    build_request,
    command_message,
    parse_response,
    query_message,
)
from ppg_link.transport import Transport


class GaugeSession:
    """
    Sends commands to one gauge over a transport it owns for its lifetime.

    Calls are serialized: the protocol is half-duplex, so a lock is held from
    the write until the reply has been parsed. The session keeps no buffer
    between calls.

    A caller that abandons a call mid-flight (e.g. KeyboardInterrupt during
    the read) leaves the line in an unknown framing state. Reset the transport
    before using the session again.
    """

    def __init__(self, transport: Transport, address: Optional[Address] = None,
                 gauge_type: str = "PPG550", max_frame_size: int = MAX_FRAME_SIZE,
                 logger: Optional[logging.Logger] = None):
        """
        Initializes the session.

        Args:
            transport: An open transport (write/read capability).
            address: The target gauge; broadcast if omitted.
            gauge_type: "PPG550" or "PPG570", selects the named command table.
            max_frame_size: Upper bound for the single read per call.
            logger: Optional logger instance.
        """
        self.transport = transport
        self.address = address if address is not None else Broadcast()
        self.max_frame_size = max_frame_size
        self.protocol = PPGProtocol(self.address, gauge_type)
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()

    def send(self, message: str) -> str:
        """
        Sends raw message text and returns the ACK payload.

        Args:
            message: The message body, e.g. "PR3?" or "U!TORR".

        Returns:
            The payload of the gauge's ACK.

        Raises:
            TransportError: Writing or reading failed.
            ParseError: The reply is malformed or from another address.
            TextDecodeError: The ACK payload is not UTF-8.
            NakError: The gauge rejected the message.
        """
        request = build_request(self.address, message)
        with self._lock:
            self.logger.debug(f"Sending command: {format_bytes(request, 'Hex')}")
            try:
                self.transport.write(request)
                response = self.transport.read(self.max_frame_size)
            except OSError as e:
                self.logger.error(f"Transport failed for {message!r}: {e}")
                raise TransportError(f"Transport failed for {message!r}: {e}") from e
            self.logger.debug(f"Received response: {format_bytes(response, 'Hex')}")
            try:
                return parse_response(response, expected=self.address)
            except NakError as e:
                self.logger.warning(f"{message!r} rejected: {e}")
                raise
            except ParseError as e:
                self.logger.debug(f"Unparseable response {format_bytes(response)}: {e}")
                raise

    def query(self, name: str) -> str:
        return self.send(query_message(name))

    def command(self, name: str, parameter: str) -> str:
        return self.send(command_message(name, parameter))

    def execute(self, command: GaugeCommand) -> str:
        """
        Sends a named command from the gauge's command table.

        Raises:
            ValueError: If the command is unknown or the access type is not supported.
        """
        return self.send(self.protocol.create_message(command))

    def read_pressure(self) -> float:
        """
        Reads the current pressure in the gauge's configured unit.

        Raises:
            ParseError: If the gauge returns a non-numeric value.
        """
        value = self.execute(GaugeCommand(name="pressure"))
        try:
            return float(value)
        except ValueError as e:
            raise ParseError(f"Pressure value is not numeric: {value!r}") from e
