"""
transport.py

The byte-stream boundary between a GaugeSession and the line. A session only
needs to write bytes and perform one bounded read; SerialTransport provides
that on top of pyserial.
"""

import logging
from typing import Optional, Dict, Any, List, Protocol

import serial
from serial.tools import list_ports as serial_list_ports

from ppg_link.config import DEFAULT_PORT, SERIAL_SETTINGS
from ppg_link.protocol import FRAME_END


class Transport(Protocol):
    """
    Minimal read/write capability a GaugeSession depends on.

    Both methods may raise OSError (pyserial's SerialException is one).
    """

    def write(self, data: bytes) -> None:
        """Writes all bytes and flushes them before returning."""
        ...

    def read(self, size: int) -> bytes:
        """Reads at most `size` bytes and returns what was received."""
        ...


class SerialTransport:
    """
    Transport over a serial port, configured for PPG gauges (9600 8N1).
    """

    def __init__(self, port: str = DEFAULT_PORT, settings: Optional[Dict[str, Any]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initializes the transport. The port is not opened until open() is called.

        Args:
            port: The serial port identifier (e.g., "/dev/ttyUSB0" or "COM3").
            settings: Overrides for SERIAL_SETTINGS (e.g., {"timeout": 2.0}).
            logger: Optional logger instance.
        """
        self.port = port
        self.logger = logger or logging.getLogger(__name__)
        self.current_settings = dict(SERIAL_SETTINGS)
        if settings:
            self.current_settings.update(settings)
        self.ser: Optional[serial.Serial] = None

    @property
    def is_open(self) -> bool:
        return self.ser is not None and self.ser.is_open

    def open(self) -> "SerialTransport":
        """
        Opens the serial port with the current settings.

        Raises:
            serial.SerialException: If the port cannot be opened.
        """
        if self.is_open:
            return self
        self.ser = serial.Serial(port=self.port, **self.current_settings)
        self.logger.info(f"Opened {self.port} at {self.current_settings['baudrate']} baud")
        return self

    def close(self) -> None:
        if self.is_open:
            self.ser.close()
            self.logger.info(f"Closed {self.port}")
        self.ser = None

    def __enter__(self) -> "SerialTransport":
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _require_open(self) -> serial.Serial:
        if not self.is_open:
            raise serial.SerialException(f"Port {self.port} is not open")
        return self.ser

    def write(self, data: bytes) -> None:
        ser = self._require_open()
        ser.write(data)
        ser.flush()

    def read(self, size: int) -> bytes:
        """
        Reads one response: returns once ";FF" arrives, `size` bytes are read,
        or the port timeout expires, whichever comes first.
        """
        ser = self._require_open()
        return ser.read_until(FRAME_END, size)

    def reset(self) -> None:
        """
        Discards pending input and output. Call after an abandoned request
        so the next response is read from a clean frame boundary.
        """
        ser = self._require_open()
        ser.reset_input_buffer()
        ser.reset_output_buffer()
        self.logger.debug(f"Reset buffers on {self.port}")


def list_ports() -> List[str]:
    """
    Lists available serial ports.

    Returns:
        A list of available port names.
    """
    return [p.device for p in serial_list_ports.comports()]
