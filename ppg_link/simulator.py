#!/usr/bin/env python3
"""
simulator.py

This module implements the GaugeSimulator class which emulates a PPG550/PPG570
gauge on an in-memory line, for testing and demos without physical hardware.
It implements the same write/read capability as SerialTransport, so a
GaugeSession can run against it unchanged.

Behaviour:
  - Frames addressed to another unicast id, or malformed frames, get no reply.
  - Broadcast frames (address 254) are answered with the simulator's own address.
  - Queries return the internal state (pressure, temperature, unit, ...).
  - Set commands update the state, so writes affect subsequent reads.
  - Rejected requests are answered with the NAK code a real gauge would use.
  - With error_probability > 0, replies are occasionally corrupted.

Usage Example:
    simulator = GaugeSimulator(device_id=1, pressure=7.6E+2)
    session = GaugeSession(simulator, Unicast(1))
    session.query("PR3")  # "7.60E+02"
"""

import random
import logging
from typing import Dict, Any, List, Optional

from ppg_link.address import BROADCAST_ID, MAX_UNICAST_ID
from ppg_link.config import PRESSURE_UNITS
from ppg_link.exceptions import NakReason
from ppg_link.protocol import ACK, FRAME_END, FRAME_START, NAK

# Zero adjustment is refused above this pressure, full scale adjustment below
# the atmospheric limit (both in the current unit).
ZERO_ADJUST_LIMIT = 1.0E-1
ATM_ADJUST_LIMIT = 5.0E+2


class GaugeSimulator:
    """
    Simulates a single PPG gauge behind a write/read transport interface.
    """

    def __init__(self, device_id: int = 253, gauge_type: str = "PPG550",
                 config: Optional[Dict[str, Any]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initializes the simulator.

        Args:
            device_id: The gauge's own RS485 address.
            gauge_type: "PPG550" or "PPG570" (the latter answers PR4/PR5/ATZ/ATD).
            config: Optional state overrides: pressure, temperature, unit,
                serial_number, firmware, setup_mode, noise_level,
                error_probability, seed.
            logger: Optional logger instance.
        """
        config = config or {}
        self.device_id = device_id
        self.gauge_type = gauge_type
        self.has_atm = (gauge_type == "PPG570")
        self.state: Dict[str, Any] = {
            "pressure": config.get("pressure", 7.60E+2),
            "atm_pressure": config.get("atm_pressure", 7.60E+2),
            "temperature": config.get("temperature", 23.5),
            "unit": config.get("unit", "TORR"),
            "serial_number": config.get("serial_number", "2401000123"),
            "firmware": config.get("firmware", "1.07"),
            "setup_mode": config.get("setup_mode", False),
        }
        self.noise_level = config.get("noise_level", 0.0)
        self.error_probability = config.get("error_probability", 0.0)
        self._rng = random.Random(config.get("seed"))
        self.logger = logger or logging.getLogger(__name__)
        self.requests: List[bytes] = []
        self._pending = b""

    def write(self, data: bytes) -> None:
        data = bytes(data)
        self.requests.append(data)
        self._pending = self._handle_frame(data)

    def read(self, size: int) -> bytes:
        response, self._pending = self._pending[:size], b""
        return response

    def reset(self) -> None:
        self._pending = b""

    def _handle_frame(self, frame: bytes) -> bytes:
        if (len(frame) < 7 or frame[:1] != FRAME_START or frame[-3:] != FRAME_END
                or not frame[1:4].isdigit()):
            self.logger.debug(f"Ignoring malformed frame {frame!r}")
            return b""
        target = int(frame[1:4])
        if target not in (self.device_id, BROADCAST_ID):
            return b""
        try:
            message = frame[4:-3].decode("ascii")
        except UnicodeDecodeError:
            return self._reply(NAK, NakReason.UNRECOGNIZED_MESSAGE.value)

        if message.endswith("?"):
            status, payload = self._handle_query(message[:-1])
        elif "!" in message:
            name, parameter = message.split("!", 1)
            status, payload = self._handle_set(name, parameter)
        else:
            status, payload = NAK, NakReason.INVALID_COMMAND_CHARACTER.value
        return self._reply(status, payload)

    def _reply(self, status: bytes, payload: str) -> bytes:
        response = (FRAME_START + f"{self.device_id:03d}".encode("ascii") + status
                    + payload.encode("utf-8") + FRAME_END)
        if self.error_probability and self._rng.random() < self.error_probability:
            # Drop the trailing "F" to mimic a truncated read.
            response = response[:-1]
        return response

    def _noisy(self, value: float) -> float:
        if not self.noise_level:
            return value
        return value * (1 + self._rng.uniform(-self.noise_level, self.noise_level))

    def _handle_query(self, name: str):
        if name == "PR3":
            return ACK, f"{self._noisy(self.state['pressure']):.2E}"
        if name == "T":
            return ACK, f"{self._noisy(self.state['temperature']):.1f}"
        if name == "FV":
            return ACK, self.state["firmware"]
        if name == "SN":
            return ACK, self.state["serial_number"]
        if name == "U":
            return ACK, self.state["unit"]
        if name == "AD":
            return ACK, f"{self.device_id:03d}"
        if self.has_atm and name == "PR4":
            return ACK, f"{self._noisy(self.state['atm_pressure']):.2E}"
        if self.has_atm and name == "PR5":
            return ACK, f"{self.state['pressure'] - self.state['atm_pressure']:.2E}"
        return NAK, NakReason.UNRECOGNIZED_MESSAGE.value

    def _handle_set(self, name: str, parameter: str):
        if name == "U":
            unit = parameter.upper()
            if unit not in PRESSURE_UNITS:
                return NAK, NakReason.INVALID_ARGUMENT.value
            self.state["unit"] = unit
            return ACK, unit
        if name == "AD":
            if not self.state["setup_mode"]:
                return NAK, NakReason.NOT_IN_SETUP_MODE.value
            if not parameter.isdigit():
                return NAK, NakReason.INVALID_ARGUMENT.value
            new_id = int(parameter)
            if new_id > MAX_UNICAST_ID:
                return NAK, NakReason.VALUE_OUT_OF_RANGE.value
            self.device_id = new_id
            return ACK, f"{new_id:03d}"
        if name == "VAC":
            if self.state["pressure"] > ZERO_ADJUST_LIMIT:
                return NAK, NakReason.ZERO_ADJUST_PRESSURE_TOO_HIGH.value
            self.state["pressure"] = 0.0
            return ACK, ""
        if name == "FS" or (self.has_atm and name == "ATD"):
            if self.state["pressure"] < ATM_ADJUST_LIMIT:
                return NAK, NakReason.ATM_ADJUST_PRESSURE_TOO_LOW.value
            return ACK, ""
        if self.has_atm and name == "ATZ":
            return ACK, ""
        return NAK, NakReason.UNRECOGNIZED_MESSAGE.value
