"""
config.py

Serial settings, the PPG550/PPG570 ASCII command table and logging setup.
"""

import logging
from typing import Dict, Any, Optional

import serial

from ppg_link.models import CommandDefinition

DEFAULT_PORT = "/dev/ttyUSB0"

# PPG gauges talk 9600 8N1 without flow control.
SERIAL_SETTINGS: Dict[str, Any] = {
    "baudrate": 9600,
    "bytesize": serial.EIGHTBITS,
    "parity": serial.PARITY_NONE,
    "stopbits": serial.STOPBITS_ONE,
    "xonxoff": False,
    "rtscts": False,
    "timeout": 1.0,
    "write_timeout": 1.0,
}

# Upper bound for the single read that collects one response.
MAX_FRAME_SIZE = 1000

BAUD_RATES = [9600, 19200, 38400, 57600, 115200]

_PPG550_COMMANDS = {
    "pressure": CommandDefinition("PR3", "Read pressure measurement", read=True),
    "temperature": CommandDefinition("T", "Read temperature", read=True, units="C"),
    "software_version": CommandDefinition("FV", "Read firmware version", read=True),
    "serial_number": CommandDefinition("SN", "Read serial number", read=True),
    "unit": CommandDefinition("U", "Get/set pressure unit", read=True, write=True),
    "address": CommandDefinition("AD", "Get/set RS485 address", read=True, write=True),
    "zero_adjust": CommandDefinition("VAC", "Perform zero adjustment", write=True),
    "piezo_adjust": CommandDefinition("FS", "Perform full scale adjustment", write=True),
}

# PPG570 devices have an additional atmospheric sensor.
_PPG570_COMMANDS = dict(_PPG550_COMMANDS)
_PPG570_COMMANDS.update({
    "atm_pressure": CommandDefinition("PR4", "Read atmospheric pressure", read=True),
    "differential_pressure": CommandDefinition("PR5", "Read differential pressure", read=True),
    "atm_zero": CommandDefinition("ATZ", "Perform atmospheric sensor zero adjustment", write=True),
    "atm_adjust": CommandDefinition("ATD", "Perform atmospheric sensor adjustment", write=True),
})

PPG_COMMANDS: Dict[str, Dict[str, CommandDefinition]] = {
    "PPG550": _PPG550_COMMANDS,
    "PPG570": _PPG570_COMMANDS,
}

PRESSURE_UNITS = ["MBAR", "PASCAL", "TORR", "MICRON"]


def setup_logging(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Configures a console logger.

    Args:
        name: Logger name, usually the package name.
        level: Logging level; DEBUG shows every frame on the wire.

    Returns:
        The configured logger.
    """
    level = logging.INFO if level is None else level
    logger = logging.getLogger(name)
    logger.setLevel(level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)

    # Removes old handlers if any
    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(console_handler)

    return logger
