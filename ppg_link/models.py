"""
models.py

Defines the data models used to describe named gauge commands.
Utilizes dataclasses to enforce structure.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class GaugeCommand:
    """
    A named command to send to a gauge.
    """
    name: str                # Command identifier (e.g., "pressure")
    command_type: str = "?"  # "?" for read, "!" for write
    parameters: Optional[Dict[str, Any]] = None  # {"value": ...} for write commands
    description: str = ""

    @property
    def is_write(self) -> bool:
        return self.command_type in ("!", "write")


@dataclass(frozen=True)
class CommandDefinition:
    """
    Data class representing an ASCII command understood by a PPG gauge.

    Attributes:
        cmd: The mnemonic sent on the wire (e.g., "PR3").
        description: A human-readable description of what the command does.
        read: True if the command may be queried with "?".
        write: True if the command may be set or executed with "!".
        units: Unit of measure of the returned value, if any.
    """
    cmd: str
    description: str
    read: bool = False
    write: bool = False
    units: Optional[str] = None
