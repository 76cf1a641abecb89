"""
ppg_link

Client for the ASCII command/response protocol of PPG550/PPG570 vacuum gauges.
"""

from ppg_link.address import Address, Broadcast, Unicast, parse_address
from ppg_link.exceptions import (
    GaugeError,
    NakError,
    NakReason,
    ParseError,
    TextDecodeError,
    TransportError,
)
from ppg_link.models import CommandDefinition, GaugeCommand
from ppg_link.protocol import PPGProtocol, build_request, parse_response
from ppg_link.session import GaugeSession
from ppg_link.simulator import GaugeSimulator
from ppg_link.transport import SerialTransport, Transport

__all__ = [
    'Address',
    'Broadcast',
    'Unicast',
    'parse_address',
    'GaugeError',
    'NakError',
    'NakReason',
    'ParseError',
    'TextDecodeError',
    'TransportError',
    'CommandDefinition',
    'GaugeCommand',
    'PPGProtocol',
    'build_request',
    'parse_response',
    'GaugeSession',
    'GaugeSimulator',
    'SerialTransport',
    'Transport',
]
