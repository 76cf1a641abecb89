"""Tests for the request/response cycle of GaugeSession."""

import threading
import time

import pytest

from ppg_link.address import Broadcast, Unicast
from ppg_link.exceptions import NakError, NakReason, ParseError, TextDecodeError, TransportError
from ppg_link.models import GaugeCommand
from ppg_link import config
from ppg_link.protocol import MAX_FRAME_SIZE
from ppg_link.session import GaugeSession


class FakeTransport:
    def __init__(self, responses=None, response=None):
        self._responses = list(responses or [])
        self._response = response
        self.writes = []
        self.read_sizes = []

    def write(self, data: bytes) -> None:
        self.writes.append(data)

    def read(self, size: int) -> bytes:
        self.read_sizes.append(size)
        if self._responses:
            return self._responses.pop(0)[:size]
        return (self._response or b"")[:size]


class FailingTransport:
    def __init__(self, fail_on: str):
        self.fail_on = fail_on

    def write(self, data: bytes) -> None:
        if self.fail_on == "write":
            raise OSError("write failed")

    def read(self, size: int) -> bytes:
        raise OSError("device disconnected")


def test_query_frames_request_and_returns_payload():
    transport = FakeTransport(response=b"@254ACK1.23E-3;FF")
    session = GaugeSession(transport)
    assert session.query("PR3") == "1.23E-3"
    assert transport.writes == [b"@254PR3?;FF"]


def test_command_frames_parameter():
    transport = FakeTransport(response=b"@007ACKTORR;FF")
    session = GaugeSession(transport, Unicast(7))
    assert session.command("U", "TORR") == "TORR"
    assert transport.writes == [b"@007U!TORR;FF"]


def test_send_is_one_write_and_one_bounded_read():
    transport = FakeTransport(response=b"@254ACKok;FF")
    session = GaugeSession(transport)
    session.send("FV?")
    assert len(transport.writes) == 1
    assert transport.read_sizes == [MAX_FRAME_SIZE]


def test_custom_max_frame_size():
    transport = FakeTransport(response=b"@254ACKok;FF")
    session = GaugeSession(transport, max_frame_size=64)
    session.send("FV?")
    assert transport.read_sizes == [64]


def test_short_read_is_parse_error():
    session = GaugeSession(FakeTransport(response=b"@254ACK"))
    with pytest.raises(ParseError):
        session.query("PR3")


def test_empty_read_is_parse_error():
    session = GaugeSession(FakeTransport(response=b""))
    with pytest.raises(ParseError):
        session.query("PR3")


def test_nak_is_raised_with_reason():
    session = GaugeSession(FakeTransport(response=b"@254NAK180;FF"))
    with pytest.raises(NakError) as excinfo:
        session.command("AD", "5")
    assert excinfo.value.reason is NakReason.NOT_IN_SETUP_MODE


def test_invalid_utf8_is_text_decode_error():
    session = GaugeSession(FakeTransport(response=b"@254ACK\xc3\x28;FF"))
    with pytest.raises(TextDecodeError):
        session.query("SN")


@pytest.mark.parametrize("fail_on", ["write", "read"])
def test_transport_failure_is_wrapped(fail_on):
    session = GaugeSession(FailingTransport(fail_on))
    with pytest.raises(TransportError) as excinfo:
        session.query("PR3")
    assert isinstance(excinfo.value.__cause__, OSError)


def test_echo_from_other_device_is_rejected():
    session = GaugeSession(FakeTransport(response=b"@002ACK1.0;FF"), Unicast(1))
    with pytest.raises(ParseError):
        session.query("PR3")


def test_broadcast_accepts_device_echo():
    session = GaugeSession(FakeTransport(response=b"@253ACK1.0;FF"), Broadcast())
    assert session.query("PR3") == "1.0"


def test_repeated_queries_are_identical():
    """No state leaks between calls."""
    transport = FakeTransport(response=b"@254ACK7.60E+02;FF")
    session = GaugeSession(transport)
    results = [session.query("PR3") for _ in range(5)]
    assert results == ["7.60E+02"] * 5
    assert transport.writes == [b"@254PR3?;FF"] * 5


def test_failure_does_not_affect_next_call():
    transport = FakeTransport(responses=[b"garbage", b"@254ACK1.0;FF"])
    session = GaugeSession(transport)
    with pytest.raises(ParseError):
        session.query("PR3")
    assert session.query("PR3") == "1.0"


def test_execute_named_command():
    transport = FakeTransport(response=b"@254ACK1.07;FF")
    session = GaugeSession(transport)
    assert session.execute(GaugeCommand(name="software_version")) == "1.07"
    assert transport.writes == [b"@254FV?;FF"]


def test_execute_unknown_command():
    session = GaugeSession(FakeTransport())
    with pytest.raises(ValueError):
        session.execute(GaugeCommand(name="speed"))


def test_read_pressure():
    session = GaugeSession(FakeTransport(response=b"@254ACK1.23E-3;FF"))
    assert session.read_pressure() == pytest.approx(1.23e-3)


def test_read_pressure_non_numeric():
    session = GaugeSession(FakeTransport(response=b"@254ACKOVER;FF"))
    with pytest.raises(ParseError):
        session.read_pressure()


class OverlapDetectingTransport:
    """Records whether a write happened while another request was in flight."""

    def __init__(self):
        self.in_flight = False
        self.overlaps = 0
        self._guard = threading.Lock()

    def write(self, data: bytes) -> None:
        with self._guard:
            if self.in_flight:
                self.overlaps += 1
            self.in_flight = True

    def read(self, size: int) -> bytes:
        time.sleep(0.005)
        with self._guard:
            self.in_flight = False
        return b"@254ACKok;FF"


def test_calls_are_serialized_across_threads():
    transport = OverlapDetectingTransport()
    session = GaugeSession(transport)
    results = []

    def worker():
        for _ in range(5):
            results.append(session.query("PR3"))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert transport.overlaps == 0
    assert results == ["ok"] * 20


def test_default_read_bound_comes_from_config():
    transport = FakeTransport(response=b"@254ACKok;FF")
    GaugeSession(transport).send("FV?")
    assert transport.read_sizes == [config.MAX_FRAME_SIZE] == [1000]
