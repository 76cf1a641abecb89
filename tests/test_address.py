"""Tests for gauge addressing."""

import pytest

from ppg_link.address import Address, Broadcast, Unicast, parse_address


def test_unicast_wire_field_for_all_ids():
    """Every unicast id renders as its zero-padded 3-digit value."""
    for device_id in range(254):
        field = Unicast(device_id).to_wire_field()
        assert len(field) == 3
        assert int(field) == device_id
        assert Unicast(device_id).to_wire_byte() == device_id


def test_unicast_examples():
    assert Unicast(7).to_wire_field() == "007"
    assert Unicast(0).to_wire_field() == "000"
    assert Unicast(253).to_wire_field() == "253"


def test_broadcast_wire_field():
    assert Broadcast().to_wire_byte() == 254
    assert Broadcast().to_wire_field() == "254"


@pytest.mark.parametrize("device_id", [254, 255, -1, 1000])
def test_unicast_rejects_out_of_range(device_id):
    """254 is reserved for broadcast and cannot be a unicast id."""
    with pytest.raises(ValueError):
        Unicast(device_id)


def test_unicast_rejects_non_int():
    with pytest.raises(TypeError):
        Unicast("7")


def test_addresses_are_immutable_values():
    addr = Unicast(12)
    assert addr == Unicast(12)
    assert Broadcast() == Broadcast()
    with pytest.raises(AttributeError):
        addr.device_id = 13


def test_echo_matching():
    assert Unicast(1).matches_echo(b"001")
    assert not Unicast(1).matches_echo(b"002")
    assert Broadcast().matches_echo(b"253")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("broadcast", Broadcast()),
        ("*", Broadcast()),
        ("254", Broadcast()),
        ("1", Unicast(1)),
        (" 042 ", Unicast(42)),
    ],
)
def test_parse_address(text, expected):
    assert parse_address(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "-1", "255", "1.5"])
def test_parse_address_invalid(text):
    with pytest.raises(ValueError):
        parse_address(text)


def test_base_address_is_abstract():
    """Only Unicast and Broadcast can be constructed."""
    with pytest.raises(TypeError):
        Address()
