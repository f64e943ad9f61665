"""Tests for protocol selection."""

import pytest

from scanprint_service.protocols import (
    OtherProtocol, TextCommandProtocol, TEXT_COMMAND, parse_protocol,
)


@pytest.mark.parametrize('value', ['CPCL', 'cpcl', 'CPCL (Zebra Mobile)', '', None, 'unknown'])
def test_text_command_protocol(value):
    assert parse_protocol(value) == TEXT_COMMAND
    assert isinstance(parse_protocol(value), TextCommandProtocol)


@pytest.mark.parametrize('value,name', [
    ('ZPL', 'ZPL'), ('zpl ii', 'ZPL'), ('ESC/POS', 'ESC/POS'), ('escpos', 'ESC/POS'),
])
def test_other_protocols(value, name):
    protocol = parse_protocol(value)

    assert protocol == OtherProtocol(name)
    assert not isinstance(protocol, TextCommandProtocol)
