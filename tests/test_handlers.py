"""Tests for the CPCL network handler."""

import socket
from unittest.mock import MagicMock, patch

import pytest

from scanprint_service.handlers import CPCLHandler, get_handler
from scanprint_service.labels.cpcl import render_test_label, serialize
from scanprint_service.models import Printer


@pytest.fixture
def printer():
    return Printer(name='ZQ320', printer_type='zebra_mobile', host='192.168.1.50', port=9100)


@pytest.fixture
def mock_socket():
    with patch('scanprint_service.handlers.cpcl.socket.socket') as factory:
        sock = MagicMock()
        factory.return_value = sock
        yield sock


def test_get_handler():
    assert get_handler('cpcl') is CPCLHandler
    assert get_handler(None) is None
    assert get_handler('evolis') is None


def test_send(printer, mock_socket):
    result = CPCLHandler(printer).send(b'! 0 200 200 240 1\r\nPRINT\r\n', timeout=7)

    assert result['success']
    assert result['bytes_sent'] == 26
    mock_socket.settimeout.assert_called_once_with(7)
    mock_socket.connect.assert_called_once_with(('192.168.1.50', 9100))
    mock_socket.sendall.assert_called_once_with(b'! 0 200 200 240 1\r\nPRINT\r\n')
    mock_socket.close.assert_called_once()


@pytest.mark.parametrize('error,message', [
    (socket.timeout(), 'Connection timeout to 192.168.1.50:9100'),
    (ConnectionRefusedError(), 'Connection refused by 192.168.1.50:9100'),
    (OSError('No route to host'), 'No route to host'),
])
def test_send_failure(printer, mock_socket, error, message):
    mock_socket.connect.side_effect = error

    result = CPCLHandler(printer).send(b'PRINT\r\n')

    assert result == {'success': False, 'error': message}
    mock_socket.close.assert_called_once()


def test_send_without_host():
    result = CPCLHandler(Printer(name='ZQ320', printer_type='cpcl')).send(b'PRINT\r\n')

    assert result == {'success': False, 'error': 'Printer host not configured'}


def test_print_test_label(printer, mock_socket):
    CPCLHandler(printer).print_test_label()

    mock_socket.sendall.assert_called_once_with(serialize(render_test_label(240)).encode('utf-8'))


def test_connect_and_disconnect(printer, mock_socket):
    handler = CPCLHandler(printer)
    assert not handler.is_connected()

    assert handler.connect()['success']
    assert handler.is_connected()
    assert handler.get_status()['status'] == 'connected'

    handler.disconnect()
    assert not handler.is_connected()
    assert printer.status == 'offline'


def test_connect_failure(printer, mock_socket):
    mock_socket.connect.side_effect = ConnectionRefusedError()

    result = CPCLHandler(printer).connect()

    assert not result['success']
    assert printer.status == 'offline'
    assert printer.last_error == 'Connection refused by 192.168.1.50:9100'


def test_inactive_printer_is_not_connected(printer):
    printer.update_status('connected')
    printer.is_active = False

    assert not CPCLHandler(printer).is_connected()


def test_identifier_falls_back_to_id():
    printer = Printer(printer_type='cpcl')

    assert CPCLHandler(printer).identifier == printer.id
