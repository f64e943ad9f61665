"""Tests for the ScanPrint client SDK."""

from unittest.mock import Mock, patch

import requests

from scanprint_service.client import ScanPrintClient


def test_scan_posts_serial():
    client = ScanPrintClient('http://station:5100/')
    with patch('scanprint_service.client.requests.post',
               return_value=Mock(json=Mock(return_value={'success': True}))) as post:
        assert client.scan('55V0001') == {'success': True}

    args, kwargs = post.call_args
    assert args[0] == 'http://station:5100/api/session/scan'
    assert kwargs['json'] == {'serial': '55V0001'}


def test_list_prefixes():
    client = ScanPrintClient()
    with patch('scanprint_service.client.requests.get',
               return_value=Mock(json=Mock(return_value={'success': True, 'prefixes': ['55V']}))):
        assert client.get_prefixes() == ['55V']


def test_unreachable_service():
    client = ScanPrintClient('http://station:5100')
    with patch('scanprint_service.client.requests.get',
               side_effect=requests.exceptions.ConnectionError()):
        assert client.health() == {'success': False, 'error': 'Cannot connect to http://station:5100'}
        assert not client.is_online()
        assert client.preview('55V0001', '55V0002') is None


def test_diagnostics():
    client = ScanPrintClient('http://station:5100')
    summary = {'success': True, 'total_scans': 4, 'labels_printed': 2, 'error_count': 1}
    with patch('scanprint_service.client.requests.get',
               return_value=Mock(json=Mock(return_value=summary))) as get:
        assert client.diagnostics() == summary

    assert get.call_args[0][0] == 'http://station:5100/api/diagnostics'


def test_export_history():
    client = ScanPrintClient('http://station:5100')
    csv_text = 'Date,Time,Serial Number,Label Type,Printer\n'
    with patch('scanprint_service.client.requests.get',
               return_value=Mock(ok=True, text=csv_text)):
        assert client.export_history() == csv_text

    with patch('scanprint_service.client.requests.get',
               side_effect=requests.exceptions.Timeout()):
        assert client.export_history() is None
