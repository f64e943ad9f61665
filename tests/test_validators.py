"""Tests for the remote prefix validator."""

from unittest.mock import Mock, patch

import pytest
import requests

from scanprint_service.exceptions import ValidationError
from scanprint_service.validators import RemotePrefixValidator


def response(payload=None, error=None):
    mock = Mock()
    if isinstance(error, requests.exceptions.HTTPError):
        mock.raise_for_status.side_effect = error
    if error is None or isinstance(error, requests.exceptions.HTTPError):
        mock.json.return_value = payload
    else:
        mock.json.side_effect = error
    return mock


@pytest.fixture
def validator():
    return RemotePrefixValidator('http://validator.local/', timeout=3, api_key='secret')


def test_valid(validator):
    with patch('scanprint_service.validators.requests.post',
               return_value=response({'valid': True})) as post:
        assert validator.is_valid('55V0001') is True

    post.assert_called_once()
    args, kwargs = post.call_args
    assert args[0] == 'http://validator.local/validate'
    assert kwargs['json'] == {'serial': '55V0001'}
    assert kwargs['timeout'] == 3
    assert kwargs['headers']['Authorization'] == 'Bearer secret'


def test_invalid(validator):
    with patch('scanprint_service.validators.requests.post',
               return_value=response({'valid': False})):
        assert validator.is_valid('55V0001') is False


@pytest.mark.parametrize('error,message', [
    (requests.exceptions.Timeout(), 'Request timeout'),
    (requests.exceptions.ConnectionError(), 'Cannot connect to http://validator.local'),
])
def test_network_failures(validator, error, message):
    with patch('scanprint_service.validators.requests.post', side_effect=error):
        with pytest.raises(ValidationError) as exc_info:
            validator.is_valid('55V0001')

    assert exc_info.value.reason == ValidationError.REMOTE_CHECK_FAILED
    assert exc_info.value.details['error'] == message
    assert exc_info.value.serial == '55V0001'


def test_http_error(validator):
    error = requests.exceptions.HTTPError('503 Server Error')
    with patch('scanprint_service.validators.requests.post', return_value=response(error=error)):
        with pytest.raises(ValidationError) as exc_info:
            validator.is_valid('55V0001')

    assert exc_info.value.reason == ValidationError.REMOTE_CHECK_FAILED


@pytest.mark.parametrize('mock_response', [
    response(error=ValueError('not json')),
    response(['valid']),
    response({'ok': True}),
])
def test_malformed_response(validator, mock_response):
    with patch('scanprint_service.validators.requests.post', return_value=mock_response):
        with pytest.raises(ValidationError) as exc_info:
            validator.is_valid('55V0001')

    assert exc_info.value.details['error'] == 'Invalid response from validation service'
