"""Tests for exceptions, logging setup and models."""

import logging

import pytest

from scanprint_service.exceptions import (
    ConfigurationError, PrintTransportError, RecordingError, ScanPrintError, ValidationError,
)
from scanprint_service.logging_config import get_logger, setup_logging
from scanprint_service.models import (
    AuditEntry, LabelConfiguration, PrefixTitleEntry, Printer, PrintJob, PrintRecord,
)
from scanprint_service.workflow import FirstValid, Idle, Notice


class TestExceptions:

    def test_hierarchy(self):
        for error in (ValidationError.empty(), PrintTransportError.not_connected(),
                      RecordingError(RecordingError.LOG_APPEND_FAILED, 'disk full'), ConfigurationError()):
            assert isinstance(error, ScanPrintError)

    def test_str_includes_details(self):
        error = ValidationError.duplicate('55V0001')

        assert str(error).startswith('Duplicate serial number detected | Details:')
        assert error.details == {'reason': 'duplicate', 'serial': '55V0001'}

    def test_prefix_messages_differ(self):
        local = ValidationError.prefix_mismatch('55V0001')
        remote = ValidationError.prefix_mismatch('55V0001', remote=True)
        failed = ValidationError.remote_check_failed('55V0001', 'timeout')

        assert len({local.message, remote.message, failed.message}) == 3

    def test_transport_errors(self):
        error = PrintTransportError.transfer_failed('Paper out', 'ZQ320')

        assert error.message == 'Print failed: Paper out'
        assert error.printer == 'ZQ320'
        assert 'ZPL' in PrintTransportError.protocol_mismatch('ZPL').message

    def test_recording_error_messages(self):
        counter = RecordingError(RecordingError.COUNTER_INCREMENT_FAILED, 'disk full')
        log = RecordingError(RecordingError.LOG_APPEND_FAILED, 'disk full')

        assert 'counter' in counter.message
        assert 'print record' in log.message


class TestLogging:

    @pytest.fixture(autouse=True)
    def reset_logger(self):
        yield
        logger = logging.getLogger('scanprint_service')
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    def test_setup_logging_level_name(self):
        logger = setup_logging('debug')

        assert logger.name == 'scanprint_service'
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_unknown_level_defaults_to_info(self):
        assert setup_logging('LOUD').level == logging.INFO

    def test_file_logging(self, tmp_path):
        logger = setup_logging(logging.INFO, log_dir=tmp_path, enable_file_logging=True)
        get_logger('workflow').info('First serial scanned')

        for handler in logger.handlers:
            handler.flush()
        content = (tmp_path / 'scanprint_service.log').read_text()
        assert 'First serial scanned' in content
        assert '[MainThread]' in content

    def test_get_logger_namespace(self):
        assert get_logger('workflow').name == 'scanprint_service.workflow'
        assert get_logger('scanprint_service.app').name == 'scanprint_service.app'


class TestModels:

    def test_label_configuration_from_dict(self):
        config = LabelConfiguration.from_dict({'block_spacing': 100, 'unknown': 1})

        assert config.block_spacing == 100
        assert config.to_dict()['barcode_type'] == '128'

    def test_prefix_title_entry_matches(self):
        assert PrefixTitleEntry(' 55V ', 'Dual Band').matches('55V0001')
        assert not PrefixTitleEntry('', 'Any').matches('55V0001')

    def test_record_roundtrip(self):
        record = PrintRecord.for_pair('55V1', '55V2', 'Dual Band', 'ZQ320')
        entry = AuditEntry('Print failed', 'ZQ320')

        assert PrintRecord.from_dict(record.to_dict()) == record
        assert AuditEntry.from_dict(entry.to_dict()) == entry

    def test_print_job_lifecycle(self):
        job = PrintJob(printer='ZQ320', serial1='55V1', serial2='55V2')
        job.start(120)
        job.fail('Paper out')

        assert job.status == 'failed'
        assert job.bytes_sent == 120
        assert job.to_dict()['error_message'] == 'Paper out'

    def test_state_dict(self):
        assert FirstValid('55V0001').to_dict() == {
            'stage': 'first_valid',
            'first': {'state': 'valid', 'value': '55V0001'},
            'second': {'state': 'empty', 'value': None},
        }
        assert Idle().to_dict()['first']['state'] == 'empty'

    def test_error_notice_is_blocking(self):
        assert Notice.error('Invalid Barcode').blocking
        assert not Notice.warning('Printed, not recorded').blocking

    def test_printer_protocol_and_address(self):
        printer = Printer(name='ZQ320', printer_type='zebra_mobile', host='10.0.0.5')

        assert printer.protocol == 'CPCL'
        assert printer.address == '10.0.0.5:9100'
        assert Printer(printer_type='zebra').protocol == 'ZPL'
        assert Printer(connection_mode='usb').address == 'usb'

    def test_printer_from_dict_drops_derived_keys(self):
        printer = Printer(name='ZQ320', printer_type='cpcl')
        printer.update_status('connected')

        loaded = Printer.from_dict(printer.to_dict())

        assert loaded.last_connected_at == printer.last_connected_at
        assert loaded.protocol == 'CPCL'
