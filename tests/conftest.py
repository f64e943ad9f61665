"""Shared fixtures: in-memory stores and a recording printer handler."""

import threading

import pytest

from scanprint_service.handlers.base import BaseHandler
from scanprint_service.models import Printer
from scanprint_service.storage import (
    LabelConfigStore, PrefixRegistry, TitleRegistry, CounterStore, PrintHistory, AuditLog,
)
from scanprint_service.workflow import ScanWorkflow


class FakeHandler(BaseHandler):
    """Handler that records payloads instead of opening a socket."""

    def __init__(self, printer=None, result=None):
        super().__init__(printer or Printer(name='ZQ320', printer_type='zebra_mobile',
                                            host='127.0.0.1', status='connected'))
        self.result = result if result is not None else {'success': True}
        self.payloads = []
        # Set to hold send() until the test releases it
        self.gate = None
        self.entered = threading.Event()

    def send(self, payload):
        self.payloads.append(payload)
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        return self.result

    def get_status(self):
        return {'success': True, 'status': self.printer.status}

    def test_connection(self):
        return {'success': True}


class BrokenStore:
    """Collaborator whose every call fails."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise OSError(f'{name} unavailable')
        return fail


@pytest.fixture
def handler():
    return FakeHandler()


@pytest.fixture
def stores():
    titles = TitleRegistry()
    titles.initialize_defaults()
    prefixes = PrefixRegistry()
    prefixes.set_prefixes(['55V'])
    return {
        'config_store': LabelConfigStore(),
        'prefix_registry': prefixes,
        'title_registry': titles,
        'counters': CounterStore(),
        'history': PrintHistory(),
        'audit_log': AuditLog(),
    }


@pytest.fixture
def make_workflow(stores, handler):
    """Build a workflow over the in-memory stores; keyword args override."""
    def build(**overrides):
        kwargs = dict(stores)
        kwargs['transport_provider'] = lambda: handler
        kwargs.update(overrides)
        return ScanWorkflow(**kwargs)
    return build


@pytest.fixture
def workflow(make_workflow):
    return make_workflow()
