"""Tests for the JSON-file stores."""

import json

from scanprint_service.models import LabelConfiguration, Printer, PrintRecord
from scanprint_service.storage import (
    AuditLog, CounterStore, DEFAULT_TITLES, LabelConfigStore, PrefixRegistry, PrintHistory,
    PrinterStore, TitleRegistry,
)


class TestPrefixRegistry:

    def test_set_prefixes_cleans_input(self):
        registry = PrefixRegistry()

        assert registry.set_prefixes([' 55V', '72V ', '', '55V', '  ']) == ['55V', '72V']

    def test_add_remove(self):
        registry = PrefixRegistry()
        registry.add('55V')
        registry.add('72V')
        registry.add('55V')

        assert registry.remove(' 55V') == ['72V']

    def test_matching_prefix(self):
        registry = PrefixRegistry()
        registry.set_prefixes(['55', '55V'])

        assert registry.matching_prefix('55V0001') == '55'
        assert registry.is_valid('55V0001')
        assert not registry.is_valid('72V0001')

    def test_empty_registry_accepts_nothing(self):
        assert not PrefixRegistry().is_valid('55V0001')

    def test_persisted(self, tmp_path):
        PrefixRegistry(tmp_path).set_prefixes(['55V', '72V'])

        assert PrefixRegistry(tmp_path).prefixes() == ['55V', '72V']
        assert json.loads((tmp_path / 'prefixes.json').read_text()) == ['55V', '72V']


class TestTitleRegistry:

    def test_defaults_installed_once(self, tmp_path):
        registry = TitleRegistry(tmp_path)

        assert registry.initialize_defaults()
        assert registry.entries() == DEFAULT_TITLES
        assert not registry.initialize_defaults()

    def test_defaults_not_installed_over_existing(self):
        registry = TitleRegistry()
        registry.add('99Z', 'Custom')

        assert not registry.initialize_defaults()
        assert registry.lookup('55V') is None

    def test_lookup_first_match_wins(self):
        registry = TitleRegistry()
        registry.initialize_defaults()
        registry.add('5', 'Generic')

        assert registry.lookup('55V') == 'Dual Band'
        assert registry.lookup('55Y') == 'New Dual Band'
        assert registry.lookup('72V') == 'Tri Band'
        assert registry.lookup('51A') == 'Generic'
        assert registry.lookup('99Z') is None

    def test_add_replaces_in_place(self):
        registry = TitleRegistry()
        registry.initialize_defaults()

        registry.add('72V', 'Quad Band')

        assert [e.prefix for e in registry.entries()] == ['55V', '72V', '55Y']
        assert registry.lookup('72V') == 'Quad Band'

    def test_remove(self, tmp_path):
        registry = TitleRegistry(tmp_path)
        registry.initialize_defaults()

        assert registry.remove('55V')
        assert not registry.remove('55V')
        assert TitleRegistry(tmp_path).lookup('55V') is None


class TestLabelConfigStore:

    def test_missing_config(self):
        assert LabelConfigStore().get('default') is None

    def test_roundtrip(self, tmp_path):
        config = LabelConfiguration(block_spacing=110, center_contents=False)
        LabelConfigStore(tmp_path).save('default', config)

        assert LabelConfigStore(tmp_path).get('default') == config

    def test_unknown_keys_ignored(self, tmp_path):
        (tmp_path / 'label_configs.json').write_text(
            json.dumps({'default': {'barcode_height': 70, 'legacy_field': 'x'}}))

        assert LabelConfigStore(tmp_path).get('default').barcode_height == 70

    def test_corrupt_file_loads_empty(self, tmp_path):
        (tmp_path / 'label_configs.json').write_text('{not json')

        assert LabelConfigStore(tmp_path).all() == {}


class TestHistory:

    def test_counter_increment(self, tmp_path):
        counters = CounterStore(tmp_path)

        assert counters.increment('55V') == 1
        assert counters.increment('55V') == 2
        assert CounterStore(tmp_path).get('55V') == 2

    def test_counter_reset(self, tmp_path):
        counters = CounterStore(tmp_path)
        counters.increment('72V')

        counters.reset_all()

        assert CounterStore(tmp_path).all() == {}

    def test_history_newest_first(self, tmp_path):
        history = PrintHistory(tmp_path)
        history.append(PrintRecord.for_pair('55V1', '55V2', 'Dual Band', 'ZQ320'))
        history.append(PrintRecord.for_pair('55V3', '55V4', 'Dual Band', 'ZQ320'))

        records = PrintHistory(tmp_path).records()

        assert [r.serial_number for r in records] == ['55V3, 55V4', '55V1, 55V2']
        assert PrintHistory(tmp_path).records(limit=1)[0].serial_number == '55V3, 55V4'
        assert PrintHistory(tmp_path).records(limit=0) == []

    def test_history_limit(self):
        history = PrintHistory(limit=2)
        for i in range(3):
            history.append(PrintRecord.for_pair(f'55V{i}', f'55V{i}b', 'Dual Band', 'ZQ320'))

        assert [r.serial_number for r in history.records()] == ['55V2, 55V2b', '55V1, 55V1b']

    def test_audit_log(self, tmp_path):
        log = AuditLog(tmp_path)
        log.append('Invalid barcode prefix')
        log.append('Print failed: Paper out', 'ZQ320')

        entries = AuditLog(tmp_path).entries()

        assert [(e.message, e.tag) for e in entries] == [
            ('Print failed: Paper out', 'ZQ320'),
            ('Invalid barcode prefix', None),
        ]

        log.clear()
        assert AuditLog(tmp_path).entries() == []


class TestPrinterStore:

    def test_roundtrip(self, tmp_path):
        printer = Printer(name='ZQ320', printer_type='zebra_mobile', host='10.0.0.5')
        PrinterStore(tmp_path).add(printer)

        loaded = PrinterStore(tmp_path).get(printer.id)

        assert loaded.name == 'ZQ320'
        assert loaded.host == '10.0.0.5'

    def test_connection_not_restored(self, tmp_path):
        printer = Printer(name='ZQ320', printer_type='zebra_mobile', status='connected')
        PrinterStore(tmp_path).add(printer)

        assert PrinterStore(tmp_path).get(printer.id).status == 'unknown'

    def test_remove(self):
        store = PrinterStore()
        printer = store.add(Printer(name='ZQ320', printer_type='cpcl'))

        assert store.remove(printer.id)
        assert not store.remove(printer.id)
        assert store.all() == []
