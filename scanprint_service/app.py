"""
ScanPrint Service - Main Application
====================================

Scan station service: two serial scans in, one dual-barcode CPCL label out.

Run: python -m scanprint_service
"""

import sys
import platform
import socket as sock
from datetime import datetime
from io import BytesIO
from typing import Optional

from flask import Flask, Response, request, jsonify, send_file
from flask_cors import CORS

from . import __version__
from .config import (
    PORT, HOST, DEBUG, DATA_DIR, PRINTER_TYPES, DEFAULT_PROTOCOL, REMOTE_VALIDATOR_URL,
    LOG_LEVEL, LOG_FILE_ENABLED, FALLBACK_TITLE,
)
from .handlers import get_handler
from .labels.cpcl import render, serialize
from .labels.layout import compute_layout
from .labels.preview import render_preview_png
from .logging_config import setup_logging, get_logger
from .models import Printer, LabelConfiguration
from .protocols import parse_protocol
from .storage import (
    LabelConfigStore, PrefixRegistry, TitleRegistry, CounterStore, PrintHistory, AuditLog,
    PrinterStore,
)
from .validators import RemotePrefixValidator
from .workflow import ScanWorkflow

logger = get_logger(__name__)

# =============================================================================
# Application Setup
# =============================================================================

app = Flask(__name__)
CORS(app)

_configs: LabelConfigStore = None
_prefixes: PrefixRegistry = None
_titles: TitleRegistry = None
_counters: CounterStore = None
_history: PrintHistory = None
_audit_log: AuditLog = None
_printers: PrinterStore = None
_workflow: ScanWorkflow = None
_active_printer_id: Optional[str] = None


def _active_handler():
    """Handler of the connected printer, or None."""
    if not _active_printer_id:
        return None
    printer = _printers.get(_active_printer_id)
    if printer is None:
        return None
    handler_class = get_handler(PRINTER_TYPES.get(printer.printer_type, {}).get('handler'))
    return handler_class(printer) if handler_class else None


def init_service(data_dir=DATA_DIR, remote_validator_url: Optional[str] = REMOTE_VALIDATOR_URL):
    """
    Load the stores and start a fresh scan session.

    Args:
        data_dir: Storage directory, or None to keep everything in memory
        remote_validator_url: Optional remote prefix validation service
    """
    global _configs, _prefixes, _titles, _counters, _history, _audit_log, _printers
    global _workflow, _active_printer_id

    _configs = LabelConfigStore(data_dir)
    _prefixes = PrefixRegistry(data_dir)
    _titles = TitleRegistry(data_dir)
    _counters = CounterStore(data_dir)
    _history = PrintHistory(data_dir)
    _audit_log = AuditLog(data_dir)
    _printers = PrinterStore(data_dir)
    _active_printer_id = None

    _titles.initialize_defaults()

    remote_validator = RemotePrefixValidator(remote_validator_url) if remote_validator_url else None
    _workflow = ScanWorkflow(
        config_store=_configs,
        prefix_registry=_prefixes,
        title_registry=_titles,
        counters=_counters,
        history=_history,
        audit_log=_audit_log,
        transport_provider=_active_handler,
        protocol=parse_protocol(DEFAULT_PROTOCOL),
        remote_validator=remote_validator,
    )
    return _workflow


def _error(message: str, status: int):
    return jsonify({'success': False, 'error': message}), status


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.route('/api', methods=['GET'])
def api_info():
    """API info (JSON)."""
    return jsonify({
        'service': 'ScanPrint Service',
        'version': __version__,
        'status': 'running',
        'endpoints': {
            'health': '/health',
            'session': '/api/session',
            'printers': '/api/printers',
            'label_configs': '/api/label-configs/<name>',
            'prefixes': '/api/prefixes',
            'titles': '/api/titles',
            'counters': '/api/counters',
            'history': '/api/history',
            'errors': '/api/errors',
            'diagnostics': '/api/diagnostics',
            'preview': '/api/preview',
        }
    })


@app.route('/health', methods=['GET'])
def health():
    """Health check with system info."""
    return jsonify({
        'status': 'online',
        'version': __version__,
        'hostname': sock.gethostname(),
        'platform': platform.system(),
        'python': sys.version.split()[0],
        'printers_registered': len(_printers.all()),
        'printer_connected': _active_handler() is not None,
        'timestamp': datetime.now().isoformat(),
    })


# =============================================================================
# Printer Management API
# =============================================================================

@app.route('/api/printers', methods=['GET'])
def list_printers():
    """List all registered printers."""
    printers = _printers.all()
    return jsonify({
        'success': True,
        'printers': [p.to_dict() for p in printers],
        'active_printer_id': _active_printer_id,
        'count': len(printers)
    })


@app.route('/api/printers', methods=['POST'])
def add_printer():
    """Add a new printer."""
    data = request.get_json(silent=True)
    if not data:
        return _error('Request body required', 400)

    if not data.get('name'):
        return _error('Printer name required', 400)
    if not data.get('printer_type'):
        return _error('Printer type required', 400)
    if data['printer_type'] not in PRINTER_TYPES:
        return _error(f'Invalid printer type. Valid: {list(PRINTER_TYPES.keys())}', 400)

    printer = Printer(
        name=data['name'],
        printer_type=data['printer_type'],
        model=data.get('model', ''),
        connection_mode=data.get('connection_mode', 'network'),
        host=data.get('host'),
        port=data.get('port', PRINTER_TYPES[data['printer_type']].get('default_port', 9100)),
    )
    _printers.add(printer)
    logger.info(f"Printer added: {printer.name} ({printer.id})")

    return jsonify({
        'success': True,
        'printer': printer.to_dict(),
        'message': 'Printer added successfully'
    }), 201


@app.route('/api/printers/<printer_id>', methods=['GET'])
def get_printer(printer_id):
    """Get printer details."""
    printer = _printers.get(printer_id)
    if not printer:
        return _error('Printer not found', 404)

    return jsonify({'success': True, 'printer': printer.to_dict()})


@app.route('/api/printers/<printer_id>', methods=['DELETE'])
def delete_printer(printer_id):
    """Delete a printer."""
    global _active_printer_id

    if not _printers.remove(printer_id):
        return _error('Printer not found', 404)
    if _active_printer_id == printer_id:
        _active_printer_id = None

    return jsonify({'success': True, 'message': 'Printer deleted'})


def _handler_for(printer_id):
    """(printer, handler, error response) for a printer id."""
    printer = _printers.get(printer_id)
    if not printer:
        return None, None, _error('Printer not found', 404)

    handler_class = get_handler(PRINTER_TYPES[printer.printer_type]['handler'])
    if not handler_class:
        protocol = PRINTER_TYPES[printer.printer_type]['protocol']
        return printer, None, _error(f'No handler for {protocol} printers', 400)
    return printer, handler_class(printer), None


@app.route('/api/printers/<printer_id>/test', methods=['POST'])
def test_printer(printer_id):
    """Test connection to printer."""
    printer, handler, error = _handler_for(printer_id)
    if error:
        return error

    result = handler.test_connection()
    if not result['success']:
        printer.update_status('offline', result.get('error'))
    elif printer.status != 'connected':
        printer.update_status('online')
    _printers.save()

    return jsonify(result)


@app.route('/api/printers/<printer_id>/status', methods=['GET'])
def printer_status(printer_id):
    """Get printer status."""
    printer, handler, error = _handler_for(printer_id)
    if error:
        return error

    result = handler.get_status()
    if not result['success'] and printer.status == 'connected':
        _audit_safe(f"Printer disconnected: {result.get('error')}", printer.name)
        printer.update_status('offline', result.get('error'))
        _printers.save()

    return jsonify(result)


@app.route('/api/printers/<printer_id>/connect', methods=['POST'])
def connect_printer(printer_id):
    """Select a printer for the scan station."""
    global _active_printer_id

    printer, handler, error = _handler_for(printer_id)
    if error:
        return error

    # Only one printer is connected at a time
    previous = _active_handler()
    if previous is not None and previous.printer.id != printer_id:
        previous.disconnect()

    result = handler.connect()
    if result['success']:
        _active_printer_id = printer_id
        logger.info(f"Printer connected: {printer.name} ({printer.address})")
    else:
        if _active_printer_id == printer_id:
            _active_printer_id = None
        _audit_safe(f"Printer connection failed: {result.get('error')}", printer.name)
    _printers.save()

    result['printer'] = printer.to_dict()
    return jsonify(result), 200 if result['success'] else 502


@app.route('/api/printers/disconnect', methods=['POST'])
def disconnect_printer():
    """Release the connected printer."""
    global _active_printer_id

    handler = _active_handler()
    if handler is not None:
        handler.disconnect()
        _printers.save()
    _active_printer_id = None
    return jsonify({'success': True, 'message': 'Printer disconnected'})


@app.route('/api/printers/<printer_id>/test-print', methods=['POST'])
def test_print(printer_id):
    """Print the diagnostic label."""
    printer, handler, error = _handler_for(printer_id)
    if error:
        return error

    result = handler.print_test_label()
    if not result['success']:
        _audit_safe(f"Test print failed: {result.get('error')}", printer.name)
    return jsonify(result)


def _audit_safe(message: str, tag: Optional[str] = None):
    try:
        _audit_log.append(message, tag)
    except OSError as e:
        logger.warning(f"Failed to log error: {e}")


# =============================================================================
# Scan Session API
# =============================================================================

def _session_dict():
    return {
        'state': _workflow.state.to_dict(),
        'protocol': _workflow.protocol.name,
        'printer_connected': _active_handler() is not None,
        'scanned_serials': _workflow.scanned_serials,
        'total_scanned': len(_workflow.scanned_serials),
        'config_name': _workflow.config_name,
        'config_loaded': _workflow.config is not None,
    }


@app.route('/api/session', methods=['GET'])
def get_session():
    """Current scan state."""
    return jsonify({'success': True, **_session_dict()})


@app.route('/api/session/scan', methods=['POST'])
def scan_serial():
    """Submit one completed scan."""
    data = request.get_json(silent=True)
    if not data or 'serial' not in data:
        return _error('serial required', 400)

    outcome = _workflow.scan(str(data['serial']))
    return jsonify({'success': outcome.accepted, **outcome.to_dict()})


@app.route('/api/session/print', methods=['POST'])
def print_pair():
    """Print (or retry printing) the validated pair."""
    outcome = _workflow.request_print()
    return jsonify({'success': outcome.printed, **outcome.to_dict()})


@app.route('/api/session/clear', methods=['POST'])
def clear_session():
    """Operator clear."""
    _workflow.clear()
    return jsonify({'success': True, **_session_dict()})


@app.route('/api/session/refresh', methods=['POST'])
def refresh_session():
    """Re-read the label configuration."""
    _workflow.refresh()
    return jsonify({'success': True, **_session_dict()})


@app.route('/api/session/new', methods=['POST'])
def new_session():
    """Start a new session (forgets the scanned serials)."""
    _workflow.new_session()
    return jsonify({'success': True, **_session_dict()})


@app.route('/api/session/protocol', methods=['GET', 'PUT'])
def session_protocol():
    """Get or select the printer protocol."""
    if request.method == 'PUT':
        data = request.get_json(silent=True)
        if not data or not data.get('protocol'):
            return _error('protocol required', 400)
        _workflow.protocol = parse_protocol(data['protocol'])

    return jsonify({'success': True, 'protocol': _workflow.protocol.name})


# =============================================================================
# Label Configuration API
# =============================================================================

_INT_FIELDS = (
    'width', 'height', 'barcode_height', 'barcode_width_scale', 'barcode_position_x',
    'barcode_position_y', 'text_position_x', 'text_position_y', 'text_size', 'block_spacing',
    'margin',
)


@app.route('/api/label-configs', methods=['GET'])
def list_label_configs():
    """List label configurations."""
    return jsonify({
        'success': True,
        'configs': {name: c.to_dict() for name, c in _configs.all().items()},
    })


@app.route('/api/label-configs/<name>', methods=['GET'])
def get_label_config(name):
    """Get a label configuration."""
    config = _configs.get(name)
    if config is None:
        return _error('Label configuration not found', 404)
    return jsonify({'success': True, 'name': name, 'config': config.to_dict()})


@app.route('/api/label-configs/<name>', methods=['PUT'])
def save_label_config(name):
    """Create or update a label configuration (takes effect on session refresh)."""
    data = request.get_json(silent=True)
    if not data:
        return _error('Request body required', 400)

    current = _configs.get(name) or LabelConfiguration()
    values = current.to_dict()
    for key, value in data.items():
        if key not in values:
            continue
        if key in _INT_FIELDS:
            try:
                value = int(value)
            except (TypeError, ValueError):
                return _error(f'{key} must be an integer', 400)
        elif key == 'center_contents':
            value = bool(value)
        values[key] = value

    config = LabelConfiguration.from_dict(values)
    _configs.save(name, config)
    return jsonify({'success': True, 'name': name, 'config': config.to_dict()})


# =============================================================================
# Prefix & Title Registry API
# =============================================================================

@app.route('/api/prefixes', methods=['GET'])
def list_prefixes():
    """List valid serial prefixes."""
    return jsonify({'success': True, 'prefixes': _prefixes.prefixes()})


@app.route('/api/prefixes', methods=['PUT'])
def set_prefixes():
    """Replace the prefix list. Accepts a list or a comma-separated string."""
    data = request.get_json(silent=True)
    if not data or 'prefixes' not in data:
        return _error('prefixes required', 400)

    prefixes = data['prefixes']
    if isinstance(prefixes, str):
        prefixes = prefixes.split(',')
    if not isinstance(prefixes, list):
        return _error('prefixes must be a list or a comma-separated string', 400)

    return jsonify({'success': True, 'prefixes': _prefixes.set_prefixes(prefixes)})


@app.route('/api/titles', methods=['GET'])
def list_titles():
    """List prefix -> title mappings."""
    return jsonify({'success': True, 'titles': [e.to_dict() for e in _titles.entries()]})


@app.route('/api/titles', methods=['POST'])
def add_title():
    """Add or replace a prefix -> title mapping."""
    data = request.get_json(silent=True)
    if not data or not str(data.get('prefix', '')).strip() or not str(data.get('title', '')).strip():
        return _error('prefix and title required', 400)

    entry = _titles.add(str(data['prefix']), str(data['title']))
    return jsonify({'success': True, 'title': entry.to_dict()}), 201


@app.route('/api/titles/<prefix>', methods=['DELETE'])
def delete_title(prefix):
    """Remove a prefix -> title mapping."""
    if not _titles.remove(prefix):
        return _error('Title mapping not found', 404)
    return jsonify({'success': True, 'message': 'Title mapping removed'})


# =============================================================================
# Counters, History & Error Log
# =============================================================================

@app.route('/api/counters', methods=['GET'])
def list_counters():
    """Printed-label counters per prefix."""
    counts = _counters.all()
    labels = {}
    for prefix, count in counts.items():
        labels[prefix] = {'title': _titles.lookup(prefix) or FALLBACK_TITLE, 'count': count}
    return jsonify({'success': True, 'counters': labels})


@app.route('/api/counters/reset', methods=['POST'])
def reset_counters():
    """Reset all counters."""
    _counters.reset_all()
    return jsonify({'success': True, 'message': 'Counters reset'})


@app.route('/api/history', methods=['GET'])
def list_history():
    """List printed labels, most recent first."""
    limit = request.args.get('limit', 50, type=int)
    records = _history.records(limit)
    return jsonify({
        'success': True,
        'records': [r.to_dict() for r in records],
        'count': len(records)
    })


@app.route('/api/history/export', methods=['GET'])
def export_history():
    """Download the print history as CSV."""
    filename = f"diagnostics-{datetime.now().strftime('%Y-%m-%d')}.csv"
    return Response(
        _history.export_csv(),
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={filename}'}
    )


@app.route('/api/history', methods=['DELETE'])
def clear_history():
    """Clear print history."""
    _history.clear()
    return jsonify({'success': True, 'message': 'Print history cleared'})


@app.route('/api/errors', methods=['GET'])
def list_errors():
    """List error log entries, most recent first."""
    entries = _audit_log.entries()
    return jsonify({
        'success': True,
        'errors': [e.to_dict() for e in entries],
        'count': len(entries)
    })


@app.route('/api/errors', methods=['DELETE'])
def clear_errors():
    """Clear the error log."""
    _audit_log.clear()
    return jsonify({'success': True, 'message': 'Error log cleared'})


@app.route('/api/diagnostics', methods=['GET'])
def diagnostics():
    """Session totals for the diagnostics page."""
    labels_printed = len(_history.records())
    return jsonify({
        'success': True,
        'total_scans': labels_printed * 2,
        'labels_printed': labels_printed,
        'error_count': len(_audit_log.entries()),
        'counters': _counters.all(),
    })


# =============================================================================
# Label Preview
# =============================================================================

def _preview_args():
    serial1 = request.args.get('serial1', '55V10M29F04381')
    serial2 = request.args.get('serial2', '55V10M29F04362')
    title = request.args.get('title') or _titles.lookup(serial1) or FALLBACK_TITLE
    config_name = request.args.get('config', _workflow.config_name)
    return serial1, serial2, title, _configs.get(config_name)


@app.route('/api/preview', methods=['GET'])
def preview_label():
    """PNG preview of a label, drawn from the same layout as the print job."""
    serial1, serial2, title, config = _preview_args()
    scale = request.args.get('scale', 2, type=int)

    layout = compute_layout(serial1, serial2, title, config)
    png = render_preview_png(layout, serial1, serial2, title, scale=scale)
    return send_file(BytesIO(png), mimetype='image/png')


@app.route('/api/preview/layout', methods=['GET'])
def preview_layout():
    """Layout coordinates and the CPCL job for a label."""
    serial1, serial2, title, config = _preview_args()

    layout = compute_layout(serial1, serial2, title, config)
    lines = render(layout, serial1, serial2, title, layout.label_width, layout.label_height)
    return jsonify({
        'success': True,
        'title': title,
        'layout': layout.to_dict(),
        'cpcl': serialize(lines),
    })


# =============================================================================
# Main
# =============================================================================

init_service(data_dir=None, remote_validator_url=None)


def main():
    """Run the service."""
    setup_logging(log_level=LOG_LEVEL, enable_file_logging=LOG_FILE_ENABLED)

    print("=" * 60)
    print("  ScanPrint Service")
    print("=" * 60)
    print(f"  Version: {__version__}")
    print(f"  Port: {PORT}")
    print(f"  Data: {DATA_DIR}")
    print(f"  Protocol: {DEFAULT_PROTOCOL}")
    print("=" * 60)
    print("  API Endpoints:")
    print("    GET  /health                          - Health check")
    print("    GET  /api/session                     - Scan state")
    print("    POST /api/session/scan                - Submit scan")
    print("    POST /api/session/print               - Retry print")
    print("    POST /api/session/clear               - Clear fields")
    print("    GET  /api/printers                    - List printers")
    print("    POST /api/printers/{id}/connect       - Select printer")
    print("    PUT  /api/label-configs/{name}        - Label settings")
    print("    PUT  /api/prefixes                    - Valid prefixes")
    print("    GET  /api/preview                     - Label preview")
    print("=" * 60)

    init_service(DATA_DIR, REMOTE_VALIDATOR_URL)
    print(f"  Loaded {len(_printers.all())} printer(s), {len(_prefixes.prefixes())} prefix(es)")
    print("=" * 60)

    app.run(host=HOST, port=PORT, debug=DEBUG, threaded=True)


if __name__ == '__main__':
    main()
