"""
Scan Workflow
=============

Two-scan, one-label workflow of the scan station.

The operator scans a first serial, then a second one. Each scan is
validated (not empty, not already scanned this session, configured
prefix, optional remote check). Once both are valid the label is printed
automatically, exactly once, and the fields reset for the next pair.

Concurrency:
    Scans and print requests may arrive on different threads (one Flask
    worker per request). Every state read and transition happens under
    ``_lock``; the Pending and Printing states are written before any
    collaborator call starts, so a second event arriving meanwhile sees
    them and is ignored. Collaborator calls (remote check, transport,
    recording) run outside the lock. ``clear()`` bumps ``_generation`` so
    that a result arriving after the clear no longer changes the state.

Usage:
    workflow = ScanWorkflow(configs, prefixes, titles, counters, history,
                            audit_log, transport_provider=lambda: handler)
    workflow.scan('55V0001')
    outcome = workflow.scan('55V0002')   # prints
"""

import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Set

from ..config import CONFIG_NAME, FALLBACK_TITLE, PRINT_QUANTITY
from ..exceptions import (
    ScanPrintError, ValidationError, PrintTransportError, RecordingError, ConfigurationError,
)
from ..handlers.base import BaseHandler
from ..labels.cpcl import render, serialize
from ..labels.layout import compute_layout
from ..logging_config import get_logger
from ..models import LabelConfiguration, PrintJob, PrintRecord
from ..protocols import PrintProtocol, TextCommandProtocol, TEXT_COMMAND
from .notices import Notice
from .states import (
    ScanState, Idle, FirstPending, FirstValid, SecondPending, BothValid, Printing,
)

logger = get_logger(__name__)

FIRST = 'first'
SECOND = 'second'

# Title lookup key when no configured prefix matches the serial
DEFAULT_PREFIX_LENGTH = 3

_STRIP_CHARS = str.maketrans('', '', '\r\n\t')


def normalize_scanned_value(value: str) -> str:
    """Remove scanner control characters and surrounding whitespace."""
    return (value or '').translate(_STRIP_CHARS).strip()


@dataclass
class PrintOutcome:
    """Result of a print request."""

    PRINTED = 'printed'
    FAILED = 'failed'
    BLOCKED = 'blocked'
    IGNORED = 'ignored'

    status: str
    state: ScanState
    job: Optional[PrintJob] = None
    error: Optional[ScanPrintError] = None
    recording_errors: List[RecordingError] = field(default_factory=list)
    notices: List[Notice] = field(default_factory=list)

    @property
    def printed(self) -> bool:
        return self.status == self.PRINTED

    @property
    def recorded(self) -> bool:
        return self.printed and not self.recording_errors

    def to_dict(self):
        return {
            'status': self.status,
            'state': self.state.to_dict(),
            'job': self.job.to_dict() if self.job else None,
            'error': self.error.message if self.error else None,
            'recorded': self.recorded,
            'notices': [n.to_dict() for n in self.notices],
        }


@dataclass
class ScanOutcome:
    """Result of one scan event."""

    accepted: bool
    state: ScanState
    slot: Optional[str] = None
    serial: str = ''
    ignored: bool = False
    error: Optional[ScanPrintError] = None
    notices: List[Notice] = field(default_factory=list)
    print_outcome: Optional[PrintOutcome] = None

    def to_dict(self):
        return {
            'accepted': self.accepted,
            'ignored': self.ignored,
            'slot': self.slot,
            'serial': self.serial,
            'state': self.state.to_dict(),
            'error': self.error.message if self.error else None,
            'reason': getattr(self.error, 'reason', None),
            'notices': [n.to_dict() for n in self.notices],
            'print': self.print_outcome.to_dict() if self.print_outcome else None,
        }


class ScanWorkflow:
    """State machine of one scan station session."""

    def __init__(
        self,
        config_store,
        prefix_registry,
        title_registry,
        counters,
        history,
        audit_log,
        transport_provider: Callable[[], Optional[BaseHandler]],
        protocol: PrintProtocol = TEXT_COMMAND,
        remote_validator=None,
        config_name: str = CONFIG_NAME,
        fallback_title: str = FALLBACK_TITLE,
        quantity: int = PRINT_QUANTITY,
        auto_print: bool = True,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ):
        """
        Args:
            config_store: ``get(name) -> LabelConfiguration | None``
            prefix_registry: ``prefixes() -> list of str``
            title_registry: ``lookup(prefix) -> str | None``
            counters: ``increment(prefix)``
            history: ``append(PrintRecord)``
            audit_log: ``append(message, tag)``
            transport_provider: Returns the selected printer handler, or None
            protocol: Printer language selected at the station
            remote_validator: Optional ``is_valid(serial) -> bool``
            config_name: Label configuration record to use
            fallback_title: Title when no mapping matches
            quantity: Labels per job
            auto_print: Print as soon as the second serial is valid
            on_notice: Called with every operator notice
        """
        self._configs = config_store
        self._prefixes = prefix_registry
        self._titles = title_registry
        self._counters = counters
        self._history = history
        self._audit_log = audit_log
        self._transport_provider = transport_provider
        self._remote_validator = remote_validator
        self.config_name = config_name
        self.fallback_title = fallback_title
        self.quantity = quantity
        self.auto_print = auto_print
        self.on_notice = on_notice

        self._lock = threading.RLock()
        self._state: ScanState = Idle()
        self._protocol = protocol
        self._generation = 0
        self._scanned: List[str] = []
        self._scanned_set: Set[str] = set()
        self._config: Optional[LabelConfiguration] = self._load_config()

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def state(self) -> ScanState:
        with self._lock:
            return self._state

    @property
    def scanned_serials(self) -> List[str]:
        """Serials accepted this session, in scan order."""
        with self._lock:
            return list(self._scanned)

    @property
    def config(self) -> Optional[LabelConfiguration]:
        """Label configuration snapshot of this session."""
        with self._lock:
            return self._config

    @property
    def protocol(self) -> PrintProtocol:
        with self._lock:
            return self._protocol

    @protocol.setter
    def protocol(self, protocol: PrintProtocol):
        with self._lock:
            self._protocol = protocol

    # =========================================================================
    # Session
    # =========================================================================

    def _load_config(self) -> Optional[LabelConfiguration]:
        try:
            config = self._configs.get(self.config_name)
        except Exception as e:
            logger.warning(f"Failed to read label configuration '{self.config_name}': {e}")
            return None
        if config is None:
            logger.info(f"No label configuration '{self.config_name}', using defaults")
        return config

    def refresh(self) -> Optional[LabelConfiguration]:
        """Re-read the label configuration for the following prints."""
        config = self._load_config()
        with self._lock:
            self._config = config
        return config

    def clear(self) -> ScanState:
        """
        Operator clear: empty both fields.

        Results of validations or prints still in progress are discarded
        when they arrive. The session's scanned serials are kept.
        """
        with self._lock:
            self._generation += 1
            self._state = Idle()
            state = self._state
        self._emit([], Notice.info('Cleared all fields'))
        return state

    def new_session(self) -> ScanState:
        """Clear, forget the scanned serials and re-read the configuration."""
        config = self._load_config()
        with self._lock:
            self._generation += 1
            self._state = Idle()
            self._scanned = []
            self._scanned_set = set()
            self._config = config
            return self._state

    # =========================================================================
    # Scanning
    # =========================================================================

    def scan(self, raw: str) -> ScanOutcome:
        """
        Handle one completed scan.

        Fills the first field from Idle and the second from FirstValid.
        Scans arriving in any other state are ignored.
        """
        serial = normalize_scanned_value(raw)

        with self._lock:
            state = self._state
            if isinstance(state, Idle):
                slot, first = FIRST, None
                self._state = FirstPending(serial)
            elif isinstance(state, FirstValid):
                slot, first = SECOND, state.serial
                self._state = SecondPending(first, serial)
            else:
                logger.debug(f"Scan '{serial}' ignored in state {state.stage}")
                return ScanOutcome(accepted=False, state=state, serial=serial, ignored=True)
            generation = self._generation

        notices: List[Notice] = []
        try:
            self._validate(serial)
        except (ValidationError, ConfigurationError) as e:
            with self._lock:
                if generation != self._generation:
                    return self._discarded(serial, slot)
                # A rejected second serial keeps the first one
                self._state = Idle() if slot == FIRST else FirstValid(first)
                state = self._state
            self._reject(e, notices)
            return ScanOutcome(accepted=False, state=state, slot=slot, serial=serial,
                               error=e, notices=notices)

        with self._lock:
            if generation != self._generation:
                return self._discarded(serial, slot)
            self._scanned.append(serial)
            self._scanned_set.add(serial)
            if slot == FIRST:
                self._state = FirstValid(serial)
            else:
                self._state = BothValid(first, serial)
            state = self._state

        logger.info(f"{slot.capitalize()} serial scanned: {serial}")
        self._emit(notices, Notice.success(f'{slot.capitalize()} serial scanned', serial))
        outcome = ScanOutcome(accepted=True, state=state, slot=slot, serial=serial, notices=notices)

        if slot == SECOND and self.auto_print:
            outcome.print_outcome = self.request_print()
            outcome.state = outcome.print_outcome.state
        return outcome

    def _discarded(self, serial: str, slot: str) -> ScanOutcome:
        logger.info(f"Validation result for '{serial}' discarded after clear")
        return ScanOutcome(accepted=False, state=self.state, slot=slot, serial=serial, ignored=True)

    def _validate(self, serial: str):
        """Raise ValidationError or ConfigurationError if ``serial`` is not acceptable."""
        if not serial:
            raise ValidationError.empty()

        with self._lock:
            if serial in self._scanned_set:
                raise ValidationError.duplicate(serial)

        try:
            prefixes = self._configured_prefixes()
        except Exception as e:
            raise ValidationError.remote_check_failed(serial, f'Prefix registry unavailable: {e}') from e

        if not prefixes:
            raise ConfigurationError()
        if not any(serial.startswith(prefix) for prefix in prefixes):
            raise ValidationError.prefix_mismatch(serial)

        if self._remote_validator is None:
            return
        try:
            is_valid = self._remote_validator.is_valid(serial)
        except ValidationError:
            raise
        except Exception as e:
            raise ValidationError.remote_check_failed(serial, str(e)) from e
        if not is_valid:
            raise ValidationError.prefix_mismatch(serial, remote=True)

    def _configured_prefixes(self) -> List[str]:
        return [p.strip() for p in self._prefixes.prefixes() if p and p.strip()]

    def _reject(self, error: ScanPrintError, notices: List[Notice]):
        logger.warning(f"Scan rejected: {error}")
        if isinstance(error, ConfigurationError):
            self._emit(notices, Notice.error('Configuration required', error.message, error.reason))
        else:
            self._emit(notices, Notice.error('Invalid Barcode', error.message, error.reason))

        if getattr(error, 'reason', None) == ValidationError.REMOTE_CHECK_FAILED:
            self._audit(f"Prefix validation error: {error.details.get('error', error.message)}")
        self._audit(error.message)

    # =========================================================================
    # Printing
    # =========================================================================

    def request_print(self) -> PrintOutcome:
        """
        Print the validated pair.

        Only acts in BothValid: repeated or concurrent requests for the same
        pair transmit at most one job. Without CPCL selected, or without a
        connected printer, nothing is sent and the pair stays valid.
        """
        error = None
        with self._lock:
            state = self._state
            if not isinstance(state, BothValid):
                return PrintOutcome(PrintOutcome.IGNORED, state)

            transport = None
            if not isinstance(self._protocol, TextCommandProtocol):
                error = PrintTransportError.protocol_mismatch(self._protocol.name)
            else:
                transport = self._transport_provider()
                if transport is None or not transport.is_connected():
                    error = PrintTransportError.not_connected()

            if error is None:
                self._state = Printing(state.first, state.second)
                generation = self._generation
                config = self._config

        if error is not None:
            notices: List[Notice] = []
            logger.info(f"Auto-print blocked: {error.message}")
            self._audit(error.message)
            if error.reason == PrintTransportError.PROTOCOL_MISMATCH:
                self._emit(notices, Notice.info('Auto-print disabled', error.message, error.reason))
            else:
                self._emit(notices, Notice.error('Cannot auto-print', error.message, error.reason))
            return PrintOutcome(PrintOutcome.BLOCKED, state, error=error, notices=notices)

        return self._print(state.first, state.second, transport, config, generation)

    def _print(self, first: str, second: str, transport: BaseHandler,
               config: Optional[LabelConfiguration], generation: int) -> PrintOutcome:
        notices: List[Notice] = []
        prefix = self._label_prefix(first)
        title = self._resolve_title(prefix)
        job = PrintJob(printer=transport.identifier, serial1=first, serial2=second,
                       title=title, quantity=self.quantity)

        try:
            payload = self._build_job(first, second, title, config, transport)
            job.start(len(payload))
            self._transmit(transport, payload)
        except PrintTransportError as e:
            job.fail(e.message)
            with self._lock:
                if generation == self._generation:
                    # Keep both serials so the operator can retry
                    self._state = BothValid(first, second)
                state = self._state
            logger.error(f"{job.id} failed: {e.message}")
            self._emit(notices, Notice.error('Print failed', e.message, e.reason))
            self._audit(e.message, transport.identifier)
            return PrintOutcome(PrintOutcome.FAILED, state, job=job, error=e, notices=notices)

        job.complete()
        logger.info(f"{job.id} printed '{title}' for {first}, {second} on {transport.identifier}")
        self._emit(notices, Notice.success('Label printed successfully!'))

        recording_errors = self._record(prefix, first, second, title, transport.identifier)
        for recording_error in recording_errors:
            self._emit(notices, Notice.warning('Printed, not recorded',
                                               recording_error.message, recording_error.reason))

        with self._lock:
            if generation == self._generation:
                self._state = Idle()
            state = self._state
        return PrintOutcome(PrintOutcome.PRINTED, state, job=job,
                            recording_errors=recording_errors, notices=notices)

    def _build_job(self, first: str, second: str, title: str,
                   config: Optional[LabelConfiguration], transport: BaseHandler) -> bytes:
        """Lay out and serialize the label; any failure counts as nothing printed."""
        try:
            layout = compute_layout(first, second, title, config)
            lines = render(layout, first, second, title,
                           layout.label_width, layout.label_height, self.quantity)
            return serialize(lines).encode('utf-8')
        except Exception as e:
            logger.exception(f"Failed to build label for {first}, {second}")
            raise PrintTransportError.transfer_failed(str(e), transport.identifier) from e

    def _transmit(self, transport: BaseHandler, payload: bytes):
        """Send the job; any non-success counts as nothing printed."""
        try:
            result = transport.send(payload)
        except Exception as e:
            raise PrintTransportError.transfer_failed(str(e), transport.identifier) from e

        if not isinstance(result, dict) or not result.get('success'):
            error = result.get('error') if isinstance(result, dict) else None
            raise PrintTransportError.transfer_failed(error or 'Unknown print error',
                                                      transport.identifier)

    def _label_prefix(self, serial: str) -> str:
        """Configured prefix of ``serial``; keys the title and the counter."""
        try:
            for prefix in self._configured_prefixes():
                if serial.startswith(prefix):
                    return prefix
        except Exception as e:
            logger.warning(f"Failed to read prefixes: {e}")
        return serial[:DEFAULT_PREFIX_LENGTH]

    def _resolve_title(self, prefix: str) -> str:
        try:
            title = self._titles.lookup(prefix)
        except Exception as e:
            logger.warning(f"Title lookup for '{prefix}' failed: {e}")
            return self.fallback_title
        return title or self.fallback_title

    def _record(self, prefix: str, first: str, second: str, title: str,
                printer: str) -> List[RecordingError]:
        """Best-effort bookkeeping after a successful print."""
        errors: List[RecordingError] = []
        try:
            self._counters.increment(prefix)
        except Exception as e:
            logger.warning(f"Failed to increment counter for '{prefix}': {e}")
            errors.append(RecordingError(RecordingError.COUNTER_INCREMENT_FAILED, str(e)))

        try:
            self._history.append(PrintRecord.for_pair(first, second, title, printer))
        except Exception as e:
            logger.warning(f"Failed to log print record: {e}")
            errors.append(RecordingError(RecordingError.LOG_APPEND_FAILED, str(e)))
        return errors

    # =========================================================================
    # Feedback
    # =========================================================================

    def _emit(self, notices: List[Notice], notice: Notice):
        notices.append(notice)
        if self.on_notice is not None:
            self.on_notice(notice)

    def _audit(self, message: str, tag: Optional[str] = None):
        """Best-effort audit entry; failures are only logged locally."""
        try:
            self._audit_log.append(message, tag)
        except Exception as e:
            logger.warning(f"Failed to log error: {e}")
