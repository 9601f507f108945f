import logging
import threading
from typing import Callable, List, Optional, Union

from .codec import decode, record_from_payload
from .errors import DecodeError, RemoteError, RestoreStateError, ValidationError
from .scoring import record_array
from .types import RestoreCandidate, RestoreOrigin, RestoreStatus


FAILURE_MESSAGES = {
    'clipboard': 'Invalid backup in clipboard',
    'file': 'Invalid backup file',
    'remote': 'No server data saved',
}
REMOTE_UNREACHABLE_MESSAGE = 'Could not fetch data from the server'
NO_SYNC_DETAILS_MESSAGE = 'Sync details are not set'

RestoreListener = Callable[[dict], None]


class _SourceUnavailable(Exception):
    """A source could not produce anything to decode."""


class RestoreWorkflow:
    """Compare-before-commit restore: idle -> comparing -> success|failed.

    Acquisitions only start from ``idle`` and only one may be in flight.
    Source failures never raise; they land in ``failed`` with a message
    naming the origin. ``confirm`` is the only path that touches the live
    record and it replaces it wholesale.
    """

    def __init__(self, store, remote=None, details_provider: Optional[Callable] = None,
                 logger: Optional[logging.Logger] = None):
        self.store = store
        self.remote = remote
        self._details_provider = details_provider
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._in_flight = False
        self.status: RestoreStatus = 'idle'
        self.candidate: Optional[RestoreCandidate] = None
        self.origin: str = ''
        self.message: str = ''
        self._listeners: List[RestoreListener] = []

    def add_listener(self, listener: RestoreListener) -> None:
        self._listeners.append(listener)

    @property
    def can_restore_from_remote(self) -> bool:
        if self.remote is None or not getattr(self.remote, 'enabled', True):
            return False
        return self._details_provider is not None and self._details_provider().can_sync

    # Entry points -----------------------------------------------------
    def request_from_clipboard(self, text: str) -> RestoreStatus:
        return self._acquire('clipboard', lambda: decode(text))

    def request_from_file(self, reader: Callable[[], Union[str, bytes]]) -> RestoreStatus:
        def _read():
            raw = reader()
            if isinstance(raw, bytes):
                raw = raw.decode('utf-8')
            return decode(raw)
        return self._acquire('file', _read)

    def request_from_remote(self) -> RestoreStatus:
        def _fetch():
            if self.remote is None or self._details_provider is None:
                raise _SourceUnavailable(REMOTE_UNREACHABLE_MESSAGE)
            details = self._details_provider()
            if not details.can_sync:
                raise _SourceUnavailable(NO_SYNC_DETAILS_MESSAGE)
            try:
                raw = self.remote.fetch_record(details)
            except RemoteError as exc:
                raise _SourceUnavailable(REMOTE_UNREACHABLE_MESSAGE) from exc
            if raw is None:
                raise _SourceUnavailable(FAILURE_MESSAGES['remote'])
            return record_from_payload(raw)
        return self._acquire('remote', _fetch)

    # Compare / commit -------------------------------------------------
    def comparison(self) -> List[dict]:
        if self.candidate is None:
            return []
        current = dict(self.store.get())
        incoming = self.candidate.record
        rows = []
        for day in sorted(set(current) | set(incoming)):
            left, right = current.get(day), incoming.get(day)
            rows.append({
                'day': day,
                'current': left.to_json() if left is not None else None,
                'candidate': right.to_json() if right is not None else None,
                'changed': left != right,
            })
        return rows

    def confirm(self) -> RestoreStatus:
        with self._lock:
            if self.status != 'comparing' or self.candidate is None:
                raise RestoreStateError(f'nothing to confirm while {self.status}')
            candidate = self.candidate
        # PersistenceError leaves us in comparing with the candidate intact
        self.store.replace_all(candidate.record)
        self._logger.info(f"[restore-confirm] origin={candidate.origin} days={len(candidate.record)}")
        self._transition('success', candidate=None, origin='', message='')
        return self.status

    def reset(self) -> RestoreStatus:
        self._transition('idle', candidate=None, origin='', message='')
        return self.status

    def snapshot(self) -> dict:
        candidate = None
        if self.candidate is not None:
            candidate = {str(day): outcome.to_json() for day, outcome in record_array(self.candidate.record)}
        summary = ''
        if self.status == 'failed':
            summary = f"Failed to restore backup from {self.origin}"
        elif self.status == 'success':
            summary = 'Restored backup!'
        return {
            'status': self.status,
            'origin': self.origin,
            'message': self.message,
            'summary': summary,
            'candidate': candidate,
        }

    # Internals --------------------------------------------------------
    def _acquire(self, origin: RestoreOrigin, load) -> RestoreStatus:
        with self._lock:
            if self._in_flight:
                raise RestoreStateError('a restore is already being loaded')
            if self.status != 'idle':
                raise RestoreStateError(f'cannot start a restore while {self.status}; reset first')
            self._in_flight = True
        try:
            try:
                record = load()
            except _SourceUnavailable as exc:
                self._fail(origin, str(exc))
            except (DecodeError, ValidationError, OSError, UnicodeDecodeError) as exc:
                self._logger.info(f"[restore-failed] origin={origin} reason={exc}")
                self._fail(origin, FAILURE_MESSAGES[origin])
            else:
                self._logger.info(f"[restore-compare] origin={origin} days={len(record)}")
                self._transition('comparing', candidate=RestoreCandidate(record=record, origin=origin),
                                 origin=origin, message='')
        finally:
            with self._lock:
                self._in_flight = False
        return self.status

    def _fail(self, origin: str, message: str) -> None:
        self._logger.info(f"[restore-failed] origin={origin} message={message}")
        self._transition('failed', candidate=None, origin=origin, message=message)

    def _transition(self, status: RestoreStatus, *, candidate, origin: str, message: str) -> None:
        with self._lock:
            self.status = status
            self.candidate = candidate
            self.origin = origin
            self.message = message
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                self._logger.exception("[restore-listener] listener failed")
