import logging
import threading
import time
from typing import Callable, List, Mapping, Optional, Tuple

from .errors import RemoteError
from .types import Outcome, SyncDetails, SyncStatus


StatusListener = Callable[[str, int], None]


def run_inline(fn, *args):
    fn(*args)


class SyncStatusChannel:
    """Observable push status: idle -> loading -> success|failed -> idle.

    Every push takes a sequence number from ``begin``. Only the newest
    sequence may settle the status, so a slow completion from an older push
    cannot overwrite what the latest push reported. ``success`` and
    ``failed`` fall back to ``idle`` after ``display_sec`` unless another
    push has started by then.

    Listeners run under the channel lock, so they observe changes in the
    order they happened.
    """

    def __init__(self, display_sec: float = 2.0, spawn: Callable = run_inline,
                 sleep: Callable[[float], None] = time.sleep, logger: Optional[logging.Logger] = None):
        self.display_sec = display_sec
        self._spawn = spawn
        self._sleep = sleep
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()
        self._status: SyncStatus = 'idle'
        self._seq = 0
        self._listeners: List[StatusListener] = []

    @property
    def status(self) -> SyncStatus:
        return self._status

    @property
    def latest_seq(self) -> int:
        return self._seq

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> dict:
        return {'status': self._status, 'seq': self._seq}

    def begin(self) -> int:
        with self._lock:
            self._seq += 1
            seq = self._seq
            self._status = 'loading'
            self._notify('loading', seq)
        return seq

    def resolve(self, seq: int, ok: bool) -> bool:
        """Settle push ``seq``; returns False if a newer push superseded it."""
        status: SyncStatus = 'success' if ok else 'failed'
        with self._lock:
            stale = seq != self._seq
            if not stale:
                self._status = status
                self._notify(status, seq)
        if stale:
            self._logger.info(f"[sync-stale] seq={seq} latest={self._seq} result={status} ignored")
            return False
        self._spawn(self._revert_after_display, seq)
        return True

    def _revert_after_display(self, seq: int) -> None:
        if self.display_sec > 0:
            self._sleep(self.display_sec)
        with self._lock:
            if seq != self._seq or self._status not in ('success', 'failed'):
                return
            self._status = 'idle'
            # Under the lock so a concurrent begin() cannot be announced first
            self._notify('idle', seq)

    def _notify(self, status: str, seq: int) -> None:
        for listener in list(self._listeners):
            try:
                listener(status, seq)
            except Exception:
                self._logger.exception("[sync-listener] listener failed")


class ScorePusher:
    """Fire-and-forget propagation of the full record to the sync service.

    Only one network call is in flight at a time. Records committed while a
    call is running collapse into a single pending slot holding the newest
    one, which is sent as soon as the running call returns. The server
    therefore always ends up with the last committed record.
    """

    def __init__(self, remote, channel: SyncStatusChannel, details_provider: Callable,
                 spawn: Callable = run_inline, logger: Optional[logging.Logger] = None):
        self.remote = remote
        self.channel = channel
        self._details_provider = details_provider
        self._spawn = spawn
        self._logger = logger or logging.getLogger(__name__)
        self._record_provider: Optional[Callable[[], Mapping[int, Outcome]]] = None
        self._lock = threading.Lock()
        self._in_flight = False
        self._pending: Optional[Tuple[int, dict, SyncDetails]] = None

    def bind_record(self, record_provider: Callable[[], Mapping[int, Outcome]]) -> None:
        self._record_provider = record_provider

    @property
    def enabled(self) -> bool:
        return self.remote is not None and getattr(self.remote, 'enabled', True)

    def push(self, record: Mapping[int, Outcome]) -> Optional[int]:
        details = self._details_provider()
        if not self.enabled or not details.can_sync:
            return None
        seq = self.channel.begin()
        payload = dict(record)
        with self._lock:
            if self._in_flight:
                self._pending = (seq, payload, details)
                queued = True
            else:
                self._in_flight = True
                queued = False
        if queued:
            self._logger.info(f"[push-queued] seq={seq} days={len(payload)}")
            return seq
        self._logger.info(f"[push-start] seq={seq} days={len(payload)}")
        self._spawn(self._run, seq, payload, details)
        return seq

    def force_push(self) -> Optional[int]:
        if self._record_provider is None:
            return None
        return self.push(self._record_provider())

    def _run(self, seq, record, details) -> None:
        while True:
            try:
                ok = self._send(seq, record, details)
            except Exception:
                with self._lock:
                    self._in_flight = False
                    self._pending = None
                raise
            with self._lock:
                pending, self._pending = self._pending, None
                if pending is None:
                    self._in_flight = False
            if pending is None:
                self.channel.resolve(seq, ok)
                return
            self._logger.info(f"[push-superseded] seq={seq} next={pending[0]}")
            seq, record, details = pending

    def _send(self, seq, record, details) -> bool:
        try:
            self.remote.push_record(details, record)
        except RemoteError as exc:
            self._logger.warning(f"[push-failed] seq={seq} reason={exc}")
            return False
        self._logger.info(f"[push-done] seq={seq}")
        return True
