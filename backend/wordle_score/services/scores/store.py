import logging
import threading
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional

from .codec import decode, encode
from .days import current_day_offset
from .errors import DecodeError, ValidationError
from .scoring import compute_score, record_array
from .storage import RECORD_KEY
from .types import Outcome, PersonScore, ScoreRecord, ScoreRecordTuple


RecordListener = Callable[[Mapping[int, Outcome]], None]


class ScoreRecordStore:
    """Owner of the live score record.

    Every mutation is written to durable storage before it becomes visible
    in memory, so a failed write leaves the previous record in place and the
    PersistenceError reaches the caller. After a successful write the score
    cache is dropped, listeners are told, and the pusher gets the new record
    without the caller waiting on the network.
    """

    def __init__(self, storage, pusher=None, logger: Optional[logging.Logger] = None,
                 epoch=None, key: str = RECORD_KEY):
        self._storage = storage
        self._pusher = pusher
        self._logger = logger or logging.getLogger(__name__)
        self._epoch = epoch
        self._key = key
        self._lock = threading.RLock()
        self._record: Optional[ScoreRecord] = None
        self._score: Optional[PersonScore] = None
        self._listeners: List[RecordListener] = []

    def add_listener(self, listener: RecordListener) -> None:
        self._listeners.append(listener)

    def attach_pusher(self, pusher) -> None:
        self._pusher = pusher

    # Reads ------------------------------------------------------------
    def get(self) -> Mapping[int, Outcome]:
        with self._lock:
            return MappingProxyType(dict(self._load()))

    def record_array(self) -> List[ScoreRecordTuple]:
        with self._lock:
            return record_array(self._load())

    def score(self) -> PersonScore:
        with self._lock:
            if self._score is None:
                self._score = compute_score(self._load())
            return self._score

    def today(self) -> int:
        return current_day_offset(epoch=self._epoch)

    # Mutations --------------------------------------------------------
    def set_day(self, day: int, outcome: Outcome) -> None:
        with self._lock:
            record = dict(self._load())
            record[day] = outcome
            self._commit(record, f"[record-set] day={day} outcome={outcome}")

    def set_today(self, outcome: Outcome) -> int:
        day = self.today()
        self.set_day(day, outcome)
        return day

    def delete_day(self, day: int) -> None:
        with self._lock:
            current = self._load()
            if day not in current:
                return
            record = dict(current)
            del record[day]
            self._commit(record, f"[record-delete] day={day}")

    def replace_all(self, record: Mapping[int, Outcome]) -> None:
        with self._lock:
            self._commit(dict(record), f"[record-replace] days={len(record)}")

    # Internals --------------------------------------------------------
    def _load(self) -> ScoreRecord:
        if self._record is None:
            raw = self._storage.read(self._key)
            if raw is None:
                self._record = {}
            else:
                try:
                    self._record = decode(raw)
                except (DecodeError, ValidationError) as exc:
                    self._logger.warning(f"[record-load] stored record unreadable, starting empty: {exc}")
                    self._record = {}
        return self._record

    def _commit(self, record: ScoreRecord, message: str) -> None:
        # Raises PersistenceError before memory is touched
        self._storage.write(self._key, encode(record))
        self._record = record
        self._score = None
        self._logger.info(message)

        snapshot = MappingProxyType(dict(record))
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                self._logger.exception("[record-listener] listener failed")
        if self._pusher is not None:
            self._pusher.push(snapshot)
