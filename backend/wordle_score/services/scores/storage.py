import time
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from wordle_score import db
from wordle_score.models import KeyValueEntry
from .errors import PersistenceError


RECORD_KEY = 'wordle-score'
SETTINGS_KEY = 'wordle-score-settings'
SYNC_DETAILS_KEY = 'wordle-score-sync-details'


class SqlKeyValueStorage:
    """Key/value persistence over the ``kv_entry`` table.

    Writes are committed before returning. Any database error rolls the
    session back and surfaces as PersistenceError.
    """

    def read(self, key: str) -> Optional[str]:
        try:
            entry = db.session.get(KeyValueEntry, key)
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceError(f'could not read {key}') from exc
        return entry.value if entry else None

    def write(self, key: str, value: str) -> None:
        try:
            entry = db.session.get(KeyValueEntry, key)
            if entry is None:
                entry = KeyValueEntry(key=key)
            entry.value = value
            entry.updated_at = time.time()
            db.session.add(entry)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceError(f'could not write {key}') from exc
