"""Backup payload codec.

The payload is the bare JSON object ``{"<day>": 1..6 | "X", ...}``; there is
no version field and no checksum, so validation is the only guard before a
candidate replaces live state.
"""

import json
import re
from typing import Any, Mapping

from .errors import MalformedJSONError, ValidationError
from .types import FAIL_MARKER, MAX_ATTEMPTS, MIN_ATTEMPTS, Outcome, ScoreRecord, outcome_from_json
from .scoring import record_array


BACKUP_FILENAME = 'wordle-score-backup.json'
BACKUP_MIMETYPE = 'application/json'

_DAY_KEY = re.compile(r'[1-9][0-9]*')


def to_payload(record: Mapping[int, Outcome]) -> dict:
    return {str(day): outcome.to_json() for day, outcome in record_array(record)}


def encode(record: Mapping[int, Outcome]) -> str:
    return json.dumps(to_payload(record), separators=(',', ':'))


def _is_valid_outcome(value: Any) -> bool:
    if value == FAIL_MARKER and isinstance(value, str):
        return True
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return MIN_ATTEMPTS <= value <= MAX_ATTEMPTS


def validate(candidate: Any) -> bool:
    if not isinstance(candidate, dict):
        return False
    for key, value in candidate.items():
        if not isinstance(key, str) or not _DAY_KEY.fullmatch(key):
            return False
        if not _is_valid_outcome(value):
            return False
    return True


def record_from_payload(candidate: Any) -> ScoreRecord:
    if not validate(candidate):
        raise ValidationError('backup does not look like a score record')
    return {int(day): outcome_from_json(value) for day, value in candidate.items()}


def decode(text: str) -> ScoreRecord:
    try:
        parsed = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise MalformedJSONError(f'backup is not valid JSON: {exc}') from exc
    return record_from_payload(parsed)
