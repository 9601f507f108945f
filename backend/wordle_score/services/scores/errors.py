"""Error taxonomy for the score engine.

Each error carries a stable ``code`` and the HTTP status the API layer
answers with. Local mutation errors propagate to the caller; I/O errors
from restore sources and the sync service are caught at the boundary and
turned into state transitions.
"""

from typing import Optional


class ScoreEngineError(Exception):
    code = 'score_engine_error'
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class PersistenceError(ScoreEngineError):
    """Durable storage write failed; the triggering mutation was not applied."""
    code = 'persistence_failed'
    status_code = 500


class DecodeError(ScoreEngineError):
    code = 'decode_error'
    status_code = 400


class MalformedJSONError(DecodeError):
    code = 'malformed_json'


class ValidationError(ScoreEngineError, ValueError):
    code = 'validation_error'
    status_code = 400


class ShareTextError(ValidationError):
    code = 'invalid_share_text'


class RemoteError(ScoreEngineError):
    code = 'remote_error'
    status_code = 502


class RestoreStateError(ScoreEngineError):
    code = 'restore_conflict'
    status_code = 409
