import json
import logging
import threading
from dataclasses import fields, replace
from typing import Optional

from .errors import ValidationError
from .storage import SETTINGS_KEY, SYNC_DETAILS_KEY
from .types import THEMES, Settings, SyncDetails


def _load_json(storage, key: str, logger: logging.Logger) -> dict:
    raw = storage.read(key)
    if raw is None:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning(f"[prefs-load] {key} is not valid JSON, using defaults")
        return {}
    return data if isinstance(data, dict) else {}


class SettingsStore:
    """Display preferences, merged over defaults and written through on change."""

    def __init__(self, storage, logger: Optional[logging.Logger] = None):
        self._storage = storage
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._settings: Optional[Settings] = None

    def get(self) -> Settings:
        with self._lock:
            if self._settings is None:
                stored = _load_json(self._storage, SETTINGS_KEY, self._logger)
                known = {f.name for f in fields(Settings)}
                self._settings = Settings(**{k: v for k, v in stored.items() if k in known})
            return self._settings

    def update(self, **changes) -> Settings:
        current = self.get()
        for name, value in changes.items():
            _check_setting(name, value)
        updated = replace(current, **changes)
        with self._lock:
            self._storage.write(SETTINGS_KEY, json.dumps(updated.to_dict()))
            self._settings = updated
        self._logger.info(f"[settings-update] {', '.join(sorted(changes)) or 'nothing'}")
        return updated


def _check_setting(name, value) -> None:
    defaults = Settings()
    if name not in {f.name for f in fields(Settings)}:
        raise ValidationError(f'unknown setting {name!r}')
    if name == 'theme':
        if value not in THEMES:
            raise ValidationError(f'theme must be one of {", ".join(THEMES)}')
        return
    if not isinstance(value, type(getattr(defaults, name))):
        raise ValidationError(f'{name} must be a boolean')


class SyncDetailsStore:
    def __init__(self, storage, logger: Optional[logging.Logger] = None):
        self._storage = storage
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._details: Optional[SyncDetails] = None

    def get(self) -> SyncDetails:
        with self._lock:
            if self._details is None:
                stored = _load_json(self._storage, SYNC_DETAILS_KEY, self._logger)
                user, password = stored.get('user'), stored.get('password')
                self._details = SyncDetails(
                    user=user if isinstance(user, str) else '',
                    password=password if isinstance(password, str) else '',
                )
            return self._details

    def set(self, user: str, password: str) -> bool:
        """Persist new details; returns False when they are unchanged."""
        if not isinstance(user, str) or not isinstance(password, str):
            raise ValidationError('user and password must be strings')
        details = SyncDetails(user=user, password=password)
        if details == self.get():
            return False
        with self._lock:
            self._storage.write(SYNC_DETAILS_KEY, json.dumps({'user': user, 'password': password}))
            self._details = details
        self._logger.info(f"[sync-details] user={user!r} can_sync={details.can_sync}")
        return True
