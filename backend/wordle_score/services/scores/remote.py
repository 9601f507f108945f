import logging
from typing import Mapping, Optional

import requests

from .codec import to_payload
from .errors import RemoteError
from .types import Outcome, SyncDetails


class RemoteScoresClient:
    """HTTP client for the remote score service.

    ``GET /scores`` returns ``{user: {"record": {...}}}`` for every known
    user; ``POST /scores`` stores the caller's own record. Credentials are
    forwarded as headers and never inspected here.
    """

    def __init__(self, base_url: str, timeout: float = 10, session: Optional[requests.Session] = None,
                 logger: Optional[logging.Logger] = None):
        self.base_url = (base_url or '').rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    def _headers(self, details: SyncDetails) -> dict:
        return {'x-user': details.user, 'x-password': details.password}

    def _request(self, method: str, path: str, details: SyncDetails, **kwargs):
        if not self.enabled:
            raise RemoteError('sync server is not configured')
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, headers=self._headers(details),
                                            timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            self.logger.warning(f"[remote-error] {method} {path} failed: {exc}")
            raise RemoteError('could not reach the sync server') from exc
        if not 200 <= response.status_code < 300:
            self.logger.warning(f"[remote-error] {method} {path} status={response.status_code}")
            raise RemoteError(f'sync server answered {response.status_code}')
        return response

    def fetch_all(self, details: SyncDetails) -> dict:
        response = self._request('GET', '/scores', details)
        try:
            data = response.json()
        except ValueError as exc:
            raise RemoteError('sync server sent a non-JSON body') from exc
        if not isinstance(data, dict):
            raise RemoteError('sync server sent an unexpected body')
        return data

    def fetch_record(self, details: SyncDetails):
        """The caller's own raw record, or None if the server has none."""
        entry = self.fetch_all(details).get(details.user)
        if not isinstance(entry, dict):
            return None
        return entry.get('record')

    def push_record(self, details: SyncDetails, record: Mapping[int, Outcome]) -> None:
        self._request('POST', '/scores', details, json={'user': details.user, 'record': to_payload(record)})
