import os
import sys
import pytest

# Ensure the backend root (containing the `wordle_score` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordle_score import create_app, db, socketio
from wordle_score.services.scores.codec import to_payload
from wordle_score.services.scores.errors import PersistenceError, RemoteError


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SYNC_API_URL = ''
    SYNC_TIMEOUT_SEC = 1
    SYNC_STATUS_DISPLAY_SEC = 0
    WORDLE_EPOCH = '2021-06-19'


class FakeRemote:
    """In-memory stand-in for the sync server."""
    enabled = True

    def __init__(self):
        self.scores = {}
        self.pushed = []
        self.fail_push = False
        self.fail_fetch = False

    def fetch_all(self, details):
        if self.fail_fetch:
            raise RemoteError('could not reach the sync server')
        return self.scores

    def fetch_record(self, details):
        entry = self.fetch_all(details).get(details.user)
        return entry.get('record') if isinstance(entry, dict) else None

    def push_record(self, details, record):
        if self.fail_push:
            raise RemoteError('sync server answered 401')
        payload = to_payload(record)
        self.pushed.append((details.user, payload))
        self.scores[details.user] = {'record': payload}


class MemoryStorage:
    def __init__(self, data=None):
        self.data = dict(data or {})
        self.fail_writes = False
        self.writes = 0

    def read(self, key):
        return self.data.get(key)

    def write(self, key, value):
        if self.fail_writes:
            raise PersistenceError(f'could not write {key}')
        self.writes += 1
        self.data[key] = value


@pytest.fixture()
def remote():
    return FakeRemote()


@pytest.fixture()
def memory_storage():
    return MemoryStorage()


@pytest.fixture()
def flask_app(remote):
    application = create_app(TestConfig, remote=remote)
    with application.app_context():
        # Ensure models are imported so tables are created
        import wordle_score.models  # noqa: F401
        db.create_all()
        # Ensure Socket.IO namespaces are registered in the test app
        try:
            import importlib
            importlib.import_module('wordle_score.socketio_events')
        except Exception:
            pass
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def engine(flask_app):
    from wordle_score import EXTENSION_KEY
    return flask_app.extensions[EXTENSION_KEY]


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass
