import pytest

from wordle_score.services.scores.errors import PersistenceError, RestoreStateError
from wordle_score.services.scores.restore import RestoreWorkflow
from wordle_score.services.scores.store import ScoreRecordStore
from wordle_score.services.scores.types import FAILED, Attempts, SyncDetails


@pytest.fixture()
def store(memory_storage):
    s = ScoreRecordStore(memory_storage)
    s.set_day(1, Attempts(3))
    s.set_day(2, Attempts(4))
    return s


@pytest.fixture()
def workflow(store, remote):
    return RestoreWorkflow(store, remote=remote, details_provider=lambda: SyncDetails('ann', 'pw'))


def test_clipboard_restore_replaces_whole_record(workflow, store):
    assert workflow.request_from_clipboard('{"2": "X", "3": 1}') == 'comparing'
    assert dict(store.get()) == {1: Attempts(3), 2: Attempts(4)}

    assert workflow.confirm() == 'success'
    assert dict(store.get()) == {2: FAILED, 3: Attempts(1)}
    assert workflow.candidate is None
    assert workflow.reset() == 'idle'


def test_comparison_rows_cover_both_sides(workflow):
    workflow.request_from_clipboard('{"2": "X", "3": 1}')
    rows = workflow.comparison()
    assert rows == [
        {'day': 1, 'current': 3, 'candidate': None, 'changed': True},
        {'day': 2, 'current': 4, 'candidate': 'X', 'changed': True},
        {'day': 3, 'current': None, 'candidate': 1, 'changed': True},
    ]


def test_invalid_clipboard_fails_with_origin(workflow, store):
    assert workflow.request_from_clipboard('not json') == 'failed'
    snap = workflow.snapshot()
    assert snap['origin'] == 'clipboard'
    assert snap['message'] == 'Invalid backup in clipboard'
    assert snap['summary'] == 'Failed to restore backup from clipboard'
    assert dict(store.get()) == {1: Attempts(3), 2: Attempts(4)}


def test_invalid_shape_never_reaches_comparing(workflow):
    assert workflow.request_from_clipboard('{"1": 9}') == 'failed'
    assert workflow.candidate is None


def test_file_read_error_fails(workflow):
    def broken_reader():
        raise OSError('disk gone')
    assert workflow.request_from_file(broken_reader) == 'failed'
    assert workflow.message == 'Invalid backup file'


def test_file_bytes_are_decoded(workflow):
    assert workflow.request_from_file(lambda: b'{"5": 2}') == 'comparing'
    workflow.reset()
    assert workflow.request_from_file(lambda: b'\xff\xfe') == 'failed'


def test_remote_restore_uses_own_record(workflow, remote, store):
    remote.scores = {'ann': {'record': {'9': 1}}, 'bob': {'record': {'1': 6}}}
    assert workflow.request_from_remote() == 'comparing'
    assert workflow.candidate.origin == 'remote'
    workflow.confirm()
    assert dict(store.get()) == {9: Attempts(1)}


def test_remote_without_saved_data(workflow, remote):
    remote.scores = {'bob': {'record': {'1': 6}}}
    assert workflow.request_from_remote() == 'failed'
    assert workflow.message == 'No server data saved'


def test_remote_unreachable(workflow, remote):
    remote.fail_fetch = True
    assert workflow.request_from_remote() == 'failed'
    assert workflow.origin == 'remote'


def test_remote_requires_sync_details(store, remote):
    workflow = RestoreWorkflow(store, remote=remote, details_provider=lambda: SyncDetails('', ''))
    assert workflow.request_from_remote() == 'failed'
    assert workflow.message == 'Sync details are not set'


def test_second_acquisition_is_rejected_until_reset(workflow):
    workflow.request_from_clipboard('{"1": 1}')
    with pytest.raises(RestoreStateError):
        workflow.request_from_clipboard('{"1": 2}')
    workflow.reset()
    assert workflow.request_from_clipboard('{"1": 2}') == 'comparing'


def test_acquisition_in_flight_rejects_another(workflow):
    def reenter():
        with pytest.raises(RestoreStateError):
            workflow.request_from_clipboard('{"1": 1}')
        return '{"4": 4}'
    assert workflow.request_from_file(reenter) == 'comparing'


def test_cancel_keeps_live_record(workflow, store):
    workflow.request_from_clipboard('{}')
    workflow.reset()
    assert dict(store.get()) == {1: Attempts(3), 2: Attempts(4)}


def test_confirm_outside_comparing(workflow):
    with pytest.raises(RestoreStateError):
        workflow.confirm()


def test_confirm_persistence_failure_keeps_candidate(workflow, store, memory_storage):
    workflow.request_from_clipboard('{"7": 5}')
    memory_storage.fail_writes = True
    with pytest.raises(PersistenceError):
        workflow.confirm()
    assert workflow.status == 'comparing'
    assert workflow.candidate is not None
    assert dict(store.get()) == {1: Attempts(3), 2: Attempts(4)}


def test_listeners_see_each_transition(workflow):
    seen = []
    workflow.add_listener(lambda snap: seen.append(snap['status']))
    workflow.request_from_clipboard('{"1": 1}')
    workflow.confirm()
    workflow.reset()
    assert seen == ['comparing', 'success', 'idle']
