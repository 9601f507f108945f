from dataclasses import dataclass
from typing import Optional

from .codec import to_payload
from .days import parse_epoch
from .preferences import SettingsStore, SyncDetailsStore
from .remote import RemoteScoresClient
from .restore import RestoreWorkflow
from .scoring import to_render_data
from .storage import SqlKeyValueStorage
from .store import ScoreRecordStore
from .sync import ScorePusher, SyncStatusChannel, run_inline


@dataclass
class ScoreEngine:
    store: ScoreRecordStore
    settings: SettingsStore
    sync_details: SyncDetailsStore
    channel: SyncStatusChannel
    pusher: ScorePusher
    restore: RestoreWorkflow
    remote: Optional[RemoteScoresClient]

    @property
    def can_sync(self) -> bool:
        return self.pusher.enabled and self.sync_details.get().can_sync

    def state(self) -> dict:
        today = self.store.today()
        record = self.store.get()
        return {
            'record': to_payload(record),
            'days': [[day, outcome.to_json()] for day, outcome in self.store.record_array()],
            'score': to_render_data(self.store.score()).to_dict(),
            'today': today,
            'today_pending': today not in record,
            'can_sync': self.can_sync,
        }


def build_engine(app, socketio, remote=None, storage=None) -> ScoreEngine:
    """Wire one engine per Flask app from its config."""
    cfg = app.config
    logger = app.logger
    storage = storage or SqlKeyValueStorage()
    if remote is None:
        remote = RemoteScoresClient(
            cfg.get('SYNC_API_URL', ''),
            timeout=float(cfg.get('SYNC_TIMEOUT_SEC', 10)),
            logger=logger,
        )

    # Pushes and status reverts run inline under TESTING so nothing outlives a test
    if cfg.get('TESTING') and not cfg.get('SYNC_BACKGROUND_IN_TESTS'):
        spawn = run_inline
    else:
        spawn = socketio.start_background_task

    sync_details = SyncDetailsStore(storage, logger=logger)
    channel = SyncStatusChannel(
        display_sec=float(cfg.get('SYNC_STATUS_DISPLAY_SEC', 2)),
        spawn=spawn,
        sleep=socketio.sleep,
        logger=logger,
    )
    pusher = ScorePusher(remote, channel, sync_details.get, spawn=spawn, logger=logger)
    store = ScoreRecordStore(storage, pusher=pusher, logger=logger, epoch=parse_epoch(cfg.get('WORDLE_EPOCH')))
    pusher.bind_record(store.get)
    restore = RestoreWorkflow(store, remote=remote, details_provider=sync_details.get, logger=logger)

    return ScoreEngine(
        store=store,
        settings=SettingsStore(storage, logger=logger),
        sync_details=sync_details,
        channel=channel,
        pusher=pusher,
        restore=restore,
        remote=remote,
    )
