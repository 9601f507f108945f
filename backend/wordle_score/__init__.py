from flask import Flask, jsonify, current_app
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

EXTENSION_KEY = 'wordle_score'


def get_engine():
    """The score engine bound to the current Flask app."""
    return current_app.extensions[EXTENSION_KEY]


def create_app(config_class=Config, remote=None, storage=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Import models so the kv table is known to metadata and migrations
    from wordle_score import models  # noqa: F401

    from wordle_score.services.scores.engine import build_engine
    from wordle_score.services.scores.errors import ScoreEngineError
    engine = build_engine(flask_app, socketio, remote=remote, storage=storage)
    flask_app.extensions[EXTENSION_KEY] = engine

    # Reactive fan-out: every committed record, push status and restore step
    # is broadcast to connected clients
    engine.store.add_listener(
        lambda _record: socketio.emit('state_update', engine.state(), namespace='/ws')
    )
    engine.channel.add_listener(
        lambda status, seq: socketio.emit('sync_status', {'status': status, 'seq': seq}, namespace='/ws')
    )
    engine.restore.add_listener(
        lambda snapshot: socketio.emit('restore_update', snapshot, namespace='/ws')
    )

    @flask_app.errorhandler(ScoreEngineError)
    def handle_engine_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {exc.code}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    # Import and register blueprints here
    from wordle_score.main import main
    flask_app.register_blueprint(main)

    from wordle_score.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/api/scores')

    from wordle_score.api.restore import restore
    flask_app.register_blueprint(restore, url_prefix='/api/restore')

    from wordle_score.api.sync import sync
    flask_app.register_blueprint(sync, url_prefix='/api/sync')

    from wordle_score.api.settings import settings
    flask_app.register_blueprint(settings, url_prefix='/api/settings')

    # Register Socket.IO event handlers
    try:
        from wordle_score.socketio_events import register_socketio_handlers
        register_socketio_handlers(testing=flask_app.config.get('TESTING', False))
    except Exception as exc:
        flask_app.logger.warning(f"SocketIO events not loaded: {exc}")

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the local score database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('import-backup')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    @click.option('--yes', is_flag=True, help='Replace the stored record without asking.')
    def import_backup_command(path, yes):
        """Compares a backup file with the stored record and replaces it on confirmation."""
        workflow = engine.restore
        with flask_app.app_context():
            with open(path, 'rb') as f:
                status = workflow.request_from_file(f.read)
            if status != 'comparing':
                message = workflow.message
                workflow.reset()
                raise click.ClickException(message)

            changed = [row for row in workflow.comparison() if row['changed']]
            for row in changed:
                print(f"day {row['day']}: {row['current']} -> {row['candidate']}")
            print(f'{len(workflow.candidate.record)} days in backup, {len(changed)} differ from the stored record')
            if not yes and not click.confirm('Replace the stored record?'):
                workflow.reset()
                print('Import cancelled')
                return
            days = len(workflow.candidate.record)
            workflow.confirm()
            workflow.reset()
            print(f'Imported {days} days from {path}')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(import_backup_command)

    return flask_app
