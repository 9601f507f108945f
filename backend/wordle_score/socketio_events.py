from flask_socketio import emit
from wordle_score import socketio, get_engine


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_subscribe(data=None):
    # Late joiners get the current picture before any further pushes
    engine = get_engine()
    emit('state_update', engine.state())
    emit('sync_status', engine.channel.snapshot())
    emit('restore_update', engine.restore.snapshot())


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('subscribe', handle_subscribe, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        # Test-only mirror on default namespace
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('subscribe', handle_subscribe, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
