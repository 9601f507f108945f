from flask import Blueprint, current_app, jsonify, request
from wordle_score import get_engine
from wordle_score.services.scores.leaderboard import build_leaderboard


sync = Blueprint('sync', __name__)


@sync.route('/status', methods=['GET'])
def get_status():
    engine = get_engine()
    payload = engine.channel.snapshot()
    payload['can_sync'] = engine.can_sync
    return jsonify(payload)


@sync.route('/details', methods=['GET'])
def get_details():
    return jsonify(get_engine().sync_details.get().to_public_dict())


@sync.route('/details', methods=['PUT'])
def set_details():
    data = request.get_json(silent=True) or {}
    engine = get_engine()
    changed = engine.sync_details.set(data.get('user'), data.get('password'))
    # New identity: make sure the server has our record
    if changed:
        engine.pusher.force_push()
    payload = engine.sync_details.get().to_public_dict()
    payload['changed'] = changed
    return jsonify(payload)


@sync.route('/push', methods=['POST'])
def force_push():
    engine = get_engine()
    seq = engine.pusher.force_push()
    if seq is None:
        return jsonify({'error': 'Sync is not configured', 'code': 'sync_disabled'}), 400
    payload = engine.channel.snapshot()
    payload['pushed_seq'] = seq
    return jsonify(payload), 202


@sync.route('/leaderboard', methods=['GET'])
def leaderboard():
    engine = get_engine()
    details = engine.sync_details.get()
    if not engine.can_sync:
        return jsonify({'error': 'Sync is not configured', 'code': 'sync_disabled'}), 400
    rows = build_leaderboard(engine.remote.fetch_all(details), logger=current_app.logger)
    return jsonify({'user': details.user, 'rows': [r.to_dict() for r in rows]})
