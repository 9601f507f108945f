from flask import Blueprint, Response, jsonify, request
from wordle_score import get_engine
from wordle_score.services.scores.codec import BACKUP_FILENAME, BACKUP_MIMETYPE, encode
from wordle_score.services.scores.days import parse_share_text
from wordle_score.services.scores.errors import ValidationError
from wordle_score.services.scores.types import outcome_from_json


scores = Blueprint('scores', __name__)


def _outcome_from_body(data):
    value = data.get('outcome')
    try:
        return outcome_from_json(value)
    except ValueError:
        raise ValidationError('outcome must be 1-6 or "X"')


def _check_day(day: int) -> None:
    today = get_engine().store.today()
    if day < 1 or day > today:
        raise ValidationError(f'day must be between 1 and {today}')


@scores.route('', methods=['GET'])
def get_state():
    return jsonify(get_engine().state())


@scores.route('/days/<int:day>', methods=['PUT'])
def set_day(day):
    data = request.get_json(silent=True) or {}
    outcome = _outcome_from_body(data)
    _check_day(day)
    engine = get_engine()
    engine.store.set_day(day, outcome)
    return jsonify(engine.state())


@scores.route('/days/<int:day>', methods=['DELETE'])
def delete_day(day):
    engine = get_engine()
    engine.store.delete_day(day)
    return jsonify(engine.state())


@scores.route('/today', methods=['POST'])
def set_today():
    data = request.get_json(silent=True) or {}
    outcome = _outcome_from_body(data)
    engine = get_engine()
    engine.store.set_today(outcome)
    return jsonify(engine.state()), 201


@scores.route('/share-text', methods=['POST'])
def add_from_share_text():
    """Record a day from the text the game puts on the clipboard when sharing."""
    data = request.get_json(silent=True) or {}
    day, outcome = parse_share_text(data.get('text') or '')
    _check_day(day)
    engine = get_engine()
    engine.store.set_day(day, outcome)
    payload = engine.state()
    payload['added'] = {'day': day, 'outcome': outcome.to_json()}
    return jsonify(payload), 201


@scores.route('/backup', methods=['GET'])
def get_backup():
    # Raw payload for the browser to put on the clipboard
    return Response(encode(get_engine().store.get()), mimetype=BACKUP_MIMETYPE)


@scores.route('/backup/download', methods=['GET'])
def download_backup():
    return Response(
        encode(get_engine().store.get()),
        mimetype=BACKUP_MIMETYPE,
        headers={'Content-Disposition': f'attachment; filename={BACKUP_FILENAME}'},
    )
