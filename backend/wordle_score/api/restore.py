from flask import Blueprint, jsonify, request
from wordle_score import get_engine
from wordle_score.services.scores.errors import ValidationError


restore = Blueprint('restore', __name__)


def _payload(workflow):
    data = workflow.snapshot()
    data['comparison'] = workflow.comparison()
    data['can_restore_from_remote'] = workflow.can_restore_from_remote
    return data


@restore.route('', methods=['GET'])
def get_restore_state():
    return jsonify(_payload(get_engine().restore))


@restore.route('/clipboard', methods=['POST'])
def from_clipboard():
    data = request.get_json(silent=True) or {}
    text = data.get('text')
    if not isinstance(text, str):
        raise ValidationError('text is required')
    workflow = get_engine().restore
    workflow.request_from_clipboard(text)
    return jsonify(_payload(workflow))


@restore.route('/file', methods=['POST'])
def from_file():
    upload = request.files.get('file')
    if upload is None:
        raise ValidationError('file is required')
    workflow = get_engine().restore
    workflow.request_from_file(upload.read)
    return jsonify(_payload(workflow))


@restore.route('/remote', methods=['POST'])
def from_remote():
    workflow = get_engine().restore
    workflow.request_from_remote()
    return jsonify(_payload(workflow))


@restore.route('/confirm', methods=['POST'])
def confirm():
    workflow = get_engine().restore
    workflow.confirm()
    return jsonify(_payload(workflow))


@restore.route('/reset', methods=['POST'])
def reset():
    workflow = get_engine().restore
    workflow.reset()
    return jsonify(_payload(workflow))
