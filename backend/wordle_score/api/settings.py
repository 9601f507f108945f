from flask import Blueprint, jsonify, request
from wordle_score import get_engine
from wordle_score.services.scores.errors import ValidationError


settings = Blueprint('settings', __name__)


@settings.route('', methods=['GET'])
def get_settings():
    return jsonify(get_engine().settings.get().to_dict())


@settings.route('', methods=['PUT'])
def update_settings():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('expected a JSON object of settings')
    return jsonify(get_engine().settings.update(**data).to_dict())
