from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from wordle_score import db, get_engine

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Wordle score server!'})

@main.route('/health')
def health():
    engine = get_engine()
    try:
        db.session.execute(text('SELECT 1'))
        database = 'ok'
    except SQLAlchemyError:
        db.session.rollback()
        database = 'unavailable'
    return jsonify({
        'database': database,
        'sync_enabled': engine.pusher.enabled,
        'sync_status': engine.channel.status,
    }), 200 if database == 'ok' else 503
