from flask import Blueprint, current_app, jsonify
from harbor.errors import GameError

rooms = Blueprint('rooms', __name__)


def _registry():
    return current_app.extensions['harbor.registry']


@rooms.route('', methods=['GET'])
def list_rooms():
    """
    Lists open rooms with their phase and seat count. Never includes pieces.
    """
    registry = _registry()
    summaries = []
    for code in registry.codes():
        try:
            session = registry.get(code)
        except GameError:
            # Destroyed between listing and lookup
            continue
        with session.lock:
            summaries.append(session.summary())
    return jsonify(summaries)


@rooms.route('/<string:room_code>', methods=['GET'])
def get_room(room_code):
    try:
        session = _registry().get(room_code)
    except GameError as exc:
        return jsonify({'error': exc.message, 'code': exc.code}), 404
    with session.lock:
        return jsonify(session.summary())
