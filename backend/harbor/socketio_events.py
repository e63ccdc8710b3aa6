from flask import current_app, request
from flask_socketio import emit
from harbor import socketio
from typing import Any, Dict


def _dispatcher():
    return current_app.extensions['harbor.dispatcher']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _room_code(data):
    # The room commands send the bare code; tolerate {'roomCode': ...} too
    if isinstance(data, dict):
        return data.get('roomCode')
    return data


def make_socket_emitter(namespace: str):
    def _emit(event, payload, sid):
        socketio.emit(event, payload, to=sid, namespace=namespace)
    return _emit


def handle_connect():
    emit('connected', {'message': 'Connected'})


def handle_disconnect(reason=None):
    current_app.logger.info(f"[disconnect] sid={_get_sid()} reason={reason}")
    _dispatcher().disconnect(_get_sid())


def handle_create_room(data):
    _dispatcher().create_room(_get_sid(), _room_code(data))


def handle_join_room(data):
    _dispatcher().join_room(_get_sid(), _room_code(data))


def handle_place_pieces(data):
    data = _payload(data)
    _dispatcher().submit_placement(_get_sid(), data.get('roomCode'), data.get('pieces'))


def handle_place_piece_live(data):
    data = _payload(data)
    _dispatcher().place_live(_get_sid(), data.get('roomCode'), data.get('x'), data.get('y'))


def handle_remove_piece_live(data):
    data = _payload(data)
    _dispatcher().remove_live(_get_sid(), data.get('roomCode'), data.get('x'), data.get('y'))


def handle_move_piece(data):
    data = _payload(data)
    _dispatcher().move(
        _get_sid(), data.get('roomCode'),
        data.get('fromX'), data.get('fromY'), data.get('toX'), data.get('toY'),
    )


def handle_attack(data):
    data = _payload(data)
    _dispatcher().attack(
        _get_sid(), data.get('roomCode'),
        data.get('fromX'), data.get('fromY'), data.get('toX'), data.get('toY'),
    )


def handle_end_turn(data):
    _dispatcher().end_turn(_get_sid(), _room_code(data))


HANDLERS = {
    'connect': handle_connect,
    'disconnect': handle_disconnect,
    'create-room': handle_create_room,
    'join-room': handle_join_room,
    'place-pieces': handle_place_pieces,
    'place-piece-live': handle_place_piece_live,
    'remove-piece-live': handle_remove_piece_live,
    'move-piece': handle_move_piece,
    'attack': handle_attack,
    'end-turn': handle_end_turn,
}


def register_socketio_handlers(namespace: str = '/ws') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    for event, handler in HANDLERS.items():
        socketio.on_event(event, handler, namespace=namespace)
