import os
import sys
import random
import pytest

# Ensure the backend root (containing the `harbor` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from harbor import create_app, socketio
from harbor.models import Piece, PieceKind
from harbor.services.games.session import GameSession


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = []
    SOCKETIO_NAMESPACE = '/ws'
    LOG_LEVEL = 'DEBUG'
    ROOM_CODE_MAX_LENGTH = 16


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/ws'
        )
        created.append(test_client)
        # Drop the 'connected' greeting
        test_client.get_received('/ws')
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


class Recorder:
    """Stands in for the socket emitter: keeps every (event, payload, sid)."""

    def __init__(self):
        self.sent = []

    def __call__(self, event, payload, sid):
        self.sent.append((event, payload, sid))

    def to(self, sid, event=None):
        return [(e, p) for e, p, s in self.sent if s == sid and (event is None or e == event)]

    def events(self, sid):
        return [e for e, _, s in self.sent if s == sid]

    def clear(self):
        self.sent = []


@pytest.fixture()
def recorder():
    return Recorder()


def put(session, player, kind, x, y, revealed=False):
    """Drop a piece straight onto a session's board."""
    piece = Piece(player, PieceKind(kind) if isinstance(kind, str) else kind, revealed)
    session.board.put(x, y, piece)
    return piece


def start_playing(session, first=0):
    """Move a session with two seated players into the playing phase."""
    session.submit_placement(0, [])
    session.submit_placement(1, [])
    session.current_player = first
    return session


@pytest.fixture()
def session():
    s = GameSession('TEST', rng=random.Random(7))
    s.add_player('sid-0')
    s.add_player('sid-1')
    return s


@pytest.fixture()
def playing(session):
    return start_playing(session, first=0)
