import logging
from functools import wraps
from typing import Callable, Optional

from harbor.errors import GameError, OutOfBounds
from .registry import RoomRegistry
from .session import PLACEMENT, GameSession

logger = logging.getLogger(__name__)

# emit(event, payload, to_sid)
Emitter = Callable[[str, object, str], None]


def rejects_to_sender(func):
    """Report a ``GameError`` to the sender only instead of raising it.

    Anything that is not a ``GameError`` propagates unchanged.
    """
    @wraps(func)
    def wrapper(self, sid, *args, **kwargs):
        try:
            return func(self, sid, *args, **kwargs)
        except GameError as exc:
            logger.info(f'[rejected] {func.__name__} sid={sid} code={exc.code} message={exc.message}')
            self.emit(exc.event, exc.to_dict(), sid)
            return None

    return wrapper


def _coord(x, y):
    for value in (x, y):
        if not isinstance(value, int) or isinstance(value, bool):
            raise OutOfBounds('Invalid coordinates')
    return x, y


class CommandDispatcher:
    """Runs player commands against the registry and emits the results.

    ``sid`` is the sender's output handle; it is stored in the session when
    the player creates or joins a room and every later push goes straight to
    it.
    """

    def __init__(self, registry: RoomRegistry, emit: Emitter):
        self.registry = registry
        self.emit = emit

    # ---- fan-out helpers (caller holds session.lock) ----

    def _broadcast(self, session: GameSession, event: str, payload) -> None:
        for _, sid in session.occupants():
            self.emit(event, payload, sid)

    def _broadcast_state(self, session: GameSession) -> None:
        for index, sid in session.occupants():
            self.emit('game-state', session.snapshot(index), sid)

    def _finish(self, session: GameSession, winner: int) -> None:
        self._broadcast(session, 'game-over', {'winner': winner})
        self.registry.destroy(session)

    # ---- room lifecycle ----

    @rejects_to_sender
    def create_room(self, sid: str, room_code) -> GameSession:
        session = self.registry.create(room_code, sid)
        with session.lock:
            self.emit('room-created', session.code, sid)
            self.emit('game-state', session.snapshot(0), sid)
        return session

    @rejects_to_sender
    def join_room(self, sid: str, room_code) -> GameSession:
        session, _ = self.registry.join(room_code, sid)
        with session.lock:
            self.emit('room-joined', session.code, sid)
            self._broadcast_state(session)
        return session

    def disconnect(self, sid: str) -> None:
        for session, remaining_sid in self.registry.leave(sid):
            self.emit('player-left', {'roomCode': session.code}, remaining_sid)

    # ---- placement ----

    @rejects_to_sender
    def submit_placement(self, sid: str, room_code, pieces) -> None:
        with self.registry.locked(room_code) as session:
            player = session.player_index(sid)
            session.submit_placement(player, pieces)
            self._broadcast_state(session)

    def place_live(self, sid: str, room_code, x, y) -> None:
        self._preview(sid, room_code, 'piece-placed-live', x, y)

    def remove_live(self, sid: str, room_code, x, y) -> None:
        self._preview(sid, room_code, 'piece-removed-live', x, y)

    def _preview(self, sid: str, room_code, event: str, x, y) -> None:
        # Unvalidated previews: dropped silently unless the room is placing
        try:
            session = self.registry.get(room_code)
        except GameError:
            return
        with session.lock:
            if session.closed or session.phase != PLACEMENT or sid not in session.players:
                return
            index = session.players.index(sid)
            opponent = session.sid_of(1 - index)
            if opponent is not None:
                self.emit(event, {'x': x, 'y': y, 'playerIndex': index}, opponent)

    # ---- play ----

    @rejects_to_sender
    def move(self, sid: str, room_code, from_x, from_y, to_x, to_y) -> Optional[int]:
        origin, dest = _coord(from_x, from_y), _coord(to_x, to_y)
        with self.registry.locked(room_code) as session:
            player = session.player_index(sid)
            winner = session.move(player, origin, dest)
            if winner is not None:
                self._finish(session, winner)
                return winner
            self._broadcast(session, 'piece-moved', {
                'fromX': origin[0], 'fromY': origin[1],
                'toX': dest[0], 'toY': dest[1],
                'playerIndex': player,
            })
            self._broadcast_state(session)
        return None

    @rejects_to_sender
    def attack(self, sid: str, room_code, from_x, from_y, to_x, to_y) -> Optional[int]:
        origin, target = _coord(from_x, from_y), _coord(to_x, to_y)
        with self.registry.locked(room_code) as session:
            player = session.player_index(sid)
            outcome = session.attack(player, origin, target)
            self._broadcast(session, 'combat-result', outcome.event)
            if outcome.winner is not None:
                self._finish(session, outcome.winner)
                return outcome.winner
            self._broadcast_state(session)
        return None

    @rejects_to_sender
    def end_turn(self, sid: str, room_code) -> None:
        with self.registry.locked(room_code) as session:
            player = session.player_index(sid)
            session.end_turn(player)
            self._broadcast_state(session)
