"""Room registry: room code -> GameSession.

Lock order is always session lock first, registry lock second. The registry
lock only guards its own dictionaries and is never held while waiting for a
session.
"""
import logging
import threading
from collections import defaultdict
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from harbor import errors
from .session import TERMINATED, GameSession

logger = logging.getLogger(__name__)


class RoomRegistry:

    def __init__(self, session_factory: Callable[[str], GameSession] = GameSession,
                 max_code_length: int = 0):
        self._session_factory = session_factory
        self._max_code_length = max_code_length
        self._rooms: Dict[str, GameSession] = {}
        self._rooms_by_sid: Dict[str, Set[str]] = defaultdict(set)
        self._lock = threading.Lock()

    def normalize(self, code) -> str:
        code = str(code or '').strip().upper()
        if not code:
            raise errors.RoomCodeRequired()
        if self._max_code_length and len(code) > self._max_code_length:
            raise errors.RoomCodeRequired(f'Room codes are at most {self._max_code_length} characters')
        return code

    def codes(self) -> List[str]:
        with self._lock:
            return sorted(self._rooms)

    def __len__(self):
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code):
        try:
            code = self.normalize(code)
        except errors.GameError:
            return False
        with self._lock:
            return code in self._rooms

    def get(self, code) -> GameSession:
        code = self.normalize(code)
        with self._lock:
            session = self._rooms.get(code)
        if session is None:
            raise errors.RoomNotFound(code)
        return session

    def create(self, code, sid: str) -> GameSession:
        code = self.normalize(code)
        with self._lock:
            if code in self._rooms:
                raise errors.RoomExists()
            session = self._session_factory(code)
            session.add_player(sid)
            self._rooms[code] = session
            self._rooms_by_sid[sid].add(code)
        logger.info(f'[room-created] code={code} sid={sid}')
        return session

    def join(self, code, sid: str) -> Tuple[GameSession, int]:
        code = self.normalize(code)
        with self._lock:
            session = self._rooms.get(code)
            available = sorted(self._rooms)
        if session is None:
            raise errors.RoomNotFound(code, available)
        with session.lock:
            if session.closed:
                raise errors.RoomNotFound(code, available)
            index = session.add_player(sid)
            with self._lock:
                self._rooms_by_sid[sid].add(code)
        logger.info(f'[room-joined] code={code} sid={sid} player={index}')
        return session, index

    @contextmanager
    def locked(self, code) -> Iterator[GameSession]:
        """Yield the live session for ``code`` with its lock held."""
        session = self.get(code)
        with session.lock:
            if session.closed or session.phase == TERMINATED:
                raise errors.RoomNotFound(session.code)
            yield session

    def destroy(self, session: GameSession) -> None:
        """Drop ``session``; the caller holds ``session.lock``."""
        session.closed = True
        with self._lock:
            if self._rooms.get(session.code) is session:
                del self._rooms[session.code]
            for sid in session.players:
                if sid is not None:
                    self._rooms_by_sid[sid].discard(session.code)
                    if not self._rooms_by_sid[sid]:
                        del self._rooms_by_sid[sid]
        logger.info(f'[room-destroyed] code={session.code}')

    def leave(self, sid: str) -> List[Tuple[GameSession, Optional[str]]]:
        """Remove ``sid`` from every room it is in.

        Returns ``(session, remaining_sid)`` for each room that still has a
        player left; empty rooms are destroyed.
        """
        with self._lock:
            codes = self._rooms_by_sid.pop(sid, set())
            sessions = [self._rooms[c] for c in codes if c in self._rooms]

        remaining = []
        for session in sessions:
            with session.lock:
                if session.closed:
                    continue
                index = session.remove_player(sid)
                logger.info(f'[player-left] code={session.code} sid={sid} player={index}')
                if session.is_empty:
                    self.destroy(session)
                else:
                    for _, other in session.occupants():
                        remaining.append((session, other))
        return remaining
