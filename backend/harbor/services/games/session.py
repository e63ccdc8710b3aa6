import logging
import random
import threading
from typing import List, NamedTuple, Optional, Set, Tuple

from harbor import errors
from harbor.models import Board, Coord, Piece
from . import rules
from .combat import apply_result, resolve
from .visibility import project_for
from .win import check_win

logger = logging.getLogger(__name__)

PLACEMENT = 'placement'
PLAYING = 'playing'
TERMINATED = 'terminated'


class AttackOutcome(NamedTuple):
    event: dict
    winner: Optional[int]


class GameSession:
    """Authoritative state of one room.

    Callers hold ``lock`` around every method call; the registry's
    ``locked()`` context manager does that for them. Every command validates
    fully before it mutates anything, so a raised ``GameError`` always means
    the state is unchanged.
    """

    def __init__(self, code: str, rng: Optional[random.Random] = None):
        self.code = code
        self.rng = rng or random.Random()
        self.lock = threading.RLock()
        self.closed = False
        self.board = Board()
        self.phase = PLACEMENT
        self.current_player = 0
        self.winner: Optional[int] = None
        self.players: List[Optional[str]] = [None, None]
        self.placements: List[Optional[list]] = [None, None]
        # Coordinates touched by this turn's moves (origins and destinations)
        self.moved: List[Set[Coord]] = [set(), set()]
        # Origins of pieces that attacked this turn and survived
        self.attacked: List[Set[Coord]] = [set(), set()]
        self.temporarily_revealed: List[Tuple[Coord, int]] = []

    # ---- players ----

    def add_player(self, sid: str) -> int:
        if sid in self.players:
            raise errors.RoomFull('You are already in this room')
        if None not in self.players:
            raise errors.RoomFull()
        if self.phase != PLACEMENT:
            # A seat emptied mid-game is never handed to someone else
            raise errors.RoomFull()
        index = self.players.index(None)
        self.players[index] = sid
        return index

    def remove_player(self, sid: str) -> Optional[int]:
        if sid not in self.players:
            return None
        index = self.players.index(sid)
        self.players[index] = None
        if self.phase == PLACEMENT and self.placements[index] is not None:
            for x, y, _ in list(self.board.pieces_of(index)):
                self.board.clear(x, y)
            self.placements[index] = None
        return index

    def player_index(self, sid: str) -> int:
        if sid not in self.players:
            raise errors.NotInRoom()
        return self.players.index(sid)

    def sid_of(self, index: int) -> Optional[str]:
        return self.players[index]

    def occupants(self) -> List[Tuple[int, str]]:
        return [(i, sid) for i, sid in enumerate(self.players) if sid is not None]

    @property
    def is_empty(self) -> bool:
        return not self.occupants()

    # ---- placement ----

    def submit_placement(self, player: int, pieces) -> bool:
        """Store ``player``'s setup; return True if this started the game."""
        if self.phase != PLACEMENT:
            raise errors.WrongPhase(self.phase)
        if self.placements[player] is not None:
            raise errors.PlacementAlreadySubmitted()
        parsed = rules.parse_placement(pieces, player)

        for x, y, kind in parsed:
            self.board.put(x, y, Piece(player, kind))
        self.placements[player] = parsed
        logger.info(f'[placement] room={self.code} player={player} pieces={len(parsed)}')

        if all(p is not None for p in self.placements):
            self.current_player = self.rng.randrange(2)
            self.phase = PLAYING
            logger.info(f'[game-start] room={self.code} starting_player={self.current_player}')
            return True
        return False

    def placements_submitted(self) -> dict:
        return {'p0': self.placements[0] is not None, 'p1': self.placements[1] is not None}

    # ---- turns ----

    def _require_turn(self, player: int) -> None:
        if self.phase != PLAYING:
            raise errors.WrongPhase(self.phase)
        if player != self.current_player:
            raise errors.NotYourTurn()

    def _own_piece(self, player: int, x: int, y: int) -> Piece:
        piece = self.board.get(x, y)
        if piece is None:
            raise errors.NoPiece(x, y)
        if piece.owner != player:
            raise errors.NotYourPiece(x, y)
        return piece

    def move(self, player: int, origin: Coord, dest: Coord) -> Optional[int]:
        """Move a piece; return the winner if the move captured a base."""
        self._require_turn(player)
        piece = self._own_piece(player, *origin)
        # Matches both origins and destinations of earlier moves this turn
        if origin in self.moved[player]:
            raise errors.AlreadyMoved(piece.kind.value)
        rules.validate_move(self.board, origin, dest, piece.kind, player)

        self.board.clear(*origin)
        self.board.put(dest[0], dest[1], piece)
        self.moved[player].update((origin, dest))
        # A piece that already attacked keeps that mark where it lands
        if origin in self.attacked[player]:
            self.attacked[player].add(dest)
        logger.debug(f'[move] room={self.code} player={player} {piece.kind.value} {origin} -> {dest}')

        winner = check_win(player, *dest)
        if winner is not None:
            self._terminate(winner)
        return winner

    def attack(self, player: int, origin: Coord, target: Coord) -> AttackOutcome:
        self._require_turn(player)
        attacker = self._own_piece(player, *origin)
        rules.validate_attack(self.board, origin, target, player, self.attacked[player])
        defender = self.board.get(*target)

        result = resolve(attacker.kind, defender.kind)
        self.temporarily_revealed.append((target, defender.owner))
        apply_result(self.board, origin, target, result)
        if self.board.get(*origin) is attacker:
            self.attacked[player].add(origin)
        logger.info(
            f'[combat] room={self.code} {attacker.kind.value}@{origin} vs '
            f'{defender.kind.value}@{target} winner={result.winner}'
        )

        event = {
            'attacker': {'x': origin[0], 'y': origin[1], 'piece': attacker.kind.value, 'player': attacker.owner},
            'defender': {'x': target[0], 'y': target[1], 'piece': defender.kind.value, 'player': defender.owner},
            'result': result.to_dict(),
        }
        # Attacks never relocate the attacker
        winner = check_win(player, *origin)
        if winner is not None:
            self._terminate(winner)
        return AttackOutcome(event, winner)

    def end_turn(self, player: int) -> None:
        self._require_turn(player)
        for (x, y), owner in self.temporarily_revealed:
            piece = self.board.get(x, y)
            if piece is not None and piece.owner == owner:
                piece.revealed = False
        self.temporarily_revealed = []
        for _, _, piece in self.board.pieces_of(player):
            piece.revealed = False
        self.moved = [set(), set()]
        self.attacked = [set(), set()]
        self.current_player = 1 - player

    def _terminate(self, winner: int) -> None:
        self.phase = TERMINATED
        self.winner = winner
        logger.info(f'[game-over] room={self.code} winner={winner}')

    # ---- views ----

    def snapshot(self, viewer: int) -> dict:
        return {
            'board': project_for(self.board, viewer),
            'phase': self.phase,
            'currentPlayer': self.current_player,
            'viewerIndex': viewer,
            'bothPlacementsSubmitted': self.placements_submitted(),
        }

    def summary(self) -> dict:
        """Public, fog-free facts about the room."""
        return {
            'code': self.code,
            'phase': self.phase,
            'players': len(self.occupants()),
            'placementsSubmitted': self.placements_submitted(),
        }
