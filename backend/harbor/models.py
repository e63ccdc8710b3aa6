from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

Coord = Tuple[int, int]

BOARD_WIDTH = 8
BOARD_HEIGHT = 12
# Base cell of each player, indexed by player
BASES: Tuple[Coord, Coord] = ((2, 0), (5, 11))
HOME_ROWS = (range(0, 5), range(7, 12))
HIDDEN = 'hidden'


class PieceKind(Enum):
    MINE = 'Mine'
    FLYING_BOAT = 'Flying Boat'
    MINELAYER = 'Minelayer'
    SUBMARINE = 'Submarine'
    MINESWEEPER = 'Minesweeper'
    RANK1 = '1'
    RANK2 = '2'
    RANK3 = '3'
    RANK4 = '4'
    RANK5 = '5'
    RANK6 = '6'
    RANK7 = '7'
    RANK8 = '8'
    RANK9 = '9'
    RANK10 = '10'

    @property
    def rank(self) -> Optional[int]:
        """Numeric strength for the numbered ranks, None for special pieces."""
        return int(self.value) if self.value.isdigit() else None

    @property
    def display_name(self) -> str:
        if self is PieceKind.RANK1:
            return 'Patrol Boat'
        if self is PieceKind.RANK2:
            return 'Torpedo Boat'
        return self.value

    @classmethod
    def parse(cls, value) -> Optional['PieceKind']:
        try:
            return cls(str(value))
        except ValueError:
            return None


FREQUENCIES: Dict[PieceKind, int] = {
    PieceKind.MINE: 3,
    PieceKind.FLYING_BOAT: 1,
    PieceKind.MINELAYER: 1,
    PieceKind.SUBMARINE: 3,
    PieceKind.MINESWEEPER: 2,
    PieceKind.RANK1: 5,
    PieceKind.RANK2: 5,
    PieceKind.RANK3: 4,
    PieceKind.RANK4: 3,
    PieceKind.RANK5: 4,
    PieceKind.RANK6: 3,
    PieceKind.RANK7: 2,
    PieceKind.RANK8: 1,
    PieceKind.RANK9: 1,
    PieceKind.RANK10: 1,
}


class Piece:
    __slots__ = ('owner', 'kind', 'revealed')

    def __init__(self, owner: int, kind: PieceKind, revealed: bool = False):
        self.owner = owner
        self.kind = kind
        self.revealed = revealed

    def __repr__(self):
        return f'Piece(owner={self.owner}, kind={self.kind.value!r}, revealed={self.revealed})'


class Board:
    """Authoritative 8x12 grid. Cells are addressed as (x, y)."""

    width = BOARD_WIDTH
    height = BOARD_HEIGHT

    def __init__(self):
        self._rows: List[List[Optional[Piece]]] = [
            [None] * self.width for _ in range(self.height)
        ]

    @classmethod
    def in_bounds(cls, x: int, y: int) -> bool:
        return 0 <= x < cls.width and 0 <= y < cls.height

    def get(self, x: int, y: int) -> Optional[Piece]:
        if not self.in_bounds(x, y):
            return None
        return self._rows[y][x]

    def put(self, x: int, y: int, piece: Piece) -> None:
        self._rows[y][x] = piece

    def clear(self, x: int, y: int) -> Optional[Piece]:
        piece = self._rows[y][x]
        self._rows[y][x] = None
        return piece

    def cells(self) -> Iterator[Tuple[int, int, Optional[Piece]]]:
        for y, row in enumerate(self._rows):
            for x, piece in enumerate(row):
                yield x, y, piece

    def pieces_of(self, player: int) -> Iterator[Tuple[int, int, Piece]]:
        for x, y, piece in self.cells():
            if piece is not None and piece.owner == player:
                yield x, y, piece

    def count(self, player: Optional[int] = None) -> int:
        return sum(
            1 for _, _, p in self.cells()
            if p is not None and (player is None or p.owner == player)
        )
