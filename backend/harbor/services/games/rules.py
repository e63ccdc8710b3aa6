from typing import FrozenSet, Iterable, List

from harbor import errors
from harbor.models import BASES, FREQUENCIES, HOME_ROWS, Board, Coord, PieceKind


def _edge(a: Coord, b: Coord) -> FrozenSet[Coord]:
    return frozenset((a, b))


# Harbor walls as the cell boundaries they block. Each entry is the unordered
# pair of adjacent cells on either side of the boundary.
WALL_EDGES: FrozenSet[FrozenSet[Coord]] = frozenset(
    # Player 0 harbor: column 2|3 boundary in rows 0-2, and the top of column 2
    [_edge((2, y), (3, y)) for y in range(0, 3)]
    + [_edge((2, 2), (2, 3))]
    # Player 1 harbor: column 4|5 boundary in rows 9-11, and the top of column 5
    + [_edge((4, y), (5, y)) for y in range(9, 12)]
    + [_edge((5, 8), (5, 9))]
)

# Attack direction along y for each player
FORWARD = (1, -1)


def path_cells(origin: Coord, dest: Coord) -> List[Coord]:
    """Cells visited by a cardinal move, origin first and destination last."""
    (fx, fy), (tx, ty) = origin, dest
    dx = (tx > fx) - (tx < fx)
    dy = (ty > fy) - (ty < fy)
    cells = [origin]
    x, y = fx, fy
    while (x, y) != (tx, ty):
        x, y = x + dx, y + dy
        cells.append((x, y))
    return cells


def crosses_wall(origin: Coord, dest: Coord) -> bool:
    cells = path_cells(origin, dest)
    return any(_edge(a, b) in WALL_EDGES for a, b in zip(cells, cells[1:]))


def validate_move(board: Board, origin: Coord, dest: Coord, kind: PieceKind, mover: int) -> None:
    """Raise the first movement error for moving ``kind`` from origin to dest.

    Moves never capture, so an occupied destination is always rejected.
    ``mover`` does not change the outcome; both harbor walls block both
    players alike.
    """
    (fx, fy), (tx, ty) = origin, dest
    if not board.in_bounds(tx, ty):
        raise errors.OutOfBounds()
    if board.get(tx, ty) is not None:
        raise errors.InvalidDestination()
    if kind is PieceKind.MINE:
        raise errors.Immobile()

    dx, dy = abs(tx - fx), abs(ty - fy)
    if (dx == 0 and dy == 0) or (dx > 0 and dy > 0):
        raise errors.NonCardinal()
    distance = dx + dy

    wall = crosses_wall(origin, dest)
    if kind is PieceKind.FLYING_BOAT:
        # Jumping the wall uses up the whole move
        if wall and distance != 1:
            raise errors.WrongDistance('Flying Boat can only move 1 square when jumping the wall')
        if distance > 2:
            raise errors.WrongDistance('Flying Boat can only move up to 2 squares')
        return

    if wall:
        raise errors.WallBlocked()

    if kind is PieceKind.RANK1:
        if distance > 2:
            raise errors.WrongDistance(f'{kind.display_name} can only move up to 2 squares')
        for x, y in path_cells(origin, dest)[1:-1]:
            if board.get(x, y) is not None:
                raise errors.PathBlocked()
        return

    if distance != 1:
        raise errors.WrongDistance('This piece can only move 1 square')


def validate_attack(board: Board, origin: Coord, target: Coord, attacker: int,
                    attacked: Iterable[Coord] = ()) -> None:
    """Raise the first attack error; the origin piece is assumed to be the attacker's."""
    (fx, fy), (tx, ty) = origin, target
    if not board.in_bounds(tx, ty):
        raise errors.OutOfBounds('Attack is out of bounds')
    defender = board.get(tx, ty)
    if defender is None:
        raise errors.NoPiece(tx, ty)
    if defender.owner == attacker:
        raise errors.InvalidTarget()
    if origin in set(attacked):
        raise errors.AlreadyAttacked(fx, fy)
    if abs(tx - fx) + abs(ty - fy) != 1:
        raise errors.NotAdjacent()
    if (ty - fy) * FORWARD[attacker] <= 0:
        raise errors.WrongDirection()
    kind = board.get(fx, fy).kind
    if kind in (PieceKind.FLYING_BOAT, PieceKind.MINELAYER):
        raise errors.CannotAttack(kind.value)


def parse_placement(pieces, player: int):
    """Validate a submitted placement and return ``[(x, y, kind), ...]``.

    Checks every entry before anything touches the board, so a rejected
    placement changes nothing.
    """
    if not isinstance(pieces, list):
        raise errors.InvalidPiece('Placement must be a list of pieces')
    parsed = []
    seen = set()
    counts = {}
    for entry in pieces:
        if not isinstance(entry, dict):
            raise errors.InvalidPiece()
        kind = PieceKind.parse(entry.get('piece'))
        x, y = entry.get('x'), entry.get('y')
        if kind is None or not isinstance(x, int) or not isinstance(y, int) \
                or isinstance(x, bool) or isinstance(y, bool):
            raise errors.InvalidPiece()
        if not Board.in_bounds(x, y):
            raise errors.OutOfBounds('Placement is out of bounds')
        if y not in HOME_ROWS[player]:
            raise errors.InvalidRow(y)
        if (x, y) == BASES[player]:
            raise errors.OnBase()
        if (x, y) in seen:
            raise errors.CellTaken(x, y)
        seen.add((x, y))
        counts[kind] = counts.get(kind, 0) + 1
        if counts[kind] > FREQUENCIES[kind]:
            raise errors.PieceLimitExceeded(kind.value, FREQUENCIES[kind])
        parsed.append((x, y, kind))
    return parsed
