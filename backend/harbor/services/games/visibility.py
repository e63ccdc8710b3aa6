from typing import List, Optional

from harbor.models import HIDDEN, Board


def project_cell(piece, viewer: int) -> Optional[dict]:
    if piece is None:
        return None
    if piece.owner == viewer or piece.revealed:
        return {'player': piece.owner, 'piece': piece.kind.value, 'revealed': True}
    return {'player': piece.owner, 'piece': HIDDEN, 'revealed': False}


def project_for(board: Board, viewer: int) -> List[List[Optional[dict]]]:
    """Board as seen by ``viewer``, row-major (``board[y][x]``).

    The viewer's own pieces are always shown. Opponent pieces show their
    kind only while revealed by combat; otherwise they are ``"hidden"``.
    """
    rows = [[None] * board.width for _ in range(board.height)]
    for x, y, piece in board.cells():
        rows[y][x] = project_cell(piece, viewer)
    return rows
