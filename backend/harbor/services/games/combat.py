"""Combat resolution.

The table is an ordered list of rules. Each rule looks at the
(attacker, defender) pair and either returns a result or passes. Several
kinds match more than one rule (a Mine against a numbered rank, say), so the
order of ``RULES`` is part of the game.
"""
from typing import Callable, List, NamedTuple, Optional

from harbor.models import Board, Coord, PieceKind

ATTACKER = 'attacker'
DEFENDER = 'defender'
BOTH = 'both'
NONE = 'none'

MINE = PieceKind.MINE
FLYING_BOAT = PieceKind.FLYING_BOAT
MINELAYER = PieceKind.MINELAYER
SUBMARINE = PieceKind.SUBMARINE
MINESWEEPER = PieceKind.MINESWEEPER
RANK2 = PieceKind.RANK2
RANK4 = PieceKind.RANK4


class CombatResult(NamedTuple):
    winner: str
    message: str

    def to_dict(self):
        return {'winner': self.winner, 'message': self.message}


Rule = Callable[[PieceKind, PieceKind], Optional[CombatResult]]


def _name(kind: PieceKind) -> str:
    return 'Torpedo Boat' if kind is RANK2 else kind.value


def _destroys(winner_side: str, winner: PieceKind, loser: PieceKind) -> CombatResult:
    return CombatResult(winner_side, f'{_name(winner)} destroys {_name(loser)}')


def mine_rule(attacker, defender):
    if attacker is not MINE and defender is not MINE:
        return None
    other, other_side = (defender, DEFENDER) if attacker is MINE else (attacker, ATTACKER)
    if other in (MINESWEEPER, MINELAYER):
        return _destroys(other_side, other, MINE)
    return CombatResult(BOTH, f'Mine destroys {_name(other)} (Mine also destroyed)')


def attacking_flying_boat_rule(attacker, defender):
    if attacker is FLYING_BOAT:
        return CombatResult(NONE, 'Flying Boat cannot attack - nothing happens')
    return None


def defending_flying_boat_rule(attacker, defender):
    if defender is not FLYING_BOAT:
        return None
    if attacker is RANK4:
        return _destroys(ATTACKER, attacker, defender)
    return CombatResult(NONE, f'Flying Boat cannot be killed by {_name(attacker)} - nothing happens')


def attacking_minelayer_rule(attacker, defender):
    if attacker is MINELAYER:
        return CombatResult(DEFENDER, 'Minelayer cannot attack')
    return None


def defending_minelayer_rule(attacker, defender):
    if defender is not MINELAYER:
        return None
    if attacker in (MINE, RANK4):
        return _destroys(ATTACKER, attacker, defender)
    return _destroys(DEFENDER, defender, attacker)


def submarine_rule(attacker, defender):
    if attacker is SUBMARINE:
        if defender in (RANK2, MINELAYER):
            return _destroys(DEFENDER, defender, attacker)
        return _destroys(ATTACKER, attacker, defender)
    if defender is SUBMARINE:
        if attacker in (RANK2, MINELAYER):
            return _destroys(ATTACKER, attacker, defender)
        return _destroys(DEFENDER, defender, attacker)
    return None


def minesweeper_rule(attacker, defender):
    # Mines were settled by mine_rule; whatever is left beats a Minesweeper
    if attacker is MINESWEEPER:
        return _destroys(DEFENDER, defender, attacker)
    if defender is MINESWEEPER:
        return _destroys(ATTACKER, attacker, defender)
    return None


def torpedo_boat_rule(attacker, defender):
    if attacker is RANK2:
        if defender.rank == 1:
            return _destroys(ATTACKER, attacker, defender)
        return _destroys(DEFENDER, defender, attacker)
    if defender is RANK2:
        if attacker.rank == 1:
            return _destroys(DEFENDER, defender, attacker)
        return _destroys(ATTACKER, attacker, defender)
    return None


def rank4_rule(attacker, defender):
    # 4 against 4 is an ordinary tie
    if attacker is RANK4 and defender is not RANK4:
        if defender.rank < 4:
            return _destroys(ATTACKER, attacker, defender)
        return _destroys(DEFENDER, defender, attacker)
    if defender is RANK4 and attacker is not RANK4:
        if attacker.rank < 4:
            return _destroys(DEFENDER, defender, attacker)
        return _destroys(ATTACKER, attacker, defender)
    return None


def rank_rule(attacker, defender):
    if attacker.rank > defender.rank:
        return _destroys(ATTACKER, attacker, defender)
    if defender.rank > attacker.rank:
        return _destroys(DEFENDER, defender, attacker)
    return CombatResult(BOTH, 'Both pieces destroyed')


RULES: List[Rule] = [
    mine_rule,
    attacking_flying_boat_rule,
    defending_flying_boat_rule,
    attacking_minelayer_rule,
    defending_minelayer_rule,
    submarine_rule,
    minesweeper_rule,
    torpedo_boat_rule,
    rank4_rule,
    rank_rule,
]


def resolve(attacker: PieceKind, defender: PieceKind) -> CombatResult:
    for rule in RULES:
        result = rule(attacker, defender)
        if result is not None:
            return result
    raise AssertionError(f'no combat rule for {attacker} vs {defender}')


def apply_result(board: Board, origin: Coord, target: Coord, result: CombatResult) -> None:
    """Apply ``result`` to the board.

    Both pieces are revealed first so the outcome is visible to both
    players, including fights where nothing is destroyed.
    """
    attacker = board.get(*origin)
    defender = board.get(*target)
    attacker.revealed = True
    defender.revealed = True

    if result.winner == ATTACKER:
        board.clear(*target)
        if attacker.kind is MINE:
            board.clear(*origin)
    elif result.winner == DEFENDER:
        board.clear(*origin)
        if defender.kind is MINE:
            board.clear(*target)
    elif result.winner == BOTH:
        board.clear(*origin)
        board.clear(*target)
