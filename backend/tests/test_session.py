import random

import pytest

from harbor import errors
from harbor.models import FREQUENCIES, HIDDEN
from harbor.services.games.session import PLACEMENT, PLAYING, TERMINATED, GameSession

from conftest import put, start_playing


def full_setup(player):
    """A legal placement using every piece in the frequency table."""
    rows = range(0, 5) if player == 0 else range(7, 12)
    base = (2, 0) if player == 0 else (5, 11)
    cells = [(x, y) for y in rows for x in range(8) if (x, y) != base]
    kinds = [k for k, n in FREQUENCIES.items() for _ in range(n)]
    return [{'x': x, 'y': y, 'piece': k.value} for (x, y), k in zip(cells, kinds)]


def test_placement_then_playing_with_random_start(session):
    assert session.phase == PLACEMENT
    assert session.submit_placement(0, full_setup(0)) is False
    assert session.phase == PLACEMENT
    assert session.placements_submitted() == {'p0': True, 'p1': False}

    assert session.submit_placement(1, full_setup(1)) is True
    assert session.phase == PLAYING
    assert session.current_player == random.Random(7).randrange(2)
    assert session.board.count(0) == sum(FREQUENCIES.values())
    assert session.board.count(1) == sum(FREQUENCIES.values())


def test_starting_player_uses_both_indices():
    starters = set()
    for seed in range(20):
        s = GameSession('R', rng=random.Random(seed))
        s.add_player('a')
        s.add_player('b')
        s.submit_placement(0, [])
        s.submit_placement(1, [])
        starters.add(s.current_player)
    assert starters == {0, 1}


def test_rejected_placement_changes_nothing(session):
    bad = full_setup(0) + [{'x': 0, 'y': 5, 'piece': '3'}]
    with pytest.raises(errors.InvalidRow):
        session.submit_placement(0, bad)
    assert session.board.count() == 0
    assert session.placements[0] is None


def test_placement_only_once_and_only_in_placement(session):
    session.submit_placement(0, [])
    with pytest.raises(errors.PlacementAlreadySubmitted):
        session.submit_placement(0, [])
    session.submit_placement(1, [])
    with pytest.raises(errors.WrongPhase):
        session.submit_placement(1, [])


def test_move_requires_playing_phase_and_turn(session):
    put(session, 0, '5', 3, 3)
    with pytest.raises(errors.WrongPhase):
        session.move(0, (3, 3), (3, 4))
    start_playing(session, first=1)
    with pytest.raises(errors.NotYourTurn):
        session.move(0, (3, 3), (3, 4))


def test_move_requires_own_piece(playing):
    put(playing, 1, '5', 3, 8)
    with pytest.raises(errors.NoPiece):
        playing.move(0, (3, 3), (3, 4))
    with pytest.raises(errors.NotYourPiece):
        playing.move(0, (3, 8), (3, 7))


def test_patrol_boat_three_cells_rejected_and_board_unchanged(playing):
    boat = put(playing, 0, '1', 3, 3)
    with pytest.raises(errors.WrongDistance):
        playing.move(0, (3, 3), (3, 6))
    assert playing.board.get(3, 3) is boat
    assert playing.board.get(3, 6) is None
    assert playing.moved[0] == set()


def test_piece_moves_once_per_turn(playing):
    put(playing, 0, '5', 3, 3)
    playing.move(0, (3, 3), (3, 4))
    with pytest.raises(errors.AlreadyMoved):
        playing.move(0, (3, 4), (3, 5))


def test_moved_tracking_records_origin_and_destination(playing):
    put(playing, 0, '5', 3, 3)
    put(playing, 0, '6', 2, 3)
    playing.move(0, (3, 3), (3, 4))
    assert playing.moved[0] == {(3, 3), (3, 4)}

    # A piece that steps into a square vacated this turn is done for the turn
    playing.move(0, (2, 3), (3, 3))
    with pytest.raises(errors.AlreadyMoved):
        playing.move(0, (3, 3), (4, 3))


def test_attack_once_per_turn_and_attacker_stays(playing):
    attacker = put(playing, 0, '9', 3, 5)
    put(playing, 1, '3', 3, 6)
    outcome = playing.attack(0, (3, 5), (3, 6))
    assert outcome.winner is None
    assert outcome.event['result']['winner'] == 'attacker'
    assert outcome.event['attacker'] == {'x': 3, 'y': 5, 'piece': '9', 'player': 0}
    assert outcome.event['defender'] == {'x': 3, 'y': 6, 'piece': '3', 'player': 1}
    assert playing.board.get(3, 5) is attacker
    assert playing.board.get(3, 6) is None
    assert (3, 5) in playing.attacked[0]

    put(playing, 1, '2', 3, 6)
    with pytest.raises(errors.AlreadyAttacked):
        playing.attack(0, (3, 5), (3, 6))


def test_destroyed_attacker_is_not_tracked(playing):
    put(playing, 0, '3', 3, 5)
    put(playing, 1, '9', 3, 6)
    playing.attack(0, (3, 5), (3, 6))
    assert playing.board.get(3, 5) is None
    assert playing.attacked[0] == set()


def test_attack_mark_follows_the_piece_when_it_moves(playing):
    put(playing, 0, '5', 3, 3)
    put(playing, 1, '3', 3, 4)
    playing.attack(0, (3, 3), (3, 4))
    playing.move(0, (3, 3), (3, 4))
    assert (3, 4) in playing.attacked[0]

    defender = put(playing, 1, '2', 3, 5)
    with pytest.raises(errors.AlreadyAttacked):
        playing.attack(0, (3, 4), (3, 5))
    assert playing.board.get(3, 5) is defender


def test_end_turn_hides_and_resets(playing):
    put(playing, 0, '9', 3, 5)
    defender = put(playing, 1, 'Flying Boat', 3, 6)
    flagship = put(playing, 0, '8', 6, 5, revealed=True)
    put(playing, 0, '5', 0, 3)
    playing.move(0, (0, 3), (0, 4))
    playing.attack(0, (3, 5), (3, 6))
    assert defender.revealed

    playing.end_turn(0)
    assert all(not p.revealed for _, _, p in playing.board.pieces_of(0))
    assert not flagship.revealed
    assert not defender.revealed
    assert playing.moved == [set(), set()]
    assert playing.attacked == [set(), set()]
    assert playing.temporarily_revealed == []
    assert playing.current_player == 1


def test_end_turn_only_from_current_player(playing):
    with pytest.raises(errors.NotYourTurn):
        playing.end_turn(1)
    assert playing.current_player == 0


def test_move_onto_enemy_base_wins(playing):
    put(playing, 0, '5', 5, 10)
    winner = playing.move(0, (5, 10), (5, 11))
    assert winner == 0
    assert playing.phase == TERMINATED
    assert playing.winner == 0


def test_player_one_wins_on_player_zero_base(session):
    start_playing(session, first=1)
    put(session, 1, '1', 1, 0)
    assert session.move(1, (1, 0), (2, 0)) == 1


def test_snapshot_applies_fog(playing):
    put(playing, 0, '10', 1, 1)
    put(playing, 1, '10', 1, 10)
    put(playing, 1, 'Submarine', 2, 10, revealed=True)

    view0 = playing.snapshot(0)
    assert view0['viewerIndex'] == 0
    assert view0['phase'] == PLAYING
    assert view0['currentPlayer'] == 0
    assert view0['bothPlacementsSubmitted'] == {'p0': True, 'p1': True}
    assert view0['board'][1][1] == {'player': 0, 'piece': '10', 'revealed': True}
    assert view0['board'][10][1] == {'player': 1, 'piece': HIDDEN, 'revealed': False}
    assert view0['board'][10][2] == {'player': 1, 'piece': 'Submarine', 'revealed': True}

    view1 = playing.snapshot(1)
    assert view1['board'][1][1] == {'player': 0, 'piece': HIDDEN, 'revealed': False}
    assert view1['board'][10][1] == {'player': 1, 'piece': '10', 'revealed': True}


def test_leaving_during_placement_clears_pieces(session):
    session.submit_placement(1, full_setup(1))
    assert session.remove_player('sid-1') == 1
    assert session.board.count(1) == 0
    assert session.placements[1] is None
    assert session.add_player('sid-2') == 1


def test_empty_seat_is_not_refilled_once_playing(playing):
    playing.remove_player('sid-1')
    with pytest.raises(errors.RoomFull):
        playing.add_player('sid-2')
