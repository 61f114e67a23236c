import pytest

from ai import Evaluator
from board import GameState
from constants import BLACK, WHITE, idx_to_xy


@pytest.fixture
def evaluator():
    return Evaluator()


def _fill(make_state, n_black, n_white, to_move=BLACK):
    squares = [idx_to_xy(i) for i in range(n_black + n_white)]
    return make_state(black=squares[:n_black], white=squares[n_black:], to_move=to_move)


def test_start_position_is_balanced(evaluator):
    state = GameState()
    assert evaluator.score(state, BLACK) == 0
    assert evaluator.score(state, WHITE) == 0


def test_corner_position_exact_terms(evaluator, make_state):
    state = make_state(black=[(0, 0)], white=[(1, 0)])
    assert evaluator.positional(state, BLACK) == 120
    # 1 move vs 0: 3 + 50 (opponent must pass) + 20 (more than double)
    assert evaluator.mobility(state, BLACK) == 73
    assert evaluator.edge_stability(state, BLACK) == 0
    assert evaluator.parity(state, BLACK) == 0
    assert evaluator.material(state, BLACK) == 0
    assert evaluator.score(state, BLACK) == 193
    assert evaluator.score(state, WHITE) == -123


def test_positional_x_square_penalty(evaluator, make_state):
    state = make_state(black=[(1, 1)], white=[(3, 3)])
    assert evaluator.positional(state, BLACK) == -50 - 1


def test_edge_term_counts_all_edge_cells(evaluator, make_state):
    state = make_state(black=[(0, 3), (7, 7), (4, 0)], white=[(3, 7), (3, 3)])
    assert evaluator.edge_stability(state, BLACK) == (3 - 1) * 5
    assert evaluator.edge_stability(state, WHITE) == (1 - 3) * 5


def test_mobility_ignored_in_endgame(evaluator, make_state):
    state = _fill(make_state, 30, 20)
    assert state.get_total_pieces() == 50
    assert evaluator.mobility(state, BLACK) == 0


def test_parity_even_empties_is_zero(evaluator, make_state):
    state = _fill(make_state, 30, 30)
    assert state.get_empty_count() == 4
    assert evaluator.parity(state, BLACK) == 0
    assert evaluator.parity(state, WHITE) == 0


def test_parity_odd_empties_rewards_side_to_move(evaluator, make_state):
    state = _fill(make_state, 31, 30, to_move=BLACK)
    assert state.get_empty_count() == 3
    assert evaluator.parity(state, BLACK) == 10
    assert evaluator.parity(state, WHITE) == -10
    state.current_player = WHITE
    assert evaluator.parity(state, BLACK) == -10


def test_parity_only_in_endgame(evaluator, make_state):
    state = _fill(make_state, 25, 24)
    assert state.get_empty_count() % 2 == 1
    assert evaluator.parity(state, BLACK) == 0


@pytest.mark.parametrize("n_black,n_white,expected", [
    (30, 20, 50),   # >= 50 pieces: x5
    (25, 15, 20),   # >= 40 pieces: x2
    (10, 5, 2),     # otherwise halved
    (3, 0, 1),
    (0, 3, -1),     # truncates toward zero
])
def test_material_scales_with_phase(evaluator, make_state, n_black, n_white, expected):
    state = _fill(make_state, n_black, n_white)
    assert evaluator.material(state, BLACK) == expected


def test_score_is_sum_of_terms(evaluator):
    state = GameState()
    for move in [(2, 3), (2, 2), (2, 1)]:
        state.play_move(move, track_time=False)
    for player in (BLACK, WHITE):
        expected = (
            evaluator.positional(state, player)
            + evaluator.mobility(state, player)
            + evaluator.edge_stability(state, player)
            + evaluator.parity(state, player)
            + evaluator.material(state, player)
        )
        assert evaluator.score(state, player) == expected


def test_score_is_pure(evaluator):
    state = GameState()
    before = state.copy()
    evaluator.score(state, BLACK)
    assert state == before
