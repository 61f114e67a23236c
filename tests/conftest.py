import pytest

from board import GameState
from constants import BLACK, WHITE


@pytest.fixture
def make_state():
    """Build a live position from lists of black and white squares."""

    def _make(black=(), white=(), to_move=BLACK):
        state = GameState.empty()
        for square in black:
            state.set_piece(square, BLACK)
        for square in white:
            state.set_piece(square, WHITE)
        state.current_player = to_move
        state.game_over = False
        return state

    return _make
