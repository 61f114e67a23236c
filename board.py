from __future__ import annotations

import time
from typing import List, Optional, Tuple

import numpy as np

from constants import (
    BLACK,
    BOARD_SIZE,
    CELL_COUNT,
    DIRECTIONS,
    EMPTY,
    WHITE,
    opponent,
    xy_to_idx,
)

Move = Tuple[int, int]


class InvalidMove(ValueError):
    """Raised when a move outside the current legal set is played."""

    def __init__(self, move, player: int):
        super().__init__(f"Illegal move {move!r} for player {player}")
        self.move = move
        self.player = player


class GameState:
    """Reversi board plus side to move, game-over flag and turn timers.

    Moves are (x, y) = (column, row). Cells live in a flat int8 array
    indexed by ``y * 8 + x``.
    """

    def __init__(self):
        self.size = BOARD_SIZE
        self.cells = np.zeros(CELL_COUNT, dtype=np.int8)
        self.current_player = BLACK
        self.game_over = False
        self.player_time = [0.0, 0.0, 0.0]  # indexed by color
        self.turn_timer = 0.0
        self.start()

    @classmethod
    def empty(cls) -> GameState:
        """Empty board, not started (game_over is set)."""
        state = cls()
        state.cells[:] = EMPTY
        state.game_over = True
        state.turn_timer = 0.0
        return state

    def start(self) -> None:
        self.cells[:] = EMPTY
        self.cells[xy_to_idx(3, 3)] = WHITE
        self.cells[xy_to_idx(4, 3)] = BLACK
        self.cells[xy_to_idx(3, 4)] = BLACK
        self.cells[xy_to_idx(4, 4)] = WHITE
        self.current_player = BLACK
        self.game_over = False
        self.player_time = [0.0, 0.0, 0.0]
        self.turn_timer = time.time()

    def copy(self) -> GameState:
        new_state = GameState.__new__(GameState)
        new_state.size = self.size
        new_state.cells = self.cells.copy()
        new_state.current_player = self.current_player
        new_state.game_over = self.game_over
        new_state.player_time = list(self.player_time)
        new_state.turn_timer = self.turn_timer
        return new_state

    # ---- cell access ----
    def in_bounds(self, x, y):
        return 0 <= x < self.size and 0 <= y < self.size

    def is_square_valid(self, move) -> bool:
        x, y = move
        return self.in_bounds(x, y)

    def get_piece(self, move) -> int:
        x, y = move
        return int(self.cells[xy_to_idx(x, y)])

    def set_piece(self, move, piece: int) -> None:
        x, y = move
        self.cells[xy_to_idx(x, y)] = piece

    # ---- move generation ----
    def _flips(self, grid: List[int], x: int, y: int, color: int) -> List[int]:
        """Indices captured by ``color`` playing (x, y); empty if illegal."""
        if grid[xy_to_idx(x, y)] != EMPTY:
            return []
        opp = opponent(color)
        flipped = []
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            to_flip = []

            while self.in_bounds(nx, ny) and grid[xy_to_idx(nx, ny)] == opp:
                to_flip.append(xy_to_idx(nx, ny))
                nx += dx
                ny += dy

            if to_flip and self.in_bounds(nx, ny) and grid[xy_to_idx(nx, ny)] == color:
                flipped.extend(to_flip)
        return flipped

    def is_valid_move(self, x, y, player: Optional[int] = None) -> bool:
        if self.game_over or not self.in_bounds(x, y):
            return False
        color = self.current_player if player is None else player
        grid = self.cells.tolist()
        return self._has_capture(grid, x, y, color)

    def _has_capture(self, grid: List[int], x: int, y: int, color: int) -> bool:
        if grid[xy_to_idx(x, y)] != EMPTY:
            return False
        opp = opponent(color)
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            found_opponent = False

            while self.in_bounds(nx, ny) and grid[xy_to_idx(nx, ny)] == opp:
                found_opponent = True
                nx += dx
                ny += dy

            if found_opponent and self.in_bounds(nx, ny) and grid[xy_to_idx(nx, ny)] == color:
                return True
        return False

    def get_valid_moves(self, player: Optional[int] = None) -> List[Move]:
        """Legal moves in row-major order (by row, then column).

        A finished game has no legal moves for either side.
        """
        if self.game_over:
            return []
        color = self.current_player if player is None else player
        grid = self.cells.tolist()
        moves = []
        for y in range(self.size):
            for x in range(self.size):
                if grid[xy_to_idx(x, y)] != EMPTY:
                    continue
                if self._has_capture(grid, x, y, color):
                    moves.append((x, y))
        return moves

    # ---- move application ----
    def play_move(self, move, track_time: bool = True) -> bool:
        """Place a piece for the side to move, flip captures and pass the turn.

        If the next player cannot move the turn returns to the mover; if
        neither side can move the game is over. Raises ``InvalidMove``
        without touching the board when ``move`` is not legal.
        """
        color = self.current_player
        try:
            x, y = move
        except (TypeError, ValueError):
            raise InvalidMove(move, color) from None
        if self.game_over or not self.in_bounds(x, y):
            raise InvalidMove(move, color)

        flipped = self._flips(self.cells.tolist(), x, y, color)
        if not flipped:
            raise InvalidMove(move, color)

        self.cells[xy_to_idx(x, y)] = color
        self.cells[flipped] = color

        if track_time:
            now = time.time()
            self.player_time[color] += now - self.turn_timer
            self.turn_timer = now

        self.current_player = opponent(color)
        if not self.get_valid_moves():
            self.current_player = color
            if not self.get_valid_moves():
                self.game_over = True
        return True

    def simulate_move(self, move) -> GameState:
        """Return the successor state; ``self`` is left unchanged."""
        child = self.copy()
        child.play_move(move, track_time=False)
        return child

    # ---- counting ----
    def count_stones(self) -> Tuple[int, int]:
        b = int(np.count_nonzero(self.cells == BLACK))
        w = int(np.count_nonzero(self.cells == WHITE))
        return b, w

    def get_total_pieces(self) -> int:
        return int(np.count_nonzero(self.cells))

    def get_empty_count(self) -> int:
        return CELL_COUNT - self.get_total_pieces()

    def get_score(self, player: int) -> int:
        """Raw piece count for ``player``."""
        return int(np.count_nonzero(self.cells == player))

    def get_timer(self, player: int) -> float:
        turn_time = 0.0
        if not self.game_over and player == self.current_player:
            turn_time = time.time() - self.turn_timer
        return self.player_time[player] + turn_time

    def __eq__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return (
            np.array_equal(self.cells, other.cells)
            and self.current_player == other.current_player
            and self.game_over == other.game_over
            and self.player_time == other.player_time
            and self.turn_timer == other.turn_timer
        )

