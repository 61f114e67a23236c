# constants.py
"""Shared constants/helpers for the Reversi engine.

- EMPTY, BLACK, WHITE
- BOARD_SIZE, DIRECTIONS, INVALID_MOVE
- POSITION_WEIGHTS, EDGE_MASK (flat, indexed by row * 8 + col)
- xy_to_idx / idx_to_xy, opponent(color), game_phase(total_pieces)
"""
from __future__ import annotations
from typing import List, Tuple

import numpy as np

# ---------------------- Colors ----------------------
EMPTY, BLACK, WHITE = 0, 1, 2  # keep numeric and contiguous

BOARD_SIZE = 8
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

# Returned when the side to move has nothing to play
INVALID_MOVE: Tuple[int, int] = (-1, -1)

DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)

# ---------------------- Positional weights ----------------------
_WEIGHT_ROWS: List[List[int]] = [
    [100, -20, 10, 5, 5, 10, -20, 100],
    [-20, -50,  1, 1, 1,  1, -50, -20],
    [10,    1,  5, 2, 2,  5,   1,  10],
    [5,     1,  2, 1, 1,  2,   1,   5],
    [5,     1,  2, 1, 1,  2,   1,   5],
    [10,    1,  5, 2, 2,  5,   1,  10],
    [-20, -50,  1, 1, 1,  1, -50, -20],
    [100, -20, 10, 5, 5, 10, -20, 100],
]

POSITION_WEIGHTS = np.array(_WEIGHT_ROWS, dtype=np.int32).reshape(CELL_COUNT)
POSITION_WEIGHTS.setflags(write=False)

EDGE_MASK = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=bool)
EDGE_MASK[0, :] = EDGE_MASK[-1, :] = True
EDGE_MASK[:, 0] = EDGE_MASK[:, -1] = True
EDGE_MASK = EDGE_MASK.reshape(CELL_COUNT)
EDGE_MASK.setflags(write=False)

# ---------------------- Game phases ----------------------
EARLY_PHASE_MAX = 20
LATE_PHASE_MIN = 45
ENDGAME_PIECES = 50


def xy_to_idx(x: int, y: int) -> int:
    """(column, row) -> flat index 0..63."""
    return (y << 3) | x


def idx_to_xy(idx: int) -> Tuple[int, int]:
    return (idx & 7), (idx >> 3)


def game_phase(total_pieces: int) -> str:
    """돌 개수로 게임 단계 결정: 'early' | 'mid' | 'late'."""
    if total_pieces <= EARLY_PHASE_MAX:
        return 'early'
    if total_pieces >= LATE_PHASE_MIN:
        return 'late'
    return 'mid'


def opponent(color: int) -> int:
    """상대 색 반환. 1^3=2, 2^3=1."""
    return color ^ 3


__all__ = [
    'EMPTY', 'BLACK', 'WHITE', 'BOARD_SIZE', 'CELL_COUNT', 'INVALID_MOVE',
    'DIRECTIONS', 'POSITION_WEIGHTS', 'EDGE_MASK',
    'EARLY_PHASE_MAX', 'LATE_PHASE_MIN', 'ENDGAME_PIECES',
    'xy_to_idx', 'idx_to_xy', 'game_phase', 'opponent',
]
