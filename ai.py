# ai.py
# Adaptive-depth alpha-beta search + one-ply move ordering + node budget

from __future__ import annotations

import logging
import time
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from board import GameState, Move
from config import load_config
from constants import (
    EDGE_MASK,
    ENDGAME_PIECES,
    INVALID_MOVE,
    POSITION_WEIGHTS,
    game_phase,
    opponent,
)

# ---- logging ----
logging.basicConfig(level=logging.INFO, format='[%(asctime)s] %(message)s', datefmt='%H:%M:%S')

# ---- sentinel scores ----
INF_SCORE = 10**9

DEFAULT_DEPTHS = {'early': 7, 'mid': 8, 'late': 12}
DEFAULT_NODE_BUDGET = 100_000


class Cutoff(Enum):
    """Why a search node stopped expanding."""
    TERMINAL = 'terminal'
    DEPTH = 'depth'
    BUDGET = 'budget'
    PRUNED = 'pruned'


@dataclass(slots=True)
class SearchContext:
    """Per-search counters threaded through every alphabeta call."""
    node_budget: Optional[int] = None
    nodes: int = 0
    cutoffs: Dict[Cutoff, int] = field(default_factory=lambda: defaultdict(int))

    def budget_exhausted(self) -> bool:
        return bool(self.node_budget) and self.nodes >= self.node_budget


@dataclass
class SearchResult:
    move: Tuple[int, int]
    score: Optional[int]
    depth: int
    nodes: int
    time_ms: int
    cutoffs: Dict[str, int] = field(default_factory=dict)


class Evaluator:
    """Static evaluation from a fixed player's point of view.

    The score is the sum of five terms: positional weights, mobility,
    edge occupation, endgame parity and phase-scaled material.
    """

    def score(self, state: GameState, perspective: int) -> int:
        total = state.get_total_pieces()
        return (
            self.positional(state, perspective)
            + self.mobility(state, perspective, total)
            + self.edge_stability(state, perspective)
            + self.parity(state, perspective, total)
            + self.material(state, perspective, total)
        )

    def positional(self, state: GameState, perspective: int) -> int:
        cells = state.cells
        mine = POSITION_WEIGHTS[cells == perspective].sum()
        theirs = POSITION_WEIGHTS[cells == opponent(perspective)].sum()
        return int(mine - theirs)

    def mobility(self, state: GameState, perspective: int, total: Optional[int] = None) -> int:
        if total is None:
            total = state.get_total_pieces()
        if total >= ENDGAME_PIECES:
            return 0

        my_moves = len(state.get_valid_moves(perspective))
        op_moves = len(state.get_valid_moves(opponent(perspective)))
        score = (my_moves - op_moves) * 3
        # Opponent forced to pass
        if op_moves == 0 and my_moves > 0:
            score += 50
        if my_moves > 2 * op_moves:
            score += 20
        return score

    def edge_stability(self, state: GameState, perspective: int) -> int:
        on_edge = state.cells[EDGE_MASK]
        mine = int((on_edge == perspective).sum())
        theirs = int((on_edge == opponent(perspective)).sum())
        return (mine - theirs) * 5

    def parity(self, state: GameState, perspective: int, total: Optional[int] = None) -> int:
        """+10/-10 for owning the last move in the endgame, else 0."""
        if total is None:
            total = state.get_total_pieces()
        if total < ENDGAME_PIECES:
            return 0
        if (64 - total) % 2 == 0:
            return 0
        return 10 if state.current_player == perspective else -10

    def material(self, state: GameState, perspective: int, total: Optional[int] = None) -> int:
        if total is None:
            total = state.get_total_pieces()
        diff = state.get_score(perspective) - state.get_score(opponent(perspective))
        if total >= ENDGAME_PIECES:
            return diff * 5
        if total >= 40:
            return diff * 2
        # truncate toward zero
        return int(diff / 2)


class MoveOrderer:
    """Greedy one-ply ordering: best-looking child first."""

    def __init__(self, evaluator: Evaluator):
        self.evaluator = evaluator

    def order(
        self,
        state: GameState,
        moves: List[Move],
        maximizing: bool,
        perspective: int,
    ) -> List[Move]:
        if len(moves) <= 1:
            return list(moves)

        sign = 1 if maximizing else -1
        move_scores = []
        for i, move in enumerate(moves):
            child = state.simulate_move(move)
            s = sign * self.evaluator.score(child, perspective)
            move_scores.append((s, i, move))

        # descending score, ties keep row-major order
        move_scores.sort(key=lambda t: (-t[0], t[1]))
        return [m for _, _, m in move_scores]


class SearchEngine:
    def __init__(
        self,
        evaluator: Evaluator,
        node_budget: Optional[int] = DEFAULT_NODE_BUDGET,
        depths: Optional[Dict[str, int]] = None,
        max_depth: Optional[int] = None,
    ):
        self.evaluator = evaluator
        self.orderer = MoveOrderer(evaluator)
        self.node_budget = node_budget
        self.depths = dict(DEFAULT_DEPTHS)
        if depths:
            self.depths.update(depths)
        self.max_depth = max_depth
        # Stats of the most recent search
        self.nodes_searched = 0

    def adaptive_depth(self, state: GameState) -> int:
        depth = self.depths[game_phase(state.get_total_pieces())]
        if self.max_depth is not None:
            depth = min(depth, self.max_depth)
        return depth

    def alphabeta(
        self,
        state: GameState,
        depth: int,
        alpha: int,
        beta: int,
        maximizing: bool,
        perspective: int,
        ctx: SearchContext,
    ) -> int:
        ctx.nodes += 1
        # Emergency cutoff overrides remaining depth
        if ctx.budget_exhausted():
            ctx.cutoffs[Cutoff.BUDGET] += 1
            return self.evaluator.score(state, perspective)

        if depth == 0 or state.game_over:
            ctx.cutoffs[Cutoff.TERMINAL if state.game_over else Cutoff.DEPTH] += 1
            return self.evaluator.score(state, perspective)

        moves = state.get_valid_moves()
        if not moves:
            passed = state.copy()
            passed.current_player = opponent(passed.current_player)
            if not passed.get_valid_moves():
                passed.game_over = True
                ctx.cutoffs[Cutoff.TERMINAL] += 1
                return self.evaluator.score(passed, perspective)
            return self.alphabeta(passed, depth - 1, alpha, beta, not maximizing, perspective, ctx)

        if len(moves) > 1:
            moves = self.orderer.order(state, moves, maximizing, perspective)

        # Fail-soft: the extremal value is returned unclamped
        if maximizing:
            best = -INF_SCORE
            for i, move in enumerate(moves):
                value = self.alphabeta(state.simulate_move(move), depth - 1, alpha, beta, False, perspective, ctx)
                best = max(best, value)
                alpha = max(alpha, value)
                if beta <= alpha:
                    if i < len(moves) - 1:
                        ctx.cutoffs[Cutoff.PRUNED] += 1
                    break
            return best

        best = INF_SCORE
        for i, move in enumerate(moves):
            value = self.alphabeta(state.simulate_move(move), depth - 1, alpha, beta, True, perspective, ctx)
            best = min(best, value)
            beta = min(beta, value)
            if beta <= alpha:
                if i < len(moves) - 1:
                    ctx.cutoffs[Cutoff.PRUNED] += 1
                break
        return best

    def search(self, state: GameState) -> SearchResult:
        start_time = time.time()
        moves = state.get_valid_moves()
        if not moves:
            logging.debug("[Search] No legal move - returning invalid move")
            self.nodes_searched = 0
            return SearchResult(move=INVALID_MOVE, score=None, depth=0, nodes=0, time_ms=0)
        if len(moves) == 1:
            logging.debug(f"[Search] Single legal move {moves[0]} - no search")
            self.nodes_searched = 0
            return SearchResult(move=moves[0], score=None, depth=0, nodes=0, time_ms=0)

        mover = state.current_player
        ctx = SearchContext(node_budget=self.node_budget)
        depth = self.adaptive_depth(state)
        ordered = self.orderer.order(state, moves, True, mover)

        alpha, beta = -INF_SCORE, INF_SCORE
        best_move = ordered[0]
        best_score = -INF_SCORE
        # Every root move is searched; alpha tightens but nothing is cut here
        for move in ordered:
            child = state.simulate_move(move)
            value = self.alphabeta(child, depth - 1, alpha, beta, False, mover, ctx)
            if value > best_score:
                best_score = value
                best_move = move
            alpha = max(alpha, value)

        self.nodes_searched = ctx.nodes
        elapsed = time.time() - start_time
        logging.info(
            f"[Search] depth={depth} nodes={ctx.nodes} score={best_score} move={best_move} ({elapsed:.3f}s)"
        )
        return SearchResult(
            move=best_move,
            score=best_score,
            depth=depth,
            nodes=ctx.nodes,
            time_ms=int(elapsed * 1000),
            cutoffs={reason.value: count for reason, count in ctx.cutoffs.items()},
        )


class ReversiAI:
    """Move picker used by the game loop; never mutates the caller's state."""

    def __init__(
        self,
        variant: Optional[str] = None,
        max_depth: Optional[int] = None,
        config_path: str = "config.json",
    ) -> None:
        cfg = load_config(config_path)
        self.config = cfg
        self.evaluator = Evaluator()
        self.search_engine = SearchEngine(self.evaluator, depths=cfg['depths'])
        self.last_result: Optional[SearchResult] = None

        self.set_variant(variant or cfg['variant'])
        self.set_max_depth(max_depth if max_depth is not None else cfg.get('max_depth'))

    def get_move(self, state: GameState) -> Move:
        result = self.search_engine.search(state)
        self.last_result = result
        return result.move

    # ---- settings ----
    def set_variant(self, name: str) -> None:
        """Select a node budget profile ('basic' or 'enhanced')."""
        budgets = self.config['node_budgets']
        if name not in budgets:
            raise ValueError(f"Unknown search variant {name!r}; expected one of {sorted(budgets)}")
        self.variant = name
        self.search_engine.node_budget = budgets[name]

    def set_max_depth(self, depth: Optional[int]) -> None:
        if depth is None:
            self.search_engine.max_depth = None
            return
        depth = int(depth)
        if depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {depth}")
        self.search_engine.max_depth = depth

    @property
    def nodes_searched(self) -> int:
        return self.search_engine.nodes_searched


_default_ai: Optional[ReversiAI] = None


def get_best_move(state: GameState) -> Move:
    """Best move for the side to move, or INVALID_MOVE when it has none."""
    global _default_ai
    if _default_ai is None:
        _default_ai = ReversiAI()
    return _default_ai.get_move(state)
