"""Depth- and time-bounded alpha-beta search for the computer player."""

import time
from typing import Callable, List, Optional, Tuple

from chess2.config import CONFIG, SearchConfig
from chess2.core.board import Color, GameState, Move
from chess2.core.evaluator import Evaluator
from chess2.core.moves import all_moves
from chess2.core.rules import apply_move
from chess2.core.utils import print_info

INF = float("inf")
MIN_LEVEL = 1
MAX_LEVEL = 10


def clamp_level(level: int) -> int:
    return max(MIN_LEVEL, min(MAX_LEVEL, int(level)))


def depth_for_level(level: int, cfg: Optional[SearchConfig] = None) -> int:
    cfg = cfg or CONFIG.search
    return cfg.depth_by_level[clamp_level(level)]


def time_budget_ms(level: int, cfg: Optional[SearchConfig] = None) -> float:
    cfg = cfg or CONFIG.search
    if cfg.time_limit_ms is not None:
        return cfg.time_limit_ms
    level = clamp_level(level)
    return cfg.base_time_ms + min(cfg.max_extra_time_ms, level * cfg.time_per_level_ms)


class SearchEngine:
    def __init__(self, evaluator: Optional[Evaluator] = None, cfg: Optional[SearchConfig] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.evaluator = evaluator or Evaluator()
        self.cfg = cfg or CONFIG.search
        self.clock = clock
        self.nodes = 0
        self._deadline: Optional[float] = None

    def choose_move(self, state: GameState, level: int, color: Optional[Color] = None) -> Optional[Move]:
        """Best move for ``color`` (default: side to move), or None if it has no moves."""
        move, _score = self.search_best_move(state, level, color)
        return move

    def search_best_move(self, state: GameState, level: int,
                         color: Optional[Color] = None) -> Tuple[Optional[Move], Optional[float]]:
        color = color or state.turn
        moves = all_moves(state, color)
        if not moves:
            return None, None

        depth = depth_for_level(level, self.cfg)
        budget = time_budget_ms(level, self.cfg)
        start = self.clock()
        self._deadline = start + budget / 1000.0
        self.nodes = 0

        best_move = None
        best_score = -INF
        for move in self._order_moves(state, moves):
            child = apply_move(state, move)
            score = self._minimax(child, depth - 1, best_score, INF, False, color)
            if score > best_score:
                best_score = score
                best_move = move
            if self._expired():
                break

        if best_move is None:
            best_move = moves[0]
        elapsed_ms = (self.clock() - start) * 1000.0
        print_info(depth, best_score, self.nodes, elapsed_ms, best_move, state.size, budget)
        return best_move, best_score

    def _expired(self) -> bool:
        return self._deadline is not None and self.clock() > self._deadline

    def _minimax(self, state: GameState, depth: int, alpha: float, beta: float,
                 maximizing: bool, color: Color) -> float:
        self.nodes += 1
        if depth <= 0 or state.winner is not None or self._expired():
            return self.evaluator.evaluate(state, color)

        side = color if maximizing else color.opponent
        moves = all_moves(state, side)
        if not moves:
            return self.evaluator.evaluate(state, color)

        if maximizing:
            best = -INF
            for move in self._order_moves(state, moves):
                val = self._minimax(apply_move(state, move), depth - 1, alpha, beta, False, color)
                best = max(best, val)
                alpha = max(alpha, best)
                if beta <= alpha:
                    break
        else:
            best = INF
            for move in self._order_moves(state, moves):
                val = self._minimax(apply_move(state, move), depth - 1, alpha, beta, True, color)
                best = min(best, val)
                beta = min(beta, best)
                if beta <= alpha:
                    break
        return best

    def _order_moves(self, state: GameState, moves: List[Move]) -> List[Move]:
        """Captures first, most valuable victim first; the sort is stable for ties."""
        return sorted(moves, key=lambda m: self._victim_value(state, m), reverse=True)

    def _victim_value(self, state: GameState, move: Move) -> float:
        victim = state.piece_at(move.to_sq)
        if victim is None:
            return -1.0
        return self.evaluator.cfg.piece_values.get(victim.type.value, 0.0)
