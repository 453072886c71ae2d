"""Static evaluation: material, upgrade levels, shield and mobility."""

import logging
from typing import Optional

from chess2.config import CONFIG, EvalConfig
from chess2.core.board import Color, GameState
from chess2.core.moves import all_moves

log = logging.getLogger(__name__)


class Evaluator:
    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval

    def material(self, state: GameState, color: Color) -> float:
        """Material + level + shield subtotal, positive favors ``color``."""
        score = 0.0
        for square, piece in state.pieces():
            value = self.cfg.piece_values.get(piece.type.value, 0.0)
            value += piece.abilities.level * self.cfg.level_weight
            if state.is_shielded(square):
                value += self.cfg.shield_bonus
            score += value if piece.color is color else -value
        return score

    def mobility(self, state: GameState, color: Color) -> int:
        return len(all_moves(state, color)) - len(all_moves(state, color.opponent))

    def evaluate(self, state: GameState, color: Color) -> float:
        """Score from ``color``'s point of view; positive favors ``color``."""
        score = self.material(state, color)
        try:
            score += self.mobility(state, color) * self.cfg.mobility_weight
        except Exception as exc:
            # keep the material subtotal
            log.debug("mobility term skipped: %r", exc)
        return score
