"""Game session: the context object a driver (CLI, web API) holds between calls.

It owns the current state, the undo stack of full snapshots, the game mode and
the computer's difficulty. All rules live in ``chess2.core``.
"""

import logging
from typing import List, Mapping, Optional

from chess2.config import CONFIG
from chess2.core.board import (
    Color,
    GameState,
    Move,
    Piece,
    Square,
    initial,
    to_algebraic,
)
from chess2.core.moves import legal_moves
from chess2.core.rules import apply_move, resolve_shield
from chess2.core.search import SearchEngine, clamp_level
from chess2.core.upgrades import UpgradeOption, apply_upgrade, auto_upgrade, get_upgrade_options

log = logging.getLogger(__name__)

MODES = ("cpu", "pvp")


class Game:
    def __init__(self, size: Optional[int] = None, mode: Optional[str] = None,
                 level: Optional[int] = None, computer_color: Optional[str] = None,
                 layout: Optional[Mapping[Square, Piece]] = None,
                 search: Optional[SearchEngine] = None):
        self.size = size or CONFIG.game.board_size
        self.mode = mode or CONFIG.game.mode
        if self.mode not in MODES:
            raise ValueError(f"unknown mode: {self.mode}")
        self.level = clamp_level(level or CONFIG.search.default_level)
        self.computer_color = Color(computer_color or CONFIG.game.computer_color)
        self.layout = layout
        self.search = search or SearchEngine()
        self.state: GameState = initial(self.size, layout)
        self.history: List[GameState] = []

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------

    def reset(self, size: Optional[int] = None, mode: Optional[str] = None, level: Optional[int] = None):
        """Start a new game, optionally changing board size, mode or difficulty."""
        if mode is not None:
            if mode not in MODES:
                raise ValueError(f"unknown mode: {mode}")
            self.mode = mode
        if level is not None:
            self.level = clamp_level(level)
        if size is not None and size != self.size:
            self.size = size
            self.layout = None
        self.state = initial(self.size, self.layout)
        self.history.clear()
        log.info("New %dx%d game (%s). White to move.", self.size, self.size, self.mode)

    def undo(self) -> bool:
        """Restore the snapshot taken before the last move."""
        if not self.history:
            log.info("Nothing to undo.")
            return False
        self.state = self.history.pop()
        log.info("Reverted one move.")
        return True

    @property
    def is_game_over(self) -> bool:
        return self.state.winner is not None

    @property
    def is_computer_turn(self) -> bool:
        return (self.mode == "cpu"
                and not self.is_game_over
                and self.state.pending_shield is None
                and self.state.turn is self.computer_color)

    def name(self, square: Square) -> str:
        return to_algebraic(square, self.size)

    # ------------------------------------------------------------------
    # selection and moves
    # ------------------------------------------------------------------

    def preview(self, square: Square) -> List[Move]:
        """Moves of whatever piece stands on ``square``, regardless of turn."""
        return legal_moves(self.state, square)

    def select(self, square: Square) -> List[Move]:
        """Select a piece of the side to move; anything else clears the selection."""
        piece = self.state.piece_at(square)
        if piece is None or piece.color is not self.state.turn or self.is_game_over:
            self.state.selection = None
            self.state.legal_moves_for_selection = []
            return []
        moves = legal_moves(self.state, square, piece)
        self.state.selection = square
        self.state.legal_moves_for_selection = moves
        return moves

    def make_move(self, from_sq: Square, to_sq: Square) -> bool:
        """Play a human move. Returns True if it was legal and applied."""
        if self.is_game_over or self.state.pending_shield is not None:
            return False
        piece = self.state.piece_at(from_sq)
        if piece is None or piece.color is not self.state.turn:
            return False
        move = next((m for m in legal_moves(self.state, from_sq, piece) if m.to_sq == to_sq), None)
        if move is None:
            return False
        self._play(move, by_computer=False)
        return True

    def computer_move(self) -> Optional[Move]:
        """Let the engine play for the side to move. Returns the move, or None."""
        if self.is_game_over or self.state.pending_shield is not None:
            return None
        move = self.search.choose_move(self.state, self.level)
        if move is None:
            log.info("%s has no legal moves.", self.state.turn.display_name)
            return None
        self._play(move, by_computer=True)
        return move

    def _play(self, move: Move, by_computer: bool):
        before = self.state
        self.history.append(before.copy())
        after = apply_move(before, move, auto_shield=by_computer)
        after.pending_upgrade = None
        mover = after.piece_at(move.to_sq)
        captured = after.last_move.captured

        if captured is not None:
            log.info("%s %s captured %s %s on %s (+1 upgrade point)",
                     mover.color.display_name, after.last_move.mover.type.display_name,
                     captured.color.display_name, captured.type.display_name, self.name(move.to_sq))
            if mover.type is not after.last_move.mover.type:
                log.info("%s piece mimics %s and transforms!", mover.color.display_name,
                         mover.type.display_name)
            if after.winner is not None:
                log.info("%s wins by capturing the King!", after.winner.display_name)
            elif by_computer:
                pick = auto_upgrade(mover)
                if pick is not None:
                    log.info("Computer upgraded %s: %s", mover.type.display_name, pick.title)
            else:
                after.pending_upgrade = move.to_sq

        if after.active_shield is not None and after.active_shield != before.active_shield:
            log.info("%s shields the piece on %s for one enemy turn.",
                     after.active_shield.owning_color.display_name, self.name(after.active_shield.square))
        elif before.active_shield is not None and after.active_shield is None:
            log.info("Royal Immunity on %s has expired.", self.name(before.active_shield.square))
        if after.pending_shield is not None:
            log.info("%s may select a friendly piece to gain Royal Immunity.",
                     after.pending_shield.display_name)
        self.state = after

    def choose_shield(self, square: Square) -> bool:
        """Resolve a pending shield onto a friendly piece."""
        try:
            self.state = resolve_shield(self.state, square)
        except ValueError as exc:
            log.debug("shield rejected: %s", exc)
            return False
        log.info("%s shields the piece on %s for one enemy turn.",
                 self.state.active_shield.owning_color.display_name, self.name(square))
        return True

    # ------------------------------------------------------------------
    # upgrades
    # ------------------------------------------------------------------

    def upgrade_options(self, square: Optional[Square] = None) -> List[UpgradeOption]:
        square = square if square is not None else self.state.pending_upgrade
        if square is None:
            return []
        piece = self.state.piece_at(square)
        if piece is None:
            return []
        return get_upgrade_options(piece)

    def upgrade(self, key: str, square: Optional[Square] = None) -> bool:
        """Spend one banked point of the piece on ``square`` (default: the pending one).

        Outside the post-capture prompt only pieces of the side to move may spend points.
        """
        pending = self.state.pending_upgrade
        square = square if square is not None else pending
        if square is None or self.is_game_over:
            return False
        piece = self.state.piece_at(square)
        if piece is None or piece.abilities.banked_points <= 0:
            return False
        if square != pending and piece.color is not self.state.turn:
            return False
        option = next((o for o in get_upgrade_options(piece) if o.key == key), None)
        if option is None:
            return False
        apply_upgrade(piece, key)
        piece.abilities.banked_points -= 1
        if square == pending:
            self.state.pending_upgrade = None
        log.info("%s %s upgraded: %s", piece.color.display_name, piece.type.display_name, option.title)
        return True

    def skip_upgrade(self) -> bool:
        """Bank the pending point for later."""
        if self.state.pending_upgrade is None:
            return False
        self.state.pending_upgrade = None
        return True
