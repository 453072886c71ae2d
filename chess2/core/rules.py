"""State transitions: applying moves, captures, mimicry, shields and turn flow.

Every function here returns a new GameState and leaves its input untouched,
so search branches never share mutable structure.
"""

from dataclasses import replace

from chess2.core.board import (
    Color,
    GameState,
    LastMove,
    Move,
    Piece,
    PieceType,
    Shield,
    Square,
)

ROYAL_TYPES = (PieceType.KING, PieceType.QUEEN)


def mimic(mover: Piece, captured: Piece):
    """Turn ``mover`` into a copy of ``captured``, keeping its own bank and level."""
    abilities = replace(captured.abilities)
    abilities.banked_points = mover.abilities.banked_points
    abilities.level = mover.abilities.level
    abilities.mimic_enabled = True
    mover.type = captured.type
    mover.abilities = abilities


def _end_turn(state: GameState, mover_color: Color):
    state.turn = mover_color.opponent
    shield = state.active_shield
    if shield is not None and shield.expires_on_color_to_move is state.turn:
        state.active_shield = None


def apply_move(state: GameState, move: Move, auto_shield: bool = True) -> GameState:
    """Play ``move`` and return the resulting state.

    The move is trusted to come from ``legal_moves``. A move whose source square
    is empty is a no-op and returns ``state`` itself.

    With ``auto_shield`` a capturing King or Queen shields its own landing
    square. Without it the owner is left to pick a square (``pending_shield``)
    and the turn does not pass until ``resolve_shield`` is called.
    """
    mover = state.piece_at(move.from_sq)
    if mover is None:
        return state

    ns = state.copy()
    mover = ns.piece_at(move.from_sq)
    pre_type = mover.type
    captured = ns.piece_at(move.to_sq)
    ns.last_move = LastMove(
        from_sq=move.from_sq,
        to_sq=move.to_sq,
        mover=mover.copy(),
        captured=captured.copy() if captured is not None else None,
        tag=move.tag,
    )

    ns.place(move.to_sq, mover)
    ns.place(move.from_sq, None)
    mover.has_moved = True

    if mover.type is PieceType.PAWN:
        far_rank = 0 if mover.color is Color.WHITE else ns.size - 1
        if move.to_sq[0] == far_rank or captured is not None:
            mover.abilities.reverse_unlocked = True

    if captured is not None:
        mover.abilities.banked_points += 1
        if captured.type is PieceType.KING:
            ns.winner = mover.color
        else:
            if mover.abilities.mimic_enabled:
                mimic(mover, captured)
            if pre_type in ROYAL_TYPES:
                if auto_shield:
                    ns.active_shield = Shield(move.to_sq, mover.color, mover.color)
                else:
                    ns.pending_shield = mover.color

    ns.selection = None
    ns.legal_moves_for_selection = []
    if ns.pending_shield is None:
        _end_turn(ns, mover.color)
    return ns


def resolve_shield(state: GameState, square: Square) -> GameState:
    """Grant the pending shield to a friendly piece on ``square`` and pass the turn."""
    owner = state.pending_shield
    if owner is None:
        raise ValueError("no shield is pending")
    target = state.piece_at(square)
    if target is None or target.color is not owner:
        raise ValueError(f"square {square} does not hold a {owner.display_name} piece")
    ns = state.copy()
    ns.active_shield = Shield(square, owner, owner)
    ns.pending_shield = None
    _end_turn(ns, owner)
    return ns
