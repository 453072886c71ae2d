"""Move generation for upgraded pieces.

``legal_moves`` is a pure function of the state: it never mutates it and does
not care whose turn it is, so drivers can also use it for hover previews.
"""

from typing import Callable, Dict, List, Optional, Tuple

from chess2.core.board import (
    Color,
    GameState,
    Move,
    Piece,
    PieceType,
    Square,
)

ORTHOGONAL = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL = ((1, 1), (1, -1), (-1, 1), (-1, -1))
ALL_DIRECTIONS = ORTHOGONAL + DIAGONAL
DIAG_22 = ((2, 2), (-2, 2), (2, -2), (-2, -2))

CHARGE_DISTANCE = 4


def reflections(a: int, b: int) -> List[Tuple[int, int]]:
    """The 8 sign/axis reflections of an (a, b) leap."""
    return [(a, b), (a, -b), (-a, b), (-a, -b), (b, a), (b, -a), (-b, a), (-b, -a)]


KNIGHT_OFFSETS = reflections(2, 1)


def knight_legs(flex_steps: int) -> List[Tuple[int, int]]:
    """Leg pairs for a knight with ``flex_steps`` extra steps spread over (2, 1)."""
    flex = max(0, flex_steps)
    legs = {}
    for a in range(flex + 1):
        leg = (2 + a, 1 + flex - a)
        legs[leg] = None
        legs[leg[::-1]] = None
    return list(legs)


def chebyshev(a: Square, b: Square) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


class _MoveBuilder:
    """Accumulates candidate destinations for one piece, applying the occupancy rules."""

    def __init__(self, state: GameState, origin: Square, piece: Piece):
        self.state = state
        self.origin = origin
        self.piece = piece
        self.moves: List[Move] = []

    def add(self, row: int, col: int, tag: Optional[str] = None) -> bool:
        """Add a destination if allowed. Returns True when something was added."""
        if not self.state.in_bounds(row, col):
            return False
        occ = self.state.board[row][col]
        if occ is not None:
            if occ.color is self.piece.color:
                return False
            if self.state.is_shielded((row, col)):
                return False
        self.moves.append(Move(self.origin, (row, col), occ is not None, tag))
        return True

    def leap(self, offsets, tag: Optional[str] = None):
        r, c = self.origin
        for dr, dc in offsets:
            self.add(r + dr, c + dc, tag)

    def ray(self, dr: int, dc: int, limit: Optional[int] = None, tag: Optional[str] = None):
        """Slide until the edge, ``limit`` squares, or the first occupant (captured if enemy)."""
        r, c = self.origin
        limit = limit if limit is not None else self.state.size
        for i in range(1, limit + 1):
            rr, cc = r + dr * i, c + dc * i
            if not self.state.in_bounds(rr, cc):
                break
            occ = self.state.board[rr][cc]
            self.add(rr, cc, tag)
            if occ is not None:
                break

    def quiet(self, row: int, col: int, tag: Optional[str] = None) -> bool:
        """Add only if the square exists and is empty."""
        if self.state.in_bounds(row, col) and self.state.board[row][col] is None:
            return self.add(row, col, tag)
        return False

    def capture_only(self, row: int, col: int, tag: Optional[str] = None):
        if not self.state.in_bounds(row, col):
            return
        occ = self.state.board[row][col]
        if occ is not None and occ.color is not self.piece.color:
            self.add(row, col, tag)


# ---------------------------------------------------------------------------
# Per-type generators
# ---------------------------------------------------------------------------


def _pawn_moves(b: _MoveBuilder):
    u = b.piece.abilities
    r, c = b.origin
    directions = [(b.piece.color.forward, "")]
    if u.reverse_unlocked:
        directions.append((-b.piece.color.forward, "rev-"))

    for d, prefix in directions:
        for i in range(1, u.forward_range + 1):
            if not b.quiet(r + d * i, c, prefix + "forward"):
                break
        for i in range(1, u.diag_range + 1):
            b.capture_only(r + d * i, c - i, prefix + "diag-cap")
            b.capture_only(r + d * i, c + i, prefix + "diag-cap")

    if not b.piece.has_moved:
        d = b.piece.color.forward
        if (b.state.in_bounds(r + 2 * d, c)
                and b.state.board[r + d][c] is None
                and b.state.board[r + 2 * d][c] is None):
            b.add(r + 2 * d, c, "double")

    if u.side_step:
        b.quiet(r, c - 1, "side")
        b.quiet(r, c + 1, "side")


def _knight_moves(b: _MoveBuilder):
    u = b.piece.abilities
    for a, s in knight_legs(u.flex_steps):
        b.leap(reflections(a, s))
    if u.diag22:
        b.leap(DIAG_22, "diag22")


def _bishop_moves(b: _MoveBuilder):
    u = b.piece.abilities
    for dr, dc in DIAGONAL:
        b.ray(dr, dc)
    if u.ortho_full:
        for dr, dc in ORTHOGONAL:
            b.ray(dr, dc)
    elif u.ortho_range > 0:
        for dr, dc in ORTHOGONAL:
            b.ray(dr, dc, u.ortho_range)
    if u.diag_jump:
        r, c = b.origin
        for dr, dc in DIAGONAL:
            if not b.state.in_bounds(r + 2 * dr, c + 2 * dc):
                continue
            if b.state.board[r + dr][c + dc] is not None:
                b.quiet(r + 2 * dr, c + 2 * dc, "jump")


def _rook_moves(b: _MoveBuilder):
    u = b.piece.abilities
    for dr, dc in ORTHOGONAL:
        b.ray(dr, dc)
    if u.diag_full:
        for dr, dc in DIAGONAL:
            b.ray(dr, dc)
    elif u.diag_range > 0:
        for dr, dc in DIAGONAL:
            b.ray(dr, dc, u.diag_range)
    if u.charge:
        r, c = b.origin
        d = b.piece.color.forward
        for i in range(1, CHARGE_DISTANCE + 1):
            if not b.quiet(r + d * i, c, "charge"):
                break


def _knight_chain_targets(state: GameState, origin: Square, leg: Tuple[int, int], hops: int) -> List[Square]:
    """Squares reached by exactly ``hops`` leaps whose intermediate landings are all empty."""
    offsets = reflections(*leg)
    frontier = [origin]
    finals: Dict[Square, None] = {}
    for hop in range(1, hops + 1):
        nxt: Dict[Square, None] = {}
        for r, c in frontier:
            for dr, dc in offsets:
                rr, cc = r + dr, c + dc
                if not state.in_bounds(rr, cc):
                    continue
                if hop == hops:
                    finals[(rr, cc)] = None
                elif state.board[rr][cc] is None:
                    nxt[(rr, cc)] = None
        frontier = list(nxt)
    finals.pop(origin, None)
    return list(finals)


def _queen_moves(b: _MoveBuilder):
    u = b.piece.abilities
    for dr, dc in ALL_DIRECTIONS:
        b.ray(dr, dc)
    leg = (3, 2) if u.extended_knight_jump else (2, 1)
    if u.has_knight_jump:
        b.leap(reflections(*leg), "knight")
    if u.knight_chain_length > 0:
        for rr, cc in _knight_chain_targets(b.state, b.origin, leg, u.knight_chain_length):
            b.add(rr, cc, "chain")


def _king_moves(b: _MoveBuilder):
    u = b.piece.abilities
    max_step = max(1, u.max_step)
    for dr, dc in ALL_DIRECTIONS:
        b.ray(dr, dc, max_step)
    if u.has_knight_jump:
        b.leap(KNIGHT_OFFSETS, "knight")


_GENERATORS: Dict[PieceType, Callable[[_MoveBuilder], None]] = {
    PieceType.PAWN: _pawn_moves,
    PieceType.KNIGHT: _knight_moves,
    PieceType.BISHOP: _bishop_moves,
    PieceType.ROOK: _rook_moves,
    PieceType.QUEEN: _queen_moves,
    PieceType.KING: _king_moves,
}


# ---------------------------------------------------------------------------
# Filters and public entry points
# ---------------------------------------------------------------------------


def immune_royals(state: GameState, color: Color) -> List[Square]:
    """Squares of ``color``'s kings that carry the adjacency immunity."""
    return [sq for sq, p in state.pieces(color)
            if p.type is PieceType.KING and p.abilities.adjacency_immunity]


def blocked_by_adjacency_immunity(state: GameState, origin: Square, target: Square,
                                  mover: Piece, royals: Optional[List[Square]] = None) -> bool:
    """True if ``target`` lies in the circle around an opposing immune king.

    The king's own square stays capturable, and a piece already standing inside
    a circle is not restricted by that circle.
    """
    if royals is None:
        royals = immune_royals(state, mover.color.opponent)
    for royal in royals:
        if target == royal or chebyshev(origin, royal) == 1:
            continue
        if chebyshev(target, royal) == 1:
            return True
    return False


def legal_moves(state: GameState, square: Square, piece: Optional[Piece] = None) -> List[Move]:
    """Legal destinations for the piece on ``square``, de-duplicated by target."""
    if piece is None:
        piece = state.piece_at(square)
        if piece is None:
            return []
    builder = _MoveBuilder(state, square, piece)
    _GENERATORS[piece.type](builder)

    royals = immune_royals(state, piece.color.opponent)
    seen = set()
    result = []
    for move in builder.moves:
        if move.to_sq in seen:
            continue
        seen.add(move.to_sq)
        if royals and blocked_by_adjacency_immunity(state, square, move.to_sq, piece, royals):
            continue
        result.append(move)
    return result


def all_moves(state: GameState, color: Color) -> List[Move]:
    """Every legal move for ``color``, scanning the board row by row."""
    moves = []
    for square, piece in state.pieces(color):
        moves.extend(legal_moves(state, square, piece))
    return moves
