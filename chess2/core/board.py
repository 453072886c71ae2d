"""Board, piece and ability model for the upgradeable N x N variant.

Coordinates are zero-based ``(row, col)`` tuples. Row 0 is Black's back rank,
row ``size - 1`` is White's. Algebraic names (``a1`` ...) exist for display only.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Tuple

Square = Tuple[int, int]

FILES = "abcdefghijklmnopqrstuvwxyz"
MIN_BOARD_SIZE = 4
MAX_BOARD_SIZE = len(FILES)


class Color(str, Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row delta pointing toward the opponent's back rank."""
        return -1 if self is Color.WHITE else 1

    @property
    def display_name(self) -> str:
        return "White" if self is Color.WHITE else "Black"


class PieceType(str, Enum):
    KING = "K"
    QUEEN = "Q"
    ROOK = "R"
    BISHOP = "B"
    KNIGHT = "N"
    PAWN = "P"

    @property
    def display_name(self) -> str:
        return self.name.capitalize()


# ---------------------------------------------------------------------------
# Ability sets: one variant per piece type
# ---------------------------------------------------------------------------


@dataclass
class Abilities:
    level: int = 0
    banked_points: int = 0
    # only ever set on pawns, and carried through mimicry
    mimic_enabled: bool = False


@dataclass
class PawnAbilities(Abilities):
    forward_range: int = 1
    diag_range: int = 1
    side_step: bool = False
    reverse_unlocked: bool = False


@dataclass
class KnightAbilities(Abilities):
    flex_steps: int = 0
    diag22: bool = False


@dataclass
class BishopAbilities(Abilities):
    ortho_range: int = 0
    ortho_full: bool = False
    diag_jump: bool = False


@dataclass
class RookAbilities(Abilities):
    diag_range: int = 0
    diag_full: bool = False
    charge: bool = False


@dataclass
class QueenAbilities(Abilities):
    has_knight_jump: bool = False
    extended_knight_jump: bool = False
    knight_chain_length: int = 0
    adjacency_immunity: bool = False


@dataclass
class KingAbilities(Abilities):
    max_step: int = 1
    has_knight_jump: bool = False
    adjacency_immunity: bool = False


ABILITY_TYPES = {
    PieceType.PAWN: PawnAbilities,
    PieceType.KNIGHT: KnightAbilities,
    PieceType.BISHOP: BishopAbilities,
    PieceType.ROOK: RookAbilities,
    PieceType.QUEEN: QueenAbilities,
    PieceType.KING: KingAbilities,
}


def base_abilities(piece_type: PieceType) -> Abilities:
    """Fresh, un-upgraded ability set for a piece type."""
    return ABILITY_TYPES[piece_type]()


@dataclass
class Piece:
    type: PieceType
    color: Color
    abilities: Optional[Abilities] = None
    has_moved: bool = False

    def __post_init__(self):
        if self.abilities is None:
            self.abilities = base_abilities(self.type)
        elif not isinstance(self.abilities, ABILITY_TYPES[self.type]):
            raise TypeError(
                f"{type(self.abilities).__name__} does not belong to a {self.type.display_name}"
            )

    @property
    def symbol(self) -> str:
        return self.type.value if self.color is Color.WHITE else self.type.value.lower()

    def copy(self) -> "Piece":
        # ability fields are all scalars, a shallow replace is a full copy
        return Piece(self.type, self.color, replace(self.abilities), self.has_moved)


# ---------------------------------------------------------------------------
# Moves and transient state records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Move:
    from_sq: Square
    to_sq: Square
    is_capture: bool = False
    tag: Optional[str] = None

    @property
    def target(self) -> Square:
        return self.to_sq

    def notation(self, size: int) -> str:
        """Display form, e.g. ``d8d1``."""
        return to_algebraic(self.from_sq, size) + to_algebraic(self.to_sq, size)


@dataclass(frozen=True)
class Shield:
    square: Square
    owning_color: Color
    expires_on_color_to_move: Color


@dataclass(frozen=True)
class LastMove:
    from_sq: Square
    to_sq: Square
    mover: Piece
    captured: Optional[Piece] = None
    tag: Optional[str] = None


@dataclass
class GameState:
    board: List[List[Optional[Piece]]]
    turn: Color = Color.WHITE
    selection: Optional[Square] = None
    legal_moves_for_selection: List[Move] = field(default_factory=list)
    last_move: Optional[LastMove] = None
    pending_upgrade: Optional[Square] = None
    winner: Optional[Color] = None
    pending_shield: Optional[Color] = None
    active_shield: Optional[Shield] = None

    @classmethod
    def empty(cls, size: int) -> "GameState":
        if not MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
            raise ValueError(f"board size must be in [{MIN_BOARD_SIZE}, {MAX_BOARD_SIZE}], got {size}")
        return cls(board=[[None] * size for _ in range(size)])

    @property
    def size(self) -> int:
        return len(self.board)

    def in_bounds(self, row: int, col: int) -> bool:
        n = len(self.board)
        return 0 <= row < n and 0 <= col < n

    def piece_at(self, square: Square) -> Optional[Piece]:
        row, col = square
        return self.board[row][col]

    def place(self, square: Square, piece: Optional[Piece]):
        row, col = square
        self.board[row][col] = piece

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[Square, Piece]]:
        """Yield ``(square, piece)`` in row-major order."""
        for r, row in enumerate(self.board):
            for c, piece in enumerate(row):
                if piece is not None and (color is None or piece.color is color):
                    yield (r, c), piece

    def find_pieces(self, pred: Callable[[Piece], bool]) -> List[Tuple[Square, Piece]]:
        return [(sq, p) for sq, p in self.pieces() if pred(p)]

    def is_shielded(self, square: Square) -> bool:
        return self.active_shield is not None and self.active_shield.square == square

    def copy(self) -> "GameState":
        """Independent copy; no piece or row is shared with ``self``."""
        last = self.last_move
        if last is not None:
            last = replace(last, mover=last.mover.copy(),
                           captured=last.captured.copy() if last.captured is not None else None)
        return GameState(
            board=[[p.copy() if p is not None else None for p in row] for row in self.board],
            turn=self.turn,
            selection=self.selection,
            legal_moves_for_selection=list(self.legal_moves_for_selection),
            last_move=last,
            pending_upgrade=self.pending_upgrade,
            winner=self.winner,
            pending_shield=self.pending_shield,
            active_shield=self.active_shield,
        )

    def __str__(self) -> str:
        n = self.size
        lines = []
        for r, row in enumerate(self.board):
            cells = " ".join(p.symbol if p else "." for p in row)
            lines.append(f"{n - r:>2} {cells}")
        lines.append("   " + " ".join(FILES[:n]))
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

BACK_RANK = [
    PieceType.ROOK, PieceType.KNIGHT, PieceType.BISHOP, PieceType.QUEEN,
    PieceType.KING, PieceType.BISHOP, PieceType.KNIGHT, PieceType.ROOK,
]


def standard_layout(size: int) -> Dict[Square, Piece]:
    """Default placement: centred back rank, full pawn ranks, extra pawns beside rooks."""
    layout: Dict[Square, Piece] = {}
    offset = (size - len(BACK_RANK)) // 2
    for color, back, pawn_row in ((Color.BLACK, 0, 1), (Color.WHITE, size - 1, size - 2)):
        for c in range(size):
            layout[(pawn_row, c)] = Piece(PieceType.PAWN, color)
            idx = c - offset
            if 0 <= idx < len(BACK_RANK):
                layout[(back, c)] = Piece(BACK_RANK[idx], color)
        rook_files = [c for c in range(size)
                      if (back, c) in layout and layout[(back, c)].type is PieceType.ROOK]
        for c in rook_files:
            for side in (c - 1, c + 1):
                if 0 <= side < size and (back, side) not in layout:
                    layout[(back, side)] = Piece(PieceType.PAWN, color)
    return layout


def initial(size: int, layout: Optional[Mapping[Square, Piece]] = None) -> GameState:
    """Fresh game state with White to move.

    ``layout`` maps squares to pieces; the standard layout is used when omitted.
    Pieces are copied so the caller's mapping is never aliased.
    """
    state = GameState.empty(size)
    if layout is None:
        layout = standard_layout(size)
    for square, piece in layout.items():
        if not state.in_bounds(*square):
            raise ValueError(f"square {square} is outside a {size}x{size} board")
        state.place(square, piece.copy())
    return state


# ---------------------------------------------------------------------------
# Algebraic names (display only)
# ---------------------------------------------------------------------------


def to_algebraic(square: Square, size: int) -> str:
    row, col = square
    return f"{FILES[col]}{size - row}"


def from_algebraic(text: str, size: int) -> Square:
    text = text.strip().lower()
    if len(text) < 2 or text[0] not in FILES[:size] or not text[1:].isdigit():
        raise ValueError(f"invalid square: {text!r}")
    col = FILES.index(text[0])
    row = size - int(text[1:])
    if not 0 <= row < size:
        raise ValueError(f"invalid square: {text!r}")
    return row, col
