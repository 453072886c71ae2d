"""Core rules components: board model, move generation, transitions, evaluation and search."""

from .board import Color, GameState, Move, Piece, PieceType, initial, standard_layout
from .evaluator import Evaluator
from .moves import all_moves, legal_moves
from .rules import apply_move, resolve_shield
from .search import SearchEngine
from .upgrades import apply_upgrade, get_upgrade_options
