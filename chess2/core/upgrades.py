"""Upgrade catalogue: which upgrades a piece may take, and applying them."""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from chess2.core.board import Abilities, Piece, PieceType

RANGE_CAP = 7
CHAIN_CAP = 5


@dataclass(frozen=True)
class UpgradeOption:
    key: str
    title: str
    description: str


def get_upgrade_options(piece: Piece) -> List[UpgradeOption]:
    """Upgrades still available to ``piece``; maxed or owned abilities are left out."""
    u = piece.abilities
    opts: List[UpgradeOption] = []
    t = piece.type

    if t is PieceType.PAWN:
        if u.forward_range < RANGE_CAP:
            n = u.forward_range + 1
            opts.append(UpgradeOption("P_FWD", f"Extend Forward to {n}",
                                      f"Increase non-capturing forward range to {n} squares."))
        if u.diag_range < RANGE_CAP:
            n = u.diag_range + 1
            opts.append(UpgradeOption("P_DIAG", f"Extend Diagonal Capture to {n}",
                                      f"Increase diagonal capture range to {n} squares."))
        if not u.side_step:
            opts.append(UpgradeOption("P_SIDE", "Side Step",
                                      "Move 1 square sideways (non-capturing)."))
        if not u.mimic_enabled:
            opts.append(UpgradeOption("P_MIMIC", "Mimic Captured",
                                      "After future captures, transform into the captured piece and gain its abilities."))

    elif t is PieceType.KNIGHT:
        if not u.diag22:
            opts.append(UpgradeOption("N_22", "Add (2,2) Jump", "Gain an extra diagonal leap of (2,2)."))
        if u.flex_steps < RANGE_CAP:
            n = u.flex_steps + 1
            opts.append(UpgradeOption("N_FLEX", "Knight Flex +1",
                                      f"Spread {n} extra steps over the (2,1) legs, e.g. ({2 + n},1) or (2,{1 + n})."))

    elif t is PieceType.BISHOP:
        if u.ortho_full:
            pass
        elif u.ortho_range == 0:
            opts.append(UpgradeOption("B_ORTHO1", "+1 Orthogonal", "Move 1 square orthogonally."))
        elif u.ortho_range < RANGE_CAP:
            opts.append(UpgradeOption("B_ORTHO_PLUS", "Extend Orthogonal +1",
                                      f"Increase limited orthogonal range to {u.ortho_range + 1}."))
        else:
            opts.append(UpgradeOption("B_ORTHO_FULL", "Full Orthogonal", "Slide any distance orthogonally."))
        if not u.diag_jump:
            opts.append(UpgradeOption("B_JUMP", "Diagonal Jump",
                                      "Jump over one adjacent piece diagonally (cannot capture)."))

    elif t is PieceType.ROOK:
        if u.diag_full:
            pass
        elif u.diag_range == 0:
            opts.append(UpgradeOption("R_DIAG1", "+1 Diagonal", "Move 1 square diagonally."))
        elif u.diag_range < RANGE_CAP:
            opts.append(UpgradeOption("R_DIAG_PLUS", "Extend Diagonal +1",
                                      f"Increase limited diagonal range to {u.diag_range + 1}."))
        else:
            opts.append(UpgradeOption("R_DIAG_FULL", "Full Diagonal", "Slide any distance diagonally."))
        if not u.charge:
            opts.append(UpgradeOption("R_CHARGE", "Rook Charge",
                                      "Advance up to 4 empty squares toward the enemy (cannot capture)."))

    elif t is PieceType.QUEEN:
        if not u.has_knight_jump:
            opts.append(UpgradeOption("Q_KNIGHT", "Add Knight Jump", "Gain standard knight jumps (2,1)."))
        elif not u.extended_knight_jump:
            opts.append(UpgradeOption("Q_EXT", "Extend Knight Jump (3,2)", "Knight jump becomes (3,2)."))
        if u.knight_chain_length < CHAIN_CAP:
            opts.append(UpgradeOption("Q_CHAIN", "Increase Knight Chain",
                                      f"Chain up to {u.knight_chain_length + 1} knight jumps per move."))

    elif t is PieceType.KING:
        if u.max_step < 2:
            opts.append(UpgradeOption("K_STEP2", "2-Step Movement", "Move up to 2 squares in any direction."))
        if not u.has_knight_jump:
            opts.append(UpgradeOption("K_KNIGHT", "Add Knight Jump", "Gain a knight-style (2,1) jump."))
        if not u.adjacency_immunity:
            opts.append(UpgradeOption("K_IMMUNE", "Royal Circle",
                                      "Opponents cannot move to squares adjacent to your King."))

    return opts


def _set(attr: str, value) -> Callable[[Abilities], None]:
    def apply(u: Abilities):
        setattr(u, attr, value)
    return apply


def _bump(attr: str, cap: int) -> Callable[[Abilities], None]:
    def apply(u: Abilities):
        setattr(u, attr, min(cap, getattr(u, attr) + 1))
    return apply


_UPGRADES: Dict[str, Tuple[PieceType, Callable[[Abilities], None]]] = {
    "P_FWD": (PieceType.PAWN, _bump("forward_range", RANGE_CAP)),
    "P_DIAG": (PieceType.PAWN, _bump("diag_range", RANGE_CAP)),
    "P_SIDE": (PieceType.PAWN, _set("side_step", True)),
    "P_MIMIC": (PieceType.PAWN, _set("mimic_enabled", True)),
    "N_22": (PieceType.KNIGHT, _set("diag22", True)),
    "N_FLEX": (PieceType.KNIGHT, _bump("flex_steps", RANGE_CAP)),
    "B_ORTHO1": (PieceType.BISHOP, _set("ortho_range", 1)),
    "B_ORTHO_PLUS": (PieceType.BISHOP, _bump("ortho_range", RANGE_CAP)),
    "B_ORTHO_FULL": (PieceType.BISHOP, _set("ortho_full", True)),
    "B_JUMP": (PieceType.BISHOP, _set("diag_jump", True)),
    "R_DIAG1": (PieceType.ROOK, _set("diag_range", 1)),
    "R_DIAG_PLUS": (PieceType.ROOK, _bump("diag_range", RANGE_CAP)),
    "R_DIAG_FULL": (PieceType.ROOK, _set("diag_full", True)),
    "R_CHARGE": (PieceType.ROOK, _set("charge", True)),
    "Q_KNIGHT": (PieceType.QUEEN, _set("has_knight_jump", True)),
    "Q_EXT": (PieceType.QUEEN, _set("extended_knight_jump", True)),
    "Q_CHAIN": (PieceType.QUEEN, _bump("knight_chain_length", CHAIN_CAP)),
    "K_STEP2": (PieceType.KING, _set("max_step", 2)),
    "K_KNIGHT": (PieceType.KING, _set("has_knight_jump", True)),
    "K_IMMUNE": (PieceType.KING, _set("adjacency_immunity", True)),
}

UPGRADE_KEYS = tuple(_UPGRADES)


def apply_upgrade(piece: Piece, key: str):
    """Apply upgrade ``key`` to ``piece`` in place and raise its level.

    Banked points are the caller's business.
    """
    try:
        piece_type, apply = _UPGRADES[key]
    except KeyError:
        raise ValueError(f"unknown upgrade: {key}") from None
    if piece_type is not piece.type:
        raise ValueError(f"{key} cannot be applied to a {piece.type.display_name}")
    piece.abilities.level += 1
    apply(piece.abilities)


# computer preference per piece type, best first
AUTO_PRIORITY = {
    PieceType.PAWN: ["P_MIMIC", "P_DIAG", "P_FWD", "P_SIDE"],
    PieceType.KNIGHT: ["N_22", "N_FLEX"],
    PieceType.BISHOP: ["B_ORTHO1", "B_ORTHO_PLUS", "B_ORTHO_FULL", "B_JUMP"],
    PieceType.ROOK: ["R_DIAG1", "R_DIAG_PLUS", "R_DIAG_FULL", "R_CHARGE"],
    PieceType.QUEEN: ["Q_EXT", "Q_KNIGHT", "Q_CHAIN"],
    PieceType.KING: ["K_STEP2", "K_KNIGHT", "K_IMMUNE"],
}


def auto_upgrade(piece: Piece) -> Optional[UpgradeOption]:
    """Spend one banked point on the preferred available upgrade.

    With nothing left to buy the point is forfeited. Returns the option taken.
    """
    if piece.abilities.banked_points <= 0:
        return None
    opts = get_upgrade_options(piece)
    piece.abilities.banked_points -= 1
    if not opts:
        return None
    by_key = {o.key: o for o in opts}
    pick = next((by_key[k] for k in AUTO_PRIORITY[piece.type] if k in by_key), opts[0])
    apply_upgrade(piece, pick.key)
    return pick
