import logging
from typing import Optional

from chess2.core.board import Move

log = logging.getLogger("chess2.search")


def setup_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def print_info(depth, score, nodes, elapsed_ms, move: Optional[Move], size: int, budget_ms):
    move_str = move.notation(size) if move else "-"
    nps = int(nodes * 1000 / elapsed_ms) if elapsed_ms > 0 else 0
    log.info(
        "info depth %d score %.2f nodes %d nps %d time %d budget %d bestmove %s",
        depth, score, nodes, nps, int(elapsed_ms), int(budget_ms), move_str,
    )
