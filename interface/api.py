"""FastAPI REST interface over a single game session."""

import threading
from dataclasses import asdict
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from chess2.config import CONFIG
from chess2.core.board import MAX_BOARD_SIZE, MIN_BOARD_SIZE, Move, Square, from_algebraic
from chess2.main import Game

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared session; every request holds the lock while it touches it.
game = Game()
_game_lock = threading.Lock()


class NewGameRequest(BaseModel):
    size: Optional[int] = Field(None, ge=MIN_BOARD_SIZE, le=MAX_BOARD_SIZE)
    mode: Optional[str] = None
    level: Optional[int] = Field(None, ge=1, le=10)


class SquareRequest(BaseModel):
    square: str  # algebraic, e.g. "d1"


class MoveRequest(BaseModel):
    from_sq: str
    to_sq: str


class UpgradeRequest(BaseModel):
    key: str
    square: Optional[str] = None


class ComputerRequest(BaseModel):
    level: Optional[int] = Field(None, ge=1, le=10)


def _square(text: str) -> Square:
    try:
        return from_algebraic(text, game.size)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _move_json(move: Move) -> dict:
    return {
        "from": game.name(move.from_sq),
        "to": game.name(move.to_sq),
        "capture": move.is_capture,
        "tag": move.tag,
    }


def _state_json() -> dict:
    s = game.state
    pieces = [
        {
            "square": game.name(sq),
            "type": p.type.value,
            "color": p.color.value,
            "has_moved": p.has_moved,
            "abilities": asdict(p.abilities),
        }
        for sq, p in s.pieces()
    ]
    shield = s.active_shield
    last = s.last_move
    return {
        "size": game.size,
        "mode": game.mode,
        "level": game.level,
        "turn": s.turn.value,
        "winner": s.winner.value if s.winner else None,
        "pending_shield": s.pending_shield.value if s.pending_shield else None,
        "pending_upgrade": game.name(s.pending_upgrade) if s.pending_upgrade else None,
        "active_shield": {
            "square": game.name(shield.square),
            "owner": shield.owning_color.value,
            "expires_on": shield.expires_on_color_to_move.value,
        } if shield else None,
        "last_move": {
            "from": game.name(last.from_sq),
            "to": game.name(last.to_sq),
            "captured": last.captured.type.value if last.captured else None,
        } if last else None,
        "pieces": pieces,
        "board": str(s),
    }


@app.get("/state")
def get_state():
    with _game_lock:
        return _state_json()


@app.post("/new")
def new_game(req: NewGameRequest = NewGameRequest()):
    with _game_lock:
        try:
            game.reset(size=req.size, mode=req.mode, level=req.level)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state_json()


@app.post("/moves")
def list_moves(req: SquareRequest) -> List[dict]:
    with _game_lock:
        return [_move_json(m) for m in game.preview(_square(req.square))]


@app.post("/move")
def make_move(req: MoveRequest):
    with _game_lock:
        if game.is_game_over:
            raise HTTPException(status_code=400, detail="Game is already over")
        if not game.make_move(_square(req.from_sq), _square(req.to_sq)):
            raise HTTPException(status_code=400, detail=f"Illegal move: {req.from_sq}{req.to_sq}")
        return _state_json()


@app.post("/shield")
def choose_shield(req: SquareRequest):
    with _game_lock:
        if not game.choose_shield(_square(req.square)):
            raise HTTPException(status_code=400, detail=f"Cannot shield {req.square}")
        return _state_json()


@app.get("/upgrades")
def upgrade_options(square: Optional[str] = None):
    with _game_lock:
        sq = _square(square) if square else None
        return [asdict(o) for o in game.upgrade_options(sq)]


@app.post("/upgrade")
def upgrade(req: UpgradeRequest):
    with _game_lock:
        sq = _square(req.square) if req.square else None
        if not game.upgrade(req.key, sq):
            raise HTTPException(status_code=400, detail=f"Upgrade {req.key} not available")
        return _state_json()


@app.post("/upgrade/skip")
def skip_upgrade():
    with _game_lock:
        if not game.skip_upgrade():
            raise HTTPException(status_code=400, detail="No upgrade pending")
        return _state_json()


@app.post("/undo")
def undo():
    with _game_lock:
        if not game.undo():
            raise HTTPException(status_code=400, detail="Nothing to undo")
        return _state_json()


@app.post("/computer")
def computer_move(req: ComputerRequest = ComputerRequest()):
    with _game_lock:
        if game.is_game_over:
            raise HTTPException(status_code=400, detail="Game is already over")
        if req.level is not None:
            game.level = req.level
        move = game.computer_move()
        return {"move": _move_json(move) if move else None, "state": _state_json()}
