# chess2/config.py
from dataclasses import dataclass, field
from typing import Dict, Optional
import os
import tomllib  # python >=3.11

# Material table in pawns
PIECE_VALUES = {
    "K": 200.0,
    "Q": 9.0,
    "R": 5.0,
    "B": 3.25,
    "N": 3.0,
    "P": 1.0,
}

# difficulty level -> search depth
DEPTH_BY_LEVEL = {1: 1, 2: 2, 3: 2, 4: 3, 5: 3, 6: 4, 7: 4, 8: 5, 9: 5, 10: 5}

@dataclass
class SearchConfig:
    depth_by_level: Dict[int, int] = field(default_factory=lambda: DEPTH_BY_LEVEL.copy())
    default_level: int = 5
    base_time_ms: int = 300
    time_per_level_ms: int = 120
    max_extra_time_ms: int = 900
    time_limit_ms: Optional[int] = None  # None means use the level budget

@dataclass
class EvalConfig:
    piece_values: Dict[str, float] = field(default_factory=lambda: PIECE_VALUES.copy())
    level_weight: float = 0.25
    shield_bonus: float = 0.5
    mobility_weight: float = 0.04

@dataclass
class GameConfig:
    board_size: int = 10
    computer_color: str = "b"
    mode: str = "cpu"  # "cpu" or "pvp"

@dataclass
class UIConfig:
    engine_name: str = "Chess 2.0"
    api_port: int = 8000

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    game: GameConfig = field(default_factory=GameConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "game", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
        # TOML table keys are strings
        cfg.search.depth_by_level = {int(k): int(v) for k, v in cfg.search.depth_by_level.items()}
        if "log_level" in raw:
            cfg.log_level = str(raw["log_level"])
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("CHESS2_CONFIG_TOML", "config.toml"))
# allow env override of level and board size for quick debugging
try:
    override_level = os.environ.get("CHESS2_SEARCH_LEVEL")
    if override_level:
        CONFIG.search.default_level = int(override_level)
    override_size = os.environ.get("CHESS2_BOARD_SIZE")
    if override_size:
        CONFIG.game.board_size = int(override_size)
except ValueError:
    pass
