# chessai/config.py
from dataclasses import dataclass, field
from typing import Dict
import logging
import os
import tomllib

logger = logging.getLogger(__name__)

# Defaults (pawn = 10)
PIECE_VALUES = {
    "PAWN": 10,
    "KNIGHT": 30,
    "BISHOP": 30,
    "ROOK": 50,
    "QUEEN": 90,
    "KING": 900,
}

@dataclass
class SearchConfig:
    difficulty: str = "medium"
    depth_presets: Dict[str, int] = field(default_factory=lambda: {
        "easy": 2, "medium": 3, "hard": 4
    })
    root_window: float = 10000.0

    def depth_for(self, difficulty: str = None) -> int:
        """Search depth for a difficulty name; unknown names use the default."""
        name = difficulty or self.difficulty
        if name not in self.depth_presets:
            logger.warning("Unknown difficulty %r, using %r", name, self.difficulty)
            name = self.difficulty
        return self.depth_presets.get(name, 3)

@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    mate_score: float = 9000.0
    mobility_weight: float = 0.1
    check_penalty: float = 5.0
    # king switches to its endgame table once queens + rooks drop to this count
    endgame_heavy_pieces: int = 2

@dataclass
class UIConfig:
    engine_name: str = "chessai"
    human_color: str = "light"
    unicode_pieces: bool = False

@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    log_level: str = "INFO"
    check_invariants: bool = False

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval", "ui"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.warning("Ignoring unknown config key %s.%s", section, k)
        for k in ("log_level", "check_invariants"):
            if k in raw:
                setattr(cfg, k, raw[k])
        return cfg

# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("CHESSAI_CONFIG_TOML", "config.toml"))
# allow env override of difficulty for quick debugging
override_difficulty = os.environ.get("CHESSAI_DIFFICULTY")
if override_difficulty:
    if override_difficulty in CONFIG.search.depth_presets:
        CONFIG.search.difficulty = override_difficulty
    else:
        logger.warning("Ignoring CHESSAI_DIFFICULTY=%r", override_difficulty)
