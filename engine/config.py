"""
Game configuration system for saving/loading user preferences.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from engine.error_handler import log_error
from settings import AI_VISIBILITY_RANGE, DEFAULT_MAP_PATH, WINDOW_HEIGHT, WINDOW_WIDTH

# Config file location
CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
CONFIG_FILE = CONFIG_DIR / "settings.json"


class GameConfig:
    """Manages game configuration/settings."""

    def __init__(self) -> None:
        self.width: int = WINDOW_WIDTH
        self.height: int = WINDOW_HEIGHT
        self.fullscreen: bool = False

        # Movement animation. The logical move is always immediate; these
        # only decide whether a visual catch-up runs and whether it gates
        # further clicks.
        self.animate_moves: bool = True
        self.block_input_while_animating: bool = False

        # Hostile AI
        self.ai_visibility_range: int = AI_VISIBILITY_RANGE
        self.ai_checks_pathability: bool = True

        self.map_path: str = str(DEFAULT_MAP_PATH)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for saving."""
        return {
            "width": self.width,
            "height": self.height,
            "fullscreen": self.fullscreen,
            "animate_moves": self.animate_moves,
            "block_input_while_animating": self.block_input_while_animating,
            "ai_visibility_range": self.ai_visibility_range,
            "ai_checks_pathability": self.ai_checks_pathability,
            "map_path": self.map_path,
        }

    def from_dict(self, data: Dict[str, Any]) -> None:
        """Load config from dictionary. Missing keys keep their defaults."""
        defaults = GameConfig().to_dict()
        self.width = int(data.get("width", defaults["width"]))
        self.height = int(data.get("height", defaults["height"]))
        self.fullscreen = bool(data.get("fullscreen", defaults["fullscreen"]))
        self.animate_moves = bool(data.get("animate_moves", defaults["animate_moves"]))
        self.block_input_while_animating = bool(
            data.get("block_input_while_animating", defaults["block_input_while_animating"])
        )
        self.ai_visibility_range = int(data.get("ai_visibility_range", defaults["ai_visibility_range"]))
        self.ai_checks_pathability = bool(data.get("ai_checks_pathability", defaults["ai_checks_pathability"]))
        self.map_path = str(data.get("map_path", defaults["map_path"]))

    def get_resolution(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def save(self, path: Optional[Path] = None) -> bool:
        """Save config to file."""
        path = Path(path) if path is not None else CONFIG_FILE
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
            return True
        except OSError as e:
            log_error(e, "save_config")
            return False

    def load(self, path: Optional[Path] = None) -> bool:
        """Load config from file."""
        path = Path(path) if path is not None else CONFIG_FILE
        if not path.exists():
            return False

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            self.from_dict(data)
            return True
        except (OSError, ValueError, TypeError, AttributeError) as e:
            log_error(e, "load_config")
            return False


# Global config instance
_config = GameConfig()


def load_config(path: Optional[Path] = None) -> GameConfig:
    """Load and return the config."""
    _config.load(path)
    return _config
