# config.py - game settings: persisted JSON plus environment overrides
import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from typing import Mapping, Optional

from klondike.actions import DrawCount

logger = logging.getLogger(__name__)

DEFAULT_UNDO_LIMIT = 200

# Difficulty presets: stock recycles allowed per game (None = unlimited)
DIFFICULTY_LABELS = [
    "Easy (Unlimited stock cycles)",
    "Medium (2 stock cycles)",
    "Hard (1 stock cycle)",
]
STOCK_CYCLE_LIMITS = [None, 2, 1]


def _require_int(name: str, value, optional: bool = False) -> None:
    if value is None and optional:
        return
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class GameConfig:
    draw_count: DrawCount = DrawCount.THREE
    stock_cycles: Optional[int] = None
    undo_limit: int = DEFAULT_UNDO_LIMIT
    seed: Optional[int] = None

    def __post_init__(self):
        object.__setattr__(self, "draw_count", DrawCount.parse(self.draw_count))
        _require_int("stock_cycles", self.stock_cycles, optional=True)
        _require_int("undo_limit", self.undo_limit)
        _require_int("seed", self.seed, optional=True)
        if self.stock_cycles is not None and self.stock_cycles < 0:
            raise ValueError("stock_cycles must be >= 0 or None")
        if self.undo_limit < 1:
            raise ValueError("undo_limit must be >= 1")

    @classmethod
    def for_difficulty(cls, index: int, draw_count: DrawCount = DrawCount.THREE) -> "GameConfig":
        return cls(draw_count=draw_count, stock_cycles=STOCK_CYCLE_LIMITS[index])

    def to_dict(self) -> dict:
        data = asdict(self)
        data["draw_count"] = self.draw_count.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping) -> "GameConfig":
        known = {k: data[k] for k in ("draw_count", "stock_cycles", "undo_limit", "seed") if k in data}
        return cls(**known)


def _settings_dir() -> str:
    # Prefer %APPDATA% on Windows, else ~/.klondike_engine
    base = os.environ.get("APPDATA")
    if base:
        return os.path.join(base, "KlondikeEngine")
    return os.path.join(os.path.expanduser("~"), ".klondike_engine")


def settings_path() -> str:
    return os.path.join(_settings_dir(), "settings.json")


def _optional_int(text: str) -> Optional[int]:
    text = text.strip().lower()
    if text in ("", "none", "unlimited"):
        return None
    return int(text)


def apply_env_overrides(config: GameConfig, environ: Optional[Mapping[str, str]] = None) -> GameConfig:
    env = os.environ if environ is None else environ
    changes = {}
    if env.get("KLONDIKE_DRAW_COUNT"):
        changes["draw_count"] = DrawCount.parse(env["KLONDIKE_DRAW_COUNT"])
    if "KLONDIKE_STOCK_CYCLES" in env:
        changes["stock_cycles"] = _optional_int(env["KLONDIKE_STOCK_CYCLES"])
    if env.get("KLONDIKE_UNDO_LIMIT"):
        changes["undo_limit"] = int(env["KLONDIKE_UNDO_LIMIT"])
    if "KLONDIKE_SEED" in env:
        changes["seed"] = _optional_int(env["KLONDIKE_SEED"])
    return replace(config, **changes) if changes else config


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> GameConfig:
    """Read settings from disk, then apply ``KLONDIKE_*`` environment overrides.

    A missing file means defaults. A file that cannot be parsed is reported and
    ignored so a bad settings file never blocks starting a game. Bad values in
    environment variables are not ignored: they raise ``ValueError``.
    """
    path = path or settings_path()
    config = GameConfig()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if isinstance(data, dict):
            config = GameConfig.from_dict(data)
        else:
            logger.warning("Ignoring settings in %s: expected a JSON object", path)
    except FileNotFoundError:
        pass
    except (OSError, ValueError, TypeError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
    return apply_env_overrides(config, environ)


def save_config(config: GameConfig, path: Optional[str] = None) -> str:
    path = path or settings_path()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    return path
