from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaneTuning:
    activation_duration: float = 1.0
    pause_between_turns: float = 0.8
    miss_feedback_duration: float = 2.0
    turn_complete_delay: float = 0.8
    round_complete_delay: float = 1.2


@dataclass(frozen=True)
class MathdropsTuning:
    ticks_per_second: int = 60
    spawn_interval: float = 2.5
    drop_speed: float = 0.7
    spawn_y: float = -40.0
    play_width: float = 400.0
    play_height: float = 600.0
    drop_width: float = 100.0
    level_step: int = 5

    @property
    def tick_interval(self) -> float:
        return 1.0 / float(self.ticks_per_second)


@dataclass(frozen=True)
class TilesTuning:
    show_duration: float = 3.0
    large_grid_show_duration: float = 3.5
    large_grid_threshold: int = 25
    feedback_duration: float = 2.0
    next_round_delay: float = 0.4


@dataclass(frozen=True)
class GameTuning:
    """Timing constants, life count and play-area geometry for every game."""

    lives: int = 3
    lane_memory: LaneTuning = field(default_factory=LaneTuning)
    mathdrops: MathdropsTuning = field(default_factory=MathdropsTuning)
    memory_tiles: TilesTuning = field(default_factory=TilesTuning)

    def __post_init__(self) -> None:
        if self.lives < 1:
            raise ConfigError("lives must be at least 1")
        for section in (self.lane_memory, self.mathdrops, self.memory_tiles):
            for f in dataclasses.fields(section):
                value = getattr(section, f.name)
                # spawn_y sits above the visible area, so it is negative
                if f.name != "spawn_y" and value <= 0:
                    raise ConfigError(f"{type(section).__name__}.{f.name} must be positive, got {value!r}")

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameTuning":
        try:
            return cls(
                lives=int(data.get("lives", 3)),
                lane_memory=LaneTuning(**data.get("lane_memory", {})),
                mathdrops=MathdropsTuning(**data.get("mathdrops", {})),
                memory_tiles=TilesTuning(**data.get("memory_tiles", {})),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid tuning values: {e}") from e

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "GameTuning":
        """Load tuning from built-in defaults and an optional user override file.

        If user_path is provided and exists, overlay its values onto defaults.
        """
        try:
            with resources.files("memorygames.config").joinpath("default_tuning.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default tuning not found; falling back to dataclass defaults.")
            default_data = dataclasses.asdict(GameTuning())

        user_data = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user tuning from %s", user_path)
            else:
                logger.warning("User tuning file not found: %s", user_path)

        tuning = cls.from_dict(cls._deep_merge(default_data, user_data))
        logger.debug("Tuning merged: %s", tuning)
        return tuning
