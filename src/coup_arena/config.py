"""Game configuration."""

import json
import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_ROUND_CAP = 1000
DEFAULT_MAX_PLAYERS = 6


@dataclass
class GameConfig:
    """Settings for a single game (and every game of a tournament)."""
    round_cap: int = DEFAULT_ROUND_CAP
    max_players: int = DEFAULT_MAX_PLAYERS
    starting_coins: int = 0
    shuffle_seating: bool = True
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.round_cap < 1:
            raise ConfigError(f"round_cap must be positive, got {self.round_cap}")
        if not 2 <= self.max_players <= DEFAULT_MAX_PLAYERS:
            raise ConfigError(
                f"max_players must be between 2 and {DEFAULT_MAX_PLAYERS}, got {self.max_players}"
            )
        if self.starting_coins < 0:
            raise ConfigError(f"starting_coins cannot be negative, got {self.starting_coins}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        """Build a config, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        try:
            return cls(**{key: value for key, value in data.items() if key in known})
        except TypeError as error:
            raise ConfigError(str(error)) from error

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: str) -> GameConfig:
    """Load a GameConfig from a JSON file."""
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as error:
        raise ConfigError(f"Could not read config {path}: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must contain a JSON object")
    return GameConfig.from_dict(data)
