"""Coup bot arena package."""

__version__ = "0.1.0"

from .bot import BaseBot, BotContext, BotContract, BotRegistry, Move, OtherPlayer
from .card import Deck
from .config import GameConfig, load_config
from .game import CoupGame, GameState, TurnEngine
from .player import CoupPlayer
from .types import ActionType, Card, ChallengeOutcome

__all__ = [
    "BaseBot",
    "BotContext",
    "BotContract",
    "BotRegistry",
    "Move",
    "OtherPlayer",
    "Deck",
    "GameConfig",
    "load_config",
    "CoupGame",
    "GameState",
    "TurnEngine",
    "CoupPlayer",
    "ActionType",
    "Card",
    "ChallengeOutcome",
]
