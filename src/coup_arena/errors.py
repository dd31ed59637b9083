"""Exceptions raised by the Coup engine.

``RuleViolation`` and its subclasses are recoverable: the turn engine
catches them and charges the offending player one influence card. The
remaining errors are raised before a game can start.
"""

from typing import Optional


class CoupError(Exception):
    """Base class for all engine errors."""


class RuleViolation(CoupError):
    """A bot broke a rule; costs the bot one card."""

    def __init__(self, player: str, reason: str) -> None:
        super().__init__(reason)
        self.player = player
        self.reason = reason


class InvalidAction(RuleViolation):
    """Unknown action kind, or an action not allowed right now."""


class InvalidTarget(RuleViolation):
    """Target is missing, dead or not allowed."""


class InsufficientResources(RuleViolation):
    """Not enough coins for the declared action."""


class InvalidClaim(RuleViolation):
    """Counter-claim names a card that cannot block the action."""


class InvalidSurrender(RuleViolation):
    """Card-loss answer names a card the player does not hold."""


class BotFault(RuleViolation):
    """A bot callback raised or returned something malformed."""

    def __init__(self, player: str, callback: str, reason: str,
                 exception: Optional[BaseException] = None) -> None:
        super().__init__(player, f"the bot failed in {callback}: {reason}")
        self.callback = callback
        self.exception = exception


class NotEnoughPlayersError(CoupError, ValueError):
    """Fewer than two bots are available."""


class MissingCallbackError(CoupError, ValueError):
    """A bot does not implement the full callback set."""


class ConfigError(CoupError, ValueError):
    """Invalid configuration value."""
