"""Type definitions for the Coup bot engine."""

from enum import Enum


class Card(Enum):
    """Character cards in Coup."""
    DUKE = "duke"
    ASSASSIN = "assassin"
    CAPTAIN = "captain"
    AMBASSADOR = "ambassador"
    CONTESSA = "contessa"

    def __str__(self) -> str:
        return self.value


class ActionType(Enum):
    """Actions a bot can declare on its turn."""
    INCOME = "taking-1"
    FOREIGN_AID = "foreign-aid"
    COUP = "couping"
    TAX = "taking-3"
    ASSASSINATE = "assassination"
    STEAL = "stealing"
    EXCHANGE = "swapping"

    def __str__(self) -> str:
        return self.value


class CounterScope(Enum):
    """Who may issue a counter-claim against an action."""
    NONE = "none"
    TARGET = "target"
    ANYONE = "anyone"


class ChallengeOutcome(Enum):
    """Result of one challenge round."""
    UNCHALLENGED = "unchallenged"
    CLAIM_UPHELD = "claim-upheld"
    CLAIM_FAILED = "claim-failed"


class HistoryType(Enum):
    """Event kinds recorded in the game history."""
    ACTION = "action"
    PENALTY = "penalty"
    LOST_CARD = "lost-card"
    CHALLENGE_ROUND = "challenge-round"
    COUNTER_ROUND = "counter-round"
    UNSUCCESSFUL_CHALLENGE = "unsuccessful-challenge"
    COUNTER_ACTION = "counter-action"
    SWAP = "swap"
    FIZZLED = "fizzled"
    INVALID_SURRENDER = "invalid-surrender"
    ROUND_CAP = "round-cap"
