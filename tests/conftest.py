"""Shared fixtures: scripted bots and hand-built tables."""

from collections import Counter
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pytest

from coup_arena.bot import BaseBot, BotContext
from coup_arena.game import GameState, TurnEngine
from coup_arena.types import Card


class ScriptedBot(BaseBot):
    """Bot whose answers are fixed up front and whose calls are counted.

    Any answer may be an exception instance, which is raised instead, or a
    callable taking the context.
    """

    def __init__(self, turn: Any = None, challenge: Any = False, counter: Any = False,
                 counter_challenge: Any = False, swap: Any = None, loss: Any = None) -> None:
        self.answers = {
            'on_turn': turn,
            'on_challenge_action_round': challenge,
            'on_counter_action': counter,
            'on_counter_action_round': counter_challenge,
            'on_swapping_cards': swap,
            'on_card_loss': loss,
        }
        self.calls: Counter = Counter()
        self.contexts: List[BotContext] = []

    def _answer(self, callback: str, context: BotContext, default: Any) -> Any:
        self.calls[callback] += 1
        self.contexts.append(context)
        answer = self.answers[callback]
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(context)
        return default if answer is None else answer

    def on_turn(self, context):
        return self._answer('on_turn', context, super().on_turn(context))

    def on_challenge_action_round(self, context):
        return self._answer('on_challenge_action_round', context, False)

    def on_counter_action(self, context):
        return self._answer('on_counter_action', context, False)

    def on_counter_action_round(self, context):
        return self._answer('on_counter_action_round', context, False)

    def on_swapping_cards(self, context):
        return self._answer('on_swapping_cards', context, list(context.my_cards))

    def on_card_loss(self, context):
        return self._answer('on_card_loss', context, context.my_cards[0])


Seat = Tuple[str, Sequence[Card], int]


def build_engine(seats: Sequence[Seat], bots: Optional[Dict[str, Any]] = None,
                 round_cap: int = 1000, seed: int = 0) -> TurnEngine:
    """Seat players with exact hands and coins; the first seat moves first."""
    bots = dict(bots or {})
    state = GameState([name for name, _, _ in seats], np.random.default_rng(seed))
    for name, cards, coins in seats:
        state.deal(name, cards)
        state.players[name].coins = coins
        bots.setdefault(name, ScriptedBot())
    return TurnEngine(state, bots, round_cap)


@pytest.fixture
def scripted():
    """The ScriptedBot class."""
    return ScriptedBot


@pytest.fixture
def make_engine():
    """Factory for a TurnEngine over hand-picked hands."""
    return build_engine
