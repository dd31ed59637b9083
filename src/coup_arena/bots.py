"""Reference bots for testing the engine and filling tournaments."""

from typing import Dict, List, Optional, Union

import numpy as np

from .actions import FORCED_COUP_THRESHOLD, ActionFactory, ASSASSINATION_COST, COUP_COST
from .bot import BaseBot, BotContext, Move
from .types import ActionType, Card

COUNTER_CARDS: Dict[ActionType, List[Card]] = {
    ActionType.FOREIGN_AID: [Card.DUKE],
    ActionType.ASSASSINATE: [Card.CONTESSA],
    ActionType.STEAL: [Card.CAPTAIN, Card.AMBASSADOR],
}


class StaticBot(BaseBot):
    """Always takes one coin, never challenges, never counters.

    Coups the first opponent once it has to.
    """

    def on_turn(self, context: BotContext) -> Move:
        if context.my_coins >= COUP_COST and context.other_players:
            return Move(ActionType.COUP, context.other_players[0].name)
        return Move(ActionType.INCOME)


class RandomBot(BaseBot):
    """Picks every answer at random, bluffs included."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = np.random.default_rng(seed)

    def _coin_flip(self) -> bool:
        return bool(self.rng.integers(2))

    def on_turn(self, context: BotContext) -> Move:
        target = context.other_players[self.rng.integers(len(context.other_players))].name
        if context.my_coins > FORCED_COUP_THRESHOLD:
            return Move(ActionType.COUP, target)

        actions = list(ActionType)
        action = actions[self.rng.integers(len(actions))]
        if action is ActionType.COUP and context.my_coins < COUP_COST:
            action = ActionType.INCOME
        if action is ActionType.ASSASSINATE and context.my_coins < ASSASSINATION_COST:
            action = ActionType.FOREIGN_AID
        return Move(action, target if ActionFactory.requires_target(action) else None)

    def on_challenge_action_round(self, context: BotContext) -> bool:
        return self._coin_flip()

    def on_counter_action(self, context: BotContext) -> Union[Card, bool]:
        options: List[Union[Card, bool]] = [False] + COUNTER_CARDS.get(context.action, [])
        return options[self.rng.integers(len(options))]

    def on_counter_action_round(self, context: BotContext) -> bool:
        return self._coin_flip()

    def on_swapping_cards(self, context: BotContext) -> List[Card]:
        pool = list(context.my_cards) + list(context.new_cards)
        self.rng.shuffle(pool)
        return pool[:len(context.my_cards)]

    def on_card_loss(self, context: BotContext) -> Card:
        return context.my_cards[self.rng.integers(len(context.my_cards))]


class HonestBot(BaseBot):
    """Never bluffs: only claims and counters with cards it holds."""

    _PREFERENCE = [
        (Card.DUKE, ActionType.TAX),
        (Card.CAPTAIN, ActionType.STEAL),
        (Card.ASSASSIN, ActionType.ASSASSINATE),
        (Card.AMBASSADOR, ActionType.EXCHANGE),
    ]

    def on_turn(self, context: BotContext) -> Move:
        richest = max(context.other_players, key=lambda other: (other.coins, other.card_count))
        if context.my_coins >= COUP_COST:
            return Move(ActionType.COUP, richest.name)

        for card, action in self._PREFERENCE:
            if card not in context.my_cards:
                continue
            if action is ActionType.ASSASSINATE and context.my_coins < ASSASSINATION_COST:
                continue
            if action is ActionType.STEAL and richest.coins == 0:
                continue
            return Move(action, richest.name if ActionFactory.requires_target(action) else None)

        return Move(ActionType.FOREIGN_AID)

    def on_counter_action(self, context: BotContext) -> Union[Card, bool]:
        for card in COUNTER_CARDS.get(context.action, []):
            if card in context.my_cards:
                return card
        return False

    def on_swapping_cards(self, context: BotContext) -> List[Card]:
        wanted = [card for card, _ in self._PREFERENCE] + [Card.CONTESSA]
        pool = sorted(list(context.my_cards) + list(context.new_cards), key=wanted.index)
        return pool[:len(context.my_cards)]

    def on_card_loss(self, context: BotContext) -> Card:
        wanted = [card for card, _ in self._PREFERENCE] + [Card.CONTESSA]
        return max(context.my_cards, key=wanted.index)


BUILTIN_BOTS = {
    "static": StaticBot,
    "random": RandomBot,
    "honest": HonestBot,
}
