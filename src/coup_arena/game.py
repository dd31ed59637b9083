"""Main game logic for Coup bot matches."""

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .actions import EXCHANGE_DRAW, ActionFactory, parse_action, parse_card
from .bot import BotContext, Move, OtherPlayer
from .card import DECK_SIZE, Deck
from .config import DEFAULT_ROUND_CAP, GameConfig
from .errors import (BotFault, InvalidAction, InvalidTarget,
                     NotEnoughPlayersError, RuleViolation)
from .player import HAND_SLOTS, CoupPlayer
from .resolution import (BotTable, ChallengeResolver, CounterActionResolver,
                         PenaltyEngine)
from .types import ActionType, Card, ChallengeOutcome, HistoryType

logger = logging.getLogger(__name__)


def _public(value: Any) -> Any:
    """History stores plain strings so bots never hold engine objects."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return tuple(_public(item) for item in value)
    return value


class GameState:
    """Everything about one game in progress.

    Players are kept in seating order; that order drives both turns and the
    order in which opponents are offered challenges and counters.
    """

    def __init__(self, names: Sequence[str], rng: np.random.Generator,
                 starting_coins: int = 0, deck: Optional[Deck] = None) -> None:
        self.rng = rng
        self.deck = deck if deck is not None else Deck(rng)
        self.players: Dict[str, CoupPlayer] = {
            name: CoupPlayer(name, starting_coins) for name in names
        }
        self.history: List[Mapping[str, Any]] = []
        self.discard_pile: List[Card] = []
        self.current_index = 0
        self.rounds = 0
        self.faults = 0

    def deal(self, name: str, cards: Optional[Iterable[Card]] = None) -> None:
        """Give a player their starting hand.

        Without ``cards`` two cards come off the top of the deck; with
        ``cards`` those exact cards are pulled out of the deck.
        """
        player = self.players[name]
        if cards is None:
            for _ in range(HAND_SLOTS):
                player.give_card(self.deck.draw())
        else:
            for card in cards:
                player.give_card(self.deck.take(card))

    def deal_all(self) -> None:
        self.deck.shuffle()
        for name in self.players:
            self.deal(name)

    def log_event(self, event_type: HistoryType, **fields: Any) -> None:
        """Append a read-only event to the public history."""
        event = {"type": event_type.value}
        event.update({key: _public(value) for key, value in fields.items()})
        self.history.append(MappingProxyType(event))

    def discard(self, name: str, slot: int) -> Card:
        """Move the card in ``slot`` to the discard pile."""
        player = self.players[name]
        lost = player.remove_slot(slot)
        self.discard_pile.append(lost)
        self.log_event(HistoryType.LOST_CARD, player=name, lost=lost)

        if player.is_alive:
            logger.debug(f"{name} has lost the {lost}")
        else:
            logger.debug(f"{name} has lost the {lost} and is out of the game")
        return lost

    def is_alive(self, name: str) -> bool:
        return name in self.players and self.players[name].is_alive

    def alive_names(self) -> List[str]:
        """Living players in seating order."""
        return [name for name, player in self.players.items() if player.is_alive]

    def current_name(self) -> str:
        return list(self.players)[self.current_index]

    def advance_turn(self) -> Optional[str]:
        """Move to the next living player; None if nobody is left."""
        names = list(self.players)
        index = self.current_index
        for _ in range(len(names)):
            index = (index + 1) % len(names)
            if self.players[names[index]].is_alive:
                self.current_index = index
                return names[index]
        return None

    def is_game_over(self) -> bool:
        return len(self.alive_names()) <= 1

    def card_total(self) -> int:
        """Cards in deck, hands and discard pile; always 15."""
        in_hands = sum(player.get_card_count() for player in self.players.values())
        return len(self.deck) + in_hands + len(self.discard_pile)

    def context_for(self, name: str, **extra: Any) -> BotContext:
        """Build the view a bot gets for one callback."""
        player = self.players[name]
        others = tuple(
            OtherPlayer(other.name, other.coins, other.get_card_count())
            for other in self.players.values()
            if other.name != name and other.is_alive
        )
        return BotContext(
            name=name,
            history=tuple(self.history),
            my_cards=tuple(player.cards),
            my_coins=player.coins,
            other_players=others,
            discarded_cards=tuple(self.discard_pile),
            **extra,
        )


class TurnEngine(BotTable):
    """Runs turns until one player is left or the round cap is hit."""

    def __init__(self, state: GameState, bots: Mapping[str, Any],
                 round_cap: int = DEFAULT_ROUND_CAP) -> None:
        super().__init__(state, bots)
        self.round_cap = round_cap
        self.penalties = PenaltyEngine(state, bots)
        self.challenges = ChallengeResolver(state, bots, self.penalties)
        self.counters = CounterActionResolver(state, bots, self.penalties, self.challenges)

    def run(self) -> List[str]:
        """Play until the game ends and return the winners."""
        while not self.state.is_game_over() and self.state.rounds < self.round_cap:
            self.play_turn()
            self.state.rounds += 1
            if not self.state.is_game_over():
                self.state.advance_turn()

        winners = self.state.alive_names()
        if len(winners) > 1:
            logger.info(f"The game was stopped after {self.state.rounds} rounds; "
                        f"{len(winners)} players still alive")
            self.state.log_event(HistoryType.ROUND_CAP, rounds=self.state.rounds)
        return winners

    def play_turn(self) -> None:
        """Play one turn for the current player.

        Any rule violation ends the turn and costs the offender one card.
        """
        name = self.state.current_name()
        try:
            self._take_turn(name)
        except RuleViolation as violation:
            self.penalties.punish(violation)

    def _take_turn(self, name: str) -> None:
        actor = self.state.players[name]

        response = self.ask(name, "on_turn")
        if not response.ok:
            raise response.fault
        raw_action, against = self._read_move(name, response.value)

        try:
            action_type = parse_action(raw_action)
        except ValueError:
            action_type = None

        targeted = action_type is not None and ActionFactory.requires_target(action_type)
        if targeted:
            self._validate_target(name, action_type, against)

        if action_type is None:
            allowed = ", ".join(a.value for a in ActionType)
            raise InvalidAction(name, f"issued an invalid action {raw_action!r}, allowed: {allowed}")

        action = ActionFactory.create_action(action_type)
        target_name = against if targeted else None
        logger.debug(f"{name} declares {action_type}" + (f" against {target_name}" if targeted else ""))
        self.state.log_event(HistoryType.ACTION, action=action_type, to=target_name, **{"from": name})

        action.validate_declaration(actor)
        action.pay(actor)

        if action.can_be_challenged():
            outcome = self.challenges.run(asserter=name, card=action.claimed_card,
                                          action=action_type, by_whom=name, to_whom=target_name)
            if outcome is ChallengeOutcome.CLAIM_FAILED:
                return

        if action.can_be_countered() and self.counters.run(action, name, target_name):
            logger.debug(f"{action_type} by {name} was blocked")
            return

        target = self.state.players.get(target_name) if targeted else None
        if not actor.is_alive or (target is not None and not target.is_alive):
            logger.debug(f"{action_type} by {name} fizzled")
            self.state.log_event(HistoryType.FIZZLED, action=action_type, to=target_name,
                                 **{"from": name})
            return

        action.validate_execution(actor, target)
        result = action.execute(self, actor, target)
        logger.debug(result.message)

    def _read_move(self, name: str, answer: Any) -> Tuple[Any, Optional[str]]:
        """Accept a Move, a mapping or an (action, against) pair."""
        if isinstance(answer, Move):
            return answer.action, answer.against
        if isinstance(answer, Mapping) and "action" in answer:
            return answer["action"], answer.get("against")
        if isinstance(answer, tuple) and len(answer) == 2:
            return answer[0], answer[1]
        raise BotFault(name, "on_turn", f"malformed turn answer {answer!r}")

    def _validate_target(self, name: str, action_type: ActionType, against: Any) -> None:
        if not isinstance(against, str) or against not in self.state.players:
            raise InvalidTarget(name, f"the bot gave invalid target {against!r} for {action_type}")
        if against == name:
            raise InvalidTarget(name, f"tried to target itself with {action_type}")
        if not self.state.is_alive(against):
            raise InvalidTarget(name, f"tried to target the dead player {against} with {action_type}")

    def swap_cards(self, player: CoupPlayer) -> None:
        """Ambassador exchange: draw two, keep as many as the hand holds."""
        deck = self.state.deck
        drawn = [deck.draw() for _ in range(min(EXCHANGE_DRAW, len(deck)))]

        response = self.ask(player.name, "on_swapping_cards", new_cards=tuple(drawn))
        try:
            if not response.ok:
                raise response.fault
            kept, returned = self._pick_cards(player, drawn, response.value)
        except BotFault as fault:
            deck.put_back(drawn)
            self.penalties.punish(fault)
            return

        for slot, card in zip(player.occupied_slots(), kept):
            player.replace_slot(slot, card)
        deck.put_back(returned)
        self.state.log_event(HistoryType.SWAP, **{"from": player.name})

    def _pick_cards(self, player: CoupPlayer, drawn: List[Card],
                    answer: Any) -> Tuple[List[Card], List[Card]]:
        """Split hand plus drawn cards into (kept, returned).

        Extra choices are ignored; a short answer is topped up from the
        current hand so the player never loses influence by swapping.
        """
        hand = player.cards
        if not isinstance(answer, (list, tuple)):
            raise BotFault(player.name, "on_swapping_cards", f"malformed card choice {answer!r}")

        pool = hand + drawn
        kept: List[Card] = []
        for item in answer[:len(hand)]:
            try:
                card = parse_card(item)
            except ValueError:
                raise BotFault(player.name, "on_swapping_cards", f"unknown card {item!r}") from None
            if card not in pool:
                raise BotFault(player.name, "on_swapping_cards", f"chose {card} which was not offered")
            pool.remove(card)
            kept.append(card)

        for card in hand:
            if len(kept) == len(hand):
                break
            if card in pool:
                pool.remove(card)
                kept.append(card)

        return kept, pool


class CoupGame:
    """Main game controller: seats the bots, deals and plays one game."""

    def __init__(self, bots: Mapping[str, Any], config: Optional[GameConfig] = None,
                 rng: Optional[np.random.Generator] = None) -> None:
        self.config = config or GameConfig()
        if len(bots) < 2:
            raise NotEnoughPlayersError("Need at least 2 players to start")
        if len(bots) > self.config.max_players:
            raise ValueError(f"Maximum {self.config.max_players} players allowed")

        self.bots = dict(bots)
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.state: Optional[GameState] = None

    def setup(self) -> GameState:
        """Seat the players, deal two cards each and pick a starter."""
        seating = list(self.bots)
        if self.config.shuffle_seating:
            self.rng.shuffle(seating)

        state = GameState(seating, self.rng, self.config.starting_coins)
        state.deal_all()
        state.current_index = int(self.rng.integers(len(seating)))

        logger.info(f"Game started with {', '.join(seating)}; "
                    f"{state.current_name()} goes first")
        self.state = state
        return state

    def play(self) -> List[str]:
        """Play one complete game and return the winners.

        Normally a single name; every survivor if the round cap was hit.
        """
        state = self.setup()
        engine = TurnEngine(state, self.bots, self.config.round_cap)
        winners = engine.run()

        if state.card_total() != DECK_SIZE:
            logger.error(f"Card count drifted to {state.card_total()}")
        logger.info(f"The winner{'s are' if len(winners) > 1 else ' is'} {', '.join(winners)}")
        return winners

    def get_game_state(self) -> Dict[str, Any]:
        """Get current game state as dictionary."""
        if self.state is None:
            return {'players': [], 'history': [], 'rounds': 0}
        return {
            'players': [
                {
                    'name': p.name,
                    'coins': p.coins,
                    'cards': p.get_card_count(),
                    'eliminated': p.is_eliminated,
                }
                for p in self.state.players.values()
            ],
            'rounds': self.state.rounds,
            'faults': self.state.faults,
            'discarded': [card.value for card in self.state.discard_pile],
            'history': [dict(event) for event in self.state.history[-10:]],
        }
