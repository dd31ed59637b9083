"""Penalties, challenge rounds and counter-action rounds."""

import logging
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from .actions import Action, parse_card
from .bot import BotResponse, invoke
from .errors import InvalidClaim, InvalidSurrender, RuleViolation
from .types import ActionType, Card, ChallengeOutcome, CounterScope, HistoryType

if TYPE_CHECKING:
    from .game import GameState

logger = logging.getLogger(__name__)


class BotTable:
    """Shared plumbing: the game state plus the bots sitting at the table."""

    def __init__(self, state: "GameState", bots: Mapping[str, Any]) -> None:
        self.state = state
        self.bots = bots

    def ask(self, name: str, callback: str, **extra: Any) -> BotResponse:
        """Run one bot callback with a fresh view of the game."""
        context = self.state.context_for(name, **extra)
        response = invoke(name, self.bots[name], callback, context)
        if not response.ok:
            self.state.faults += 1
        return response


class PenaltyEngine(BotTable):
    """Takes influence away from players. The only way a card is lost."""

    def punish(self, violation: RuleViolation) -> Optional[Card]:
        """Charge one card for a rule violation or bot fault."""
        return self.penalize(violation.player, violation.reason)

    def penalize(self, name: str, reason: str) -> Optional[Card]:
        """Make ``name`` forfeit one card.

        The bot chooses which card via ``on_card_loss``. If it crashes or
        names a card it does not hold, slot one goes before slot two.
        Returns the lost card, or None if the player had nothing left.
        """
        player = self.state.players[name]
        if not player.is_alive:
            logger.debug(f"{name} has no cards left to lose ({reason})")
            return None

        logger.debug(f"{name} was penalised because {reason}")
        self.state.log_event(HistoryType.PENALTY, player=name, reason=reason)

        slot = None
        response = self.ask(name, "on_card_loss")
        if response.ok:
            try:
                slot = self._chosen_slot(name, response.value)
            except InvalidSurrender as surrender:
                logger.warning(f"{name} {surrender.reason}; losing first card instead")
                self.state.log_event(HistoryType.INVALID_SURRENDER, player=name,
                                     reason=surrender.reason)

        if slot is None:
            slot = player.first_occupied_slot()
        return self.state.discard(name, slot)

    def _chosen_slot(self, name: str, answer: Any) -> int:
        player = self.state.players[name]
        try:
            slot = player.slot_of(parse_card(answer))
        except ValueError:
            slot = None

        if slot is None:
            raise InvalidSurrender(name, f"didn't give up a valid card {answer!r}")
        return slot


class ChallengeResolver(BotTable):
    """Offers every other living player the chance to call a bluff."""

    def __init__(self, state: "GameState", bots: Mapping[str, Any],
                 penalties: PenaltyEngine) -> None:
        super().__init__(state, bots)
        self.penalties = penalties

    def run(self, asserter: str, card: Card, action: ActionType, by_whom: str,
            to_whom: Optional[str] = None, counterer: Optional[str] = None) -> ChallengeOutcome:
        """Run one challenge round against ``asserter``'s claim of ``card``.

        Challengers are asked in seating order; the first yes ends the round.
        ``counterer`` is set when the claim being disputed is a counter-action.
        """
        round_type = HistoryType.COUNTER_ROUND if counterer else HistoryType.CHALLENGE_ROUND
        callback = "on_counter_action_round" if counterer else "on_challenge_action_round"

        challengers = [name for name in self.state.alive_names() if name != asserter]
        for challenger in challengers:
            response = self.ask(challenger, callback, action=action, by_whom=by_whom,
                                to_whom=to_whom, counterer=counterer, card=card)
            if not response.ok:
                self.penalties.punish(response.fault)
                continue
            if response.value:
                return self._resolve(challenger, asserter, card, action, round_type)

        return ChallengeOutcome.UNCHALLENGED

    def _resolve(self, challenger: str, asserter: str, card: Card, action: ActionType,
                 round_type: HistoryType) -> ChallengeOutcome:
        player = self.state.players[asserter]
        lying = not player.has_card(card)

        logger.debug(f"{asserter} was challenged by {challenger}")
        self.state.log_event(round_type, challenger=challenger, challengee=asserter,
                             action=action, card=card, lying=lying)

        if lying:
            self.penalties.penalize(asserter, f"was caught bluffing the {card}")
            return ChallengeOutcome.CLAIM_FAILED

        self.penalties.penalize(challenger, f"challenged {asserter} unsuccessfully")
        self._replace_revealed(asserter, card)
        return ChallengeOutcome.CLAIM_UPHELD

    def _replace_revealed(self, name: str, card: Card) -> None:
        """Shuffle the revealed card back and draw a new one into its slot."""
        player = self.state.players[name]
        slot = player.slot_of(card)
        player.replace_slot(slot, self.state.deck.exchange(card))

        logger.debug(f"{name} put the {card} back in the deck and drew a new card")
        self.state.log_event(HistoryType.UNSUCCESSFUL_CHALLENGE, card=card, **{"from": name})


class CounterActionResolver(BotTable):
    """Offers counter-claims against blockable actions."""

    def __init__(self, state: "GameState", bots: Mapping[str, Any],
                 penalties: PenaltyEngine, challenges: ChallengeResolver) -> None:
        super().__init__(state, bots)
        self.penalties = penalties
        self.challenges = challenges

    def candidates(self, action: Action, actor: str, target: Optional[str]) -> List[str]:
        """Players who get asked for a counter-claim, in order."""
        if action.counter_scope is CounterScope.TARGET:
            return [target] if target is not None and self.state.is_alive(target) else []
        if action.counter_scope is CounterScope.ANYONE:
            return [name for name in self.state.alive_names() if name != actor]
        return []

    def run(self, action: Action, actor: str, target: Optional[str] = None) -> bool:
        """Returns True when the action is blocked."""
        counterer = None
        claim = None
        for name in self.candidates(action, actor, target):
            response = self.ask(name, "on_counter_action", action=action.action_type,
                                by_whom=actor, to_whom=target)
            if not response.ok:
                self.penalties.punish(response.fault)
                continue
            if response.value:
                counterer, claim = name, response.value
                break

        if counterer is None:
            return False

        try:
            card = parse_card(claim)
        except ValueError:
            card = None

        if card not in action.counter_cards:
            allowed = ", ".join(sorted(c.value for c in action.counter_cards))
            self.penalties.punish(InvalidClaim(
                counterer,
                f"didn't give a valid counter action {claim!r} for {action.action_type} (allowed: {allowed})",
            ))
            return True

        logger.debug(f"{actor} was counter actioned by {counterer} with {card}")
        self.state.log_event(HistoryType.COUNTER_ACTION, action=action.action_type, to=target,
                             counter=card, counterer=counterer, **{"from": actor})

        outcome = self.challenges.run(asserter=counterer, card=card, action=action.action_type,
                                      by_whom=actor, to_whom=target, counterer=counterer)
        return outcome is not ChallengeOutcome.CLAIM_FAILED
