"""Action system for the Coup engine."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, FrozenSet, List, Optional, Type

from .errors import InsufficientResources, InvalidAction, InvalidTarget
from .player import CoupPlayer
from .types import ActionType, Card, CounterScope

if TYPE_CHECKING:
    from .game import TurnEngine

COUP_COST = 7
ASSASSINATION_COST = 3
FORCED_COUP_THRESHOLD = 10
STEAL_AMOUNT = 2
EXCHANGE_DRAW = 2


@dataclass
class ActionResult:
    """Result of applying an action's effect."""
    success: bool
    message: str
    coins_gained: int = 0
    coins_lost: int = 0
    cards_lost: List[Card] = field(default_factory=list)


def parse_action(value: Any) -> ActionType:
    """Turn a bot's answer into an ActionType.

    Names are case-insensitive, like card names. Raises ValueError for
    anything that is not a known action.
    """
    if isinstance(value, ActionType):
        return value
    if isinstance(value, str):
        return ActionType(value.lower())
    raise ValueError(f"Unknown action: {value!r}")


def parse_card(value: Any) -> Card:
    """Turn a bot's answer into a Card, ignoring case. Raises ValueError otherwise."""
    if isinstance(value, Card):
        return value
    if isinstance(value, str):
        return Card(value.lower())
    raise ValueError(f"Unknown card: {value!r}")


class Action(ABC):
    """Base class for all game actions.

    Subclasses describe one row of the action table: what it costs, which
    card it claims, who may counter it and with what, plus the effect.
    """

    action_type: ActionType
    cost: int = 0
    claimed_card: Optional[Card] = None
    counter_cards: FrozenSet[Card] = frozenset()
    counter_scope: CounterScope = CounterScope.NONE
    requires_target: bool = False

    def can_be_challenged(self) -> bool:
        return self.claimed_card is not None

    def can_be_countered(self) -> bool:
        return self.counter_scope is not CounterScope.NONE

    def validate_declaration(self, player: CoupPlayer) -> None:
        """Check the forced coup and coin cost before anything is paid or claimed."""
        self._check_forced_coup(player)
        if player.coins < self.cost:
            raise InsufficientResources(
                player.name,
                f"didn't have enough coins for {self.action_type} "
                f"({player.coins} < {self.cost})",
            )

    def pay(self, player: CoupPlayer) -> None:
        """Deduct the cost at declaration time, if this action pays up front."""

    def validate_execution(self, player: CoupPlayer, target: Optional[CoupPlayer]) -> None:
        """Re-check preconditions right before the effect applies."""
        if self.requires_target and target is None:
            raise InvalidTarget(player.name, f"didn't give a valid player for {self.action_type}")
        self._check_forced_coup(player)

    def _check_forced_coup(self, player: CoupPlayer) -> None:
        if player.coins > FORCED_COUP_THRESHOLD and self.action_type is not ActionType.COUP:
            raise InvalidAction(
                player.name,
                f"had too many coins ({player.coins}) and needed to coup",
            )

    @abstractmethod
    def execute(self, engine: "TurnEngine", player: CoupPlayer,
                target: Optional[CoupPlayer] = None) -> ActionResult:
        """Apply the effect."""


class IncomeAction(Action):
    """Income - gain 1 coin."""

    action_type = ActionType.INCOME

    def execute(self, engine: "TurnEngine", player: CoupPlayer,
                target: Optional[CoupPlayer] = None) -> ActionResult:
        player.add_coins(1)
        return ActionResult(True, f"{player.name} gained 1 coin from income", coins_gained=1)


class ForeignAidAction(Action):
    """Foreign aid - gain 2 coins; any Duke may block."""

    action_type = ActionType.FOREIGN_AID
    counter_cards = frozenset({Card.DUKE})
    counter_scope = CounterScope.ANYONE

    def execute(self, engine: "TurnEngine", player: CoupPlayer,
                target: Optional[CoupPlayer] = None) -> ActionResult:
        player.add_coins(2)
        return ActionResult(True, f"{player.name} gained 2 coins from foreign aid", coins_gained=2)


class CoupAction(Action):
    """Coup - pay 7 coins, the target loses a card."""

    action_type = ActionType.COUP
    cost = COUP_COST
    requires_target = True

    def validate_execution(self, player: CoupPlayer, target: Optional[CoupPlayer]) -> None:
        super().validate_execution(player, target)
        self.validate_declaration(player)

    def execute(self, engine: "TurnEngine", player: CoupPlayer,
                target: Optional[CoupPlayer] = None) -> ActionResult:
        player.spend_coins(self.cost)
        lost = engine.penalties.penalize(target.name, f"was couped by {player.name}")
        return ActionResult(True, f"{player.name} couped {target.name}",
                            coins_lost=self.cost, cards_lost=[lost] if lost else [])


class TaxAction(Action):
    """Tax - gain 3 coins, claims the Duke."""

    action_type = ActionType.TAX
    claimed_card = Card.DUKE

    def execute(self, engine: "TurnEngine", player: CoupPlayer,
                target: Optional[CoupPlayer] = None) -> ActionResult:
        player.add_coins(3)
        return ActionResult(True, f"{player.name} gained 3 coins from tax", coins_gained=3)


class AssassinateAction(Action):
    """Assassinate - pay 3 coins up front, the target loses a card."""

    action_type = ActionType.ASSASSINATE
    cost = ASSASSINATION_COST
    claimed_card = Card.ASSASSIN
    counter_cards = frozenset({Card.CONTESSA})
    counter_scope = CounterScope.TARGET
    requires_target = True

    def pay(self, player: CoupPlayer) -> None:
        player.spend_coins(self.cost)

    def execute(self, engine: "TurnEngine", player: CoupPlayer,
                target: Optional[CoupPlayer] = None) -> ActionResult:
        lost = engine.penalties.penalize(target.name, f"was assassinated by {player.name}")
        return ActionResult(True, f"{player.name} assassinated {target.name}",
                            coins_lost=self.cost, cards_lost=[lost] if lost else [])


class StealAction(Action):
    """Steal - take up to 2 coins from the target, claims the Captain."""

    action_type = ActionType.STEAL
    claimed_card = Card.CAPTAIN
    counter_cards = frozenset({Card.CAPTAIN, Card.AMBASSADOR})
    counter_scope = CounterScope.TARGET
    requires_target = True

    def execute(self, engine: "TurnEngine", player: CoupPlayer,
                target: Optional[CoupPlayer] = None) -> ActionResult:
        amount = min(STEAL_AMOUNT, target.coins)
        target.spend_coins(amount)
        player.add_coins(amount)
        return ActionResult(True, f"{player.name} stole {amount} coins from {target.name}",
                            coins_gained=amount)


class ExchangeAction(Action):
    """Exchange - draw two cards and keep the best, claims the Ambassador."""

    action_type = ActionType.EXCHANGE
    claimed_card = Card.AMBASSADOR

    def execute(self, engine: "TurnEngine", player: CoupPlayer,
                target: Optional[CoupPlayer] = None) -> ActionResult:
        engine.swap_cards(player)
        return ActionResult(True, f"{player.name} exchanged cards with the deck")


class ActionFactory:
    """Factory for creating action instances."""

    _ACTION_CLASSES: Dict[ActionType, Type[Action]] = {
        ActionType.INCOME: IncomeAction,
        ActionType.FOREIGN_AID: ForeignAidAction,
        ActionType.COUP: CoupAction,
        ActionType.TAX: TaxAction,
        ActionType.ASSASSINATE: AssassinateAction,
        ActionType.STEAL: StealAction,
        ActionType.EXCHANGE: ExchangeAction,
    }

    @classmethod
    def create_action(cls, action_type: ActionType) -> Action:
        """Create an action instance of the specified type."""
        if action_type not in cls._ACTION_CLASSES:
            raise ValueError(f"Unknown action type: {action_type}")
        return cls._ACTION_CLASSES[action_type]()

    @classmethod
    def requires_target(cls, action_type: ActionType) -> bool:
        return cls._ACTION_CLASSES[action_type].requires_target
