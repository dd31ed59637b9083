"""Bot interface, callback boundary and bot registry."""

import importlib
import logging
from dataclasses import dataclass
from typing import (Any, Callable, Dict, Iterator, List, Mapping, Optional,
                    Protocol, Sequence, Tuple, Union, runtime_checkable)

from .errors import BotFault, MissingCallbackError, NotEnoughPlayersError
from .types import ActionType, Card

logger = logging.getLogger(__name__)

CALLBACKS = (
    "on_turn",
    "on_challenge_action_round",
    "on_counter_action",
    "on_counter_action_round",
    "on_swapping_cards",
    "on_card_loss",
)


@dataclass(frozen=True)
class OtherPlayer:
    """Public view of a living opponent."""
    name: str
    coins: int
    card_count: int


@dataclass(frozen=True)
class BotContext:
    """Everything a bot may see when one of its callbacks runs.

    The round-specific fields are only filled in for the callbacks that use
    them: ``action``/``by_whom``/``to_whom`` for challenge and counter
    rounds, ``counterer``/``card`` for counter challenges and
    ``new_cards`` for the ambassador exchange.
    """
    name: str
    history: Tuple[Mapping[str, Any], ...]
    my_cards: Tuple[Card, ...]
    my_coins: int
    other_players: Tuple[OtherPlayer, ...]
    discarded_cards: Tuple[Card, ...]
    action: Optional[ActionType] = None
    by_whom: Optional[str] = None
    to_whom: Optional[str] = None
    counterer: Optional[str] = None
    card: Optional[Card] = None
    new_cards: Tuple[Card, ...] = ()


@dataclass(frozen=True)
class Move:
    """A turn decision: the action and, for targeted actions, the target."""
    action: Union[ActionType, str]
    against: Optional[str] = None


@runtime_checkable
class BotContract(Protocol):
    """Callbacks every bot must implement."""

    def on_turn(self, context: BotContext) -> Any:
        ...

    def on_challenge_action_round(self, context: BotContext) -> bool:
        ...

    def on_counter_action(self, context: BotContext) -> Union[Card, str, bool, None]:
        ...

    def on_counter_action_round(self, context: BotContext) -> bool:
        ...

    def on_swapping_cards(self, context: BotContext) -> Sequence[Union[Card, str]]:
        ...

    def on_card_loss(self, context: BotContext) -> Union[Card, str]:
        ...


class BaseBot:
    """Passive defaults for every callback; subclass and override."""

    def on_turn(self, context: BotContext) -> Move:
        return Move(ActionType.INCOME)

    def on_challenge_action_round(self, context: BotContext) -> bool:
        return False

    def on_counter_action(self, context: BotContext) -> Union[Card, bool]:
        return False

    def on_counter_action_round(self, context: BotContext) -> bool:
        return False

    def on_swapping_cards(self, context: BotContext) -> List[Card]:
        return list(context.my_cards)

    def on_card_loss(self, context: BotContext) -> Card:
        return context.my_cards[0]


@dataclass(frozen=True)
class BotResponse:
    """Outcome of one bot callback: a value or a fault, never both."""
    value: Any = None
    fault: Optional[BotFault] = None

    @property
    def ok(self) -> bool:
        return self.fault is None


def invoke(name: str, bot: Any, callback: str, context: BotContext) -> BotResponse:
    """Call a bot callback, turning any exception into a BotFault result."""
    try:
        method: Callable[[BotContext], Any] = getattr(bot, callback)
        return BotResponse(value=method(context))
    except Exception as error:
        logger.warning(f"Bot {name} crashed in {callback}: {error!r}")
        logger.debug(f"Traceback for {name}.{callback}", exc_info=True)
        return BotResponse(fault=BotFault(name, callback, repr(error), error))


def load_bot(path: str) -> Any:
    """Instantiate a bot from a ``module:Class`` path."""
    module_name, _, attr = path.partition(":")
    if not module_name or not attr:
        raise ValueError(f"Bot path must look like 'package.module:Class', got {path!r}")
    module = importlib.import_module(module_name)
    return getattr(module, attr)()


class BotRegistry:
    """Explicit mapping from bot name to bot object."""

    def __init__(self) -> None:
        self._bots: Dict[str, Any] = {}

    def register(self, name: str, bot: Any) -> str:
        """Add a bot and return the unique name it was stored under."""
        missing = [callback for callback in CALLBACKS
                   if not callable(getattr(bot, callback, None))]
        if missing:
            raise MissingCallbackError(
                f"The bot {name} is missing {'methods' if len(missing) > 1 else 'a method'}: "
                f"{', '.join(missing)}"
            )

        unique_name = name
        suffix = 2
        while unique_name in self._bots:
            unique_name = f"{name} {suffix}"
            suffix += 1

        self._bots[unique_name] = bot
        logger.debug(f"Registered bot {unique_name} ({type(bot).__name__})")
        return unique_name

    def register_path(self, path: str, name: Optional[str] = None) -> str:
        """Load a bot from ``module:Class`` and register it."""
        bot = load_bot(path)
        return self.register(name or path.rpartition(":")[2], bot)

    def require_players(self, minimum: int = 2) -> None:
        if len(self._bots) < minimum:
            raise NotEnoughPlayersError(
                f"We need at least {minimum} players to play this game, got {len(self._bots)}"
            )

    def names(self) -> List[str]:
        return list(self._bots)

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._bots)

    def __getitem__(self, name: str) -> Any:
        return self._bots[name]

    def __contains__(self, name: object) -> bool:
        return name in self._bots

    def __iter__(self) -> Iterator[str]:
        return iter(self._bots)

    def __len__(self) -> int:
        return len(self._bots)
