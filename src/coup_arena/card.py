"""Deck implementation for the Coup engine."""

from typing import Iterable, List, Optional

import numpy as np

from .types import Card

COPIES_PER_CARD = 3
DECK_SIZE = COPIES_PER_CARD * len(Card)


def new_deck() -> List[Card]:
    """Return the 15 cards of a standard deck, unshuffled."""
    return [card for card in Card for _ in range(COPIES_PER_CARD)]


class Deck:
    """Manages the court deck.

    The deck is a stack: cards are drawn from the end of the list and every
    card put back triggers a reshuffle. Randomness comes from the injected
    numpy generator so games can be replayed from a seed.
    """

    def __init__(self, rng: np.random.Generator,
                 cards: Optional[Iterable[Card]] = None) -> None:
        self._rng = rng
        self._cards: List[Card] = list(new_deck() if cards is None else cards)

    def shuffle(self) -> None:
        """Shuffle the deck in place (Fisher-Yates via numpy)."""
        self._rng.shuffle(self._cards)

    def draw(self) -> Card:
        """Draw a card from the top of the deck."""
        if not self._cards:
            raise ValueError("Cannot draw from empty deck")
        return self._cards.pop()

    def take(self, card: Card) -> Card:
        """Remove a specific card from the deck."""
        try:
            self._cards.remove(card)
        except ValueError:
            raise ValueError(f"No {card} left in the deck") from None
        return card

    def put_back(self, cards: Iterable[Card]) -> None:
        """Return cards to the deck and reshuffle."""
        self._cards.extend(cards)
        self.shuffle()

    def exchange(self, card: Card) -> Card:
        """Push a card back, reshuffle and draw a replacement.

        The replacement may be the very card that was pushed back.
        """
        self.put_back([card])
        return self.draw()

    def is_empty(self) -> bool:
        """Check if deck is empty."""
        return len(self._cards) == 0

    def size(self) -> int:
        """Get number of cards in deck."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)
