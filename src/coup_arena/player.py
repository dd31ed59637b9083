"""Player implementation for the Coup engine."""

from typing import List, Optional

from .types import Card

HAND_SLOTS = 2


class CoupPlayer:
    """A seat at the table: two card slots and a coin purse.

    An empty slot is a lost influence. Slots are never refilled once
    emptied, so the held-card count only goes down.
    """

    def __init__(self, name: str, coins: int = 0) -> None:
        self.name = name
        self.coins = coins
        self.slots: List[Optional[Card]] = [None] * HAND_SLOTS

    @property
    def cards(self) -> List[Card]:
        """Cards still held, slot one first."""
        return [card for card in self.slots if card is not None]

    @property
    def is_alive(self) -> bool:
        return any(card is not None for card in self.slots)

    @property
    def is_eliminated(self) -> bool:
        return not self.is_alive

    def get_card_count(self) -> int:
        """Get number of cards player has."""
        return len(self.cards)

    def has_card(self, card: Card) -> bool:
        """Check if player holds a specific card."""
        return card in self.slots

    def slot_of(self, card: Card) -> Optional[int]:
        """Index of the first slot holding ``card``."""
        for index, held in enumerate(self.slots):
            if held is not None and held == card:
                return index
        return None

    def first_occupied_slot(self) -> Optional[int]:
        for index, held in enumerate(self.slots):
            if held is not None:
                return index
        return None

    def occupied_slots(self) -> List[int]:
        return [index for index, held in enumerate(self.slots) if held is not None]

    def give_card(self, card: Card) -> None:
        """Place a dealt card in the first free slot."""
        for index, held in enumerate(self.slots):
            if held is None:
                self.slots[index] = card
                return
        raise ValueError(f"Player cannot have more than {HAND_SLOTS} cards")

    def remove_slot(self, index: int) -> Card:
        """Empty a slot and return the card it held."""
        card = self.slots[index]
        if card is None:
            raise ValueError(f"Slot {index} of {self.name} is already empty")
        self.slots[index] = None
        return card

    def replace_slot(self, index: int, card: Card) -> Card:
        """Swap the card in an occupied slot, returning the old one."""
        old = self.slots[index]
        if old is None:
            raise ValueError(f"Slot {index} of {self.name} is empty")
        self.slots[index] = card
        return old

    def add_coins(self, amount: int) -> None:
        """Add coins to player's total."""
        self.coins += amount

    def spend_coins(self, amount: int) -> bool:
        """Spend coins. Returns True if player had enough coins."""
        if self.coins >= amount:
            self.coins -= amount
            return True
        return False

    def __str__(self) -> str:
        return f"{self.name} ({self.coins} coins, {self.get_card_count()} cards)"

    def __repr__(self) -> str:
        return f"CoupPlayer(name='{self.name}', coins={self.coins}, cards={self.get_card_count()})"
