# cards.py - card values, placement predicates and the deck factory
from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import List, MutableSequence, Optional


class Suit(IntEnum):
    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3

    @property
    def symbol(self) -> str:
        return SUIT_SYMBOLS[self]

    @property
    def is_red(self) -> bool:
        return self in (Suit.HEARTS, Suit.DIAMONDS)

    def __str__(self):
        return self.name.title()


SUIT_SYMBOLS = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}


class Rank(IntEnum):
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    @property
    def text(self) -> str:
        return RANK_TO_TEXT[int(self)]


RANK_TO_TEXT = {1: "A", 11: "J", 12: "Q", 13: "K"}
for _r in range(2, 11):
    RANK_TO_TEXT[_r] = str(_r)

CARD_BACK = "🂠"
CARDS_PER_SUIT = 13
DECK_SIZE = 52


@dataclass(frozen=True)
class Card:
    """A single playing card.

    Cards are values: moving a card between piles copies it, and turning it
    over produces a new card (see ``flipped``).
    """

    suit: Suit
    rank: Rank
    face_up: bool = False

    def __post_init__(self):
        # accept plain ints (0..3 / 1..13) from callers
        object.__setattr__(self, "suit", Suit(self.suit))
        object.__setattr__(self, "rank", Rank(self.rank))

    @property
    def card_id(self) -> int:
        """Stable identity in 0..51, independent of orientation."""
        return int(self.suit) * CARDS_PER_SUIT + int(self.rank) - 1

    def is_red(self) -> bool:
        return self.suit.is_red

    def is_black(self) -> bool:
        return not self.suit.is_red

    def color(self) -> str:
        return "red" if self.is_red() else "black"

    def flipped(self) -> "Card":
        return replace(self, face_up=not self.face_up)

    def turned(self, face_up: bool) -> "Card":
        if self.face_up == face_up:
            return self
        return replace(self, face_up=face_up)

    def __str__(self):
        if not self.face_up:
            return CARD_BACK
        return f"{self.rank.text}{self.suit.symbol}"


def can_place_on_tableau(candidate: Card, target_top: Card) -> bool:
    """True when ``candidate`` may be packed on the exposed ``target_top``.

    Tableau building is descending and alternating in color. Empty columns
    are not handled here; only a King may start one.
    """
    if not target_top.face_up:
        return False
    if candidate.is_red() == target_top.is_red():
        return False
    return candidate.rank == target_top.rank - 1


def can_place_on_foundation(candidate: Card, foundation_top: Optional[Card]) -> bool:
    if foundation_top is None:
        return candidate.rank == Rank.ACE
    return candidate.suit == foundation_top.suit and candidate.rank == foundation_top.rank + 1


def flip(pile: MutableSequence[Card], index: int = -1) -> Card:
    """Turn over the card at ``pile[index]`` in place and return the new value."""
    card = pile[index].flipped()
    pile[index] = card
    return card


def make_deck(rng: Optional[random.Random] = None, shuffle: bool = True) -> List[Card]:
    """Build the 52 cards face-down in suit-major order, then shuffle.

    ``rng`` is the randomness source; pass a seeded ``random.Random`` for a
    reproducible deal. Without one a fresh, entropy-seeded generator is used.
    """
    deck = [Card(suit, rank, False) for suit in Suit for rank in Rank]
    if shuffle:
        if rng is None:
            rng = random.Random()
        rng.shuffle(deck)
    return deck
