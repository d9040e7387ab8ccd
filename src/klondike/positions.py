"""Addresses for every card slot on the table.

A position carries no card data. Whether it points at a real card is decided
against the current ``GameState``, never here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

TABLEAU_COLUMNS = 7
FOUNDATION_PILES = 4


@dataclass(frozen=True)
class Tableau:
    column: int
    index: int = 0

    def __str__(self):
        return f"Tableau({self.column}, {self.index})"


@dataclass(frozen=True)
class Foundation:
    pile: int

    def __str__(self):
        return f"Foundation({self.pile})"


@dataclass(frozen=True)
class Stock:
    def __str__(self):
        return "Stock"


@dataclass(frozen=True)
class Waste:
    index: int = 0

    def __str__(self):
        return f"Waste({self.index})"


Position = Union[Tableau, Foundation, Stock, Waste]

STOCK = Stock()


def same_pile(a: Position, b: Position) -> bool:
    """True when both addresses name the same pile, ignoring card index."""
    if isinstance(a, Tableau) and isinstance(b, Tableau):
        return a.column == b.column
    if isinstance(a, Foundation) and isinstance(b, Foundation):
        return a.pile == b.pile
    if isinstance(a, Waste) and isinstance(b, Waste):
        return True
    return isinstance(a, Stock) and isinstance(b, Stock)


__all__ = [
    "TABLEAU_COLUMNS",
    "FOUNDATION_PILES",
    "Tableau",
    "Foundation",
    "Stock",
    "Waste",
    "Position",
    "STOCK",
    "same_pile",
]
