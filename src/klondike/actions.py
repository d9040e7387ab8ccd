"""Player actions understood by the engine.

The front-end builds one of these per completed gesture and hands it to
``Game.dispatch``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from klondike.positions import Position


class DrawCount(Enum):
    """Cards dealt from stock to waste per deal."""

    ONE = 1  # easier
    THREE = 3  # harder

    def __str__(self):
        return self.name.title()

    @classmethod
    def parse(cls, value) -> "DrawCount":
        """Accept a DrawCount, 1/3, or their names ("one", "Three")."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                raise ValueError(f"Unknown draw count: {value!r}") from None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Unknown draw count: {value!r}")
        return cls(value)


@dataclass(frozen=True)
class MoveCard:
    """Move the liftable run at ``source`` onto the pile named by ``target``."""

    source: Position
    target: Position


@dataclass(frozen=True)
class FlipCard:
    """Turn a face-down top tableau card face-up."""

    position: Position


@dataclass(frozen=True)
class DealFromStock:
    pass


@dataclass(frozen=True)
class NewGame:
    pass


@dataclass(frozen=True)
class Undo:
    pass


Action = Union[MoveCard, FlipCard, DealFromStock, NewGame, Undo]


__all__ = [
    "DrawCount",
    "MoveCard",
    "FlipCard",
    "DealFromStock",
    "NewGame",
    "Undo",
    "Action",
]
