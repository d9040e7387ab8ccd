"""Klondike solitaire rules engine.

The engine owns the game state and validates every action; front-ends build
``Action`` values and call ``Game.dispatch``.
"""

from klondike.actions import Action, DealFromStock, DrawCount, FlipCard, MoveCard, NewGame, Undo
from klondike.cards import Card, Rank, Suit, can_place_on_foundation, can_place_on_tableau, make_deck
from klondike.config import GameConfig, load_config
from klondike.errors import ErrorKind, RulesError
from klondike.game import Game, dispatch
from klondike.positions import STOCK, Foundation, Position, Stock, Tableau, Waste
from klondike.state import GameState

__all__ = [
    "Action",
    "DealFromStock",
    "DrawCount",
    "FlipCard",
    "MoveCard",
    "NewGame",
    "Undo",
    "Card",
    "Rank",
    "Suit",
    "can_place_on_foundation",
    "can_place_on_tableau",
    "make_deck",
    "GameConfig",
    "load_config",
    "ErrorKind",
    "RulesError",
    "Game",
    "dispatch",
    "STOCK",
    "Foundation",
    "Position",
    "Stock",
    "Tableau",
    "Waste",
    "GameState",
]
