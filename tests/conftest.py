from typing import List, Optional, Sequence

import pytest

from klondike.actions import DrawCount
from klondike.cards import Card, make_deck
from klondike.state import GameState


def _build_state(
    tableau: Optional[Sequence[List[Card]]] = None,
    foundations: Optional[Sequence[List[Card]]] = None,
    waste: Optional[List[Card]] = None,
    draw_count: DrawCount = DrawCount.THREE,
    fill_stock: bool = True,
) -> GameState:
    """Lay out a specific table. Unused cards go to the stock face-down."""
    state = GameState(draw_count=draw_count, start_time=0.0)
    for i, pile in enumerate(tableau or []):
        state.tableau[i] = list(pile)
    for i, pile in enumerate(foundations or []):
        state.foundations[i] = list(pile)
    state.waste = list(waste or [])
    if fill_stock:
        used = {c.card_id for c in state.all_cards()}
        state.stock = [c for c in make_deck(shuffle=False) if c.card_id not in used]
    return state


@pytest.fixture
def build_state():
    return _build_state
