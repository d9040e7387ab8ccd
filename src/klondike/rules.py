"""Read-only rule queries over a GameState.

Which cards can be lifted from a position, where they may land, and whether
the game is won. Nothing here mutates state.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from klondike.cards import Card, Rank, can_place_on_foundation, can_place_on_tableau
from klondike.positions import (
    FOUNDATION_PILES,
    TABLEAU_COLUMNS,
    Foundation,
    Position,
    Stock,
    Tableau,
    Waste,
    same_pile,
)
from klondike.state import GameState


def is_valid_sequence(cards: Sequence[Card]) -> bool:
    """Face-up, descending by one, alternating color, bottom to top."""
    if not cards:
        return False
    base = cards[0]
    if not base.face_up:
        return False
    for upper in cards[1:]:
        if not upper.face_up or not can_place_on_tableau(upper, base):
            return False
        base = upper
    return True


def cards_at_position(state: GameState, position: Position) -> List[Card]:
    """The run of cards that would be lifted by picking up ``position``.

    Returns an empty list when nothing there can be moved, including for
    addresses that fall outside the table.
    """
    if isinstance(position, Stock):
        return []

    if isinstance(position, Waste):
        if state.waste and position.index == len(state.waste) - 1:
            return [state.waste[-1]]
        return []

    if isinstance(position, Foundation):
        if 0 <= position.pile < FOUNDATION_PILES and state.foundations[position.pile]:
            return [state.foundations[position.pile][-1]]
        return []

    if isinstance(position, Tableau):
        if not 0 <= position.column < TABLEAU_COLUMNS:
            return []
        pile = state.tableau[position.column]
        if not 0 <= position.index < len(pile):
            return []
        run = pile[position.index:]
        return list(run) if is_valid_sequence(run) else []

    return []


def accepts(state: GameState, lead: Card, target: Position) -> bool:
    """Whether ``lead`` (the bottom card of a run) may be dropped on ``target``."""
    if isinstance(target, Tableau):
        if not 0 <= target.column < TABLEAU_COLUMNS:
            return False
        pile = state.tableau[target.column]
        if not pile:
            return lead.rank == Rank.KING
        return can_place_on_tableau(lead, pile[-1])
    if isinstance(target, Foundation):
        if not 0 <= target.pile < FOUNDATION_PILES:
            return False
        return can_place_on_foundation(lead, state.foundation_top(target.pile))
    return False


def legal_targets(state: GameState, source: Position) -> List[Position]:
    """Every pile the run at ``source`` could legally be moved to.

    Tableau targets are addressed at the slot the run would occupy, i.e. the
    current length of the column.
    """
    run = cards_at_position(state, source)
    if not run:
        return []
    lead = run[0]
    targets: List[Position] = []
    for col in range(TABLEAU_COLUMNS):
        pos = Tableau(col, len(state.tableau[col]))
        if not same_pile(source, pos) and accepts(state, lead, pos):
            targets.append(pos)
    if len(run) == 1:
        for fi in range(FOUNDATION_PILES):
            pos = Foundation(fi)
            if not same_pile(source, pos) and accepts(state, lead, pos):
                targets.append(pos)
    return targets


def is_won(state: GameState) -> bool:
    return all(len(f) == int(Rank.KING) for f in state.foundations)


def source_pile(state: GameState, position: Position) -> Optional[List[Card]]:
    """The live list a position points into, or None when it is off the table."""
    if isinstance(position, Tableau):
        if 0 <= position.column < TABLEAU_COLUMNS:
            return state.tableau[position.column]
        return None
    if isinstance(position, Foundation):
        if 0 <= position.pile < FOUNDATION_PILES:
            return state.foundations[position.pile]
        return None
    if isinstance(position, Waste):
        return state.waste
    if isinstance(position, Stock):
        return state.stock
    return None
