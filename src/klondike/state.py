# state.py - the Klondike table: piles, counters and the opening deal
from __future__ import annotations

import random
import time
from collections import Counter
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional

from klondike.actions import DrawCount
from klondike.cards import DECK_SIZE, Card, make_deck
from klondike.positions import FOUNDATION_PILES, TABLEAU_COLUMNS


@dataclass
class GameState:
    """Everything that describes one game in progress.

    Piles are plain lists ordered bottom to top, so ``pile[-1]`` is always the
    exposed card. Cards are immutable values and never shared between piles.
    """

    tableau: List[List[Card]] = field(default_factory=lambda: [[] for _ in range(TABLEAU_COLUMNS)])
    foundations: List[List[Card]] = field(default_factory=lambda: [[] for _ in range(FOUNDATION_PILES)])
    stock: List[Card] = field(default_factory=list)
    waste: List[Card] = field(default_factory=list)
    move_count: int = 0
    start_time: float = field(default_factory=time.time)
    game_won: bool = False
    draw_count: DrawCount = DrawCount.THREE
    stock_cycles_used: int = 0

    @classmethod
    def deal(
        cls,
        draw_count: DrawCount = DrawCount.THREE,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
    ) -> "GameState":
        """Shuffle a fresh deck and lay out a new game.

        Column ``i`` receives ``i + 1`` cards with only the last one face-up;
        the remaining 24 cards form the stock, face-down.
        """
        deck = make_deck(rng)
        state = cls(draw_count=draw_count, start_time=clock())

        for col in range(TABLEAU_COLUMNS):
            for r in range(col + 1):
                card = deck.pop()
                state.tableau[col].append(card.turned(r == col))

        # deck is already face-down; stock deals from its end
        state.stock = deck
        return state

    # ---------- Queries ----------
    def foundation_top(self, pile: int) -> Optional[Card]:
        cards = self.foundations[pile]
        return cards[-1] if cards else None

    def all_cards(self) -> List[Card]:
        cards: List[Card] = []
        for p in self.tableau:
            cards.extend(p)
        for f in self.foundations:
            cards.extend(f)
        cards.extend(self.stock)
        cards.extend(self.waste)
        return cards

    def elapsed_seconds(self, now: Optional[float] = None) -> float:
        if now is None:
            now = time.time()
        return max(0.0, now - self.start_time)

    def snapshot(self) -> "GameState":
        """Independent copy of this state; later moves never touch it."""
        return replace(
            self,
            tableau=[list(p) for p in self.tableau],
            foundations=[list(f) for f in self.foundations],
            stock=list(self.stock),
            waste=list(self.waste),
        )

    def invariant_violations(self) -> List[str]:
        problems = []

        if len(self.tableau) != TABLEAU_COLUMNS:
            problems.append(f"expected {TABLEAU_COLUMNS} tableau columns, found {len(self.tableau)}")
        if len(self.foundations) != FOUNDATION_PILES:
            problems.append(f"expected {FOUNDATION_PILES} foundations, found {len(self.foundations)}")

        ids = Counter(c.card_id for c in self.all_cards())
        if len(ids) != DECK_SIZE or any(n != 1 for n in ids.values()):
            dupes = sorted(i for i, n in ids.items() if n > 1)
            problems.append(
                f"cards not conserved: {sum(ids.values())} cards, {len(ids)} distinct, duplicates {dupes}"
            )

        for col, pile in enumerate(self.tableau):
            seen_face_up = False
            for i, c in enumerate(pile):
                if c.face_up:
                    seen_face_up = True
                elif seen_face_up:
                    problems.append(f"tableau column {col}: face-down card at {i} above a face-up card")
                    break

        for fi, pile in enumerate(self.foundations):
            for i, c in enumerate(pile):
                if c.rank != i + 1 or c.suit != pile[0].suit or not c.face_up:
                    problems.append(f"foundation {fi}: {c!r} out of order at {i}")
                    break

        if any(c.face_up for c in self.stock):
            problems.append("stock holds a face-up card")
        if any(not c.face_up for c in self.waste):
            problems.append("waste holds a face-down card")
        if self.move_count < 0:
            problems.append("negative move count")
        return problems

    # ---------- Display ----------
    def summary(self) -> str:
        return (
            f"Moves: {self.move_count} | Stock: {len(self.stock)} | "
            f"Waste: {len(self.waste)} | Draw: {self.draw_count}"
        )

    def debug_info(self) -> str:
        lines = [
            "=== SOLITAIRE GAME STATE DEBUG ===",
            f"Move Count: {self.move_count}",
            f"Draw Count: {self.draw_count}",
            f"Game Won: {self.game_won}",
            f"Stock Cards: {len(self.stock)}",
            f"Waste Cards: {len(self.waste)}",
            f"Stock Cycles Used: {self.stock_cycles_used}",
            "",
            "--- TABLEAU ---",
        ]
        for col, pile in enumerate(self.tableau):
            cards = ", ".join(str(c) for c in pile) if pile else "(empty)"
            lines.append(f"Column {col}: {len(pile)} cards - {cards}")

        lines += ["", "--- FOUNDATIONS ---"]
        for i, pile in enumerate(self.foundations):
            if not pile:
                lines.append(f"Foundation {i}: (empty)")
            else:
                lines.append(f"Foundation {i} ({pile[0].suit}): {len(pile)} cards, top: {pile[-1]}")

        lines += ["", "--- STOCK & WASTE ---", f"Stock: {len(self.stock)} cards (all face-down)"]
        lines.append("Waste: " + (", ".join(str(c) for c in self.waste) if self.waste else "(empty)"))
        return "\n".join(lines) + "\n"
