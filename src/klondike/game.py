"""The game session: applies actions to a GameState and keeps undo history.

``Game.dispatch`` is the only way to change a game. Each handler validates
the whole action before touching any pile, so a rejected action (signalled
by ``RulesError``) leaves the state exactly as it was.
"""

from __future__ import annotations

import logging
import random
from collections import deque
from typing import Callable, Deque, Dict, Optional, Tuple

from klondike import rules
from klondike.actions import Action, DealFromStock, DrawCount, FlipCard, MoveCard, NewGame, Undo
from klondike.cards import Card, flip
from klondike.config import GameConfig
from klondike.errors import ErrorKind, RulesError
from klondike.positions import FOUNDATION_PILES, TABLEAU_COLUMNS, Foundation, Position, Tableau, same_pile
from klondike.state import GameState

logger = logging.getLogger(__name__)


class Game:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        state: Optional[GameState] = None,
    ):
        self.config = config or GameConfig()
        if rng is None:
            rng = random.Random(self.config.seed)
        self.rng = rng
        self.history: Deque[GameState] = deque(maxlen=self.config.undo_limit)
        if state is None:
            state = GameState.deal(self.config.draw_count, self.rng)
        self.state = state
        self._handlers: Dict[type, Callable] = {
            MoveCard: self._move_card,
            FlipCard: self._flip_card,
            DealFromStock: self._deal_from_stock,
            NewGame: self._new_game,
            Undo: self._undo,
        }

    # ---------- Dispatch ----------
    def dispatch(self, action: Action) -> None:
        """Apply ``action`` or raise ``RulesError`` without changing anything."""
        handler = self._handlers.get(type(action))
        if handler is None:
            raise TypeError(f"Not a game action: {action!r}")
        try:
            handler(action)
        except RulesError as exc:
            logger.debug("Rejected %s: %s", action, exc)
            raise
        logger.debug("Applied %s -> %s", action, self.state.summary())

    def _commit(self, next_state: GameState) -> None:
        self.history.append(self.state)
        next_state.move_count = self.state.move_count + 1
        self.state = next_state

    def _deal_from_stock(self, action: DealFromStock) -> None:
        state = self.state
        if state.stock:
            nxt = state.snapshot()
            n = min(state.draw_count.value, len(nxt.stock))
            for _ in range(n):
                nxt.waste.append(nxt.stock.pop().turned(True))
            self._commit(nxt)
            return

        if not state.waste:
            raise RulesError(ErrorKind.EMPTY_PILES)
        limit = self.config.stock_cycles
        if limit is not None and state.stock_cycles_used >= limit:
            raise RulesError(ErrorKind.NO_STOCK_CYCLES, f"limit is {limit}")

        nxt = state.snapshot()
        while nxt.waste:
            nxt.stock.append(nxt.waste.pop().turned(False))
        nxt.stock_cycles_used += 1
        self._commit(nxt)

    def _flip_card(self, action: FlipCard) -> None:
        pos = action.position
        if not isinstance(pos, Tableau):
            raise RulesError(ErrorKind.WRONG_PILE_KIND, str(pos))
        if not 0 <= pos.column < TABLEAU_COLUMNS:
            raise RulesError(ErrorKind.INVALID_COLUMN, str(pos))
        pile = self.state.tableau[pos.column]
        if not 0 <= pos.index < len(pile):
            raise RulesError(ErrorKind.INVALID_INDEX, str(pos))
        if pos.index != len(pile) - 1:
            raise RulesError(ErrorKind.NOT_TOP_CARD, str(pos))
        if pile[pos.index].face_up:
            raise RulesError(ErrorKind.ALREADY_FACE_UP, str(pos))

        nxt = self.state.snapshot()
        flip(nxt.tableau[pos.column], pos.index)
        self._commit(nxt)

    def _move_card(self, action: MoveCard) -> None:
        source, target = action.source, action.target
        run = rules.cards_at_position(self.state, source)
        if not run:
            raise RulesError(ErrorKind.NO_MOVABLE_CARDS, str(source))
        if len(run) > 1 and not isinstance(target, Tableau):
            raise RulesError(ErrorKind.INVALID_SEQUENCE_TARGET, str(target))
        if same_pile(source, target):
            raise RulesError(ErrorKind.NO_OP_MOVE, str(target))

        lead = run[0]
        if isinstance(target, Tableau):
            if not 0 <= target.column < TABLEAU_COLUMNS:
                raise RulesError(ErrorKind.INVALID_COLUMN, str(target))
            if not rules.accepts(self.state, lead, target):
                raise RulesError(ErrorKind.ILLEGAL_TABLEAU_PLACEMENT, f"{lead} onto {target}")
        elif isinstance(target, Foundation):
            if not 0 <= target.pile < FOUNDATION_PILES:
                raise RulesError(ErrorKind.INVALID_INDEX, str(target))
            if not rules.accepts(self.state, lead, target):
                raise RulesError(ErrorKind.ILLEGAL_FOUNDATION_PLACEMENT, f"{lead} onto {target}")
        else:
            raise RulesError(ErrorKind.WRONG_PILE_KIND, str(target))

        nxt = self.state.snapshot()
        src = rules.source_pile(nxt, source)
        dst = rules.source_pile(nxt, target)
        del src[len(src) - len(run):]
        dst.extend(run)
        nxt.game_won = rules.is_won(nxt)
        self._commit(nxt)
        if nxt.game_won:
            logger.info("Game won in %d moves", nxt.move_count)

    def _new_game(self, action: NewGame) -> None:
        fresh = GameState.deal(self.state.draw_count, self.rng)
        self.history.append(self.state)
        self.state = fresh
        logger.info("New game dealt (draw %s)", fresh.draw_count)

    def _undo(self, action: Undo) -> None:
        if not self.history:
            raise RulesError(ErrorKind.NOTHING_TO_UNDO)
        self.state = self.history.pop()

    # ---------- Queries ----------
    @property
    def tableau(self) -> Tuple[Tuple[Card, ...], ...]:
        return tuple(tuple(p) for p in self.state.tableau)

    @property
    def foundations(self) -> Tuple[Tuple[Card, ...], ...]:
        return tuple(tuple(f) for f in self.state.foundations)

    @property
    def stock(self) -> Tuple[Card, ...]:
        return tuple(self.state.stock)

    @property
    def waste(self) -> Tuple[Card, ...]:
        return tuple(self.state.waste)

    @property
    def move_count(self) -> int:
        return self.state.move_count

    @property
    def draw_count(self) -> DrawCount:
        return self.state.draw_count

    @property
    def game_won(self) -> bool:
        return self.state.game_won

    def can_undo(self) -> bool:
        return len(self.history) > 0

    def cards_at(self, position: Position):
        return rules.cards_at_position(self.state, position)

    def legal_targets(self, source: Position):
        return rules.legal_targets(self.state, source)

    def elapsed_seconds(self) -> float:
        return self.state.elapsed_seconds()

    def summary(self) -> str:
        return self.state.summary()

    def debug_info(self) -> str:
        return self.state.debug_info()


def dispatch(game: Game, action: Action) -> None:
    game.dispatch(action)


__all__ = ["Game", "dispatch"]
