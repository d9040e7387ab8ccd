# scene.py - Klondike table scene: turns mouse/keyboard gestures into actions
import logging
from typing import List, Optional, Tuple

import pygame

from klondike import render as R
from klondike.actions import Action, DealFromStock, FlipCard, MoveCard, NewGame, Undo
from klondike.cards import Card
from klondike.errors import RulesError
from klondike.game import Game
from klondike.positions import (
    FOUNDATION_PILES,
    STOCK,
    TABLEAU_COLUMNS,
    Foundation,
    Position,
    Tableau,
    Waste,
    same_pile,
)

logger = logging.getLogger(__name__)

WIN_MESSAGE = "Congratulations! You won! Press N for a new game."


class DragInfo:
    """A run of cards picked up from ``source`` and following the mouse."""

    def __init__(self, source: Position, cards: List[Card], targets: List[Position], grab_offset: Tuple[int, int]):
        self.source = source
        self.cards = cards
        self.targets = targets
        self.grab_offset = grab_offset


class KlondikeScene:
    """Draws a Game and feeds it actions.

    The scene never changes piles itself; every change goes through
    ``Game.dispatch`` and the table is redrawn from the game's accessors.
    """

    def __init__(self, game: Game):
        self.game = game
        self.quit_requested = False
        self.message = ""
        self.drag: Optional[DragInfo] = None
        self.mouse_pos = (0, 0)

        self.stock_view = R.PileView(0, 0)
        self.waste_view = R.PileView(0, 0)
        self.foundation_views = [R.PileView(0, 0) for _ in range(FOUNDATION_PILES)]
        self.tableau_views = [R.PileView(0, 0, fan_y=R.FAN_Y) for _ in range(TABLEAU_COLUMNS)]
        self.b_new = R.Button("New Game", 0, 12)
        self.b_undo = R.Button("Undo", 0, 12)
        self.compute_layout()

    def compute_layout(self):
        """Place piles and buttons for the current window width.

        The top row shares the tableau's columns: stock over column 0, waste
        over column 1, foundations over columns 3-6. A narrow window closes
        the column gaps first, then the side margins.
        """
        spare = R.SCREEN_W - TABLEAU_COLUMNS * R.CARD_W
        gap = max(R.MIN_CARD_GAP_X, min(R.CARD_GAP_X, (spare - 2 * R.MARGIN_X) // (TABLEAU_COLUMNS - 1)))
        margin = max(R.MIN_MARGIN_X, min(R.MARGIN_X, (spare - (TABLEAU_COLUMNS - 1) * gap) // 2))
        xs = [margin + i * (R.CARD_W + gap) for i in range(TABLEAU_COLUMNS)]

        for x, view in zip(xs, self.tableau_views):
            view.x, view.y = x, 260
        self.stock_view.x, self.stock_view.y = xs[0], 90
        self.waste_view.x, self.waste_view.y = xs[1], 90
        for x, view in zip(xs[TABLEAU_COLUMNS - FOUNDATION_PILES:], self.foundation_views):
            view.x, view.y = x, 90
        self.b_new.rect.topleft = (margin, 12)
        self.b_undo.rect.topleft = (self.b_new.rect.right + 20, 12)

    # ---------- Actions ----------
    def perform(self, action: Action) -> bool:
        """Dispatch ``action``; a rejection becomes the status message.

        Anything but a ``MoveCard`` also drops a run held by the mouse.
        """
        if not isinstance(action, MoveCard):
            self.drag = None
        try:
            self.game.dispatch(action)
        except RulesError as exc:
            self.message = f"Can't do that: {exc}"
            return False
        self.message = WIN_MESSAGE if self.game.game_won else ""
        return True

    def position_at(self, pos) -> Optional[Position]:
        """The card slot under the mouse, addressed the way the engine expects."""
        if self.stock_view.top_rect(0).collidepoint(pos):
            return STOCK
        waste = self.game.waste
        if waste and self.waste_view.top_rect(0).collidepoint(pos):
            return Waste(len(waste) - 1)
        for fi, view in enumerate(self.foundation_views):
            if view.top_rect(0).collidepoint(pos):
                return Foundation(fi)
        for ti, view in enumerate(self.tableau_views):
            cards = self.game.tableau[ti]
            hi = view.hit(pos, len(cards))
            if hi is not None:
                return Tableau(ti, max(hi, 0))
        return None

    def drop_target_at(self, pos) -> Optional[Position]:
        for fi, view in enumerate(self.foundation_views):
            if view.drop_rect(0).collidepoint(pos):
                return Foundation(fi)
        for ti, view in enumerate(self.tableau_views):
            count = len(self.game.tableau[ti])
            if view.drop_rect(count).collidepoint(pos):
                return Tableau(ti, count)
        return None

    # ---------- Event handling ----------
    def handle_event(self, e):
        if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
            self.mouse_pos = e.pos
            if self.b_new.hovered(e.pos):
                self.perform(NewGame())
                return
            if self.b_undo.hovered(e.pos):
                self.perform(Undo())
                return
            self._press(e.pos)

        elif e.type == pygame.MOUSEMOTION:
            self.mouse_pos = e.pos

        elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
            self.mouse_pos = e.pos
            if not self.drag:
                return
            drag, self.drag = self.drag, None
            target = self.drop_target_at(e.pos)
            if target is None:
                return  # dropped on the felt: nothing happens
            if same_pile(drag.source, target):
                return  # put back where it came from
            self.perform(MoveCard(drag.source, target))

        elif e.type == pygame.KEYDOWN:
            if e.key == pygame.K_n:
                self.perform(NewGame())
            elif e.key == pygame.K_u:
                self.perform(Undo())
            elif e.key == pygame.K_SPACE:
                self.perform(DealFromStock())
            elif e.key == pygame.K_d:
                logger.info("\n%s", self.game.debug_info())
            elif e.key == pygame.K_ESCAPE:
                self.quit_requested = True

    def _press(self, pos):
        where = self.position_at(pos)
        if where is None:
            return
        if where == STOCK:
            self.perform(DealFromStock())
            return
        if isinstance(where, Tableau):
            cards = self.game.tableau[where.column]
            if not cards:
                return
            # click-to-reveal on a face-down top card
            if where.index == len(cards) - 1 and not cards[-1].face_up:
                self.perform(FlipCard(where))
                return
        run = self.game.cards_at(where)
        if not run:
            return
        origin = self._origin_rect(where)
        self.drag = DragInfo(where, run, self.game.legal_targets(where), (pos[0] - origin.x, pos[1] - origin.y))

    def _origin_rect(self, where: Position) -> pygame.Rect:
        if isinstance(where, Tableau):
            return self.tableau_views[where.column].rect_for_index(where.index)
        if isinstance(where, Foundation):
            return self.foundation_views[where.pile].top_rect(0)
        return self.waste_view.top_rect(0)

    def update(self, dt):
        pass

    # ---------- Drawing ----------
    def draw(self, screen):
        if R.FONT_UI is None:
            R.setup_fonts()
        screen.fill(R.TABLE_BG)

        mp = self.mouse_pos
        self.b_new.draw(screen, hover=self.b_new.hovered(mp))
        self.b_undo.draw(screen, hover=self.b_undo.hovered(mp))

        status = R.FONT_UI.render(self.game.summary(), True, R.WHITE)
        screen.blit(status, (self.stock_view.x, 58))
        secs = int(self.game.elapsed_seconds())
        clock = R.FONT_UI.render(f"{secs // 60:02d}:{secs % 60:02d}", True, R.WHITE)
        screen.blit(clock, (R.SCREEN_W - clock.get_width() - 20, 20))

        drag = self.drag
        targets = drag.targets if drag else []

        for fi, view in enumerate(self.foundation_views):
            cards = self.game.foundations[fi]
            if drag and drag.source == Foundation(fi):
                cards = cards[:-1]
            view.draw(screen, cards[-1:], highlight=Foundation(fi) in targets)

        stock = self.game.stock
        self.stock_view.draw(screen, stock[-1:])
        waste = self.game.waste
        if drag and isinstance(drag.source, Waste):
            waste = waste[:-1]
        self.waste_view.draw(screen, waste[-1:])

        for ti, view in enumerate(self.tableau_views):
            cards = self.game.tableau[ti]
            skip = None
            if drag and isinstance(drag.source, Tableau) and drag.source.column == ti:
                skip = drag.source.index
            view.draw(screen, cards, skip_from=skip, highlight=Tableau(ti, len(cards)) in targets)

        if drag:
            ox, oy = drag.grab_offset
            for i, c in enumerate(drag.cards):
                screen.blit(R.get_card_surface(c), (mp[0] - ox, mp[1] - oy + i * R.FAN_Y))

        if self.message:
            msg = R.FONT_UI.render(self.message, True, (255, 255, 180))
            screen.blit(msg, (R.SCREEN_W // 2 - msg.get_width() // 2, R.SCREEN_H - 40))
