# render.py - drawing helpers for the pygame front-end
import pygame
from typing import Dict, Optional, Sequence, Tuple

from klondike.cards import Card, Suit

# ---------- Configuration ----------
SCREEN_W, SCREEN_H = 1280, 800
TABLE_BG = (2, 100, 40)

CARD_W, CARD_H = 100, 140
CARD_RADIUS = 10
CARD_GAP_X = 18
MIN_CARD_GAP_X = 4
MARGIN_X = 40
MIN_MARGIN_X = 10
FAN_Y = 28

# Smallest window that still shows all seven tableau columns
MIN_SCREEN_W = 7 * CARD_W + 6 * MIN_CARD_GAP_X + 2 * MIN_MARGIN_X
MIN_SCREEN_H = 480

# Colors
BLACK = (20, 20, 20)
WHITE = (245, 245, 245)
RED = (200, 20, 20)
BLUE = (34, 96, 200)
GOLD = (230, 190, 80)
LIGHT = (220, 220, 220)
HIGHLIGHT = (59, 130, 246)

# Fonts are created by setup_fonts() after pygame.init()
FONT_UI = None
FONT_CORNER_RANK = None


def setup_fonts():
    global FONT_UI, FONT_CORNER_RANK
    if not pygame.font.get_init():
        pygame.font.init()
    # the bundled default font is always available, even headless
    FONT_UI = pygame.font.Font(None, 30)
    FONT_CORNER_RANK = pygame.font.Font(None, 34)


def _fonts():
    if FONT_UI is None:
        setup_fonts()


# ---------- Cards ----------
_card_face_cache: Dict[Tuple[int, int], pygame.Surface] = {}
_card_back_cache: Optional[pygame.Surface] = None


def draw_suit_shape(surface, center, suit, color, size=42):
    x, y = center
    if suit == Suit.DIAMONDS:
        half = size // 2
        points = [(x, y - half), (x + half, y), (x, y + half), (x - half, y)]
        pygame.draw.polygon(surface, color, points)
    elif suit == Suit.HEARTS:
        r = size // 3
        pygame.draw.circle(surface, color, (x - r, y - r), r)
        pygame.draw.circle(surface, color, (x + r, y - r), r)
        tri = [(x - 2 * r, y - r), (x + 2 * r, y - r), (x, y + 2 * r)]
        pygame.draw.polygon(surface, color, tri)
    elif suit == Suit.SPADES:
        r = size // 3
        pygame.draw.circle(surface, color, (x - r, y), r)
        pygame.draw.circle(surface, color, (x + r, y), r)
        tri = [(x - 2 * r, y), (x + 2 * r, y), (x, y - 2 * r)]
        pygame.draw.polygon(surface, color, tri)
        stem_w = max(6, size // 6)
        pygame.draw.rect(surface, color, (x - stem_w // 2, y + r, stem_w, size // 2))
    else:  # clubs
        r = size // 3
        pygame.draw.circle(surface, color, (x, y - r), r)
        pygame.draw.circle(surface, color, (x - r, y + r // 3), r)
        pygame.draw.circle(surface, color, (x + r, y + r // 3), r)
        stem_w = max(6, size // 6)
        pygame.draw.rect(surface, color, (x - stem_w // 2, y + r, stem_w, size // 2))


def get_card_surface(card: Card) -> pygame.Surface:
    if not card.face_up:
        return get_back_surface()
    key = (int(card.suit), int(card.rank))
    if key in _card_face_cache:
        return _card_face_cache[key]
    _fonts()
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, WHITE, (0, 0, CARD_W, CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0, 0, CARD_W, CARD_H), width=3, border_radius=CARD_RADIUS)
    color = RED if card.is_red() else BLACK
    margin = 10
    rtxt = FONT_CORNER_RANK.render(card.rank.text, True, color)
    surf.blit(rtxt, (margin, margin))
    draw_suit_shape(surf, (margin + 10, margin + rtxt.get_height() + 12), card.suit, color, size=18)
    r180 = pygame.transform.rotate(rtxt, 180)
    surf.blit(r180, (CARD_W - margin - r180.get_width(), CARD_H - margin - r180.get_height()))
    draw_suit_shape(surf, (CARD_W // 2, CARD_H // 2), card.suit, color, size=56)
    _card_face_cache[key] = surf
    return surf


def get_back_surface() -> pygame.Surface:
    global _card_back_cache
    if _card_back_cache is not None:
        return _card_back_cache
    surf = pygame.Surface((CARD_W, CARD_H), pygame.SRCALPHA)
    pygame.draw.rect(surf, WHITE, (0, 0, CARD_W, CARD_H), border_radius=CARD_RADIUS)
    pygame.draw.rect(surf, BLACK, (0, 0, CARD_W, CARD_H), width=3, border_radius=CARD_RADIUS)
    inset = 8
    inner_rect = pygame.Rect(inset, inset, CARD_W - 2 * inset, CARD_H - 2 * inset)
    pygame.draw.rect(surf, BLUE, inner_rect, border_radius=8)
    for i in range(-CARD_H, CARD_W, 12):
        pygame.draw.line(surf, LIGHT, (i, 8), (i + CARD_H, CARD_H - 8), 1)
        pygame.draw.line(surf, LIGHT, (i + 6, 8), (i + CARD_H + 6, CARD_H - 8), 1)
    _card_back_cache = surf
    return surf


def invalidate_card_caches():
    global _card_face_cache, _card_back_cache
    _card_face_cache = {}
    _card_back_cache = None


# ---------- Piles ----------
class PileView:
    """Screen geometry of one pile. The cards themselves live in the game state."""

    def __init__(self, x, y, fan_y=0):
        self.x, self.y = x, y
        self.fan_y = fan_y

    def rect_for_index(self, idx) -> pygame.Rect:
        return pygame.Rect(self.x, self.y + idx * self.fan_y, CARD_W, CARD_H)

    def top_rect(self, count) -> pygame.Rect:
        if count <= 0:
            return pygame.Rect(self.x, self.y, CARD_W, CARD_H)
        return self.rect_for_index(count - 1)

    def drop_rect(self, count) -> pygame.Rect:
        """Area accepting drops: the whole fanned pile, or the empty slot."""
        return self.rect_for_index(0).union(self.top_rect(count))

    def hit(self, pos, count) -> Optional[int]:
        """Index of the topmost card under ``pos``, -1 for an empty slot, None on a miss."""
        if count <= 0:
            return -1 if self.top_rect(0).collidepoint(pos) else None
        for i in reversed(range(count)):
            if self.rect_for_index(i).collidepoint(pos):
                return i
        return None

    def draw(self, screen, cards: Sequence[Card], skip_from: Optional[int] = None, highlight=False):
        if not cards or skip_from == 0:
            pygame.draw.rect(
                screen,
                LIGHT,
                (self.x, self.y, CARD_W, CARD_H),
                border_radius=CARD_RADIUS,
                width=2,
            )
        for i, c in enumerate(cards):
            if skip_from is not None and i >= skip_from:
                break
            r = self.rect_for_index(i)
            screen.blit(get_card_surface(c), r.topleft)
        if highlight:
            pygame.draw.rect(screen, HIGHLIGHT, self.drop_rect(len(cards)), width=4, border_radius=CARD_RADIUS)


# ---------- UI ----------
class Button:
    def __init__(self, text, x, y, w=170, h=36):
        self.text = text
        self.rect = pygame.Rect(x, y, w, h)

    def draw(self, screen, hover=False):
        _fonts()
        col = GOLD if hover else (200, 200, 200)
        pygame.draw.rect(screen, col, self.rect, border_radius=12)
        pygame.draw.rect(screen, BLACK, self.rect, 2, border_radius=12)
        t = FONT_UI.render(self.text, True, BLACK)
        screen.blit(t, (self.rect.centerx - t.get_width() // 2, self.rect.centery - t.get_height() // 2))

    def hovered(self, mouse_pos):
        return self.rect.collidepoint(mouse_pos)
