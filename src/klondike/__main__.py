# __main__.py - entry point: python -m klondike
import logging
import os

import pygame

from klondike import render as R
from klondike.config import load_config
from klondike.game import Game
from klondike.scene import KlondikeScene


def _initial_window_size():
    info = pygame.display.Info()
    # Keep a safety margin so the window never hides under taskbar
    margin_w, margin_h = 120, 140
    w = min(R.SCREEN_W, max(R.MIN_SCREEN_W, info.current_w - margin_w))
    h = min(R.SCREEN_H, max(R.MIN_SCREEN_H, info.current_h - margin_h))
    return w, h


def main():
    logging.basicConfig(
        level=os.environ.get("KLONDIKE_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config()

    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    pygame.init()
    w, h = _initial_window_size()
    R.SCREEN_W, R.SCREEN_H = w, h
    screen = pygame.display.set_mode((w, h), pygame.RESIZABLE)
    pygame.display.set_caption("Klondike")
    R.setup_fonts()
    clock = pygame.time.Clock()

    scene = KlondikeScene(Game(config))
    running = True
    while running:
        dt = clock.tick(60)
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
                break
            if e.type == pygame.VIDEORESIZE:
                R.SCREEN_W, R.SCREEN_H = max(R.MIN_SCREEN_W, e.w), max(R.MIN_SCREEN_H, e.h)
                screen = pygame.display.set_mode((R.SCREEN_W, R.SCREEN_H), pygame.RESIZABLE)
                scene.compute_layout()
                continue
            scene.handle_event(e)
        if scene.quit_requested:
            running = False
        scene.update(dt)
        scene.draw(screen)
        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    main()
