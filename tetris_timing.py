"""Fixed tick pacing on the pygame clock"""
import os

# pygame prints a banner on import, which would land in the middle of the curses screen
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame


class Ticker:
    def __init__(self, tick_ms: int):
        self.tick_ms = tick_ms
        self.clock = pygame.time.Clock()

    def tick(self) -> int:
        """Wait out the rest of the current tick; return ms since the previous one."""
        return self.clock.tick_busy_loop(1000 / self.tick_ms)
