"""
Screen composition and the curses render sink.

The engine builds a plain 2-D character buffer every tick:
- field cells go through SYMBOLS at FIELD_OFFSET
- the falling piece is overlaid with its letter ('A' + variant)
- the score is written as text to the right of the field

A sink only has to paint that buffer at a 1-indexed (col, row) cursor position.
"""
from __future__ import annotations
import curses
import logging
from typing import Any, Dict, List, Protocol, Tuple

from tetris_board import SYMBOLS
from tetris_game import Game, Phase

log = logging.getLogger(__name__)

Buffer = List[List[str]]
Goto = Tuple[int, int]
SCORE_ROW = 2


class RenderError(Exception):
    """Painting to the terminal failed; the session cannot continue."""


class TerminalTooSmall(RenderError):
    pass


class RenderSink(Protocol):
    def draw(self, buffer: Buffer, goto: Goto, score: int) -> None: ...


def score_text(score: int) -> str:
    return f"SCORE: {score:8d}"


class LayoutError(RenderError):
    """The field and score text do not fit in the screen buffer."""


def check_layout(cfg: Dict[str, Any]):
    w, h = cfg["FIELD_WIDTH"], cfg["FIELD_HEIGHT"]
    ox, oy = cfg["FIELD_OFFSET"]
    cols = max(ox + w, w + 6 + len(score_text(0)))
    rows = max(oy + h, SCORE_ROW + 1)
    if cols > cfg["SCREEN_WIDTH"] or rows > cfg["SCREEN_HEIGHT"]:
        raise LayoutError(f"{w}x{h} field needs a {cols}x{rows} screen, "
                          f"buffer is {cfg['SCREEN_WIDTH']}x{cfg['SCREEN_HEIGHT']}")


def compose(game: Game, cfg: Dict[str, Any]) -> Buffer:
    h, w = cfg["SCREEN_HEIGHT"], cfg["SCREEN_WIDTH"]
    ox, oy = cfg["FIELD_OFFSET"]
    buf = [[" "] * w for _ in range(h)]

    def put(x: int, y: int, ch: str):
        if 0 <= x < w and 0 <= y < h: buf[y][x] = ch

    f = game.field
    for y, row in enumerate(f.cells):
        for x, v in enumerate(row):
            put(ox + x, oy + y, SYMBOLS[v])

    p = game.piece
    if p is not None and game.phase is Phase.FALLING:
        letter = chr(ord("A") + p.variant)
        for x, y in p.cells():
            if y >= 0: put(ox + x, oy + y, letter)

    for i, ch in enumerate(score_text(game.score)):
        put(f.width + 6 + i, SCORE_ROW, ch)
    return buf


class CursesSink:
    """Paints the buffer with curses. Terminal mode setup/restore is curses.wrapper's job."""
    def __init__(self, stdscr):
        self.stdscr = stdscr

    def check_size(self, rows: int, cols: int):
        max_y, max_x = self.stdscr.getmaxyx()
        # curses cannot write the bottom-right cell, so keep one spare column
        if max_y < rows or max_x <= cols:
            raise TerminalTooSmall(f"terminal is {max_x}x{max_y}, need {cols + 1}x{rows}")

    def draw(self, buffer: Buffer, goto: Goto, score: int) -> None:
        col, row = goto[0] - 1, goto[1] - 1
        try:
            for y, line in enumerate(buffer):
                self.stdscr.addstr(row + y, col, "".join(line))
            self.stdscr.refresh()
        except curses.error as e:
            log.error("render failed at score %d", score, exc_info=True)
            raise RenderError(str(e)) from e
