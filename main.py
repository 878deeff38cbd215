import argparse
import curses
import logging
import sys
from typing import Any, Dict, List, Optional

from tetris_config import CONFIG, with_overrides
from tetris_game import Game, Phase
from tetris_input import InputChannel, InputReader, TerminalKeySource
from tetris_log import setup_logging
from tetris_render import CursesSink, RenderError, RenderSink, check_layout, compose
from tetris_timing import Ticker

log = logging.getLogger(__name__)

ORIGIN = (1, 1)


def parse_args(argv: Optional[List[str]] = None) -> Dict[str, Any]:
    p = argparse.ArgumentParser(description="Console Tetris")
    p.add_argument("--seed", type=int, default=None, help="piece randomizer seed")
    p.add_argument("--width", type=int, default=CONFIG["FIELD_WIDTH"], help="field width incl. borders")
    p.add_argument("--height", type=int, default=CONFIG["FIELD_HEIGHT"], help="field height incl. floor")
    p.add_argument("--tick-ms", type=int, default=CONFIG["TICK_MS"], help="milliseconds per game tick")
    p.add_argument("--log-file", default=CONFIG["LOG_FILE"], help="append log records here")
    p.add_argument("--log-level", default=CONFIG["LOG_LEVEL"])
    p.add_argument("--no-log", action="store_true", help="disable the log file")
    a = p.parse_args(argv)
    cfg = with_overrides(
        SEED=a.seed, FIELD_WIDTH=a.width, FIELD_HEIGHT=a.height, TICK_MS=max(1, a.tick_ms),
        LOG_FILE=None if a.no_log else a.log_file, LOG_LEVEL=a.log_level,
    )
    try:
        check_layout(cfg)
    except RenderError as e:
        p.error(str(e))
    return cfg


def run(game: Game, channel: InputChannel, sink: RenderSink, ticker: Ticker, cfg: Dict[str, Any]) -> int:
    """Tick until quit, game over or the input side stops. Returns the final score."""
    while True:
        ticker.tick()
        # the clear pause leaves queued keys for the next piece
        game.update(None if game.phase is Phase.LINE_CLEARING else channel.poll())
        sink.draw(compose(game, cfg), ORIGIN, game.score)
        if channel.stopped or not game.running:
            break
    log.info("loop done: %s", game.snapshot())
    return game.score


def play(stdscr, cfg: Dict[str, Any]) -> int:
    curses.curs_set(0)
    curses.noecho()
    # raw so Ctrl-C reaches the reader as a quit key
    curses.raw()
    sink = CursesSink(stdscr)
    sink.check_size(cfg["SCREEN_HEIGHT"], cfg["SCREEN_WIDTH"])
    check_layout(cfg)

    channel = InputChannel()
    InputReader(TerminalKeySource(sys.stdin.fileno()), channel).start()
    try:
        return run(Game(cfg), channel, sink, Ticker(cfg["TICK_MS"]), cfg)
    finally:
        channel.stop()


def main(argv: Optional[List[str]] = None) -> int:
    cfg = parse_args(argv)
    setup_logging(cfg["LOG_FILE"], cfg["LOG_LEVEL"])
    log.info("session start: field %dx%d, seed %s", cfg["FIELD_WIDTH"], cfg["FIELD_HEIGHT"], cfg["SEED"])
    score = curses.wrapper(play, cfg)
    log.info("session end: score %d", score)
    print(f"Game Over!! Score: {score}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
