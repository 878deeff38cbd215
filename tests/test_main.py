import unittest

import main
from main import parse_args, run
from tetris_config import with_overrides
from tetris_board import locked_cell
from tetris_game import Game, Phase
from tetris_piece import Piece
from tetris_input import InputChannel, Key
from tetris_render import LayoutError, RenderError, check_layout, compose, score_text


class FakeTicker:
    def __init__(self):
        self.ticks = 0

    def tick(self):
        self.ticks += 1
        return 14


class RecordingSink:
    def __init__(self, fail_after=None):
        self.frames = []
        self.fail_after = fail_after

    def draw(self, buffer, goto, score):
        if self.fail_after is not None and len(self.frames) >= self.fail_after:
            raise RenderError("terminal gone")
        self.frames.append((goto, score))


def setup(**overrides):
    cfg = with_overrides(**{"CLEAR_DELAY_TICKS": 0, **overrides})
    return cfg, Game(cfg, first_variant=0), InputChannel(), FakeTicker()


class RunTests(unittest.TestCase):
    def test_quit_key_ends_loop(self):
        cfg, game, ch, ticker = setup()
        ch.send(Key.LEFT)
        ch.send(Key.QUIT)
        sink = RecordingSink()
        self.assertEqual(run(game, ch, sink, ticker, cfg), 0)
        self.assertEqual(ticker.ticks, 2)
        self.assertEqual(len(sink.frames), 2)
        self.assertEqual(game.piece.x, 5)

    def test_stop_flag_ends_loop(self):
        cfg, game, ch, ticker = setup()
        ch.stop()
        run(game, ch, RecordingSink(), ticker, cfg)
        self.assertEqual(ticker.ticks, 1)

    def test_one_key_per_tick(self):
        cfg, game, ch, ticker = setup()
        for k in [Key.LEFT, Key.LEFT, Key.LEFT, Key.QUIT]:
            ch.send(k)
        run(game, ch, RecordingSink(), ticker, cfg)
        self.assertEqual(ticker.ticks, 4)
        self.assertEqual(game.piece.x, 3)

    def test_plays_to_game_over(self):
        cfg, game, ch, ticker = setup(INITIAL_SPEED=1, SEED=3)
        sink = RecordingSink()
        score = run(game, ch, sink, ticker, cfg)
        self.assertTrue(game.over)
        self.assertGreaterEqual(score, 25 * 4)
        self.assertEqual(score % 25, 0)
        self.assertEqual(sink.frames[-1], ((1, 1), score))

    def test_keys_wait_out_line_clear(self):
        cfg, game, ch, ticker = setup(CLEAR_DELAY_TICKS=3, INITIAL_SPEED=200)
        for x in range(1, 11):
            if x != 8:
                game.field.cells[16][x] = locked_cell(6)
        game.piece = Piece(0, 0, 6, 13)
        game.force_down()
        self.assertEqual(game.phase, Phase.LINE_CLEARING)
        for k in [Key.LEFT, Key.LEFT, Key.QUIT]:
            ch.send(k)
        run(game, ch, RecordingSink(), ticker, cfg)
        self.assertEqual(ticker.ticks, 6)
        self.assertEqual(game.piece.x, 4)
        self.assertTrue(game.quit_requested)

    def test_render_error_propagates(self):
        cfg, game, ch, ticker = setup()
        with self.assertRaises(RenderError):
            run(game, ch, RecordingSink(fail_after=3), ticker, cfg)


class ArgsTests(unittest.TestCase):
    def test_defaults(self):
        cfg = parse_args([])
        self.assertEqual((cfg["FIELD_WIDTH"], cfg["FIELD_HEIGHT"]), (12, 18))
        self.assertEqual(cfg["LOG_FILE"], "tetris.log")

    def test_overrides(self):
        cfg = parse_args(["--seed", "9", "--width", "10", "--no-log", "--tick-ms", "0"])
        self.assertEqual(cfg["SEED"], 9)
        self.assertEqual(cfg["FIELD_WIDTH"], 10)
        self.assertIsNone(cfg["LOG_FILE"])
        self.assertEqual(cfg["TICK_MS"], 1)

    def test_field_must_fit_screen(self):
        parse_args(["--width", "59", "--height", "28"])
        for argv in (["--width", "60"], ["--width", "80"], ["--height", "29"]):
            with self.assertRaises(SystemExit):
                parse_args(argv)

    def test_largest_field_shows_walls_and_score(self):
        cfg = with_overrides(FIELD_WIDTH=59, FIELD_HEIGHT=28)
        check_layout(cfg)
        buf = compose(Game(cfg, first_variant=0), cfg)
        self.assertEqual(buf[2][2 + 58], "#")
        self.assertEqual("".join(buf[29][2:2 + 59]), "#" * 59)
        self.assertIn(score_text(0), "".join(buf[2]))

    def test_layout_error_is_render_error(self):
        with self.assertRaises(LayoutError):
            check_layout(with_overrides(FIELD_WIDTH=80))
        self.assertTrue(issubclass(LayoutError, RenderError))

    def test_logger_named_after_module(self):
        self.assertEqual(main.log.name, main.__name__)

    def test_unknown_override(self):
        with self.assertRaises(KeyError):
            with_overrides(NOPE=1)


if __name__ == "__main__":
    unittest.main()
