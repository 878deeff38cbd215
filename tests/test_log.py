import logging
import os
import tempfile
import unittest

from tetris_log import setup_logging


class LogTests(unittest.TestCase):
    def tearDown(self):
        setup_logging(None)

    def test_appends_to_file(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "tetris.log")
            setup_logging(path, "debug")
            logging.getLogger("tetris_game").debug("spawned %s", "I")
            setup_logging(path, "info")
            logging.getLogger("tetris_game").info("score %d", 25)
            logging.getLogger("tetris_game").debug("hidden")
            setup_logging(None)
            with open(path, encoding="utf-8") as f:
                lines = f.read().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertIn("DEBUG tetris_game: spawned I", lines[0])
        self.assertIn("INFO tetris_game: score 25", lines[1])

    def test_no_file(self):
        root = setup_logging(None)
        self.assertTrue(all(isinstance(h, logging.NullHandler) for h in root.handlers))


if __name__ == "__main__":
    unittest.main()
