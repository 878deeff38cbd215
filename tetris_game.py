"""Game state machine: one `update` call per tick"""
import enum
import logging
from typing import Any, Dict, List, Optional

from tetris_board import Field, new_field, fits, lock, find_lines, clear_lines, score_for
from tetris_input import Key
from tetris_piece import Piece, NAMES
from tetris_rng import PieceRandom

log = logging.getLogger(__name__)


class Phase(enum.Enum):
    SPAWNING = "spawning"
    FALLING = "falling"
    LOCKING = "locking"
    LINE_CLEARING = "line_clearing"
    GAME_OVER = "game_over"


class RotateLatch(enum.Enum):
    """Rotation fires once per held key; there are no key-up events to go by."""
    ARMED = "armed"
    DISARMED = "disarmed"


MOVES = {Key.LEFT: (-1, 0), Key.RIGHT: (1, 0), Key.DOWN: (0, 1)}


class Game:
    def __init__(self, cfg: Dict[str, Any], rng: Optional[PieceRandom] = None,
                 first_variant: Optional[int] = None):
        self.cfg = cfg
        self.rng = rng or PieceRandom(cfg["SEED"])
        self.field: Field = new_field(cfg["FIELD_WIDTH"], cfg["FIELD_HEIGHT"])
        self.score = 0
        self.speed = cfg["INITIAL_SPEED"]
        self.speed_count = 0
        self.piece_count = 0
        self.latch = RotateLatch.ARMED
        self.lines: List[int] = []
        self.clear_ticks = 0
        self.quit_requested = False
        self.piece: Optional[Piece] = None
        self.phase = Phase.SPAWNING
        self.spawn(first_variant)

    # ---------- queries ----------
    @property
    def over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    @property
    def running(self) -> bool:
        return not (self.over or self.quit_requested)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value, "score": self.score, "speed": self.speed,
            "pieces": self.piece_count, "piece": self.piece,
        }

    # ---------- transitions ----------
    def spawn(self, variant: Optional[int] = None):
        self.phase = Phase.SPAWNING
        if variant is None:
            variant = self.rng.next_piece()
        self.piece = Piece.spawn(variant, self.field.width)
        if not fits(self.field, self.piece):
            self.phase = Phase.GAME_OVER
            log.info("game over: %s does not fit at spawn, score %d", NAMES[variant], self.score)
            return
        self.phase = Phase.FALLING
        log.debug("spawned %s", NAMES[variant])

    def try_move(self, dx: int, dy: int) -> bool:
        t = self.piece.moved(dx, dy)
        if not fits(self.field, t): return False
        self.piece = t
        return True

    def try_rotate(self) -> bool:
        if self.latch is RotateLatch.DISARMED:
            return False
        t = self.piece.rotated()
        if fits(self.field, t):
            self.piece = t
            self.latch = RotateLatch.DISARMED
            return True
        # a failed attempt leaves the latch armed
        return False

    def handle_key(self, key: Optional[Key]):
        if key is not Key.ROTATE:
            self.latch = RotateLatch.ARMED
        if key is None: return
        if key is Key.QUIT:
            self.quit_requested = True
        elif key is Key.ROTATE:
            self.try_rotate()
        elif key in MOVES:
            self.try_move(*MOVES[key])

    def lock_piece(self):
        self.phase = Phase.LOCKING
        lock(self.field, self.piece)
        self.piece_count += 1
        if self.piece_count % self.cfg["PIECES_PER_SPEEDUP"] == 0 and self.speed > self.cfg["MIN_SPEED"]:
            self.speed -= 1
            log.info("speed now %d after %d pieces", self.speed, self.piece_count)
        log.debug("locked %s at (%d, %d), piece %d", self.piece.name, self.piece.x, self.piece.y, self.piece_count)

        self.lines = find_lines(self.field, self.piece)
        self.score += score_for(len(self.lines), self.cfg)
        if self.lines:
            log.info("cleared %d line(s), score %d", len(self.lines), self.score)
            if self.cfg["CLEAR_DELAY_TICKS"] > 0:
                self.phase = Phase.LINE_CLEARING
                self.clear_ticks = self.cfg["CLEAR_DELAY_TICKS"]
                return
            self.finish_clear()
            return
        self.spawn()

    def finish_clear(self):
        clear_lines(self.field, self.lines)
        self.lines = []
        self.clear_ticks = 0
        self.spawn()

    def force_down(self):
        if not self.try_move(0, 1):
            self.lock_piece()

    def update(self, key: Optional[Key] = None):
        """Advance one tick with the key drained for it (or None)."""
        if not self.running: return
        if self.phase is Phase.LINE_CLEARING:
            if key is Key.QUIT:
                self.quit_requested = True
                return
            self.clear_ticks -= 1
            if self.clear_ticks <= 0:
                self.finish_clear()
            return

        self.speed_count = (self.speed_count + 1) % self.cfg["TICK_COUNTER_CEILING"]
        force = self.speed_count >= self.speed
        if force:
            self.speed_count = 0

        self.handle_key(key)
        if self.quit_requested: return
        if force:
            self.force_down()
