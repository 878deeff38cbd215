"""Tunable game constants"""
from typing import Any, Dict

CONFIG: Dict[str, Any] = {
    # Field
    "FIELD_WIDTH": 12,
    "FIELD_HEIGHT": 18,

    # Timing: one tick every TICK_MS, gravity every `speed` ticks
    "TICK_MS": 14,
    "INITIAL_SPEED": 20,
    "MIN_SPEED": 10,
    "PIECES_PER_SPEEDUP": 50,
    "TICK_COUNTER_CEILING": 256,
    "CLEAR_DELAY_TICKS": 28,      # how long completed rows show as '=' (0 => clear at once)

    # Scoring
    "LOCK_SCORE": 25,
    "LINE_BONUS": 100,
    "MAX_BONUS_LINES": 10,

    # Screen buffer
    "SCREEN_WIDTH": 80,
    "SCREEN_HEIGHT": 30,
    "FIELD_OFFSET": (2, 2),       # (col, row) of the field inside the buffer

    "SEED": None,
    "LOG_FILE": "tetris.log",
    "LOG_LEVEL": "INFO",
}


def with_overrides(base: Dict[str, Any] = CONFIG, **overrides: Any) -> Dict[str, Any]:
    cfg = dict(base)
    for key, value in overrides.items():
        if key not in cfg:
            raise KeyError(f"unknown config key: {key}")
        cfg[key] = value
    return cfg
