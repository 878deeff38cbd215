"""Uniform piece randomizer"""
import random
from typing import Optional

from tetris_piece import SHAPES


class PieceRandom:
    def __init__(self, seed: Optional[int] = None):
        # seed=None draws from OS entropy; an int gives a reproducible game
        self.seed = seed
        self._rng = random.Random(seed)

    def next_piece(self) -> int:
        return self._rng.randrange(len(SHAPES))
