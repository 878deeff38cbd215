"""Piece model: shape masks, rotation indexing, piece pose"""
from dataclasses import dataclass, replace
from typing import Iterator, Tuple

# One canonical 4x4 mask per variant, read row by row. Rotations are computed.
NAMES = "IOTJLSZ"
SHAPES: Tuple[str, ...] = (
    "..X...X...X...X.",  # I
    ".....XX..XX.....",  # O
    "..X..XX...X.....",  # T
    "..X...X..XX.....",  # J
    ".X...X...XX.....",  # L
    ".X...XX...X.....",  # S
    "..X..XX..X......",  # Z
)
FILLED = "X"


def rotate(px: int, py: int, r: int) -> int:
    """Index into a 16-cell mask of local cell (px, py) after r quarter turns."""
    r %= 4
    if r == 0: return py * 4 + px
    if r == 1: return 12 + py - px * 4
    if r == 2: return 15 - py * 4 - px
    return 3 - py + px * 4


def filled(variant: int, r: int, px: int, py: int) -> bool:
    return SHAPES[variant][rotate(px, py, r)] == FILLED


def rotated_mask(variant: int, r: int) -> str:
    return "".join(SHAPES[variant][rotate(px, py, r)] for py in range(4) for px in range(4))


@dataclass(frozen=True)
class Piece:
    variant: int
    rotation: int
    x: int
    y: int

    @staticmethod
    def spawn(variant: int, field_width: int) -> "Piece":
        return Piece(variant, 0, field_width // 2, 0)

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated(self) -> "Piece":
        return replace(self, rotation=(self.rotation + 1) % 4)

    def local_cells(self) -> Iterator[Tuple[int, int]]:
        for py in range(4):
            for px in range(4):
                if filled(self.variant, self.rotation, px, py):
                    yield px, py

    def cells(self) -> Iterator[Tuple[int, int]]:
        for px, py in self.local_cells():
            yield self.x + px, self.y + py

    @property
    def name(self) -> str:
        return NAMES[self.variant]
