"""Field helpers: fit test, lock, line detection and clearing, scoring"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

from tetris_piece import Piece, filled

# Cell values. Locked blocks keep their variant (1..7) so the renderer can letter them.
EMPTY = 0
CLEARING = 8
BORDER = 9
SYMBOLS = " ABCDEFG=#"

Row = List[int]


def locked_cell(variant: int) -> int:
    return variant + 1


def is_locked(value: int) -> bool:
    return 1 <= value <= 7


@dataclass
class Field:
    width: int
    height: int
    cells: List[Row]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> int:
        # Negative indices would silently wrap on a list.
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} field")
        return self.cells[y][x]

    def set(self, x: int, y: int, value: int):
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} field")
        self.cells[y][x] = value

    def empty_row(self) -> Row:
        return [BORDER] + [EMPTY] * (self.width - 2) + [BORDER]


def new_field(width: int, height: int) -> Field:
    if width < 3 or height < 2:
        raise ValueError(f"field {width}x{height} has no interior")
    f = Field(width, height, [])
    f.cells = [f.empty_row() for _ in range(height - 1)] + [[BORDER] * width]
    return f


def fits_at(variant: int, rotation: int, x: int, y: int, field: Field) -> bool:
    for py in range(4):
        for px in range(4):
            if not filled(variant, rotation, px, py): continue
            fx, fy = x + px, y + py
            if fx < 0 or fx >= field.width or fy >= field.height: return False
            # Cells above the top row are allowed so pieces can spawn partly hidden.
            if fy < 0: continue
            if field.cells[fy][fx] != EMPTY: return False
    return True


def fits(field: Field, piece: Piece) -> bool:
    return fits_at(piece.variant, piece.rotation, piece.x, piece.y, field)


def lock(field: Field, piece: Piece):
    """Stamp the piece's cells into the field; nothing else is touched."""
    v = locked_cell(piece.variant)
    for x, y in piece.cells():
        if y >= 0: field.set(x, y, v)


def find_lines(field: Field, piece: Piece) -> List[int]:
    """Mark complete rows spanned by the piece as CLEARING; return them ascending."""
    lines = []
    for py in range(4):
        y = piece.y + py
        if y < 0 or y >= field.height - 1: continue
        row = field.cells[y]
        if all(row[x] != EMPTY for x in range(1, field.width - 1)):
            for x in range(1, field.width - 1):
                row[x] = CLEARING
            lines.append(y)
    return lines


def clear_lines(field: Field, lines: Iterable[int]):
    """Remove marked rows bottom to top, shifting everything above down by one each time."""
    for removed, y in enumerate(sorted(lines, reverse=True)):
        # every row already removed below this one pulled it down a row
        y += removed
        for row in range(y, 0, -1):
            field.cells[row] = list(field.cells[row - 1])
            field.cells[row][0] = field.cells[row][-1] = BORDER
        field.cells[0] = field.empty_row()


def score_for(lines: int, cfg: Dict[str, Any]) -> int:
    score = cfg["LOCK_SCORE"]
    if lines > 0:
        score += (1 << min(lines, cfg["MAX_BONUS_LINES"])) * cfg["LINE_BONUS"]
    return score
