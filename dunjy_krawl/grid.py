"""
Grid Model
===========
The dungeon tile matrix and coordinate validity rules.
"""

from typing import List, Tuple


WALL = 1
FLOOR = 0


class Grid:
    """
    COLS x ROWS matrix of WALL/FLOOR cells, indexed as cells[y][x].

    Only the dungeon generator writes to it; everything else asks
    in_bounds / is_floor / is_open before moving.
    """

    def __init__(self, cols: int, rows: int):
        self.cols = cols
        self.rows = rows
        self.cells: List[List[int]] = []
        self.fill(WALL)

    def fill(self, value: int = WALL):
        """Reset every cell to value."""
        self.cells = [[value] * self.cols for _ in range(self.rows)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def is_floor(self, x: int, y: int) -> bool:
        """True for an in-bounds FLOOR cell; out-of-bounds reads as wall."""
        return self.in_bounds(x, y) and self.cells[y][x] == FLOOR

    def is_open(self, x: int, y: int) -> bool:
        """A valid move destination: in bounds and floor."""
        return self.is_floor(x, y)

    # -------------------------------------------------------------------------
    # Carving (generation only)
    # -------------------------------------------------------------------------

    def carve(self, x: int, y: int):
        if self.in_bounds(x, y):
            self.cells[y][x] = FLOOR

    def carve_rect(self, x: int, y: int, w: int, h: int):
        """Carve the w x h rectangle whose top-left tile is (x, y)."""
        for ry in range(y, y + h):
            for rx in range(x, x + w):
                self.carve(rx, ry)

    def carve_h_line(self, x1: int, x2: int, y: int):
        for x in range(min(x1, x2), max(x1, x2) + 1):
            self.carve(x, y)

    def carve_v_line(self, y1: int, y2: int, x: int):
        for y in range(min(y1, y2), max(y1, y2) + 1):
            self.carve(x, y)

    def floor_tiles(self) -> List[Tuple[int, int]]:
        return [
            (x, y)
            for y in range(self.rows)
            for x in range(self.cols)
            if self.cells[y][x] == FLOOR
        ]

    def as_tuple(self) -> Tuple[Tuple[int, ...], ...]:
        """Immutable copy of the cells for read-only consumers."""
        return tuple(tuple(row) for row in self.cells)
