"""
Rendering Engine
=================
Double-buffered terminal renderer with screen shake.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import random

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")


# ANSI 256 color constants
TORCH_YELLOW = 220
BLOOD_RED = 160
MOSS_GREEN = 70
STEEL_BLUE = 67
EMBER_ORANGE = 208
BONE_WHITE = 230

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235


# A cell is (char, fg_color); the buffers are rows of cells
Cell = Tuple[str, int]
BLANK: Cell = (' ', GRAY_DARKER)


class DoubleBuffer:
    """
    Double-buffered terminal surface.

    Frames are drawn into the back buffer. present() diffs it against
    the front buffer and emits one cursor move and colour change per
    run of changed cells, so a two-character tile goes out as one write.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()
        self._normal = term.normal  # Cache reset sequence

    def _init_buffers(self):
        self.front = [[BLANK] * self.width for _ in range(self.height)]
        self.back = [[BLANK] * self.width for _ in range(self.height)]

    def resize(self, width: int, height: int):
        """Start over at a new size; the next present() redraws everything."""
        self.width = width
        self.height = height
        self._init_buffers()
        # Force a full repaint over whatever the terminal kept
        self.front = [[('', -1)] * self.width for _ in range(self.height)]

    def clear_back(self):
        for y in range(self.height):
            self.back[y] = [BLANK] * self.width

    def put(self, x: int, y: int, char: str, fg_color: int = 7):
        """Put a character in the back buffer; off-screen writes are dropped."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.back[y][x] = (char, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color)

    def present(self) -> str:
        """Swap buffers and return the escape output for changed cells."""
        term = self.term
        output_parts = []

        for y in range(self.height):
            back_row, front_row = self.back[y], self.front[y]
            x = 0
            while x < self.width:
                if back_row[x] == front_row[x]:
                    x += 1
                    continue
                # Extend the run over changed cells sharing a colour
                color = back_row[x][1]
                run = []
                while (x < self.width and back_row[x] != front_row[x]
                       and back_row[x][1] == color):
                    run.append(back_row[x][0] or ' ')
                    x += 1
                output_parts.append(term.move_xy(x - len(run), y))
                output_parts.append(self._normal)
                output_parts.append(term.color(color))
                output_parts.append(''.join(run))

        # Swap: back becomes the new front, old front becomes next back
        self.front, self.back = self.back, self.front

        return ''.join(output_parts)


@dataclass
class GameRenderer:
    """
    Tile renderer on top of the double buffer.

    Each dungeon tile is TILE_WIDTH characters wide so the grid looks
    roughly square. Screen shake offsets the map area only; HUD rows
    below it stay put.
    """
    term: Terminal
    buffer: DoubleBuffer = field(init=False)

    # Map placement, in characters
    origin_x: int = 1
    origin_y: int = 1
    map_rows: int = 15

    # Screen shake state
    shake_x: int = 0
    shake_y: int = 0
    shake_frames: int = 0
    shake_intensity: int = 1

    TILE_WIDTH = 2

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def hud_y(self) -> int:
        """First row below the map frame."""
        return self.origin_y + self.map_rows + 1

    def trigger_shake(self, intensity: int = 1, frames: int = 6):
        self.shake_intensity = intensity
        self.shake_frames = max(self.shake_frames, frames)

    def update_effects(self):
        """Tick the screen shake timer."""
        if self.shake_frames > 0:
            self.shake_x = random.randint(-self.shake_intensity, self.shake_intensity)
            self.shake_y = random.randint(-max(1, self.shake_intensity // 2),
                                          max(1, self.shake_intensity // 2))
            self.shake_frames -= 1
        else:
            self.shake_x = 0
            self.shake_y = 0

    def begin_frame(self):
        self.buffer.clear_back()

    def end_frame(self) -> str:
        """Finalize frame: advance shake and present changed cells."""
        self.update_effects()
        return self.buffer.present()

    def put_tile(self, tx: int, ty: int, glyph: str, fg_color: int = 7):
        """
        Draw one dungeon tile. glyph is one or TILE_WIDTH characters;
        a single character is padded with a space.
        """
        text = glyph.ljust(self.TILE_WIDTH)[:self.TILE_WIDTH]
        x = self.origin_x + tx * self.TILE_WIDTH + self.shake_x
        y = self.origin_y + ty + self.shake_y
        self.buffer.put_string(x, y, text, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7):
        """UI text, never shaken."""
        self.buffer.put_string(x, y, text, fg_color)

    def put_centered(self, y: int, text: str, fg_color: int = 7):
        self.buffer.put_string(self.width // 2 - len(text) // 2, y, text, fg_color)

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)

    def sync_size(self) -> bool:
        """Follow the terminal if it was resized. Returns True on a resize."""
        width, height = self.term.width, self.term.height
        if (width, height) == (self.buffer.width, self.buffer.height):
            return False
        self.resize(width, height)
        return True

    def draw_box(self, x: int, y: int, w: int, h: int, color: int = GRAY_DARK,
                 char: str = '#'):
        """Draw a rectangular border."""
        for i in range(w):
            self.buffer.put(x + i, y, char, color)
            self.buffer.put(x + i, y + h - 1, char, color)
        for j in range(1, h - 1):
            self.buffer.put(x, y + j, char, color)
            self.buffer.put(x + w - 1, y + j, char, color)
