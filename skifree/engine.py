"""
Terminal Renderer
==================
Two cell grids: the slope is drawn into the back grid every frame, then
only cells that differ from what is already on screen are written out.
Runs of adjacent changed cells share one cursor move, and color codes
are emitted only when the color actually changes.

The bottom HUD_ROWS rows hold the status panel and never shake.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import random

try:
    from blessed import Terminal
except ImportError:
    raise ImportError("'blessed' library required. Install with: pip install blessed")


# ANSI 256 palette
SNOW_SHADE = 253
PINE_GREEN = 28
PINE_DARK = 22
BARK_BROWN = 94
ROCK_GRAY = 245
FIRE_RED = 196
FIRE_ORANGE = 208
MUSHROOM_RED = 160
DOG_BROWN = 136
YETI_WHITE = 231
SKIER_BLUE = 27
SKIER_RED = 196
ICE_CYAN = 51
GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235
WHITE = 255

DEFAULT_FG = 7
HUD_ROWS = 3


@dataclass
class Cell:
    char: str = ' '
    fg_color: int = DEFAULT_FG

    def set(self, char: str, fg_color: int):
        self.char = char
        self.fg_color = fg_color

    def reset(self):
        self.set(' ', DEFAULT_FG)


def _blank_grid(width: int, height: int) -> List[List[Cell]]:
    return [[Cell() for _ in range(width)] for _ in range(height)]


class DoubleBuffer:
    """Front grid mirrors the screen, back grid is the frame being drawn."""

    def __init__(self, term: Terminal):
        self.term = term
        self.resize(term.width, term.height)

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self.front = _blank_grid(width, height)
        self.back = _blank_grid(width, height)

    def clear_back(self):
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = DEFAULT_FG):
        """Write one glyph; anything off the grid is dropped."""
        if 0 <= y < self.height and 0 <= x < self.width:
            self.back[y][x].set(char, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = DEFAULT_FG):
        for offset, char in enumerate(text):
            self.put(x + offset, y, char, fg_color)

    def present(self) -> str:
        """Escape sequences turning the front grid into the back grid, then swap."""
        term = self.term
        out = []
        color: Optional[int] = None

        for y, (back_row, front_row) in enumerate(zip(self.back, self.front)):
            cursor_x = -1
            for x, (new, old) in enumerate(zip(back_row, front_row)):
                if new == old:
                    continue
                if x != cursor_x:
                    out.append(term.move_xy(x, y))
                if new.fg_color != color:
                    color = new.fg_color
                    out.append(term.normal + term.color(color))
                out.append(new.char or ' ')
                cursor_x = x + 1

        if out:
            out.append(term.normal)
        self.front, self.back = self.back, self.front
        return ''.join(out)


@dataclass
class GameRenderer:
    """
    Frame lifecycle plus screen shake.

    Slope drawing goes through put()/put_string(), which apply the
    current shake offset; the HUD writes straight to the buffer.
    """
    term: Terminal
    buffer: DoubleBuffer = field(init=False)

    shake_frames: int = 0
    shake_intensity: int = 1
    offset_x: int = 0
    offset_y: int = 0

    show_fps: bool = False
    current_fps: float = 60.0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Rows available to the slope above the status panel."""
        return self.buffer.height - HUD_ROWS

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)

    def trigger_shake(self, intensity: int = 1, frames: int = 6):
        """Stronger shakes override weaker ones; durations never shorten."""
        self.shake_intensity = max(intensity, self.shake_intensity if self.shake_frames else 0)
        self.shake_frames = max(self.shake_frames, frames)

    def _roll_shake(self):
        if self.shake_frames <= 0:
            self.offset_x = self.offset_y = 0
            return
        self.shake_frames -= 1
        reach = self.shake_intensity
        self.offset_x = random.randint(-reach, reach)
        self.offset_y = random.randint(-1, 1) if reach > 1 else 0

    def begin_frame(self):
        self.buffer.clear_back()

    def end_frame(self) -> str:
        output = self.buffer.present()
        self._roll_shake()
        return output

    def _shaken(self, x: int, y: int, with_shake: bool):
        if with_shake and y < self.game_height:
            return x + self.offset_x, y + self.offset_y
        return x, y

    def put(self, x: int, y: int, char: str, fg_color: int = DEFAULT_FG,
            with_shake: bool = True):
        x, y = self._shaken(x, y, with_shake)
        self.buffer.put(x, y, char, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = DEFAULT_FG,
                   with_shake: bool = True):
        x, y = self._shaken(x, y, with_shake)
        self.buffer.put_string(x, y, text, fg_color)

    def draw_frame(self, x: int, y: int, w: int, h: int, char: str = '.',
                   color: int = GRAY_DARKER, with_shake: bool = True):
        """Outline a rectangle with a single repeated glyph."""
        for i in range(w):
            self.put(x + i, y, char, color, with_shake)
            self.put(x + i, y + h - 1, char, color, with_shake)
        for j in range(1, h - 1):
            self.put(x, y + j, char, color, with_shake)
            self.put(x + w - 1, y + j, char, color, with_shake)
