"""Drawable surfaces for termwm windows.

A ``Display`` is the shared character-cell terminal. Each window owns a
``BufferedSurface``: a retained grid of cells over a sub-rectangle of the
display. Writes to a visible surface are drawn through to the display
immediately; ``redraw()`` repaints the whole buffer, which the compositor
requests when a window is fully invalidated.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, NamedTuple, Tuple

logger = logging.getLogger(__name__)


class Cell(NamedTuple):
    char: str
    fg: str
    bg: str


class Display(ABC):
    """Root terminal contract implemented by rendering backends.

    Coordinates are 1-based. Implementations must clip writes that fall
    outside the display.
    """

    @abstractmethod
    def get_size(self) -> Tuple[int, int]:
        """Return (width, height) in cells."""

    @abstractmethod
    def write_at(self, x: int, y: int, text: str, fg: str, bg: str) -> None:
        """Write text starting at (x, y) with the given colors."""

    @abstractmethod
    def clear(self, bg: str) -> None:
        """Fill the whole display with blank cells of color bg."""

    @abstractmethod
    def set_cursor(self, x: int, y: int, visible: bool) -> None:
        """Place the hardware cursor and set its visibility."""

    @abstractmethod
    def hide_cursor(self) -> None:
        """Hide the hardware cursor."""

    def flush(self) -> None:
        """Push pending output to the terminal (no-op by default)."""


class BufferedSurface:
    """Independently drawable, repositionable window content area."""

    def __init__(
        self,
        display: Display,
        x: int,
        y: int,
        w: int,
        h: int,
        visible: bool = True,
        fg: str = "white",
        bg: str = "black",
    ) -> None:
        self.display = display
        self.x = x
        self.y = y
        self.w = max(0, w)
        self.h = max(0, h)
        self.visible = visible
        self.text_color = fg
        self.background_color = bg
        self.cursor_x = 1
        self.cursor_y = 1
        self.cursor_blink = False
        self._lines: List[List[Cell]] = [self._blank_line() for _ in range(self.h)]

    # Contract used by the window manager core

    def reposition(self, x: int, y: int, w: int, h: int) -> None:
        """Move and resize, keeping existing content anchored top-left."""
        w = max(0, w)
        h = max(0, h)
        if w != self.w or h != self.h:
            blank = Cell(" ", self.text_color, self.background_color)
            lines = []
            for row in range(h):
                old = self._lines[row] if row < len(self._lines) else []
                line = old[:w] + [blank] * max(0, w - len(old))
                lines.append(line)
            self._lines = lines
        self.x, self.y, self.w, self.h = x, y, w, h

    def set_visible(self, visible: bool) -> None:
        self.visible = visible

    def is_visible(self) -> bool:
        return self.visible

    def redraw(self) -> None:
        """Repaint the buffered content onto the display."""
        if not self.visible:
            return
        for row, line in enumerate(self._lines):
            self._draw_run(1, row + 1, line)

    def restore_cursor(self) -> None:
        """Put the display cursor where this surface last left it."""
        if not self.visible:
            self.display.hide_cursor()
            return
        self.display.set_cursor(
            self.x + self.cursor_x - 1,
            self.y + self.cursor_y - 1,
            self.cursor_blink,
        )

    # Drawing API used by programs

    def get_size(self) -> Tuple[int, int]:
        return self.w, self.h

    def get_position(self) -> Tuple[int, int]:
        return self.x, self.y

    def set_cursor_pos(self, x: int, y: int) -> None:
        self.cursor_x = x
        self.cursor_y = y

    def get_cursor_pos(self) -> Tuple[int, int]:
        return self.cursor_x, self.cursor_y

    def set_cursor_blink(self, blink: bool) -> None:
        self.cursor_blink = blink

    def set_text_color(self, color: str) -> None:
        self.text_color = color

    def set_background_color(self, color: str) -> None:
        self.background_color = color

    def write(self, text: str) -> None:
        """Write text at the cursor and advance it; clipped to the surface."""
        text = str(text)
        row = self.cursor_y - 1
        start = self.cursor_x
        self.cursor_x += len(text)
        if not 0 <= row < self.h:
            return
        written = []
        for offset, char in enumerate(text):
            col = start + offset - 1
            if 0 <= col < self.w:
                cell = Cell(char, self.text_color, self.background_color)
                self._lines[row][col] = cell
                written.append((col, cell))
        if written and self.visible:
            first_col = written[0][0]
            self._draw_run(first_col + 1, self.cursor_y, [cell for _, cell in written])

    def write_line(self, text: str) -> None:
        """Write text on its own line, scrolling when the cursor is past the bottom."""
        if self.cursor_x > 1:
            self.cursor_y += 1
        if self.cursor_y > self.h:
            self.scroll(self.cursor_y - self.h)
            self.cursor_y = self.h
        self.cursor_x = 1
        self.write(text)

    def clear(self) -> None:
        self._lines = [self._blank_line() for _ in range(self.h)]
        self.redraw()

    def clear_line(self) -> None:
        row = self.cursor_y - 1
        if 0 <= row < self.h:
            self._lines[row] = self._blank_line()
            if self.visible:
                self._draw_run(1, self.cursor_y, self._lines[row])

    def scroll(self, n: int = 1) -> None:
        """Scroll content up by n lines (down when n is negative)."""
        if n == 0 or self.h == 0:
            return
        if n > 0:
            n = min(n, self.h)
            self._lines = self._lines[n:] + [self._blank_line() for _ in range(n)]
        else:
            n = min(-n, self.h)
            self._lines = [self._blank_line() for _ in range(n)] + self._lines[:-n]
        self.redraw()

    def get_line(self, y: int) -> str:
        """Text of content row y (1-based), used by tests and tooling."""
        return "".join(cell.char for cell in self._lines[y - 1])

    def get_cell(self, x: int, y: int) -> Cell:
        return self._lines[y - 1][x - 1]

    # Internal helpers

    def _blank_line(self) -> List[Cell]:
        return [Cell(" ", self.text_color, self.background_color)] * self.w

    def _draw_run(self, col: int, row: int, cells: List[Cell]) -> None:
        """Draw cells starting at local (col, row), batching equal colors."""
        i = 0
        while i < len(cells):
            fg, bg = cells[i].fg, cells[i].bg
            j = i
            while j < len(cells) and cells[j].fg == fg and cells[j].bg == bg:
                j += 1
            text = "".join(cell.char for cell in cells[i:j])
            self.display.write_at(self.x + col - 1 + i, self.y + row - 1, text, fg, bg)
            i = j
