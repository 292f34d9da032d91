"""Headless display backed by an in-memory cell grid."""

from typing import List, Optional, Tuple

from ..surface import Cell, Display


class MemoryDisplay(Display):
    """Display that records every cell, for tests and embedding."""

    def __init__(self, width: int = 51, height: int = 19, bg: str = "black") -> None:
        self.width = width
        self.height = height
        self.cursor: Optional[Tuple[int, int]] = None
        self.cursor_visible = False
        self.flush_count = 0
        self._cells: List[List[Cell]] = []
        self.clear(bg)

    def resize(self, width: int, height: int) -> None:
        """Change the display size, as a terminal resize would."""
        bg = self._cells[0][0].bg if self._cells and self._cells[0] else "black"
        self.width = width
        self.height = height
        self.clear(bg)

    def get_size(self) -> Tuple[int, int]:
        return self.width, self.height

    def write_at(self, x: int, y: int, text: str, fg: str, bg: str) -> None:
        if not 1 <= y <= self.height:
            return
        for offset, char in enumerate(text):
            col = x + offset
            if 1 <= col <= self.width:
                self._cells[y - 1][col - 1] = Cell(char, fg, bg)

    def clear(self, bg: str) -> None:
        self._cells = [[Cell(" ", "white", bg)] * self.width for _ in range(self.height)]

    def set_cursor(self, x: int, y: int, visible: bool) -> None:
        self.cursor = (x, y)
        self.cursor_visible = visible

    def hide_cursor(self) -> None:
        self.cursor_visible = False

    def flush(self) -> None:
        self.flush_count += 1

    def cell(self, x: int, y: int) -> Cell:
        return self._cells[y - 1][x - 1]

    def row_text(self, y: int) -> str:
        return "".join(cell.char for cell in self._cells[y - 1])
