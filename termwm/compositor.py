"""Dirty tracking and window compositing for termwm.

Each process carries a dirty level: CLEAN (nothing to do), BORDER_ONLY
(repaint decorations) or FULL (repaint decorations and ask the surface to
repaint its content). Invalidating a window also promotes every window
above it in the z-order to FULL.
"""

import logging
from typing import Optional, TYPE_CHECKING

from .constants import TITLE_BUTTON_CELLS
from .models import DirtyState, Process

if TYPE_CHECKING:
    from .manager import WindowManager

logger = logging.getLogger(__name__)


def pad_title(title: str, length: int) -> str:
    """Left-align title in a field of length cells, truncating if needed."""
    length = max(0, length)
    if len(title) > length:
        return title[:length]
    return title + " " * (length - len(title))


class Compositor:
    """Tracks invalidation and paints the desktop and window decorations."""

    def __init__(self, wm: "WindowManager") -> None:
        self.wm = wm

    @property
    def state(self):
        return self.wm.state

    def invalidate(self, process_id: Optional[int] = None, force: bool = False) -> None:
        """Schedule a redraw.

        Args:
            process_id: None to redraw everything; otherwise redraw the border
                of that window plus border and content of all windows above it
            force: Also redraw the content of the given window
        """
        if process_id is None:
            self.invalidate_all()
            return
        process = self.state.get(process_id)
        if process is None:
            logger.debug(f"Ignoring invalidate of unknown process {process_id}")
            return
        self.invalidate_process(process, force)

    def invalidate_all(self) -> None:
        self.state.draw_background = True
        for process in self.state.z_order:
            process.dirty = DirtyState.FULL

    def invalidate_process(self, process: Process, force: bool = False) -> None:
        if force:
            process.dirty = DirtyState.FULL
        elif process.dirty == DirtyState.CLEAN:
            process.dirty = DirtyState.BORDER_ONLY

        layer = self.state.layer_of(process)
        if layer is not None:
            for above in self.state.z_order[layer + 1:]:
                above.dirty = DirtyState.FULL

    def render(self) -> None:
        """Draw the background (if needed) and every dirty window, back to front."""
        state = self.state
        display = self.wm.display
        colors = self.wm.config.colors

        if state.draw_background:
            display.clear(colors.bg)
            state.draw_background = False

        for process in list(state.z_order):
            self._draw_process(process)

        if state.focus is not None and state.focus.surface is not None:
            state.focus.surface.restore_cursor()
        else:
            display.hide_cursor()
        display.flush()

    def _draw_process(self, process: Process) -> None:
        if not process.visible or process.dirty == DirtyState.CLEAN:
            return

        display = self.wm.display
        config = self.wm.config
        colors = config.colors
        glyphs = config.glyphs

        if process.dirty == DirtyState.FULL and process.surface is not None:
            process.surface.redraw()

        if config.shadow:
            display.write_at(process.x + 1, process.y + process.h, " " * process.w, colors.shadow, colors.shadow)
            for row in range(1, process.h):
                display.write_at(process.x + process.w, process.y + row, " ", colors.shadow, colors.shadow)

        if process.border:
            focused = process is self.state.focus
            title_color = colors.title_focused if focused else colors.title_unfocused
            x, y = process.x, process.y

            title = pad_title(process.title, process.w - TITLE_BUTTON_CELLS)
            display.write_at(x, y, title, colors.title_text, title_color)
            buttons_x = x + len(title)
            display.write_at(buttons_x, y, glyphs.minimize + glyphs.maximize, title_color, colors.title_text)
            display.write_at(buttons_x + 2, y, glyphs.close, colors.title_text, colors.title_close)

            if not process.maximized:
                display.write_at(
                    x + process.w - 1, y + process.h - 1, glyphs.resize, colors.resize_fg, colors.resize_bg
                )

        process.dirty = DirtyState.CLEAN
