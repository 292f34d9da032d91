"""Drag-move, drag-resize and maximize handling for termwm windows.

States: Idle, Dragging(MOVE, target, offset) and Dragging(RESIZE, target).
While a drag is active the event router hands every pointer event here;
motion events reshape the target window and a release returns to Idle.
"""

import logging
from typing import Optional, TYPE_CHECKING

from .constants import KIND_MOUSE_DRAG, KIND_MOUSE_UP, MIN_HEIGHT, MIN_WIDTH
from .models import DragMode, DragState, Geometry, MouseEvent, Process

if TYPE_CHECKING:
    from .manager import WindowManager

logger = logging.getLogger(__name__)


class InteractionStateMachine:
    """Owns the drag state and the maximize/restore transitions."""

    def __init__(self, wm: "WindowManager") -> None:
        self.wm = wm

    @property
    def state(self):
        return self.wm.state

    @property
    def active(self) -> bool:
        return self.state.drag is not None

    @property
    def mode(self) -> Optional[DragMode]:
        return self.state.drag.mode if self.state.drag is not None else None

    def begin_move(self, process: Process, offset: int) -> None:
        self.state.drag = DragState(target=process, mode=DragMode.MOVE, offset=offset)
        logger.debug(f"Begin move of {process.title!r} (offset {offset})")

    def begin_resize(self, process: Process) -> None:
        self.state.drag = DragState(target=process, mode=DragMode.RESIZE)
        logger.debug(f"Begin resize of {process.title!r}")

    def handle(self, event: MouseEvent) -> None:
        """Apply a pointer event to the active drag; other pointer kinds are swallowed."""
        drag = self.state.drag
        if drag is None:
            return

        if event.kind == KIND_MOUSE_UP:
            self.state.drag = None
            logger.debug(f"End {drag.mode.value} of {drag.target.title!r}")
            return

        if event.kind != KIND_MOUSE_DRAG or not drag.target.alive:
            return

        process = drag.target
        lifecycle = self.wm.lifecycle
        if drag.mode == DragMode.MOVE:
            lifecycle.reposition(process, event.x - drag.offset, event.y)
        elif drag.mode == DragMode.RESIZE:
            lifecycle.reposition(
                process,
                process.x,
                process.y,
                max(event.x - process.x + 1, MIN_WIDTH),
                max(event.y - process.y + 1, MIN_HEIGHT),
            )

    # Maximize

    def set_maximized(self, target, maximized: bool) -> None:
        """Fit a window to the display, or restore its saved geometry."""
        process = self.wm.lifecycle.resolve(target)
        if process is None or process.maximized == maximized:
            return

        process.maximized = maximized
        if maximized:
            process.saved_geometry = process.geometry
            width, height = self.wm.display.get_size()
            self.wm.lifecycle.reposition(process, 1, 1, width, height)
        else:
            saved = process.saved_geometry or process.geometry
            process.saved_geometry = None
            self.wm.lifecycle.reposition(process, saved.x, saved.y, saved.w, saved.h)

    def toggle_maximized(self, target) -> None:
        process = self.wm.lifecycle.resolve(target)
        if process is not None:
            self.set_maximized(process, not process.maximized)

    def fit_maximized(self) -> None:
        """Re-fit every maximized window after the display changed size."""
        width, height = self.wm.display.get_size()
        for process in list(self.state.processes):
            if process.maximized and process.geometry != Geometry(1, 1, width, height):
                self.wm.lifecycle.reposition(process, 1, 1, width, height)
