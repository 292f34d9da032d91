"""Process lifecycle and window mutations for termwm.

Creation allocates the process record, its surface and its task, then
runs one synchronous, unqueued initial resume so a program's setup code
has run by the time ``create`` returns. Every geometry, visibility, title
and focus change goes through here so dirty propagation and resize
notifications stay consistent.
"""

import logging
from typing import Any, Dict, Optional, Sequence, Union, TYPE_CHECKING

from .api import ProcessContext
from .constants import DEFAULT_HEIGHT, DEFAULT_WIDTH, DEFAULT_X, DEFAULT_Y, MIN_HEIGHT, MIN_WIDTH
from .errors import TaskCreationError
from .models import FocusEvent, Process, ResizeEvent
from .surface import BufferedSurface
from .task import Program, Task

if TYPE_CHECKING:
    from .manager import WindowManager

logger = logging.getLogger(__name__)

Target = Union[int, Process]


class LifecycleManager:
    """Creates, mutates and ends processes."""

    def __init__(self, wm: "WindowManager") -> None:
        self.wm = wm

    @property
    def state(self):
        return self.wm.state

    def resolve(self, target: Optional[Target]) -> Optional[Process]:
        if isinstance(target, Process):
            return target if target.alive else None
        return self.state.get(target)

    # Creation and termination

    def create(
        self,
        program: Program,
        title: str,
        x: Optional[int] = None,
        y: Optional[int] = None,
        w: Optional[int] = None,
        h: Optional[int] = None,
        border: bool = True,
        args: Sequence[Any] = (),
        env: Optional[Dict[str, Any]] = None,
    ) -> Optional[int]:
        """Create a process running program in a new topmost window.

        Returns:
            The new process id, or None if the program could not be started
            or ended during its initial resume
        """
        colors = self.wm.config.colors
        process = Process(
            title=title,
            x=DEFAULT_X if x is None else x,
            y=DEFAULT_Y if y is None else y,
            w=DEFAULT_WIDTH if w is None else w,
            h=DEFAULT_HEIGHT if h is None else h,
            border=border,
        )
        process_id = self.state.add(process)
        process.surface = BufferedSurface(
            self.wm.display, *process.content_rect(), visible=True, fg=colors.window_fg, bg=colors.window_bg
        )
        process.context = ProcessContext(self.wm, process, args=args, env=env)
        self.wm.compositor.invalidate_all()

        try:
            process.task = Task.create(program, process.context, name=title)
        except TaskCreationError as e:
            logger.error(f"Failed to create process {title!r}: {e.message}")
            self.end_process(process)
            return None

        logger.info(f"Created process {process_id} ({title!r}) at {process.geometry}")
        self.wm.scheduler.resume_process(process, None, initial=True)

        if not process.alive:
            return None
        return self.state.id_of(process)

    def end(self, target: Target) -> None:
        """End a process; unknown or dead targets are ignored."""
        process = self.resolve(target)
        if process is None:
            logger.debug(f"Ignoring end of unknown process {target}")
            return
        self.end_process(process)

    def end_process(self, process: Process) -> None:
        if not process.alive:
            return
        process.alive = False
        process_id = self.state.remove(process)
        if process.surface is not None:
            process.surface.set_visible(False)
        if process.task is not None:
            process.task.close()
            process.task = None
        logger.info(f"Ended process {process_id} ({process.title!r})")
        self.wm.compositor.invalidate_all()

    # Window mutations

    def reposition(
        self,
        target: Target,
        x: int,
        y: int,
        w: Optional[int] = None,
        h: Optional[int] = None,
    ) -> None:
        """Move and/or resize a window, notifying the process if its size changed."""
        process = self.resolve(target)
        if process is None:
            return

        w = process.w if w is None else w
        h = process.h if h is None else h
        w = max(w, MIN_WIDTH)
        h = max(h, MIN_HEIGHT)
        resized = (w, h) != (process.w, process.h)

        process.x, process.y, process.w, process.h = x, y, w, h
        if process.surface is not None:
            process.surface.reposition(*process.content_rect())

        if resized:
            self.state.queue_event(process, ResizeEvent())
        self.wm.compositor.invalidate_all()

    def set_visible(self, target: Target, visible: bool) -> None:
        process = self.resolve(target)
        if process is None:
            return
        process.visible = visible
        if process.surface is not None:
            process.surface.set_visible(visible)
        if visible:
            self.state.show(process)
        else:
            self.state.hide(process)
        self.wm.compositor.invalidate_all()

    def set_title(self, target: Target, title: str) -> None:
        process = self.resolve(target)
        if process is None:
            return
        process.title = title
        self.wm.compositor.invalidate_process(process)

    def set_border(self, target: Target, border: bool) -> None:
        """Toggle the decoration band, re-deriving the content rectangle."""
        process = self.resolve(target)
        if process is None:
            return
        process.border = border
        self.reposition(process, process.x, process.y, process.w, process.h)

    def set_focus(self, target: Optional[Target], top: bool = False) -> None:
        """Give input focus to a process (None clears focus).

        Args:
            target: Process or id to focus
            top: Also raise the window to the top of the z-order
        """
        state = self.state
        process = self.resolve(target) if target is not None else None
        compositor = self.wm.compositor

        old = state.focus
        if old is not None and old is not process:
            state.focus = None
            compositor.invalidate_process(old)
            state.queue_event(old, FocusEvent(False))

        if process is None:
            state.focus = None
            return

        if top:
            raised = False
            if process.visible and state.z_order[-1] is not process:
                state.raise_to_top(process)
                raised = True
            if state.focus is not process:
                state.focus = process
                state.queue_event(process, FocusEvent(True))
                compositor.invalidate_process(process, force=True)
            elif raised:
                compositor.invalidate_process(process, force=True)
        elif state.focus is not process:
            state.focus = process
            state.queue_event(process, FocusEvent(True))
            compositor.invalidate_process(process)
