"""Cooperative scheduler for termwm processes.

Exactly one process executes at a time. A process runs only when the
scheduler resumes it with an event matching the kind it last asked for (or
a terminate request), and it runs until its next ``yield``. Resumes may
nest, e.g. when a running program launches another one synchronously; the
previously executing process and output target are always restored.
"""

import logging
from contextlib import contextmanager
from functools import partial
from typing import Optional, TYPE_CHECKING

from .constants import KIND_KEY, KIND_TERMINATE
from .errors import TaskCreationError
from .models import Event, Process
from .task import ResumeResult, Task

if TYPE_CHECKING:
    from .manager import WindowManager

logger = logging.getLogger(__name__)


def press_any_key(ctx, error: Optional[BaseException] = None):
    """Placeholder shown when a program exits before receiving any event."""
    surface = ctx.surface
    if error is not None:
        surface.set_text_color("red")
        surface.write(f"{type(error).__name__}: {error}")
        surface.set_cursor_pos(1, surface.get_cursor_pos()[1] + 1)
        surface.set_text_color("white")
    surface.write("Press any key")
    yield KIND_KEY


class Scheduler:
    """Resumes process tasks with filtered event delivery."""

    def __init__(self, wm: "WindowManager") -> None:
        self.wm = wm

    @property
    def state(self):
        return self.wm.state

    def resume(self, process_id: int, event: Optional[Event]) -> bool:
        """Resume the process with the given id; unknown ids are a no-op."""
        process = self.state.get(process_id)
        if process is None:
            logger.debug(f"Ignoring resume of unknown process {process_id}")
            return False
        return self.resume_process(process, event)

    def resume_process(self, process: Process, event: Optional[Event], initial: bool = False) -> bool:
        """Deliver an event to a process.

        Returns:
            True if the task actually ran, False if the delivery was skipped
        """
        if not process.alive or process.task is None:
            return False

        kind = event.kind if event is not None else None
        if process.event_filter is not None and kind != process.event_filter and kind != KIND_TERMINATE:
            return False

        with self.executing(process):
            result = process.task.resume(event)
            if event is not None:
                process.events_delivered += 1

        process.event_filter = result.event_filter

        if result.finished:
            self._handle_finished(process, result, initial)
        elif process.alive:
            self.wm.compositor.invalidate_process(process)
        return True

    def run_queue(self) -> int:
        """Drain the event queue in FIFO order, including events queued meanwhile.

        Returns:
            Number of deliveries that resumed a task
        """
        delivered = 0
        while self.state.event_queue:
            process, event = self.state.pop_event()
            if self.resume_process(process, event):
                delivered += 1
        return delivered

    @contextmanager
    def executing(self, process: Process):
        """Make a process current and redirect output to its surface."""
        state = self.state
        previous = state.current
        state.current = process
        state.output = process.surface
        try:
            yield process
        finally:
            if previous is not None and previous.alive:
                state.current = previous
                state.output = previous.surface
                previous.surface.restore_cursor()
            else:
                state.current = None
                state.output = None

    def _handle_finished(self, process: Process, result: ResumeResult, initial: bool) -> None:
        prompt = (
            initial
            and process.events_delivered == 0
            and self.wm.config.first_exit_policy == "prompt"
        )
        if prompt and process.alive:
            logger.info(f"Process {process.title!r} exited immediately, showing placeholder")
            try:
                process.task = Task.create(
                    partial(press_any_key, error=result.error), process.context, name=process.title
                )
            except TaskCreationError as e:
                logger.error(f"Could not create placeholder: {e}")
                self.wm.lifecycle.end_process(process)
                return
            process.event_filter = None
            self.state.queue_event(process, None)
            return

        self.wm.lifecycle.end_process(process)
