"""Resumable execution units for termwm processes.

A program is a generator function taking a ``ProcessContext``. Each
``yield`` suspends the program and hands back the event kind it wants next
(``None`` for any kind); the delivered event is the value of the ``yield``
expression. Returning, or raising, ends the program.

    def echo(ctx):
        while True:
            event = yield "char"
            ctx.surface.write(event.char)
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generator, Optional

from .errors import TaskCreationError
from .models import Event

logger = logging.getLogger(__name__)

Program = Callable[..., Generator[Optional[str], Optional[Event], Any]]


@dataclass(frozen=True)
class ResumeResult:
    """Outcome of resuming a task."""

    finished: bool
    event_filter: Optional[str] = None
    error: Optional[BaseException] = None


class Task:
    """Wraps a program generator with an explicit resume/result interface."""

    def __init__(self, generator: Generator, name: str = "task") -> None:
        self._generator = generator
        self.name = name
        self.started = False
        self.finished = False

    @classmethod
    def create(cls, program: Program, context: Any, name: str = "task") -> "Task":
        """Instantiate a program for a context.

        Raises:
            TaskCreationError: If the program is not callable, raises while
                being called, or does not return a generator
        """
        if not callable(program):
            raise TaskCreationError(name, f"{program!r} is not callable")
        try:
            generator = program(context)
        except Exception as e:
            raise TaskCreationError(name, f"{type(e).__name__}: {e}")
        if not inspect.isgenerator(generator):
            raise TaskCreationError(name, f"expected a generator, got {type(generator).__name__}")
        return cls(generator, name=name)

    def resume(self, event: Optional[Event]) -> ResumeResult:
        """Run the task until its next yield, delivering event.

        The first resume starts the generator; its event is not visible to
        the program since nothing is waiting on a ``yield`` yet.
        """
        if self.finished:
            return ResumeResult(finished=True)
        try:
            if not self.started:
                self.started = True
                wanted = next(self._generator)
            else:
                wanted = self._generator.send(event)
        except StopIteration:
            self.finished = True
            return ResumeResult(finished=True)
        except (Exception, SystemExit, KeyboardInterrupt) as e:
            self.finished = True
            logger.error(f"Task {self.name!r} raised {type(e).__name__}: {e}", exc_info=True)
            return ResumeResult(finished=True, error=e)

        if wanted is not None and not isinstance(wanted, str):
            logger.warning(f"Task {self.name!r} yielded non-string filter {wanted!r}, treating as any")
            wanted = None
        return ResumeResult(finished=False, event_filter=wanted)

    def close(self) -> None:
        """Finalize the generator so its cleanup code runs."""
        if self.finished:
            return
        self.finished = True
        try:
            self._generator.close()
        except (RuntimeError, ValueError) as e:
            logger.warning(f"Task {self.name!r} ignored close: {e}")
        except Exception as e:
            logger.error(f"Task {self.name!r} failed during cleanup: {e}", exc_info=True)
