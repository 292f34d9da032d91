"""Program registry and built-in programs for termwm.

Programs are generator functions taking a ``ProcessContext``. The registry
maps names to them; extra entries can be loaded from the ``programs`` table
of config.toml as ``"package.module:function"`` import paths.
"""

import importlib
import logging
import time
from dataclasses import dataclass, fields
from typing import Dict, List, Optional

from .constants import KIND_KEY, KIND_TERMINATE, KIND_TERM_RESIZE, KIND_TICK
from .errors import ProgramImportError, ProgramNotFoundError
from .task import Program

logger = logging.getLogger(__name__)


@dataclass
class ProgramEntry:
    """Registered program"""

    name: str
    factory: Program
    description: str = ""
    source: str = "builtin"


class ProgramRegistry:
    """Name -> program lookup used by the launcher and ``ProcessControl.launch``."""

    def __init__(self, include_builtins: bool = True):
        self._entries: Dict[str, ProgramEntry] = {}
        if include_builtins:
            register_builtins(self)

    def register(self, name: str, factory: Program, description: str = "", source: str = "builtin") -> None:
        if name in self._entries:
            logger.warning(f"Program {name!r} re-registered from {source}")
        self._entries[name] = ProgramEntry(name=name, factory=factory, description=description, source=source)

    def get(self, name: str) -> Program:
        """
        Look up a program by name

        Raises:
            ProgramNotFoundError: If no program is registered under name
        """
        entry = self._entries.get(name)
        if entry is None:
            raise ProgramNotFoundError(name, available=self.names())
        return entry.factory

    def entry(self, name: str) -> Optional[ProgramEntry]:
        return self._entries.get(name)

    def names(self) -> List[str]:
        return sorted(self._entries)

    def entries(self) -> List[ProgramEntry]:
        return [self._entries[name] for name in self.names()]

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def load_entries(self, programs: Dict[str, str]) -> None:
        """
        Import and register 'module:function' program entries

        Raises:
            ProgramImportError: If a module cannot be imported or the
                function is missing or not callable
        """
        for name, target in programs.items():
            module_name, _, attr = target.partition(":")
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                raise ProgramImportError(name, target, str(e))

            factory = getattr(module, attr, None)
            if factory is None or not callable(factory):
                raise ProgramImportError(name, target, f"{attr!r} is not a callable in {module_name}")

            doc = (factory.__doc__ or "").strip().splitlines()
            self.register(name, factory, description=doc[0] if doc else "", source=target)
            logger.info(f"Registered program {name!r} from {target}")


# Built-in programs

def describe_event(event) -> str:
    """Compact one-line rendering: the kind followed by its payload fields."""
    parts = [event.kind]
    for field in fields(event):
        if field.name != "kind":
            parts.append(f"{field.name}={getattr(event, field.name)!r}")
    return " ".join(parts)


def events_program(ctx):
    """Event viewer: prints every event delivered to this window."""
    surface = ctx.surface
    surface.write_line(f"events (pid {ctx.pid})")
    while True:
        event = yield None
        if event is None:
            continue
        if event.kind == KIND_TERMINATE:
            return
        if event.kind == KIND_TERM_RESIZE:
            width, height = surface.get_size()
            surface.write_line(f"resized to {width}x{height}")
            continue
        surface.write_line(describe_event(event))


def hello_program(ctx):
    """Prints a greeting and exits on any key."""
    surface = ctx.surface
    name = ctx.args[0] if ctx.args else ctx.env.get("USER", "world")
    surface.set_cursor_pos(1, 1)
    surface.write(f"Hello, {name}!")
    surface.write_line("Press any key to close")
    yield KIND_KEY


def clock_program(ctx):
    """Shows the current time, refreshed on every tick."""
    surface = ctx.surface
    fmt = ctx.args[0] if ctx.args else "%H:%M:%S"
    redraw = True
    while True:
        if redraw:
            surface.clear()
            surface.set_cursor_pos(1, 1)
            surface.write(time.strftime(fmt))
        event = yield None
        if event is not None and event.kind == KIND_TERMINATE:
            return
        redraw = event is None or event.kind in (KIND_TICK, KIND_TERM_RESIZE)


def register_builtins(registry: ProgramRegistry) -> None:
    registry.register("events", events_program, "Event viewer")
    registry.register("hello", hello_program, "Greeting window")
    registry.register("clock", clock_program, "Clock refreshed on tick")
