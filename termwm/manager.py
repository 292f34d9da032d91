"""Window manager facade and main loop.

``WindowManager`` owns the shared state and wires the core components
together. Each main-loop iteration renders, reads exactly one raw event,
routes it and then drains the event queue completely before the next read.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Optional, Protocol

from .api import ProcessControl
from .compositor import Compositor
from .config import WMConfig
from .constants import KIND_TERMINATE
from .errors import ProgramNotFoundError
from .interaction import InteractionStateMachine
from .lifecycle import LifecycleManager
from .models import Event, LogEvent
from .programs import ProgramRegistry
from .router import EventRouter
from .scheduler import Scheduler
from .state import WMState
from .surface import Display
from .task import Program

logger = logging.getLogger(__name__)

Launcher = Callable[[int, int], Any]


class EventSource(Protocol):
    def next_event(self) -> Event:
        ...


class WindowManager:
    """Cooperative window manager over a single display."""

    def __init__(
        self,
        display: Display,
        config: Optional[WMConfig] = None,
        registry: Optional[ProgramRegistry] = None,
        launcher: Optional[Launcher] = None,
    ) -> None:
        self.display = display
        self.config = config or WMConfig()
        self.registry = registry or ProgramRegistry()
        self.state = WMState()
        self.api = ProcessControl(self)
        self.scheduler = Scheduler(self)
        self.compositor = Compositor(self)
        self.lifecycle = LifecycleManager(self)
        self.interaction = InteractionStateMachine(self)
        self.router = EventRouter(self)
        self.launcher = launcher if launcher is not None else self.launch_at
        self.running = False

    # Process helpers

    def create(self, program: Program, title: str, *args, **kwargs) -> Optional[int]:
        return self.lifecycle.create(program, title, *args, **kwargs)

    def launch(
        self,
        name: str,
        *args: Any,
        x: Optional[int] = None,
        y: Optional[int] = None,
        env: Optional[Dict[str, Any]] = None,
    ) -> Optional[int]:
        """Start a registered program by name.

        Raises:
            ProgramNotFoundError: If name is not registered
        """
        program = self.registry.get(name)
        return self.lifecycle.create(program, name, x=x, y=y, args=args, env=env)

    def launch_at(self, x: int, y: int) -> Optional[int]:
        """Default launcher hook: start the configured program at the click position."""
        name = self.config.launcher_program
        if not name:
            return None
        try:
            process_id = self.launch(name, x=x, y=y)
        except ProgramNotFoundError as e:
            logger.error(f"Launcher failed: {e.message}")
            return None
        if process_id is not None:
            self.lifecycle.set_focus(process_id, top=True)
        return process_id

    def start_programs(self, names: Iterable[str]) -> None:
        """Launch programs by name and focus the first; unknown names are logged and skipped."""
        for name in names:
            try:
                self.launch(name)
            except ProgramNotFoundError as e:
                logger.error(f"{e.message} ({', '.join(self.registry.names())} available)")
        if self.state.processes:
            self.lifecycle.set_focus(1)

    def log(self, message: str) -> None:
        """Broadcast a diagnostic message to every process."""
        logger.info(message)
        self.router.broadcast(LogEvent(message))

    # Main loop

    def step(self, event: Event) -> None:
        """Route one raw event and drain the resulting deliveries."""
        self.router.handle(event)
        self.scheduler.run_queue()

    def should_exit(self, event: Event) -> bool:
        return event.kind == KIND_TERMINATE and self.state.focus is None

    def run(self, events: EventSource) -> None:
        """Run until a terminate request arrives while nothing has focus."""
        self.running = True
        self.compositor.invalidate_all()
        self.scheduler.run_queue()
        try:
            while self.running:
                self.compositor.render()
                event = events.next_event()
                if self.should_exit(event):
                    logger.info("Terminate with no focused process, exiting")
                    break
                self.step(event)
        finally:
            self.running = False
            self.shutdown()

    def shutdown(self) -> None:
        """End every remaining process so program cleanup code runs."""
        while self.state.processes:
            self.lifecycle.end_process(self.state.processes[-1])
