"""Process table and shared window manager state.

All mutable tables (processes, z-order, focus, event queue, drag state)
live in one ``WMState`` owned by the window manager and mutated only from
its single control thread.

Collaborators hold ``Process`` objects as stable handles. The public id of a
process is its 1-based position in the table, so removing a process shifts
every higher id down by one wherever it is observed (table, z-order, focus,
queue) without a separate renumbering pass.
"""

import logging
from collections import deque
from typing import Deque, List, Optional, Set, Tuple

from .errors import UnknownProcessError
from .models import DragState, Event, Process

logger = logging.getLogger(__name__)


class WMState:
    """Scheduler-owned state shared by every core component."""

    def __init__(self) -> None:
        self.processes: List[Process] = []
        self.z_order: List[Process] = []  # back-to-front, visible only
        self.focus: Optional[Process] = None
        self.current: Optional[Process] = None
        self.output = None  # surface of the executing process, None = root display
        self.event_queue: Deque[Tuple[Process, Optional[Event]]] = deque()
        self.drag: Optional[DragState] = None
        self.draw_background = False
        self.held_modifiers: Set[str] = set()

    # Identity

    def id_of(self, process: Optional[Process]) -> Optional[int]:
        """Public 1-based id of a process, or None if it is not in the table."""
        if process is None:
            return None
        for index, candidate in enumerate(self.processes):
            if candidate is process:
                return index + 1
        return None

    def get(self, process_id: Optional[int]) -> Optional[Process]:
        if process_id is None or not 1 <= process_id <= len(self.processes):
            return None
        return self.processes[process_id - 1]

    def require(self, process_id: Optional[int]) -> Process:
        process = self.get(process_id)
        if process is None:
            raise UnknownProcessError(process_id)
        return process

    @property
    def focus_id(self) -> Optional[int]:
        return self.id_of(self.focus)

    @property
    def current_id(self) -> Optional[int]:
        return self.id_of(self.current)

    def z_order_ids(self) -> List[int]:
        return [self.id_of(p) for p in self.z_order]

    def pending(self) -> List[Tuple[int, Optional[Event]]]:
        """Snapshot of queued deliveries as (target id, event), oldest first."""
        return [(self.id_of(p), event) for p, event in self.event_queue]

    # Table mutation

    def add(self, process: Process) -> int:
        """Append a process to the table and the top of the z-order."""
        self.processes.append(process)
        if process.visible:
            self.z_order.append(process)
        return len(self.processes)

    def remove(self, process: Process) -> Optional[int]:
        """Remove a process from every table and return its former id.

        Queued deliveries targeting the process are dropped, and focus and
        drag state referencing it are cleared.
        """
        process_id = self.id_of(process)
        if process_id is None:
            return None

        del self.processes[process_id - 1]
        if process in self.z_order:
            self.z_order.remove(process)
        if self.focus is process:
            self.focus = None
        if self.drag is not None and self.drag.target is process:
            self.drag = None

        dropped = len(self.event_queue)
        self.event_queue = deque(
            (target, event) for target, event in self.event_queue if target is not process
        )
        dropped -= len(self.event_queue)
        if dropped:
            logger.debug(f"Dropped {dropped} queued event(s) for removed process {process_id}")

        return process_id

    # Z-order

    def raise_to_top(self, process: Process) -> None:
        if process in self.z_order:
            self.z_order.remove(process)
        self.z_order.append(process)

    def show(self, process: Process) -> None:
        if process not in self.z_order:
            self.z_order.append(process)

    def hide(self, process: Process) -> None:
        if process in self.z_order:
            self.z_order.remove(process)

    def layer_of(self, process: Process) -> Optional[int]:
        """Index of a process in the z-order (0 = bottom), or None if hidden."""
        try:
            return self.z_order.index(process)
        except ValueError:
            return None

    # Event queue

    def queue_event(self, process: Process, event: Optional[Event]) -> None:
        self.event_queue.append((process, event))

    def pop_event(self) -> Optional[Tuple[Process, Optional[Event]]]:
        if not self.event_queue:
            return None
        return self.event_queue.popleft()

    # Consistency

    def validate(self) -> List[str]:
        """Check structural invariants and return a list of violations."""
        problems = []
        for process in self.z_order:
            if process not in self.processes:
                problems.append(f"z-order references removed process {process.title!r}")
            elif not process.visible:
                problems.append(f"z-order contains hidden process {self.id_of(process)}")
        for process in self.processes:
            if process.visible and self.z_order.count(process) != 1:
                problems.append(
                    f"visible process {self.id_of(process)} appears "
                    f"{self.z_order.count(process)} times in z-order"
                )
        if self.focus is not None and self.focus not in self.processes:
            problems.append("focus references a removed process")
        for target, _ in self.event_queue:
            if target not in self.processes:
                problems.append(f"queued event targets removed process {target.title!r}")
        return problems
