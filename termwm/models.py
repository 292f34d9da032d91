"""Data models for the termwm core.

Events are tagged dataclasses decoded once at the backend boundary; each
carries a ``kind`` string so tasks can filter on it. Processes are plain
mutable records owned by the process table and referenced by identity.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, FrozenSet, NamedTuple, Optional, Tuple, Union, TYPE_CHECKING

from .constants import (
    KIND_CHAR,
    KIND_KEY,
    KIND_PASTE,
    KIND_TERMINATE,
    KIND_TERM_RESIZE,
    KIND_WM_FOCUS,
    KIND_WM_LOG,
)

if TYPE_CHECKING:
    from .surface import BufferedSurface
    from .task import Task


# Events

@dataclass(frozen=True)
class CharEvent:
    """A printable character typed by the user."""
    char: str
    kind: str = KIND_CHAR


@dataclass(frozen=True)
class KeyEvent:
    """A key press (kind=key) or release (kind=key_up).

    ``key`` is a backend-neutral key name ("tab", "enter", "a", "left_ctrl").
    ``modifiers`` holds modifiers the backend saw together with the key,
    for terminals that cannot report bare modifier presses.
    """
    key: str
    modifiers: FrozenSet[str] = frozenset()
    kind: str = KIND_KEY


@dataclass(frozen=True)
class PasteEvent:
    """A block of pasted text."""
    text: str
    kind: str = KIND_PASTE


@dataclass(frozen=True)
class TerminateEvent:
    """Request to terminate the focused program (or the manager)."""
    kind: str = KIND_TERMINATE


@dataclass(frozen=True)
class MouseEvent:
    """Pointer event in screen coordinates (1-based).

    For ``mouse_scroll`` the ``button`` field holds the scroll direction
    (-1 up, 1 down).
    """
    kind: str
    button: int
    x: int
    y: int

    @property
    def delta(self) -> int:
        return self.button


@dataclass(frozen=True)
class ResizeEvent:
    """The display, or a window's content area, changed size."""
    kind: str = KIND_TERM_RESIZE


@dataclass(frozen=True)
class FocusEvent:
    """Sent to a process when it gains or loses input focus."""
    focused: bool
    kind: str = KIND_WM_FOCUS


@dataclass(frozen=True)
class LogEvent:
    """Diagnostic message broadcast by the window manager."""
    message: str
    kind: str = KIND_WM_LOG


@dataclass(frozen=True)
class GenericEvent:
    """Opaque broadcast-class event (timers, messages), forwarded verbatim."""
    kind: str
    args: Tuple[Any, ...] = ()


Event = Union[
    CharEvent,
    KeyEvent,
    PasteEvent,
    TerminateEvent,
    MouseEvent,
    ResizeEvent,
    FocusEvent,
    LogEvent,
    GenericEvent,
]


# Window state

class Geometry(NamedTuple):
    """Screen rectangle with a 1-based origin."""
    x: int
    y: int
    w: int
    h: int

    def contains(self, px: int, py: int) -> bool:
        return self.x <= px < self.x + self.w and self.y <= py < self.y + self.h


class DirtyState(IntEnum):
    """Per-process redraw level."""
    CLEAN = 0
    BORDER_ONLY = 1
    FULL = 2


class DragMode(Enum):
    """Window manipulation gesture in progress."""
    MOVE = "move"
    RESIZE = "resize"


@dataclass(eq=False)
class Process:
    """One scheduled, window-owning task.

    Compared by identity: the object itself is the stable handle, while
    the public integer id is its 1-based position in the process table.
    """

    title: str
    x: int
    y: int
    w: int
    h: int
    border: bool = True
    visible: bool = True
    maximized: bool = False
    saved_geometry: Optional[Geometry] = None
    dirty: DirtyState = DirtyState.FULL
    task: Optional["Task"] = None
    event_filter: Optional[str] = None
    alive: bool = True
    surface: Optional["BufferedSurface"] = None
    context: Any = None
    events_delivered: int = 0

    @property
    def geometry(self) -> Geometry:
        return Geometry(self.x, self.y, self.w, self.h)

    def content_rect(self) -> Geometry:
        """Content sub-rectangle; bordered windows reserve the first row."""
        if self.border:
            return Geometry(self.x, self.y + 1, self.w, self.h - 1)
        return Geometry(self.x, self.y, self.w, self.h)


@dataclass
class DragState:
    """Active drag-move or drag-resize gesture."""
    target: Process
    mode: DragMode
    offset: int = 0
