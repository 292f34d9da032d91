"""Narrow process-control API handed to running programs.

Programs never touch another process's record directly. They receive a
``ProcessContext`` holding their own surface plus a ``ProcessControl``
facade that speaks in public process ids (focus, titles, counts and
launching new programs).
"""

import logging
from typing import Any, Dict, Optional, Sequence, TYPE_CHECKING

from .errors import UnknownProcessError
from .models import Process

if TYPE_CHECKING:
    from .manager import WindowManager
    from .surface import BufferedSurface

logger = logging.getLogger(__name__)


class ProcessControl:
    """Id-based operations a program may perform on the window manager."""

    def __init__(self, wm: "WindowManager") -> None:
        self._wm = wm

    def _require(self, process_id: int) -> Process:
        return self._wm.state.require(process_id)

    def get_focus(self) -> Optional[int]:
        """Id of the focused process, or None."""
        return self._wm.state.focus_id

    def set_focus(self, process_id: Optional[int], top: bool = False) -> None:
        """Focus a process by id (None clears focus)."""
        if process_id is None:
            self._wm.lifecycle.set_focus(None)
            return
        self._wm.lifecycle.set_focus(self._require(process_id), top=top)

    def get_title(self, process_id: int) -> str:
        return self._require(process_id).title

    def set_title(self, process_id: int, title: str) -> None:
        self._wm.lifecycle.set_title(self._require(process_id), str(title))

    def get_current(self) -> Optional[int]:
        """Id of the process that is executing right now."""
        return self._wm.state.current_id

    def get_count(self) -> int:
        return len(self._wm.state.processes)

    def launch(self, env: Optional[Dict[str, Any]], path: str, *args: Any) -> Optional[int]:
        """Start a registered program in a new window.

        Args:
            env: Environment mapping exposed to the new program as ``ctx.env``
            path: Registered program name
            *args: Arguments exposed to the new program as ``ctx.args``

        Returns:
            Id of the new process, or None if it exited immediately

        Raises:
            ProgramNotFoundError: If no program is registered under path
        """
        program = self._wm.registry.get(path)
        logger.debug(f"Launching {path!r} with args {args!r}")
        return self._wm.lifecycle.create(program, path, args=args, env=dict(env or {}))


class ProcessContext:
    """Everything a running program can see: its surface, arguments and the control API."""

    def __init__(
        self,
        wm: "WindowManager",
        process: Process,
        args: Sequence[Any] = (),
        env: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._wm = wm
        self._process = process
        self.args = tuple(args)
        self.env: Dict[str, Any] = dict(env or {})
        self.wm = wm.api

    @property
    def surface(self) -> "BufferedSurface":
        return self._process.surface

    @property
    def term(self) -> "BufferedSurface":
        """Current output target (the executing process's surface)."""
        return self._wm.state.output or self._process.surface

    @property
    def pid(self) -> int:
        process_id = self._wm.state.id_of(self._process)
        if process_id is None:
            raise UnknownProcessError(self._process.title)
        return process_id

    @property
    def title(self) -> str:
        return self._process.title

    def log(self, message: str) -> None:
        """Write to the manager log, tagged with this process's title."""
        logger.info(f"[{self._process.title}] {message}")
