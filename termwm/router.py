"""Event classification and dispatch for termwm.

Every raw input event falls into one of three classes:

- keyboard (char, key, key_up, paste, terminate): global bindings first,
  then the focused process
- pointer (mouse_*): the active drag, else hit-testing front-to-back for
  presses and scrolls, else the focused process
- broadcast (everything else): every live process, ascending id order
"""

import logging
from dataclasses import replace
from typing import Optional, TYPE_CHECKING

from .constants import (
    BUTTON_PRIMARY,
    BUTTON_SECONDARY,
    HIT_TEST_EVENTS,
    KEYBOARD_EVENTS,
    KIND_KEY,
    KIND_KEY_UP,
    KIND_MOUSE_CLICK,
    KIND_TERM_RESIZE,
    MODIFIER_KEYS,
    POINTER_EVENTS,
)
from .models import Event, MouseEvent, Process

if TYPE_CHECKING:
    from .manager import WindowManager

logger = logging.getLogger(__name__)


def translate_pointer(process: Process, event: MouseEvent) -> MouseEvent:
    """Map screen coordinates into the 1-based content space of a window, clamped."""
    cx, cy, cw, ch = process.content_rect()
    x = min(max(event.x - cx + 1, 1), cw)
    y = min(max(event.y - cy + 1, 1), ch)
    return replace(event, x=x, y=y)


class EventRouter:
    """Routes raw events to processes, bindings and the interaction state machine."""

    def __init__(self, wm: "WindowManager") -> None:
        self.wm = wm

    @property
    def state(self):
        return self.wm.state

    def handle(self, event: Event) -> None:
        kind = event.kind
        if kind == KIND_TERM_RESIZE:
            self.wm.interaction.fit_maximized()
            self.wm.compositor.invalidate_all()

        if kind in POINTER_EVENTS:
            self.handle_pointer(event)
        elif kind in KEYBOARD_EVENTS:
            self.handle_keyboard(event)
        else:
            self.broadcast(event)

    def broadcast(self, event: Event) -> None:
        for process in list(self.state.processes):
            self.state.queue_event(process, event)

    # Keyboard

    def handle_keyboard(self, event: Event) -> None:
        if event.kind in (KIND_KEY, KIND_KEY_UP):
            modifier = MODIFIER_KEYS.get(event.key)
            if modifier is not None:
                if event.kind == KIND_KEY:
                    self.state.held_modifiers.add(modifier)
                else:
                    self.state.held_modifiers.discard(modifier)
            elif event.kind == KIND_KEY and self._is_cycle_binding(event):
                self.cycle_focus()
                return

        if self.state.focus is not None:
            self.state.queue_event(self.state.focus, event)

    def _is_cycle_binding(self, event) -> bool:
        config = self.wm.config
        if event.key != config.cycle_key:
            return False
        modifier = config.cycle_modifier
        return modifier in self.state.held_modifiers or modifier in event.modifiers

    def cycle_focus(self) -> Optional[int]:
        """Focus the next process id (wrapping), showing and raising it."""
        count = len(self.state.processes)
        if count == 0:
            return None
        new_focus = (self.state.focus_id or 0) + 1
        if new_focus > count:
            new_focus = 1
        lifecycle = self.wm.lifecycle
        lifecycle.set_visible(new_focus, True)
        lifecycle.set_focus(new_focus, top=True)
        logger.debug(f"Cycled focus to process {new_focus}")
        return new_focus

    # Pointer

    def handle_pointer(self, event: MouseEvent) -> None:
        if self.wm.interaction.active:
            self.wm.interaction.handle(event)
            return

        if event.kind not in HIT_TEST_EVENTS:
            if self.state.focus is not None:
                self.state.queue_event(self.state.focus, translate_pointer(self.state.focus, event))
            return

        hit = self.hit_test(event.x, event.y)
        if hit is None:
            if event.kind == KIND_MOUSE_CLICK:
                self._handle_desktop_click(event)
            return

        consumed = False
        if event.kind == KIND_MOUSE_CLICK:
            self.wm.lifecycle.set_focus(hit, top=True)
            consumed = self.handle_decoration_click(hit, event)

        if not consumed and hit.alive and hit.content_rect().contains(event.x, event.y):
            self.state.queue_event(hit, translate_pointer(hit, event))

    def hit_test(self, x: int, y: int) -> Optional[Process]:
        """Topmost visible window whose rectangle contains (x, y)."""
        for process in reversed(self.state.z_order):
            if process.visible and process.geometry.contains(x, y):
                return process
        return None

    def handle_decoration_click(self, process: Process, event: MouseEvent) -> bool:
        """Apply a press on a window's decorations.

        Returns:
            True if the press landed on the decoration and must not reach
            the window content
        """
        if not process.border:
            return False

        right = process.x + process.w - 1
        if event.y == process.y:
            if event.button == BUTTON_PRIMARY:
                if event.x == right:
                    self.wm.lifecycle.end_process(process)
                elif event.x == right - 1:
                    self.wm.interaction.toggle_maximized(process)
                elif event.x == right - 2:
                    self.wm.lifecycle.set_visible(process, False)
                elif not process.maximized:
                    self.wm.interaction.begin_move(process, event.x - process.x)
            return True

        if event.y == process.y + process.h - 1 and event.x == right and not process.maximized:
            self.wm.interaction.begin_resize(process)
            return True
        return False

    def _handle_desktop_click(self, event: MouseEvent) -> None:
        if event.button == BUTTON_SECONDARY:
            if self.wm.launcher is not None:
                self.wm.launcher(event.x, event.y)
        elif self.state.focus is not None:
            self.wm.lifecycle.set_focus(None)
