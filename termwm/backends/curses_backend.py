"""Curses terminal backend: root display plus input decoding.

Colors are rich color names; they are downgraded to the terminal's palette
and mapped onto a cache of curses color pairs. The standard 16 rich colors
share curses' numbering (0 black .. 7 white, 8-15 bright).
"""

import curses
import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from rich.color import Color, ColorParseError, ColorSystem

from ..constants import (
    BUTTON_MIDDLE,
    BUTTON_PRIMARY,
    BUTTON_SECONDARY,
    KIND_MOUSE_CLICK,
    KIND_MOUSE_DRAG,
    KIND_MOUSE_SCROLL,
    KIND_MOUSE_UP,
    KIND_TICK,
)
from ..models import CharEvent, Event, GenericEvent, KeyEvent, MouseEvent, ResizeEvent, TerminateEvent
from ..surface import Display

logger = logging.getLogger(__name__)


def _safe_addstr(win: "curses.window", y: int, x: int, s: str, attr: int = 0) -> None:
    # Writing the bottom-right cell moves the cursor off-screen and raises.
    try:
        win.addstr(y, x, s, attr)
    except curses.error:
        pass


class CursesDisplay(Display):
    """Display contract over a curses standard screen."""

    def __init__(self, stdscr: "curses.window") -> None:
        self.stdscr = stdscr
        self._pairs: Dict[Tuple[int, int], int] = {}
        self._numbers: Dict[str, int] = {}
        self._has_colors = curses.has_colors()
        if self._has_colors:
            curses.start_color()
            try:
                curses.use_default_colors()
            except curses.error:
                pass
        self.hide_cursor()

    def get_size(self) -> Tuple[int, int]:
        height, width = self.stdscr.getmaxyx()
        return width, height

    def color_number(self, name: str) -> int:
        """Curses color number for a rich color name (-1 = terminal default)."""
        number = self._numbers.get(name)
        if number is not None:
            return number

        try:
            color = Color.parse(name)
        except ColorParseError:
            logger.warning(f"Unknown color {name!r}, using terminal default")
            color = Color.default()

        system = ColorSystem.EIGHT_BIT if curses.COLORS >= 256 else ColorSystem.STANDARD
        number = color.downgrade(system).number
        if number is None:
            number = -1
        elif curses.COLORS < 16 and number >= 8:
            number -= 8
        self._numbers[name] = number
        return number

    def color_attr(self, fg: str, bg: str) -> int:
        if not self._has_colors:
            return curses.A_REVERSE if bg != "black" else 0

        key = (self.color_number(fg), self.color_number(bg))
        pair = self._pairs.get(key)
        if pair is None:
            pair = len(self._pairs) + 1
            if pair >= curses.COLOR_PAIRS:
                logger.debug(f"Out of color pairs for {fg}/{bg}")
                return 0
            curses.init_pair(pair, *key)
            self._pairs[key] = pair
        return curses.color_pair(pair)

    def write_at(self, x: int, y: int, text: str, fg: str, bg: str) -> None:
        width, height = self.get_size()
        if not 1 <= y <= height or x > width or not text:
            return
        if x < 1:
            text = text[1 - x:]
            x = 1
        text = text[:width - x + 1]
        if text:
            _safe_addstr(self.stdscr, y - 1, x - 1, text, self.color_attr(fg, bg))

    def clear(self, bg: str) -> None:
        self.stdscr.bkgd(" ", self.color_attr("white", bg))
        self.stdscr.erase()

    def set_cursor(self, x: int, y: int, visible: bool) -> None:
        try:
            self.stdscr.move(y - 1, x - 1)
            curses.curs_set(2 if visible else 0)
        except curses.error:
            pass

    def hide_cursor(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            pass

    def flush(self) -> None:
        self.stdscr.noutrefresh()
        curses.doupdate()


KEY_NAMES: Dict[int, str] = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_PPAGE: "page_up",
    curses.KEY_NPAGE: "page_down",
    curses.KEY_IC: "insert",
    curses.KEY_DC: "delete",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_ENTER: "enter",
    curses.KEY_BTAB: "tab",
}
KEY_NAMES.update({curses.KEY_F0 + n: f"f{n}" for n in range(1, 13)})

CONTROL_CHARS: Dict[str, str] = {
    "\n": "enter",
    "\r": "enter",
    "\t": "tab",
    "\x1b": "escape",
    "\x7f": "backspace",
    "\x08": "backspace",
}

# curses button number -> termwm button (1 primary, 2 secondary, 3 middle)
MOUSE_BUTTONS: Tuple[Tuple[int, int], ...] = (
    (1, BUTTON_PRIMARY),
    (3, BUTTON_SECONDARY),
    (2, BUTTON_MIDDLE),
)


def _mask(name: str) -> int:
    return getattr(curses, name, 0)


class CursesInput:
    """Reads curses input and decodes it into typed termwm events."""

    def __init__(self, stdscr: "curses.window", tick_interval_ms: int = 1000) -> None:
        self.stdscr = stdscr
        self.tick_interval_ms = tick_interval_ms
        self.held_button: Optional[int] = None
        self._pending: Deque[Event] = deque()

    def enable(self) -> None:
        """Turn on keypad decoding, mouse reporting and the idle timeout."""
        self.stdscr.keypad(True)
        curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
        curses.mouseinterval(0)
        self.stdscr.timeout(self.tick_interval_ms if self.tick_interval_ms > 0 else -1)

    def next_event(self) -> Event:
        """Block until the next event; an idle timeout yields a ``tick``."""
        while not self._pending:
            try:
                ch = self.stdscr.get_wch()
            except KeyboardInterrupt:
                return TerminateEvent()
            except curses.error:
                return GenericEvent(KIND_TICK)
            self._pending.extend(self.decode(ch))
        return self._pending.popleft()

    def decode(self, ch) -> List[Event]:
        """Decode one ``get_wch`` result (str or int) into zero or more events."""
        if isinstance(ch, str):
            return self._decode_char(ch)

        if ch == curses.KEY_RESIZE:
            return [ResizeEvent()]
        if ch == curses.KEY_MOUSE:
            return self.decode_mouse()

        name = KEY_NAMES.get(ch)
        if name is None:
            logger.debug(f"Ignoring unmapped key code {ch}")
            return []
        return [KeyEvent(name)]

    def _decode_char(self, ch: str) -> List[Event]:
        if ch == "\x03":
            return [TerminateEvent()]
        if ch in CONTROL_CHARS:
            return [KeyEvent(CONTROL_CHARS[ch])]
        code = ord(ch)
        if 1 <= code <= 26:
            return [KeyEvent(chr(code + 96), modifiers=frozenset({"ctrl"}))]
        if not ch.isprintable():
            logger.debug(f"Ignoring control character {code:#x}")
            return []
        return [KeyEvent(ch.lower()), CharEvent(ch)]

    def decode_mouse(self) -> List[Event]:
        try:
            _, mx, my, _, bstate = curses.getmouse()
        except curses.error:
            return []
        x, y = mx + 1, my + 1

        if bstate & _mask("BUTTON4_PRESSED"):
            return [MouseEvent(KIND_MOUSE_SCROLL, -1, x, y)]
        if bstate & _mask("BUTTON5_PRESSED"):
            return [MouseEvent(KIND_MOUSE_SCROLL, 1, x, y)]

        for number, button in MOUSE_BUTTONS:
            if bstate & _mask(f"BUTTON{number}_PRESSED"):
                self.held_button = button
                return [MouseEvent(KIND_MOUSE_CLICK, button, x, y)]
            if bstate & _mask(f"BUTTON{number}_RELEASED"):
                self.held_button = None
                return [MouseEvent(KIND_MOUSE_UP, button, x, y)]
            if bstate & _mask(f"BUTTON{number}_CLICKED"):
                self.held_button = None
                return [MouseEvent(KIND_MOUSE_CLICK, button, x, y), MouseEvent(KIND_MOUSE_UP, button, x, y)]

        if bstate & _mask("REPORT_MOUSE_POSITION") and self.held_button is not None:
            return [MouseEvent(KIND_MOUSE_DRAG, self.held_button, x, y)]
        return []
