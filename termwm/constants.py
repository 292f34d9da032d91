"""Centralized constants and configuration paths for termwm.

Single source of truth for window geometry defaults, event classification
sets, and the file paths the window manager reads and writes.
"""

from pathlib import Path
from typing import Final, FrozenSet


# Minimum window size enforced by interactive resize and reposition
MIN_WIDTH: Final[int] = 4
MIN_HEIGHT: Final[int] = 3

# Default geometry for windows created without explicit placement
DEFAULT_X: Final[int] = 4
DEFAULT_Y: Final[int] = 3
DEFAULT_WIDTH: Final[int] = 20
DEFAULT_HEIGHT: Final[int] = 10

# Number of decoration cells at the right of the title band (min, max, close)
TITLE_BUTTON_CELLS: Final[int] = 3

# Pointer buttons
BUTTON_PRIMARY: Final[int] = 1
BUTTON_SECONDARY: Final[int] = 2
BUTTON_MIDDLE: Final[int] = 3

# Event kinds
KIND_CHAR: Final[str] = "char"
KIND_KEY: Final[str] = "key"
KIND_KEY_UP: Final[str] = "key_up"
KIND_PASTE: Final[str] = "paste"
KIND_TERMINATE: Final[str] = "terminate"
KIND_MOUSE_CLICK: Final[str] = "mouse_click"
KIND_MOUSE_UP: Final[str] = "mouse_up"
KIND_MOUSE_SCROLL: Final[str] = "mouse_scroll"
KIND_MOUSE_DRAG: Final[str] = "mouse_drag"
KIND_TERM_RESIZE: Final[str] = "term_resize"
KIND_WM_FOCUS: Final[str] = "wm_focus"
KIND_WM_LOG: Final[str] = "wm_log"
KIND_TICK: Final[str] = "tick"

# Events which should be sent to the focused window
KEYBOARD_EVENTS: Final[FrozenSet[str]] = frozenset(
    {KIND_CHAR, KIND_KEY, KIND_KEY_UP, KIND_PASTE, KIND_TERMINATE}
)

# Events which carry x/y coordinates
POINTER_EVENTS: Final[FrozenSet[str]] = frozenset(
    {KIND_MOUSE_CLICK, KIND_MOUSE_UP, KIND_MOUSE_SCROLL, KIND_MOUSE_DRAG}
)

# Pointer events that are hit-tested against the window stack
HIT_TEST_EVENTS: Final[FrozenSet[str]] = frozenset({KIND_MOUSE_CLICK, KIND_MOUSE_SCROLL})

# Key names reported by backends for bare modifier presses
MODIFIER_KEYS: Final[dict] = {
    "left_ctrl": "ctrl",
    "right_ctrl": "ctrl",
    "left_alt": "alt",
    "right_alt": "alt",
    "left_shift": "shift",
    "right_shift": "shift",
}


class ConfigPaths:
    """Centralized configuration paths.

    All paths are computed once at import time based on the user's home
    directory. Use these constants instead of constructing paths manually.
    """

    HOME: Final[Path] = Path.home()
    CONFIG_DIR: Final[Path] = HOME / ".config" / "termwm"
    STATE_DIR: Final[Path] = HOME / ".local" / "state" / "termwm"

    CONFIG_FILE: Final[Path] = CONFIG_DIR / "config.toml"
    LOG_FILE: Final[Path] = STATE_DIR / "termwm.log"

    @classmethod
    def ensure_dirs(cls) -> None:
        """Create the config and state directories if they don't exist."""
        for d in (cls.CONFIG_DIR, cls.STATE_DIR):
            d.mkdir(parents=True, exist_ok=True)
