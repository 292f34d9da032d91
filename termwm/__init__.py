"""termwm - cooperative window manager for character-cell terminals."""

__version__ = "1.0.0"

from .config import WMConfig, load_config
from .errors import ErrorCode, WindowManagerError
from .manager import WindowManager
from .programs import ProgramRegistry

__all__ = [
    "ErrorCode",
    "ProgramRegistry",
    "WMConfig",
    "WindowManager",
    "WindowManagerError",
    "load_config",
]
