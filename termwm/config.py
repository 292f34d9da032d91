"""
Configuration models and loader for termwm.

Settings are validated with Pydantic and loaded from a TOML file
(~/.config/termwm/config.toml by default). A missing file yields defaults.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator
from rich.color import Color, ColorParseError

from .constants import ConfigPaths
from .errors import ConfigLoadError

logger = logging.getLogger(__name__)


class WMColors(BaseModel):
    """Color scheme for the desktop and window decorations.

    Values are color names understood by rich (e.g. "bright_blue", "grey50").
    """

    bg: str = Field("bright_cyan", description="Desktop background")
    shadow: str = Field("bright_black", description="Drop shadow cells")
    title_unfocused: str = Field("bright_black", description="Title band of unfocused windows")
    title_focused: str = Field("blue", description="Title band of the focused window")
    title_text: str = Field("white", description="Title text and button background")
    title_close: str = Field("red", description="Close button background")
    resize_bg: str = Field("white", description="Resize handle background")
    resize_fg: str = Field("bright_black", description="Resize handle glyph")
    window_bg: str = Field("black", description="Default window content background")
    window_fg: str = Field("white", description="Default window content foreground")

    @field_validator("*")
    @classmethod
    def validate_color(cls, v: str) -> str:
        """Validate that the color name is parseable."""
        try:
            Color.parse(v)
        except ColorParseError as e:
            raise ValueError(f"Invalid color: {e}")
        return v


class WMGlyphs(BaseModel):
    """Single-cell glyphs used in window decorations."""

    minimize: str = Field("-", min_length=1, max_length=1)
    maximize: str = Field("+", min_length=1, max_length=1)
    close: str = Field("x", min_length=1, max_length=1)
    resize: str = Field("/", min_length=1, max_length=1)


class WMConfig(BaseModel):
    """Top-level window manager configuration."""

    colors: WMColors = Field(default_factory=WMColors)
    glyphs: WMGlyphs = Field(default_factory=WMGlyphs)
    shadow: bool = Field(False, description="Draw drop shadows under windows")
    first_exit_policy: Literal["prompt", "terminate"] = Field(
        "prompt",
        description="What to do when a program exits during its first resume",
    )
    cycle_modifier: str = Field("ctrl", description="Modifier held for the focus-cycle binding")
    cycle_key: str = Field("tab", description="Key that cycles focus while the modifier is held")
    startup: List[str] = Field(default_factory=lambda: ["events"], description="Programs launched at start")
    launcher_program: Optional[str] = Field(
        "events", description="Program started by a secondary click on the desktop"
    )
    programs: Dict[str, str] = Field(
        default_factory=dict, description="Extra programs as name -> 'module:function'"
    )
    tick_interval_ms: int = Field(1000, ge=0, description="Idle interval for broadcast tick events (0 disables)")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO")
    log_file: Optional[Path] = Field(default=None, description="Log file while the display is active")

    @field_validator("cycle_modifier", "cycle_key")
    @classmethod
    def validate_key_name(cls, v: str) -> str:
        """Key names are lowercase identifiers."""
        v = v.strip().lower()
        if not re.match(r"^[a-z0-9_]+$", v):
            raise ValueError(f"Invalid key name: {v!r}")
        return v

    @field_validator("programs")
    @classmethod
    def validate_program_targets(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Program targets must look like 'package.module:function'."""
        for name, target in v.items():
            if not re.match(r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$", target):
                raise ValueError(f"Invalid program target for {name!r}: {target!r}")
        return v

    def effective_log_file(self) -> Path:
        return self.log_file or ConfigPaths.LOG_FILE


def load_config(config_file: Optional[Path] = None) -> WMConfig:
    """Load window manager configuration from a TOML file.

    Args:
        config_file: Path to config.toml (defaults to ConfigPaths.CONFIG_FILE)

    Returns:
        Validated WMConfig (defaults when the file does not exist)

    Raises:
        ConfigLoadError: If the file cannot be parsed or fails validation
    """
    config_file = config_file or ConfigPaths.CONFIG_FILE

    if not config_file.exists():
        logger.info(f"Config file does not exist: {config_file}, using defaults")
        return WMConfig()

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigLoadError(str(config_file), str(e))

    try:
        config = WMConfig(**data)
    except ValidationError as e:
        raise ConfigLoadError(str(config_file), str(e))

    logger.info(f"Loaded configuration from {config_file}")
    return config
