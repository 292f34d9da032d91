"""
Tests for configuration models and the TOML loader.
"""

import pytest
from pydantic import ValidationError

from termwm.config import WMColors, WMConfig, WMGlyphs, load_config
from termwm.errors import ConfigLoadError, ErrorCode


class TestWMConfig:
    """Test configuration defaults and validation."""

    def test_defaults(self):
        config = WMConfig()
        assert config.first_exit_policy == "prompt"
        assert (config.cycle_modifier, config.cycle_key) == ("ctrl", "tab")
        assert config.startup == ["events"]
        assert config.colors.bg == "bright_cyan"
        assert config.glyphs.close == "x"

    def test_invalid_color_rejected(self):
        with pytest.raises(ValidationError):
            WMColors(bg="not-a-color")

    def test_hex_color_accepted(self):
        assert WMColors(title_focused="#336699").title_focused == "#336699"

    def test_glyph_must_be_single_cell(self):
        with pytest.raises(ValidationError):
            WMGlyphs(close="xx")

    def test_key_names_normalized(self):
        config = WMConfig(cycle_modifier=" Alt ", cycle_key="N")
        assert (config.cycle_modifier, config.cycle_key) == ("alt", "n")

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValidationError):
            WMConfig(first_exit_policy="ignore")

    def test_invalid_program_target_rejected(self):
        with pytest.raises(ValidationError):
            WMConfig(programs={"bad": "no-colon-here"})

    def test_effective_log_file(self, tmp_path):
        assert WMConfig(log_file=tmp_path / "wm.log").effective_log_file() == tmp_path / "wm.log"
        assert WMConfig().effective_log_file().name == "termwm.log"


class TestLoadConfig:
    """Test loading config.toml."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.toml")
        assert config == WMConfig()

    def test_loads_values(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            'first_exit_policy = "terminate"\n'
            'shadow = true\n'
            'startup = ["clock", "events"]\n'
            '\n'
            '[colors]\n'
            'bg = "black"\n'
            '\n'
            '[programs]\n'
            'demo = "termwm.programs:hello_program"\n'
        )
        config = load_config(path)
        assert config.first_exit_policy == "terminate"
        assert config.shadow is True
        assert config.startup == ["clock", "events"]
        assert config.colors.bg == "black"
        assert config.colors.title_focused == "blue"
        assert config.programs == {"demo": "termwm.programs:hello_program"}

    def test_invalid_toml(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("shadow = = true\n")
        with pytest.raises(ConfigLoadError) as exc_info:
            load_config(path)
        assert exc_info.value.code == ErrorCode.CONFIG_LOAD_FAILED
        assert exc_info.value.to_dict()["context"]["file_path"] == str(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[colors]\nbg = "nope"\n')
        with pytest.raises(ConfigLoadError):
            load_config(path)
