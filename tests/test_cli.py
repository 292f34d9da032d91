"""
Tests for the termwm command line interface.

The ``run`` command needs a real terminal, so only its argument checks are
exercised here.
"""

import json

from click.testing import CliRunner

from termwm.cli import cli


class TestProgramsCommand:
    """Test `termwm programs`."""

    def test_json_lists_builtins(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["programs", "--config", str(tmp_path / "none.toml"), "--json"])

        assert result.exit_code == 0, result.output
        names = [entry["name"] for entry in json.loads(result.output)]
        assert names == sorted(names)
        assert {"clock", "events", "hello"} <= set(names)

    def test_table_output(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["programs", "--config", str(tmp_path / "none.toml")])
        assert result.exit_code == 0, result.output
        assert "events" in result.output

    def test_configured_programs_included(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[programs]\ngreet = "termwm.programs:hello_program"\n')
        runner = CliRunner()
        result = runner.invoke(cli, ["programs", "--config", str(path), "--json"])

        entries = {entry["name"]: entry for entry in json.loads(result.output)}
        assert entries["greet"]["source"] == "termwm.programs:hello_program"


class TestConfigCommand:
    """Test `termwm config`."""

    def test_json_defaults(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "--config", str(tmp_path / "none.toml"), "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["first_exit_policy"] == "prompt"
        assert data["colors"]["bg"] == "bright_cyan"

    def test_invalid_config_exits_with_error(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("shadow = = true\n")
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "--config", str(path)])

        assert result.exit_code == 1
        assert "Failed to load configuration" in result.output


class TestRunCommand:
    """Test `termwm run` validation that happens before curses starts."""

    def test_unknown_program_rejected(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(cli, [
            "run",
            "--config", str(tmp_path / "none.toml"),
            "--log-file", str(tmp_path / "wm.log"),
            "no-such-program",
        ])
        assert result.exit_code == 1
