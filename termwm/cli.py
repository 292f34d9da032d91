"""
termwm command line interface.

Usage:
    termwm run [--config PATH] [--verbose] [--debug] [--log-file PATH] [PROGRAM...]
    termwm programs [--json]
    termwm config [--config PATH] [--json]
"""

import curses
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import WMConfig, load_config
from .constants import ConfigPaths
from .errors import WindowManagerError
from .logging_config import log_timing, setup_logging
from .programs import ProgramRegistry

logger = logging.getLogger(__name__)


def build_registry(config: WMConfig) -> ProgramRegistry:
    registry = ProgramRegistry()
    registry.load_entries(config.programs)
    return registry


def _load(console: Console, config_path: Optional[Path]) -> WMConfig:
    try:
        return load_config(config_path)
    except WindowManagerError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        if e.suggestion:
            console.print(f"[dim]Tip: {e.suggestion}[/dim]")
        sys.exit(1)


@click.group()
@click.version_option(__version__, prog_name="termwm")
def cli():
    """Cooperative window manager for the terminal."""
    pass


@cli.command()
@click.option('--config', 'config_path', type=click.Path(path_type=Path), help='Path to config.toml')
@click.option('--verbose', '-v', is_flag=True, help='Log at INFO level')
@click.option('--debug', is_flag=True, help='Log at DEBUG level')
@click.option('--log-file', type=click.Path(path_type=Path), help='Log file (default: ~/.local/state/termwm/termwm.log)')
@click.argument('programs', nargs=-1)
def run(config_path: Optional[Path], verbose: bool, debug: bool, log_file: Optional[Path], programs: Tuple[str, ...]):
    """
    Start the window manager.

    PROGRAMS are registered program names to open at start; without any,
    the configured startup list is used. Press Ctrl+C with no window
    focused to quit.
    """
    console = Console(stderr=True)
    config = _load(console, config_path)

    log_path = log_file or config.effective_log_file()
    setup_logging(verbose=verbose, debug=debug, log_file=log_path, level=config.log_level)

    try:
        registry = build_registry(config)
    except WindowManagerError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(1)

    startup = list(programs) or config.startup
    unknown = [name for name in startup if name not in registry]
    if unknown:
        console.print(f"[red]Error: Unknown program(s): {', '.join(unknown)}[/red]")
        console.print("[dim]Tip: Run 'termwm programs' to list registered programs[/dim]")
        sys.exit(1)

    ConfigPaths.ensure_dirs()
    try:
        curses.wrapper(_run_curses, config, registry, startup)
    except Exception as e:
        logger.exception("Window manager crashed")
        console.print(f"[red]Unexpected error: {e}[/red]")
        console.print(f"[dim]See {log_path}[/dim]")
        sys.exit(2)


def _run_curses(stdscr, config: WMConfig, registry: ProgramRegistry, startup) -> None:
    from .backends.curses_backend import CursesDisplay, CursesInput
    from .manager import WindowManager

    display = CursesDisplay(stdscr)
    events = CursesInput(stdscr, tick_interval_ms=config.tick_interval_ms)
    events.enable()

    wm = WindowManager(display, config=config, registry=registry)
    with log_timing("Start programs", logger):
        wm.start_programs(startup)
    wm.run(events)


@cli.command()
@click.option('--config', 'config_path', type=click.Path(path_type=Path), help='Path to config.toml')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of a formatted table')
def programs(config_path: Optional[Path], output_json: bool):
    """List registered programs."""
    console = Console()
    config = _load(console, config_path)

    try:
        registry = build_registry(config)
    except WindowManagerError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        sys.exit(1)

    entries = registry.entries()
    if output_json:
        data = [{"name": e.name, "description": e.description, "source": e.source} for e in entries]
        click.echo(json.dumps(data, indent=2))
        return

    table = Table(title="Programs", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Source", style="dim")
    for entry in entries:
        table.add_row(entry.name, entry.description, entry.source)
    console.print(table)


@cli.command()
@click.option('--config', 'config_path', type=click.Path(path_type=Path), help='Path to config.toml')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of a formatted panel')
def config(config_path: Optional[Path], output_json: bool):
    """Show the effective configuration."""
    console = Console()
    wm_config = _load(console, config_path)

    if output_json:
        click.echo(wm_config.model_dump_json(indent=2))
        return

    source = config_path or ConfigPaths.CONFIG_FILE
    status = "[green]loaded[/green]" if source.exists() else "[yellow]defaults (file missing)[/yellow]"
    console.print(Panel(f"{source}\n{status}", title="Config file", border_style="blue"))

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in wm_config.model_dump(exclude={"colors", "glyphs"}).items():
        table.add_row(key, str(value))
    for key, value in wm_config.colors.model_dump().items():
        table.add_row(f"colors.{key}", f"[{value}]{value}[/{value}]")
    for key, value in wm_config.glyphs.model_dump().items():
        table.add_row(f"glyphs.{key}", value)
    console.print(table)


if __name__ == '__main__':
    cli()
