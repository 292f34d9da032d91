"""Pytest configuration and shared fixtures for termwm tests."""

import sys
from pathlib import Path

import pytest

# Make the termwm package importable without installation
package_root = Path(__file__).parent.parent
if str(package_root) not in sys.path:
    sys.path.insert(0, str(package_root))

from termwm.backends.memory import MemoryDisplay  # noqa: E402
from termwm.config import WMConfig  # noqa: E402
from termwm.manager import WindowManager  # noqa: E402
from termwm.models import DirtyState  # noqa: E402


def idle_program(ctx):
    """Program that accepts every event and never exits."""
    while True:
        yield None


def make_recorder(log, wanted=None):
    """Build a program that appends (title, event) for every delivery it receives."""
    def program(ctx):
        while True:
            event = yield wanted
            log.append((ctx.title, event))
    return program


def events_of(log, title=None, kind=None):
    """Filter a recorder log by process title and/or event kind."""
    return [
        event for owner, event in log
        if (title is None or owner == title) and (kind is None or (event is not None and event.kind == kind))
    ]


def settle(wm):
    """Render once so every window is clean, as after a main-loop iteration."""
    wm.compositor.render()
    for process in wm.state.processes:
        assert process.dirty == DirtyState.CLEAN or not process.visible, (
            f"{process.title} still dirty after render"
        )


@pytest.fixture
def display():
    """51x19 headless display."""
    return MemoryDisplay(51, 19)


@pytest.fixture
def config():
    return WMConfig()


@pytest.fixture
def launches():
    """Coordinates passed to the launcher hook."""
    return []


@pytest.fixture
def wm(display, config, launches):
    """Window manager over the headless display with a recording launcher hook."""
    return WindowManager(display, config=config, launcher=lambda x, y: launches.append((x, y)))


@pytest.fixture
def log():
    return []
