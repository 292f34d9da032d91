"""
Tests for the WindowManager facade and main loop.
"""

from termwm.models import CharEvent, GenericEvent, TerminateEvent

from conftest import events_of, make_recorder


class ScriptedEvents:
    """Event source replaying a fixed list of events."""

    def __init__(self, events):
        self.events = list(events)
        self.reads = 0

    def next_event(self):
        self.reads += 1
        return self.events.pop(0)


class TestMainLoop:
    """Test run() until exit."""

    def test_terminate_without_focus_exits(self, wm, display):
        source = ScriptedEvents([GenericEvent("timer"), TerminateEvent()])
        wm.run(source)

        assert source.reads == 2
        assert wm.running is False
        assert display.flush_count == 2

    def test_terminate_goes_to_focused_process(self, wm):
        """With a focused process terminate is forwarded instead of exiting."""
        def quits_on_terminate(ctx):
            while True:
                event = yield None
                if event is not None and event.kind == "terminate":
                    return

        wm.create(quits_on_terminate, "A")
        wm.lifecycle.set_focus(1)
        source = ScriptedEvents([TerminateEvent(), TerminateEvent()])
        wm.run(source)

        assert source.reads == 2
        assert wm.api.get_count() == 0

    def test_shutdown_ends_remaining_processes(self, wm):
        cleaned = []

        def tidy(ctx):
            try:
                while True:
                    yield None
            finally:
                cleaned.append(ctx.title)

        wm.create(tidy, "A")
        wm.create(tidy, "B")
        wm.run(ScriptedEvents([TerminateEvent()]))

        assert sorted(cleaned) == ["A", "B"]
        assert wm.api.get_count() == 0

    def test_one_raw_event_drains_queue(self, wm):
        """Everything a raw event fans out into is delivered before the next read."""
        log = []
        wm.create(make_recorder(log), "A")
        wm.create(make_recorder(log), "B")
        wm.lifecycle.set_focus(2)

        wm.step(CharEvent("k"))

        assert wm.state.pending() == []
        assert events_of(log, "B", "char") == [CharEvent("k")]


class TestLaunching:
    """Test launching registered programs."""

    def test_start_programs_skips_unknown(self, wm):
        wm.start_programs(["hello", "missing", "clock"])
        assert [p.title for p in wm.state.processes] == ["hello", "clock"]

    def test_start_programs_focuses_first(self, wm):
        wm.start_programs(["events", "clock"])
        assert wm.api.get_focus() == 1

    def test_first_terminate_reaches_startup_program(self, wm):
        """Terminate ends the focused startup program before it can exit the manager."""
        wm.start_programs(["events"])
        source = ScriptedEvents([TerminateEvent(), TerminateEvent()])
        wm.run(source)

        assert source.reads == 2
        assert wm.api.get_count() == 0

    def test_start_programs_without_processes_leaves_focus_empty(self, wm):
        wm.start_programs(["missing"])
        assert wm.api.get_focus() is None

    def test_launch_at_without_program(self, wm):
        wm.config.launcher_program = None
        assert wm.launch_at(5, 5) is None
        assert wm.api.get_count() == 0
