"""
Tests for process creation, termination and window mutations.
"""

import pytest

from termwm.models import DirtyState, FocusEvent, Geometry, ResizeEvent

from conftest import events_of, idle_program, make_recorder, settle


class TestCreate:
    """Test process creation."""

    def test_defaults(self, wm):
        """Unspecified geometry falls back to (4, 3, 20, 10)."""
        process_id = wm.create(idle_program, "A")
        process = wm.state.get(process_id)

        assert process.geometry == Geometry(4, 3, 20, 10)
        assert process.content_rect() == Geometry(4, 4, 20, 9)
        assert process.surface.get_position() == (4, 4)
        assert process.surface.get_size() == (20, 9)

    def test_new_process_on_top_and_dirty(self, wm):
        wm.create(idle_program, "A")
        wm.create(idle_program, "B")
        assert wm.state.z_order_ids() == [1, 2]
        assert wm.state.draw_background is True
        assert all(p.dirty == DirtyState.FULL for p in wm.state.processes)

    def test_borderless_content_rect(self, wm):
        wm.lifecycle.create(idle_program, "bare", 2, 2, 10, 5, border=False)
        process = wm.state.get(1)
        assert process.content_rect() == process.geometry

    def test_create_does_not_take_focus(self, wm):
        wm.create(idle_program, "A")
        assert wm.state.focus is None


class TestEnd:
    """Test termination."""

    def test_end_removes_everywhere(self, wm):
        wm.create(idle_program, "A")
        wm.create(idle_program, "B")
        wm.lifecycle.set_focus(1, top=True)
        settle(wm)

        surface = wm.state.get(1).surface
        wm.lifecycle.end(1)

        assert wm.api.get_count() == 1
        assert wm.state.focus is None
        assert wm.state.pending() == []
        assert surface.is_visible() is False
        assert wm.state.draw_background is True
        assert wm.state.validate() == []

    def test_end_unknown_is_noop(self, wm):
        wm.create(idle_program, "A")
        wm.lifecycle.end(5)
        assert wm.api.get_count() == 1


class TestReposition:
    """Test geometry changes."""

    def test_round_trip(self, wm):
        """Geometry reads back exactly what was set when above the floor."""
        wm.create(idle_program, "A")
        wm.lifecycle.reposition(1, 7, 2, 12, 6)
        assert wm.state.get(1).geometry == Geometry(7, 2, 12, 6)

    @pytest.mark.parametrize("w,h,expected", [
        (1, 1, (4, 3)),
        (3, 8, (4, 8)),
        (9, 2, (9, 3)),
    ])
    def test_clamps_to_floor(self, wm, w, h, expected):
        wm.create(idle_program, "A")
        wm.lifecycle.reposition(1, 1, 1, w, h)
        process = wm.state.get(1)
        assert (process.w, process.h) == expected

    def test_move_only_sends_no_resize(self, wm):
        log = []
        wm.create(make_recorder(log), "A")
        wm.lifecycle.reposition(1, 10, 6)
        wm.scheduler.run_queue()
        assert events_of(log, "A", "term_resize") == []

    def test_size_change_sends_one_resize(self, wm):
        log = []
        wm.create(make_recorder(log), "A")
        wm.lifecycle.reposition(1, 4, 3, 25, 12)
        wm.scheduler.run_queue()
        assert events_of(log, "A", "term_resize") == [ResizeEvent()]
        assert wm.state.get(1).surface.get_size() == (25, 11)

    def test_set_border_rederives_content(self, wm):
        wm.create(idle_program, "A")
        wm.lifecycle.set_border(1, False)
        process = wm.state.get(1)
        assert process.surface.get_position() == (4, 3)
        assert process.surface.get_size() == (20, 10)


class TestWindowState:
    """Test title, visibility and focus changes."""

    def test_set_title_invalidates_border(self, wm):
        wm.create(idle_program, "A")
        settle(wm)
        wm.lifecycle.set_title(1, "renamed")
        process = wm.state.get(1)
        assert process.title == "renamed"
        assert process.dirty == DirtyState.BORDER_ONLY

    def test_set_visible(self, wm):
        wm.create(idle_program, "A")
        wm.lifecycle.set_visible(1, False)
        assert wm.state.z_order == []
        wm.lifecycle.set_visible(1, True)
        assert wm.state.z_order_ids() == [1]
        assert wm.state.validate() == []

    def test_focus_notifications(self, wm):
        """Losing and gaining focus are both notified."""
        log = []
        wm.create(make_recorder(log), "A")
        wm.create(make_recorder(log), "B")

        wm.lifecycle.set_focus(1)
        wm.lifecycle.set_focus(2)
        wm.scheduler.run_queue()

        assert events_of(log, "A", "wm_focus") == [FocusEvent(True), FocusEvent(False)]
        assert events_of(log, "B", "wm_focus") == [FocusEvent(True)]

    def test_focus_without_top_keeps_order(self, wm):
        wm.create(idle_program, "A")
        wm.create(idle_program, "B")
        wm.lifecycle.set_focus(1)
        assert wm.state.z_order_ids() == [1, 2]

    def test_refocus_is_silent(self, wm):
        """Focusing the focused process queues nothing."""
        wm.create(idle_program, "A")
        wm.lifecycle.set_focus(1)
        wm.scheduler.run_queue()
        wm.lifecycle.set_focus(1)
        assert wm.state.pending() == []

    def test_clear_focus(self, wm):
        wm.create(idle_program, "A")
        wm.lifecycle.set_focus(1)
        wm.lifecycle.set_focus(None)
        assert wm.state.focus is None
