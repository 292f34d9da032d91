"""
Tests for dirty tracking and rendering.
"""

from termwm.compositor import pad_title
from termwm.models import DirtyState

from conftest import idle_program, settle


def dirty_snapshot(wm):
    return [process.dirty for process in wm.state.processes], wm.state.draw_background


class TestPadTitle:
    """Test title fitting."""

    def test_pads_short_titles(self):
        assert pad_title("abc", 6) == "abc   "

    def test_truncates_long_titles(self):
        assert pad_title("abcdefgh", 4) == "abcd"

    def test_negative_length(self):
        assert pad_title("abc", -2) == ""


class TestInvalidation:
    """Test dirty promotion rules."""

    def test_global_invalidate_is_idempotent(self, wm):
        """Invalidating everything twice equals invalidating once."""
        wm.create(idle_program, "a")
        wm.create(idle_program, "b")
        settle(wm)

        wm.compositor.invalidate()
        once = dirty_snapshot(wm)
        wm.compositor.invalidate()
        assert dirty_snapshot(wm) == once
        assert once == ([DirtyState.FULL, DirtyState.FULL], True)

    def test_invalidate_lower_window_promotes_windows_above(self, wm):
        """The target gets BorderOnly, everything above it Full."""
        wm.create(idle_program, "bottom")
        wm.create(idle_program, "middle")
        wm.create(idle_program, "top")
        settle(wm)

        wm.compositor.invalidate(2)

        bottom, middle, top = wm.state.processes
        assert bottom.dirty == DirtyState.CLEAN
        assert middle.dirty == DirtyState.BORDER_ONLY
        assert top.dirty == DirtyState.FULL
        assert wm.state.draw_background is False

    def test_forced_invalidate_is_full(self, wm):
        wm.create(idle_program, "a")
        settle(wm)
        wm.compositor.invalidate(1, force=True)
        assert wm.state.get(1).dirty == DirtyState.FULL

    def test_invalidate_does_not_downgrade(self, wm):
        """A Full window stays Full on a non-forced invalidate."""
        wm.create(idle_program, "a")
        wm.compositor.invalidate(1)
        assert wm.state.get(1).dirty == DirtyState.FULL

    def test_invalidate_unknown_id_is_ignored(self, wm):
        wm.compositor.invalidate(42)


class TestRender:
    """Test what render() paints."""

    def test_background_and_decorations(self, wm, display):
        """Background fill, title band, buttons and resize handle."""
        wm.create(idle_program, "A")
        wm.compositor.render()

        assert display.cell(1, 1).bg == "bright_cyan"
        title_row = display.row_text(3)
        assert title_row[3:23] == "A" + " " * 16 + "-+x"
        assert display.cell(4, 3).bg == "bright_black"
        assert display.cell(22, 3).bg == "white"
        assert display.cell(23, 3).bg == "red"
        assert display.cell(23, 12).char == "/"

    def test_focused_title_color(self, wm, display):
        wm.create(idle_program, "A")
        wm.lifecycle.set_focus(1, top=True)
        wm.compositor.render()
        assert display.cell(4, 3).bg == "blue"

    def test_render_cleans_everything(self, wm):
        wm.create(idle_program, "a")
        wm.create(idle_program, "b")
        wm.compositor.render()
        assert dirty_snapshot(wm) == ([DirtyState.CLEAN, DirtyState.CLEAN], False)

    def test_content_is_painted(self, wm, display):
        """Surface content lands inside the content rectangle."""
        def greeter(ctx):
            ctx.surface.write("hi")
            while True:
                yield None

        wm.create(greeter, "g", 4, 3, 20, 10)
        wm.compositor.render()
        assert display.row_text(4)[3:5] == "hi"

    def test_overlapping_window_painted_on_top(self, wm, display):
        """Later windows cover earlier ones."""
        wm.create(idle_program, "under", 4, 3, 20, 10)
        wm.create(idle_program, "over", 10, 3, 20, 10)
        wm.compositor.render()
        assert display.row_text(3)[9:13] == "over"

    def test_cursor_follows_focus(self, wm, display):
        """The focused surface owns the cursor; no focus hides it."""
        def blinker(ctx):
            ctx.surface.set_cursor_blink(True)
            while True:
                yield None

        wm.create(blinker, "b", 4, 3, 20, 10)
        wm.compositor.render()
        assert display.cursor_visible is False

        wm.lifecycle.set_focus(1)
        wm.compositor.render()
        assert display.cursor == (4, 4)
        assert display.cursor_visible is True

    def test_maximized_window_has_no_resize_handle(self, wm, display):
        wm.create(idle_program, "big")
        wm.interaction.set_maximized(1, True)
        wm.compositor.render()
        assert display.cell(51, 19).char != "/"

    def test_hidden_window_not_drawn(self, wm, display):
        wm.create(idle_program, "A")
        wm.lifecycle.set_visible(1, False)
        wm.compositor.render()
        assert display.row_text(3).strip() == ""

    def test_shadow(self, wm, display):
        wm.config.shadow = True
        wm.create(idle_program, "A", 4, 3, 20, 10)
        wm.compositor.render()
        assert display.cell(24, 5).bg == "bright_black"
        assert display.cell(5, 13).bg == "bright_black"
