"""Tests for the focus / tooltip state machine and its controller."""
import asyncio

import pytest

from vibescore.interaction import (
    INITIAL_STATE,
    AsyncioScheduler,
    ChartContext,
    FocusIn,
    InteractionController,
    KeyDown,
    ManualScheduler,
    Phase,
    PointsChanged,
    TimerCommand,
    reduce,
)


class TestReduce:
    def test_keys_ignored_when_idle(self, scenario_points):
        ctx = ChartContext(scenario_points)
        result = reduce(INITIAL_STATE, KeyDown("ArrowRight"), ctx)
        assert result.state == INITIAL_STATE
        assert result.announcement is None

    def test_focus_in_sets_first_point(self, scenario_points):
        result = reduce(INITIAL_STATE, FocusIn(), ChartContext(scenario_points))
        assert result.state.phase is Phase.FOCUSED
        assert result.state.focused_index == 0
        assert result.state.is_chart_focused
        assert result.timer is TimerCommand.NONE

    def test_focus_in_twice_is_noop(self, scenario_points):
        ctx = ChartContext(scenario_points)
        focused = reduce(INITIAL_STATE, FocusIn(), ctx).state
        again = reduce(focused, FocusIn(), ctx)
        assert again.state == focused
        assert again.announcement is None

    def test_unknown_event(self, scenario_points):
        result = reduce(INITIAL_STATE, object(), ChartContext(scenario_points))
        assert result.state == INITIAL_STATE

    def test_enter_starts_timer(self, scenario_points):
        ctx = ChartContext(scenario_points)
        focused = reduce(INITIAL_STATE, FocusIn(), ctx).state
        result = reduce(focused, KeyDown("Enter"), ctx)
        assert result.state.phase is Phase.TOOLTIP_OPEN
        assert result.timer is TimerCommand.START


class TestKeyboardNavigation:
    def test_focus_announces_summary_and_first_point(self, controller):
        controller.focus()
        text = controller.announcement
        assert text.startswith("Radar chart showing 4 metrics. Average score 84 out of 100.")
        assert "Highest: Code Quality at 95." in text
        assert "Lowest: Innovation at 70." in text
        assert text.endswith("Code Quality: 95 out of 100, item 1 of 4")

    def test_arrow_right_wraps(self, controller):
        controller.focus()
        controller.key("End")
        assert controller.state.focused_index == 3
        controller.key("ArrowRight")
        assert controller.state.focused_index == 0
        assert controller.announcement == "Code Quality: 95 out of 100, item 1 of 4"

    def test_arrow_down_moves_forward(self, controller):
        controller.focus()
        controller.key("ArrowDown")
        assert controller.state.focused_index == 1
        assert controller.announcement == "Readability: 80 out of 100, item 2 of 4"

    @pytest.mark.parametrize("key", ["ArrowLeft", "ArrowUp"])
    def test_backward_wraps(self, controller, key):
        controller.focus()
        controller.key(key)
        assert controller.state.focused_index == 3
        assert controller.announcement == "Innovation: 70 out of 100, item 4 of 4"

    def test_home_and_end(self, controller):
        controller.focus()
        controller.key("End")
        assert controller.state.focused_index == 3
        controller.key("Home")
        assert controller.state.focused_index == 0

    def test_full_cycle_returns_to_start(self, controller):
        controller.focus()
        for _ in range(4):
            controller.key("ArrowRight")
        assert controller.state.focused_index == 0

    def test_unhandled_key_ignored(self, controller):
        controller.focus()
        before = controller.state
        controller.key("Tab")
        assert controller.state == before

    def test_keys_ignored_before_focus(self, controller):
        controller.key("ArrowRight")
        assert controller.state.focused_index == -1
        assert controller.state.phase is Phase.IDLE
        assert controller.announcement == ""

    def test_blur_resets(self, controller, manual_scheduler):
        controller.focus()
        controller.key("ArrowRight")
        controller.key("Enter")
        controller.blur()
        assert controller.state == INITIAL_STATE
        assert manual_scheduler.pending == 0

    def test_unmount_resets(self, controller, manual_scheduler):
        controller.focus()
        controller.key("Enter")
        controller.unmount()
        assert controller.state == INITIAL_STATE
        assert not controller.timer_pending
        assert manual_scheduler.pending == 0


class TestTooltip:
    def test_enter_opens_tooltip_at_marker(self, controller):
        controller.focus()
        controller.key("ArrowRight")
        controller.key("Enter")
        state = controller.state
        assert state.phase is Phase.TOOLTIP_OPEN
        assert state.tooltip.visible
        assert state.tooltip.text == "Readability: 80 out of 100"
        assert (state.tooltip.x, state.tooltip.y) == (10.0, 20.0)
        assert state.tooltip.source == "keyboard"
        assert controller.announcement.startswith("Readability: 80 out of 100. Rated Excellent. Item 2 of 4.")

    @pytest.mark.parametrize("key", [" ", "Space", "Spacebar"])
    def test_space_opens_tooltip(self, controller, key):
        controller.focus()
        controller.key(key)
        assert controller.state.phase is Phase.TOOLTIP_OPEN

    def test_auto_dismiss_after_five_seconds(self, controller, manual_scheduler):
        controller.focus()
        controller.key("Enter")
        manual_scheduler.advance(4.9)
        assert controller.state.phase is Phase.TOOLTIP_OPEN
        manual_scheduler.advance(0.2)
        assert controller.state.phase is Phase.FOCUSED
        assert not controller.state.tooltip.visible
        assert controller.state.focused_index == 0

    def test_escape_closes_and_cancels(self, controller, manual_scheduler):
        controller.focus()
        controller.key("Enter")
        controller.key("Escape")
        assert controller.state.phase is Phase.FOCUSED
        assert not controller.state.tooltip.visible
        assert manual_scheduler.pending == 0
        assert manual_scheduler.advance(10) == 0

    def test_escape_in_focused_is_harmless(self, controller):
        controller.focus()
        controller.key("Escape")
        assert controller.state.phase is Phase.FOCUSED
        assert controller.state.focused_index == 0

    def test_navigation_closes_tooltip(self, controller, manual_scheduler):
        controller.focus()
        controller.key("Enter")
        controller.key("ArrowRight")
        assert controller.state.phase is Phase.FOCUSED
        assert not controller.state.tooltip.visible
        assert controller.state.focused_index == 1
        assert manual_scheduler.pending == 0

    def test_reopening_restarts_timer(self, controller, manual_scheduler):
        controller.focus()
        controller.key("Enter")
        manual_scheduler.advance(3)
        controller.key("Enter")
        manual_scheduler.advance(3)
        assert controller.state.phase is Phase.TOOLTIP_OPEN
        assert manual_scheduler.pending == 1
        manual_scheduler.advance(2.1)
        assert controller.state.phase is Phase.FOCUSED

    def test_stale_callback_is_dropped(self, scenario_points):
        class LeakyScheduler:
            """Hands out handles whose cancel() does nothing."""

            def __init__(self):
                self.callbacks = []

            def call_later(self, delay, callback):
                self.callbacks.append(callback)
                return self

            def cancel(self):
                pass

        scheduler = LeakyScheduler()
        controller = InteractionController(scenario_points, scheduler=scheduler)
        controller.focus()
        controller.key("Enter")
        controller.key("Escape")
        controller.key("Enter")
        scheduler.callbacks[0]()
        assert controller.state.phase is Phase.TOOLTIP_OPEN
        scheduler.callbacks[1]()
        assert controller.state.phase is Phase.FOCUSED

    def test_asyncio_scheduler(self, scenario_points):
        async def scenario():
            controller = InteractionController(
                scenario_points, scheduler=AsyncioScheduler(), dismiss_seconds=0.01
            )
            controller.focus()
            controller.key("Enter")
            assert controller.state.phase is Phase.TOOLTIP_OPEN
            await asyncio.sleep(0.1)
            return controller.state

        state = asyncio.run(scenario())
        assert state.phase is Phase.FOCUSED
        assert not state.tooltip.visible


class TestPointer:
    def test_hover_without_focus(self, controller):
        controller.pointer_enter(2, 12.5, 40.0)
        state = controller.state
        assert state.phase is Phase.IDLE
        assert state.focused_index == 2
        assert state.tooltip.visible
        assert state.tooltip.source == "pointer"
        assert (state.tooltip.x, state.tooltip.y) == (12.5, 40.0)
        assert controller.announcement == "Collaboration: 90 out of 100, item 3 of 4"

        controller.pointer_leave()
        assert controller.state.focused_index == -1
        assert not controller.state.tooltip.visible

    def test_hover_with_focus_keeps_index(self, controller):
        controller.focus()
        controller.pointer_enter(2)
        assert controller.state.phase is Phase.FOCUSED
        controller.pointer_leave()
        assert controller.state.focused_index == 2
        assert controller.state.phase is Phase.FOCUSED

    def test_hover_same_point_not_reannounced(self, controller, recorder):
        controller.focus()
        controller.pointer_enter(0)
        assert len(recorder.payloads("announce")) == 1

    def test_out_of_range_ignored(self, controller):
        controller.pointer_enter(9)
        assert controller.state == INITIAL_STATE

    def test_leave_closes_tooltip_opened_from_keyboard(self, controller, manual_scheduler):
        controller.focus()
        controller.key("Enter")
        controller.pointer_enter(2, 5.0, 5.0)
        assert controller.state.phase is Phase.TOOLTIP_OPEN
        assert controller.state.tooltip.source == "pointer"

        controller.pointer_leave()
        assert controller.state.phase is Phase.FOCUSED
        assert not controller.state.tooltip.visible
        assert controller.state.focused_index == 2
        assert manual_scheduler.pending == 0
        controller.key("Enter")
        assert controller.state.tooltip.text == "Collaboration: 90 out of 100"

    def test_leave_without_hover_ignored(self, controller):
        controller.focus()
        before = controller.state
        controller.pointer_leave()
        assert controller.state == before


class TestEmptyChart:
    def test_focus_with_no_points(self, manual_scheduler):
        controller = InteractionController(scheduler=manual_scheduler)
        controller.focus()
        assert controller.state.phase is Phase.FOCUSED
        assert controller.state.focused_index == -1
        assert controller.announcement == "No metric data available."

    @pytest.mark.parametrize("key", ["ArrowRight", "ArrowLeft", "Home", "End", "Enter"])
    def test_keys_do_nothing(self, manual_scheduler, key):
        controller = InteractionController(scheduler=manual_scheduler)
        controller.focus()
        controller.key(key)
        assert controller.state.focused_index == -1
        assert controller.state.phase is Phase.FOCUSED
        assert manual_scheduler.pending == 0


class TestSetPoints:
    def test_index_clamped(self, controller, scenario_points):
        controller.focus()
        controller.key("End")
        controller.set_points(scenario_points[:2])
        assert controller.state.focused_index == 1
        assert len(controller.points) == 2

    def test_clamped_index_is_announced(self, controller, recorder, scenario_points):
        controller.focus()
        controller.key("End")
        controller.set_points(scenario_points[:2])
        assert controller.announcement == "Readability: 80 out of 100, item 2 of 2"
        event, before, after = recorder.payloads("transition")[-1]
        assert event == PointsChanged(2)
        assert (before.focused_index, after.focused_index) == (3, 1)

    def test_unchanged_index_not_reannounced(self, controller, recorder, scenario_points):
        controller.focus()
        controller.key("ArrowRight")
        announced = len(recorder.payloads("announce"))
        controller.set_points(scenario_points[:3])
        assert controller.state.focused_index == 1
        assert len(recorder.payloads("announce")) == announced

    def test_empty_points_clear_index(self, controller):
        controller.focus()
        controller.set_points([])
        assert controller.state.focused_index == -1
        assert controller.state.phase is Phase.FOCUSED

    def test_open_tooltip_closed(self, controller, scenario_points, manual_scheduler):
        controller.focus()
        controller.key("Enter")
        controller.set_points(scenario_points)
        assert controller.state.phase is Phase.FOCUSED
        assert not controller.state.tooltip.visible
        assert manual_scheduler.pending == 0

    def test_points_arriving_after_focus(self, scenario_points, manual_scheduler):
        controller = InteractionController(scheduler=manual_scheduler)
        controller.focus()
        controller.set_points(scenario_points)
        controller.key("ArrowRight")
        assert controller.state.focused_index == 0


class TestObserver:
    def test_transitions_and_announcements_recorded(self, controller, recorder):
        controller.focus()
        controller.key("ArrowRight")
        assert recorder.names() == ["transition", "announce", "transition", "announce"]
        event, before, after = recorder.payloads("transition")[1]
        assert event == KeyDown("ArrowRight")
        assert (before.focused_index, after.focused_index) == (0, 1)
        assert recorder.payloads("announce")[-1] == controller.announcement

    def test_no_transition_recorded_for_ignored_event(self, controller, recorder):
        controller.key("ArrowRight")
        assert recorder.events == []


def test_manual_scheduler_orders_by_deadline():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(2, lambda: fired.append("b"))
    scheduler.call_later(1, lambda: fired.append("a"))
    cancelled = scheduler.call_later(1.5, lambda: fired.append("x"))
    cancelled.cancel()
    assert scheduler.pending == 2
    assert scheduler.advance(5) == 2
    assert fired == ["a", "b"]
