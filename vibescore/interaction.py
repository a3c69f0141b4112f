"""
Interaction Controller
======================

Finite-state machine for exploring the radar chart by keyboard, mouse or
touch.

    IDLE ──focus──▶ FOCUSED ──Enter/Space──▶ TOOLTIP_OPEN
      ▲               │  ▲                        │
      └────blur───────┘  └────Escape / 5 s────────┘

In FOCUSED the arrow keys move between points (wrapping), Home/End jump to
the first/last point. Pointer hover is a parallel highlight channel: it moves
the focused index and shows a lightweight tooltip without changing the phase.

The transition logic lives in the pure reduce() function. InteractionController
wraps it, owns the single FocusState, runs the tooltip dismiss timer through
an injectable scheduler, and publishes announcements for the live region.
"""

import asyncio
import heapq
import itertools
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .config import TOOLTIP_DISMISS_SECONDS
from .geometry import RadarPoint
from .narrator import ChartNarrator, chart_summary, navigation_announcement, value_text
from .observers import NULL_OBSERVER, ScoreObserver

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

NEXT_KEYS = frozenset({"ArrowRight", "ArrowDown"})
PREV_KEYS = frozenset({"ArrowLeft", "ArrowUp"})
HOME_KEYS = frozenset({"Home"})
END_KEYS = frozenset({"End"})
ACTIVATE_KEYS = frozenset({"Enter", " ", "Space", "Spacebar"})
ESCAPE_KEYS = frozenset({"Escape", "Esc"})


# =============================================================================
# STATE
# =============================================================================

class Phase(Enum):
    IDLE = "idle"
    FOCUSED = "focused"
    TOOLTIP_OPEN = "tooltip_open"


@dataclass(frozen=True)
class Tooltip:
    visible: bool = False
    text: str = ""
    x: float = 0.0
    y: float = 0.0
    source: Optional[str] = None  # "keyboard" or "pointer"


HIDDEN_TOOLTIP = Tooltip()


@dataclass(frozen=True)
class FocusState:
    phase: Phase = Phase.IDLE
    focused_index: int = -1
    is_chart_focused: bool = False
    tooltip: Tooltip = HIDDEN_TOOLTIP
    hovering: bool = False


INITIAL_STATE = FocusState()


# =============================================================================
# EVENTS
# =============================================================================

@dataclass(frozen=True)
class FocusIn:
    pass


@dataclass(frozen=True)
class FocusOut:
    pass


@dataclass(frozen=True)
class Unmount:
    pass


@dataclass(frozen=True)
class KeyDown:
    key: str


@dataclass(frozen=True)
class PointerEnter:
    index: int
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class PointerLeave:
    pass


@dataclass(frozen=True)
class DismissTimeout:
    generation: int = 0


@dataclass(frozen=True)
class PointsChanged:
    """A new render replaced the chart's points (the context already holds them)."""
    count: int = 0


class TimerCommand(Enum):
    NONE = "none"
    START = "start"
    CANCEL = "cancel"


@dataclass(frozen=True)
class Transition:
    state: FocusState
    announcement: Optional[str] = None
    timer: TimerCommand = TimerCommand.NONE


@dataclass(frozen=True)
class ChartContext:
    """What the reducer needs to know about the current render."""
    points: Sequence[RadarPoint] = ()
    anchors: Sequence[Point] = ()
    narrator: ChartNarrator = field(default_factory=ChartNarrator)

    def anchor(self, index: int) -> Point:
        if 0 <= index < len(self.anchors):
            return self.anchors[index]
        return 0.0, 0.0


# =============================================================================
# REDUCER
# =============================================================================

def _move(index: int, key: str, n: int) -> int:
    if key in HOME_KEYS:
        return 0
    if key in END_KEYS:
        return n - 1
    if key in NEXT_KEYS:
        return 0 if index < 0 else (index + 1) % n
    # PREV_KEYS
    return n - 1 if index < 0 else (index - 1 + n) % n


def _on_focus_in(state: FocusState, ctx: ChartContext) -> Transition:
    if state.is_chart_focused:
        return Transition(state)
    n = len(ctx.points)
    index = state.focused_index if 0 <= state.focused_index < n else (0 if n else -1)
    new_state = replace(state, phase=Phase.FOCUSED, is_chart_focused=True, focused_index=index)

    announcement = chart_summary(ctx.points)
    if index >= 0:
        announcement = f"{announcement} {navigation_announcement(ctx.points[index], n)}"
    return Transition(new_state, announcement)


def _on_key(state: FocusState, key: str, ctx: ChartContext) -> Transition:
    if not state.is_chart_focused:
        return Transition(state)

    if key in ESCAPE_KEYS:
        hidden = replace(state, phase=Phase.FOCUSED, tooltip=HIDDEN_TOOLTIP)
        return Transition(hidden, timer=TimerCommand.CANCEL)

    n = len(ctx.points)
    if n == 0:
        return Transition(state)

    if key in NEXT_KEYS | PREV_KEYS | HOME_KEYS | END_KEYS:
        index = _move(state.focused_index, key, n)
        new_state = replace(state, phase=Phase.FOCUSED, focused_index=index, tooltip=HIDDEN_TOOLTIP)
        return Transition(new_state, navigation_announcement(ctx.points[index], n), TimerCommand.CANCEL)

    if key in ACTIVATE_KEYS:
        index = state.focused_index if 0 <= state.focused_index < n else 0
        point = ctx.points[index]
        x, y = ctx.anchor(index)
        tooltip = Tooltip(visible=True, text=value_text(point), x=x, y=y, source="keyboard")
        new_state = replace(state, phase=Phase.TOOLTIP_OPEN, focused_index=index, tooltip=tooltip)
        return Transition(new_state, ctx.narrator.detail(point, n), TimerCommand.START)

    return Transition(state)


def _on_pointer_enter(state: FocusState, event: PointerEnter, ctx: ChartContext) -> Transition:
    n = len(ctx.points)
    if not 0 <= event.index < n:
        return Transition(state)
    point = ctx.points[event.index]
    tooltip = Tooltip(visible=True, text=value_text(point), x=event.x, y=event.y, source="pointer")
    new_state = replace(state, focused_index=event.index, tooltip=tooltip, hovering=True)

    announcement = None
    if event.index != state.focused_index:
        announcement = navigation_announcement(point, n)
    return Transition(new_state, announcement)


def _on_pointer_leave(state: FocusState) -> Transition:
    if not state.hovering:
        return Transition(state)
    index = state.focused_index if state.is_chart_focused else -1
    if state.tooltip.source != "pointer":
        return Transition(replace(state, focused_index=index, hovering=False))
    # The pointer tooltip replaced any keyboard tooltip, so nothing is left open
    phase = Phase.FOCUSED if state.phase is Phase.TOOLTIP_OPEN else state.phase
    timer = TimerCommand.CANCEL if state.phase is Phase.TOOLTIP_OPEN else TimerCommand.NONE
    new_state = replace(state, phase=phase, tooltip=HIDDEN_TOOLTIP, focused_index=index, hovering=False)
    return Transition(new_state, timer=timer)


def _on_points_changed(state: FocusState, ctx: ChartContext) -> Transition:
    n = len(ctx.points)
    index = state.focused_index if state.is_chart_focused else -1
    if n == 0:
        index = -1
    elif index >= n:
        index = n - 1

    new_state = replace(
        state,
        focused_index=index,
        tooltip=HIDDEN_TOOLTIP,
        hovering=False,
        phase=Phase.FOCUSED if state.is_chart_focused else Phase.IDLE,
    )
    announcement = None
    if state.is_chart_focused and index >= 0 and index != state.focused_index:
        announcement = navigation_announcement(ctx.points[index], n)
    return Transition(new_state, announcement, TimerCommand.CANCEL)


def _on_timeout(state: FocusState) -> Transition:
    if state.phase is not Phase.TOOLTIP_OPEN:
        return Transition(state)
    tooltip = HIDDEN_TOOLTIP if state.tooltip.source == "keyboard" else state.tooltip
    return Transition(replace(state, phase=Phase.FOCUSED, tooltip=tooltip))


def reduce(state: FocusState, event, ctx: ChartContext) -> Transition:
    """
    Pure transition function.

    Returns the next state, an optional live-region announcement, and what to
    do with the dismiss timer. Unknown events leave the state untouched.
    """
    if isinstance(event, FocusIn):
        return _on_focus_in(state, ctx)
    if isinstance(event, (FocusOut, Unmount)):
        return Transition(INITIAL_STATE, timer=TimerCommand.CANCEL)
    if isinstance(event, KeyDown):
        return _on_key(state, event.key, ctx)
    if isinstance(event, PointerEnter):
        return _on_pointer_enter(state, event, ctx)
    if isinstance(event, PointerLeave):
        return _on_pointer_leave(state)
    if isinstance(event, DismissTimeout):
        return _on_timeout(state)
    if isinstance(event, PointsChanged):
        return _on_points_changed(state, ctx)
    return Transition(state)


# =============================================================================
# SCHEDULERS
# =============================================================================

class ManualTimer:
    """Handle returned by ManualScheduler.call_later()."""

    def __init__(self, deadline: float, callback: Callable[[], None]):
        self.deadline = deadline
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by an explicit clock.

    Tests call advance(); polling hosts (e.g. Streamlit reruns) call
    run_due(time.monotonic()) before dispatching new input.
    """

    def __init__(self, now: float = 0.0):
        self.now = now
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback)
        heapq.heappush(self._queue, (timer.deadline, next(self._seq), timer))
        return timer

    def run_due(self, now: Optional[float] = None) -> int:
        """Fire every non-cancelled timer whose deadline has passed. Returns how many fired."""
        if now is not None:
            self.now = max(self.now, now)
        fired = 0
        while self._queue and self._queue[0][0] <= self.now:
            _, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            timer.callback()
            fired += 1
        return fired

    def advance(self, seconds: float) -> int:
        return self.run_due(self.now + seconds)

    @property
    def pending(self) -> int:
        return sum(1 for _, _, timer in self._queue if not timer.cancelled)


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop's call_later()."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


# =============================================================================
# CONTROLLER
# =============================================================================

class InteractionController:
    """
    Owns the FocusState for one chart.

    Usage:
        controller = InteractionController(points, anchors, scheduler=ManualScheduler())
        controller.focus()
        controller.key("ArrowRight")
        controller.announcement   # "Readability: 80 out of 100, item 2 of 4"
    """

    def __init__(
        self,
        points: Sequence[RadarPoint] = (),
        anchors: Sequence[Point] = (),
        scheduler=None,
        observer: ScoreObserver = NULL_OBSERVER,
        narrator: Optional[ChartNarrator] = None,
        dismiss_seconds: float = TOOLTIP_DISMISS_SECONDS,
    ):
        self.scheduler = scheduler or ManualScheduler()
        self.observer = observer
        self.dismiss_seconds = dismiss_seconds
        self._narrator = narrator or ChartNarrator()
        self._context = ChartContext(tuple(points), tuple(anchors), self._narrator)
        self._state = INITIAL_STATE
        self._announcement = ""
        self._timer = None
        self._generation = 0

    @property
    def state(self) -> FocusState:
        return self._state

    @property
    def announcement(self) -> str:
        """Current live-region text."""
        return self._announcement

    @property
    def points(self) -> Sequence[RadarPoint]:
        return self._context.points

    @property
    def timer_pending(self) -> bool:
        return self._timer is not None

    def dispatch(self, event) -> FocusState:
        before = self._state
        result = reduce(before, event, self._context)
        self._apply_timer(result.timer)
        self._state = result.state

        if result.state != before:
            self.observer.on_transition(event, before, result.state)
        if result.announcement:
            self._announce(result.announcement)
        return self._state

    # Convenience wrappers for hosts
    def focus(self) -> FocusState:
        return self.dispatch(FocusIn())

    def blur(self) -> FocusState:
        return self.dispatch(FocusOut())

    def unmount(self) -> FocusState:
        return self.dispatch(Unmount())

    def key(self, key: str) -> FocusState:
        return self.dispatch(KeyDown(key))

    def pointer_enter(self, index: int, x: float = 0.0, y: float = 0.0) -> FocusState:
        return self.dispatch(PointerEnter(index, x, y))

    def pointer_leave(self) -> FocusState:
        return self.dispatch(PointerLeave())

    def set_points(self, points: Sequence[RadarPoint], anchors: Sequence[Point] = ()) -> FocusState:
        """
        Swap in a fresh render's points.

        The focused index is clamped to the new range and announced when that
        moves it; an open tooltip is closed because its text may be stale.
        """
        self._context = ChartContext(tuple(points), tuple(anchors), self._narrator)
        return self.dispatch(PointsChanged(len(points)))

    def _announce(self, text: str) -> None:
        self._announcement = text
        self.observer.on_announce(text)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        # Any callback already in flight carries the old generation and is dropped
        self._generation += 1

    def _apply_timer(self, command: TimerCommand) -> None:
        if command is TimerCommand.NONE:
            return
        self._cancel_timer()
        if command is TimerCommand.START:
            generation = self._generation
            self._timer = self.scheduler.call_later(
                self.dismiss_seconds, lambda: self._on_timer(generation)
            )

    def _on_timer(self, generation: int) -> None:
        if generation != self._generation:
            logger.debug("Dropping stale dismiss timer (generation %d)", generation)
            return
        self._timer = None
        self.dispatch(DismissTimeout(generation))
