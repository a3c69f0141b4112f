"""
Observers
=========

Extension points the core calls at well-defined moments (after an aggregate,
on every interaction transition, on each live-region announcement, and when
the renderer falls back to its error state).

Instrumentation is injected rather than hard-wired: pass a LoggingObserver for
diagnostics, a RecordingObserver in tests, or nothing at all.
"""

import logging
from typing import Any, List, Optional, Tuple

from .config import get_log_level

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ScoreObserver:
    """Base observer; every hook is a no-op."""

    def on_aggregate(self, breakdown: Any, result: Any) -> None:
        pass

    def on_transition(self, event: Any, before: Any, after: Any) -> None:
        pass

    def on_announce(self, text: str) -> None:
        pass

    def on_render_error(self, error: BaseException) -> None:
        pass


NULL_OBSERVER = ScoreObserver()


class LoggingObserver(ScoreObserver):
    """Writes each hook to a logger as key=value pairs."""

    def __init__(self, log: Optional[logging.Logger] = None, level: int = logging.DEBUG):
        self.log = log or logger
        self.level = level

    def on_aggregate(self, breakdown, result):
        self.log.log(
            self.level,
            "aggregate metrics=%d value=%s raw=%.4f grade=%s",
            len(breakdown or {}), result.value, result.raw_value, result.grade.value,
        )

    def on_transition(self, event, before, after):
        self.log.log(
            self.level,
            "transition event=%s phase=%s->%s index=%d->%d",
            type(event).__name__, before.phase.value, after.phase.value,
            before.focused_index, after.focused_index,
        )

    def on_announce(self, text):
        self.log.log(self.level, "announce text=%r", text)

    def on_render_error(self, error):
        self.log.error("render_error type=%s message=%s", type(error).__name__, error)


class RecordingObserver(ScoreObserver):
    """Collects hook calls as (name, payload) tuples."""

    def __init__(self):
        self.events: List[Tuple[str, Any]] = []

    def on_aggregate(self, breakdown, result):
        self.events.append(("aggregate", result))

    def on_transition(self, event, before, after):
        self.events.append(("transition", (event, before, after)))

    def on_announce(self, text):
        self.events.append(("announce", text))

    def on_render_error(self, error):
        self.events.append(("render_error", error))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def payloads(self, name: str) -> List[Any]:
        return [payload for event_name, payload in self.events if event_name == name]


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging for a host process (CLI or app)."""
    resolved = (level or get_log_level()).upper()
    logging.basicConfig(level=getattr(logging, resolved, logging.WARNING), format=LOG_FORMAT)
