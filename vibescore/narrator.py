"""
Accessibility Narrator
======================

Derives the text a screen reader needs from chart data:
- a chart summary (count, average, highest, lowest, how to navigate)
- per-point announcements with positional context ("item k of N")
- a detail string for the point the user opened
- a tabular description of the full weighted breakdown

All functions are pure and deterministic: identical inputs give identical
strings, which keeps them snapshot-testable.
"""

from typing import Any, List, Mapping, Optional, Sequence

from .config import GRADE_ANNOUNCEMENTS
from .geometry import RadarPoint
from .registry import DEFAULT_REGISTRY, MetricRegistry
from .scoring import OverallScore, ScoreRow, metric_band, score_rows
from .utils import round_half_up

NAVIGATION_INSTRUCTIONS = (
    "Use the arrow keys to move between metrics and Home or End to jump to the "
    "first or last metric. Press Enter or Space for details and Escape to close them."
)

EMPTY_SUMMARY = "No metric data available."


def _fmt(value: float) -> str:
    return str(round_half_up(value))


def position_text(index: int, total: int) -> str:
    """Positional context for a point: 'item 2 of 12'."""
    return f"item {index + 1} of {total}"


def value_text(point: RadarPoint) -> str:
    return f"{point.axis_label}: {_fmt(point.value)} out of 100"


def navigation_announcement(point: RadarPoint, total: int) -> str:
    """Announcement made whenever focus lands on a point."""
    return f"{value_text(point)}, {position_text(point.index, total)}"


def point_detail(
    point: RadarPoint,
    total: int,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> str:
    """Detailed announcement for an opened point."""
    parts = [
        f"{value_text(point)}.",
        f"Rated {metric_band(point.value)}.",
        f"{position_text(point.index, total).capitalize()}.",
    ]
    metric = registry.get(point.key)
    if metric and metric.description:
        parts.append(metric.description)
    return " ".join(parts)


def chart_summary(points: Sequence[RadarPoint]) -> str:
    """
    Summary announced when the chart receives focus.

    Ties for highest/lowest go to the first point in chart order.
    """
    if not points:
        return EMPTY_SUMMARY

    highest = points[0]
    lowest = points[0]
    total = 0.0
    for point in points:
        total += point.value
        if point.value > highest.value:
            highest = point
        if point.value < lowest.value:
            lowest = point
    average = total / len(points)

    noun = "metric" if len(points) == 1 else "metrics"
    return (
        f"Radar chart showing {len(points)} {noun}. "
        f"Average score {_fmt(average)} out of 100. "
        f"Highest: {highest.axis_label} at {_fmt(highest.value)}. "
        f"Lowest: {lowest.axis_label} at {_fmt(lowest.value)}. "
        f"{NAVIGATION_INSTRUCTIONS}"
    )


def score_announcement(overall: OverallScore) -> str:
    """Live-region text for the overall score."""
    return f"Vibe score is {overall.value} out of 100. {GRADE_ANNOUNCEMENTS[overall.grade.value]}"


def breakdown_table(
    breakdown: Optional[Mapping[str, Any]],
    weights: Optional[Mapping[str, Any]] = None,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> List[ScoreRow]:
    """Rows for the non-visual breakdown table (breakdown order)."""
    return score_rows(breakdown, weights, registry)


def table_text(rows: Sequence[ScoreRow]) -> str:
    """
    Render rows as a plain-text table.

    Columns: Metric, Score, Weight (share of the effective total), and
    Contribution (points added to the overall score).
    """
    if not rows:
        return EMPTY_SUMMARY

    headers = ("Metric", "Score", "Weight", "Contribution")
    body = [
        (row.label, _fmt(row.score), f"{row.weight_share:.1f}%", f"{row.contribution:.1f}")
        for row in rows
    ]
    widths = [max(len(headers[i]), *(len(line[i]) for line in body)) for i in range(len(headers))]

    def fmt_line(cells):
        first = cells[0].ljust(widths[0])
        rest = [cell.rjust(width) for cell, width in zip(cells[1:], widths[1:])]
        return "  ".join([first] + rest)

    lines = [fmt_line(headers), "  ".join("-" * w for w in widths)]
    lines.extend(fmt_line(line) for line in body)
    return "\n".join(lines)


class ChartNarrator:
    """Narrator functions bound to a registry."""

    def __init__(self, registry: MetricRegistry = DEFAULT_REGISTRY):
        self.registry = registry

    def summary(self, points: Sequence[RadarPoint]) -> str:
        return chart_summary(points)

    def navigation(self, point: RadarPoint, total: int) -> str:
        return navigation_announcement(point, total)

    def detail(self, point: RadarPoint, total: int) -> str:
        return point_detail(point, total, self.registry)

    def table(self, breakdown, weights=None) -> str:
        return table_text(breakdown_table(breakdown, weights, self.registry))
