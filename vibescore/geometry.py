"""
Polar Projection
================

Maps a breakdown onto a radar (spider) chart laid out on a circle.

    angle_i  = 360 / N × i                       (degrees, 0° = up, clockwise)
    r(v)     = clamp(v, 0, 100) / 100 × R_max     (fixed [0, 100] domain)
    x        = r × cos((θ - 90) × π / 180)
    y        = r × sin((θ - 90) × π / 180)

The -90° offset puts index 0 straight up. The radial domain is fixed rather
than fitted to the data so charts stay comparable across repositories.

Everything here returns plain data centred on (0, 0); translating to pixels
and drawing is the renderer's job.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .config import GRID_LEVELS, MAX_VALUE
from .registry import DEFAULT_REGISTRY, MetricRegistry
from .utils import clamp, sanitize_score

Point = Tuple[float, float]


@dataclass(frozen=True)
class RadarPoint:
    """One metric positioned on the chart."""
    key: str
    axis_label: str
    value: float
    angle_degrees: float
    index: int


@dataclass(frozen=True)
class GridRing:
    level: int
    radius: float
    label: str
    label_position: Point


@dataclass(frozen=True)
class AxisLine:
    index: int
    start: Point
    end: Point


@dataclass(frozen=True)
class AxisLabel:
    index: int
    text: str
    position: Point
    anchor: str      # start / middle / end
    baseline: str    # middle / text-after-edge / text-before-edge


@dataclass(frozen=True)
class RadarGeometry:
    """All shapes needed to draw a radar chart, centred on the origin."""
    max_radius: float
    rings: List[GridRing]
    axes: List[AxisLine]
    labels: List[AxisLabel]
    polygon: List[Point]     # closed: first point repeated at the end
    markers: List[Point]

    @property
    def is_empty(self) -> bool:
        return not self.markers


def project(
    breakdown: Optional[Mapping[str, Any]],
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> List[RadarPoint]:
    """
    Turn a breakdown into radar points.

    Index and angle follow the breakdown's insertion order. Values are
    sanitized the same way the aggregator does it. An empty breakdown gives
    an empty list.
    """
    if not breakdown:
        return []

    n = len(breakdown)
    step = 360.0 / n
    return [
        RadarPoint(
            key=key,
            axis_label=registry.short_label_for(key),
            value=sanitize_score(raw),
            angle_degrees=step * i,
            index=i,
        )
        for i, (key, raw) in enumerate(breakdown.items())
    ]


def radius_for(value: float, max_radius: float) -> float:
    """Linear radial scale over the fixed [0, 100] domain."""
    return clamp(float(value)) / MAX_VALUE * max_radius


def polar_to_cartesian(radius: float, angle_degrees: float) -> Point:
    """Convert (r, θ) with 0° pointing up into x/y (y grows downward)."""
    theta = np.deg2rad(angle_degrees - 90.0)
    return float(radius * np.cos(theta)), float(radius * np.sin(theta))


def _project_many(radii: Sequence[float], angles: Sequence[float]) -> List[Point]:
    """Vectorized polar_to_cartesian over parallel sequences."""
    if len(radii) == 0:
        return []
    r = np.asarray(radii, dtype=float)
    theta = np.deg2rad(np.asarray(angles, dtype=float) - 90.0)
    xs = r * np.cos(theta)
    ys = r * np.sin(theta)
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


def text_anchor(angle_degrees: float) -> str:
    """Horizontal text anchor so axis labels sit outside the chart."""
    angle = angle_degrees % 360
    if np.isclose(angle, 0.0) or np.isclose(angle, 180.0):
        return "middle"
    if 0 < angle < 180:
        return "start"
    return "end"


def text_baseline(angle_degrees: float) -> str:
    angle = angle_degrees % 360
    if np.isclose(angle, 90.0):
        return "text-after-edge"
    if np.isclose(angle, 270.0):
        return "text-before-edge"
    return "middle"


def grid_rings(max_radius: float, levels: Sequence[int] = GRID_LEVELS) -> List[GridRing]:
    rings = []
    for level in levels:
        radius = radius_for(level, max_radius)
        # Grid labels sit just right of the vertical axis, above the centre
        rings.append(GridRing(level=level, radius=radius, label=str(level), label_position=(4.0, -radius)))
    return rings


def build_geometry(
    points: Sequence[RadarPoint],
    max_radius: float,
    label_offset: float = 15.0,
) -> RadarGeometry:
    """
    Compute rings, axes, labels, the data polygon and marker positions.

    Args:
        points: Output of project()
        max_radius: Radius of the 100 ring in pixels
        label_offset: Distance of axis labels beyond the outer ring
    """
    max_radius = max(0.0, float(max_radius))
    angles = [p.angle_degrees for p in points]

    axis_ends = _project_many([max_radius] * len(points), angles)
    label_positions = _project_many([max_radius + label_offset] * len(points), angles)
    markers = _project_many([radius_for(p.value, max_radius) for p in points], angles)

    axes = [AxisLine(index=p.index, start=(0.0, 0.0), end=end) for p, end in zip(points, axis_ends)]
    labels = [
        AxisLabel(
            index=p.index,
            text=p.axis_label,
            position=pos,
            anchor=text_anchor(p.angle_degrees),
            baseline=text_baseline(p.angle_degrees),
        )
        for p, pos in zip(points, label_positions)
    ]
    polygon = markers + markers[:1]

    return RadarGeometry(
        max_radius=max_radius,
        rings=grid_rings(max_radius),
        axes=axes,
        labels=labels,
        polygon=polygon,
        markers=markers,
    )


class PolarProjector:
    """Projector bound to a registry."""

    def __init__(self, registry: MetricRegistry = DEFAULT_REGISTRY):
        self.registry = registry

    def project(self, breakdown: Optional[Mapping[str, Any]]) -> List[RadarPoint]:
        return project(breakdown, self.registry)

    def geometry(self, breakdown: Optional[Mapping[str, Any]], max_radius: float,
                 label_offset: float = 15.0) -> RadarGeometry:
        return build_geometry(self.project(breakdown), max_radius, label_offset)
