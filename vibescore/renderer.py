"""
Radar Chart Renderer
====================

Turns a breakdown plus a LayoutConfig into a flat list of drawing primitives
(circles, lines, text, the data polygon, markers and an optional tooltip),
already translated to pixel coordinates around the chart centre.

RadarChartRenderer never draws anything itself. SvgSurface is the one
imperative adapter and serializes a RenderResult to an accessible SVG string.
Failures inside projection or drawing are caught here and reported as an
error result instead of a half-drawn chart.
"""

import html
import logging
from dataclasses import dataclass, replace
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .config import (
    AXIS_STROKE,
    BACKGROUND_FILL,
    CENTER_DOT_RADIUS,
    CHART_COLOR,
    CHART_FILL,
    EMPTY_CHART_MESSAGE,
    ERROR_CHART_MESSAGE,
    FOCUS_RING_COLOR,
    FOCUS_RING_GAP,
    GRID_LABEL_COLOR,
    GRID_STROKE,
    LABEL_COLOR,
)
from .geometry import PolarProjector, RadarGeometry, RadarPoint, build_geometry
from .interaction import FocusState
from .layout import LayoutConfig
from .narrator import EMPTY_SUMMARY, chart_summary
from .observers import NULL_OBSERVER, ScoreObserver
from .registry import DEFAULT_REGISTRY, MetricRegistry

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_ERROR = "error"


# =============================================================================
# PRIMITIVES
# =============================================================================

@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    fill: str = "none"
    stroke: str = "none"
    stroke_width: float = 1.0
    role: str = "grid"   # background / grid / center / focus-ring


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    stroke: str = AXIS_STROKE
    stroke_width: float = 1.0


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    anchor: str = "middle"
    baseline: str = "middle"
    font_size: float = 12.0
    fill: str = LABEL_COLOR
    role: str = "axis-label"   # axis-label / grid-label


@dataclass(frozen=True)
class Polygon:
    points: Tuple[Point, ...]
    fill: str = CHART_FILL
    stroke: str = CHART_COLOR
    stroke_width: float = 2.0


@dataclass(frozen=True)
class Marker:
    cx: float
    cy: float
    r: float
    index: int
    key: str
    value: float
    fill: str = CHART_COLOR
    focused: bool = False


@dataclass(frozen=True)
class TooltipBox:
    x: float
    y: float
    text: str
    source: Optional[str] = None


Primitive = Union[Circle, Line, Text, Polygon, Marker, TooltipBox]


@dataclass(frozen=True)
class RenderResult:
    """Everything a host needs to paint and narrate one chart."""
    status: str
    layout: Optional[LayoutConfig] = None
    primitives: Tuple[Primitive, ...] = ()
    points: Tuple[RadarPoint, ...] = ()
    anchors: Tuple[Point, ...] = ()   # marker centres in pixels, by point index
    summary: str = EMPTY_SUMMARY
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    def of_type(self, kind) -> List[Primitive]:
        return [p for p in self.primitives if isinstance(p, kind)]


# =============================================================================
# RENDERER
# =============================================================================

class RadarChartRenderer:
    """
    Builds primitives for a radar chart.

    Usage:
        renderer = RadarChartRenderer()
        result = renderer.render(breakdown, layout, controller.state)
        svg = SvgSurface().render(result)
    """

    def __init__(self, registry: MetricRegistry = DEFAULT_REGISTRY, observer: ScoreObserver = NULL_OBSERVER):
        self.projector = PolarProjector(registry)
        self.observer = observer

    def render(
        self,
        breakdown: Optional[Mapping[str, Any]],
        layout: LayoutConfig,
        focus_state: Optional[FocusState] = None,
    ) -> RenderResult:
        if not breakdown:
            return RenderResult(status=STATUS_EMPTY, layout=layout, message=EMPTY_CHART_MESSAGE)

        try:
            points = self.projector.project(breakdown)
            geometry = build_geometry(points, layout.radius, layout.label_offset)
            primitives, anchors = self._draw(points, geometry, layout, focus_state)
        except Exception as exc:
            logger.exception("Radar chart render failed")
            self.observer.on_render_error(exc)
            return RenderResult(status=STATUS_ERROR, layout=layout, message=ERROR_CHART_MESSAGE)

        return RenderResult(
            status=STATUS_OK,
            layout=layout,
            primitives=tuple(primitives),
            points=tuple(points),
            anchors=tuple(anchors),
            summary=chart_summary(points),
        )

    def _draw(
        self,
        points: Sequence[RadarPoint],
        geometry: RadarGeometry,
        layout: LayoutConfig,
        focus_state: Optional[FocusState],
    ) -> Tuple[List[Primitive], List[Point]]:
        cx, cy = layout.center

        def at(pos: Point) -> Point:
            return cx + pos[0], cy + pos[1]

        focused = -1
        if focus_state is not None and 0 <= focus_state.focused_index < len(points):
            focused = focus_state.focused_index

        out: List[Primitive] = [
            Circle(cx, cy, geometry.max_radius, fill=BACKGROUND_FILL, role="background"),
        ]

        for ring in geometry.rings:
            out.append(Circle(cx, cy, ring.radius, stroke=GRID_STROKE, stroke_width=1.0))

        for axis in geometry.axes:
            x1, y1 = at(axis.start)
            x2, y2 = at(axis.end)
            out.append(Line(x1, y1, x2, y2, stroke=AXIS_STROKE, stroke_width=1.0))

        for ring in geometry.rings:
            x, y = at(ring.label_position)
            out.append(Text(
                x, y, ring.label,
                anchor="start", baseline="middle",
                font_size=layout.grid_font_size, fill=GRID_LABEL_COLOR, role="grid-label",
            ))

        out.append(Polygon(
            points=tuple(at(p) for p in geometry.polygon),
            stroke_width=layout.stroke_width,
        ))
        out.append(Circle(cx, cy, CENTER_DOT_RADIUS, fill=CHART_COLOR, role="center"))

        anchors = [at(m) for m in geometry.markers]
        for point, (mx, my) in zip(points, anchors):
            is_focused = point.index == focused
            radius = layout.point_hover_radius if is_focused else layout.point_radius
            out.append(Marker(mx, my, radius, point.index, point.key, point.value, focused=is_focused))
            if is_focused:
                out.append(Circle(
                    mx, my, radius + FOCUS_RING_GAP,
                    stroke=FOCUS_RING_COLOR, stroke_width=2.0, role="focus-ring",
                ))

        for label in geometry.labels:
            x, y = at(label.position)
            out.append(Text(
                x, y, label.text,
                anchor=label.anchor, baseline=label.baseline,
                font_size=layout.font_size, fill=LABEL_COLOR, role="axis-label",
            ))

        if focus_state is not None and focus_state.tooltip.visible:
            tip = focus_state.tooltip
            out.append(TooltipBox(tip.x, tip.y, tip.text, tip.source))

        return out, anchors


# =============================================================================
# SVG SURFACE
# =============================================================================

def _esc(text: Any) -> str:
    return html.escape(str(text), quote=True)


def _n(value: float) -> str:
    return f"{value:.2f}"


class SvgSurface:
    """
    Serializes a RenderResult to a standalone SVG document.

    A primitive that cannot be serialized turns the whole document into the
    error state, the same way RadarChartRenderer.render() does.
    """

    def __init__(self, tooltip_font_size: float = 12.0, observer: ScoreObserver = NULL_OBSERVER):
        self.tooltip_font_size = tooltip_font_size
        self.observer = observer

    def render(self, result: RenderResult) -> str:
        width = result.layout.width if result.layout else 300.0
        height = result.layout.height if result.layout else 300.0

        body: List[str] = []
        if result.ok:
            try:
                body = [self._element(p) for p in result.primitives]
            except Exception as exc:
                logger.exception("SVG serialization failed")
                self.observer.on_render_error(exc)
                result = replace(result, status=STATUS_ERROR, primitives=(), message=ERROR_CHART_MESSAGE)

        label = result.summary if result.ok else result.message
        lines = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{_n(width)}" height="{_n(height)}"'
            f' viewBox="0 0 {_n(width)} {_n(height)}" role="img" aria-label="{_esc(label)}">'
        ]
        if result.ok:
            lines.extend(body)
        else:
            lines.append(
                f'<text x="{_n(width / 2)}" y="{_n(height / 2)}" text-anchor="middle"'
                f' dominant-baseline="middle" font-size="14" fill="{GRID_LABEL_COLOR}">'
                f'{_esc(result.message)}</text>'
            )
        lines.append("</svg>")
        return "\n".join(lines)

    def _element(self, p: Primitive) -> str:
        if isinstance(p, Circle):
            return (
                f'<circle class="{p.role}" cx="{_n(p.cx)}" cy="{_n(p.cy)}" r="{_n(p.r)}"'
                f' fill="{p.fill}" stroke="{p.stroke}" stroke-width="{p.stroke_width}"/>'
            )
        if isinstance(p, Line):
            return (
                f'<line x1="{_n(p.x1)}" y1="{_n(p.y1)}" x2="{_n(p.x2)}" y2="{_n(p.y2)}"'
                f' stroke="{p.stroke}" stroke-width="{p.stroke_width}"/>'
            )
        if isinstance(p, Text):
            return (
                f'<text class="{p.role}" x="{_n(p.x)}" y="{_n(p.y)}" text-anchor="{p.anchor}"'
                f' dominant-baseline="{p.baseline}" font-size="{p.font_size}" fill="{p.fill}">'
                f'{_esc(p.text)}</text>'
            )
        if isinstance(p, Polygon):
            coords = " ".join(f"{_n(x)},{_n(y)}" for x, y in p.points)
            return (
                f'<polygon points="{coords}" fill="{p.fill}" stroke="{p.stroke}"'
                f' stroke-width="{p.stroke_width}" stroke-linejoin="round"/>'
            )
        if isinstance(p, Marker):
            css = "marker focused" if p.focused else "marker"
            return (
                f'<circle class="{css}" data-index="{p.index}" data-key="{_esc(p.key)}"'
                f' cx="{_n(p.cx)}" cy="{_n(p.cy)}" r="{_n(p.r)}" fill="{p.fill}"/>'
            )
        if isinstance(p, TooltipBox):
            box_w = len(p.text) * self.tooltip_font_size * 0.6 + 16
            box_h = self.tooltip_font_size + 12
            x = p.x - box_w / 2
            y = p.y - box_h - 10
            return (
                f'<g class="tooltip" role="tooltip">'
                f'<rect x="{_n(x)}" y="{_n(y)}" width="{_n(box_w)}" height="{_n(box_h)}" rx="4"'
                f' fill="{LABEL_COLOR}" fill-opacity="0.9"/>'
                f'<text x="{_n(p.x)}" y="{_n(y + box_h / 2)}" text-anchor="middle"'
                f' dominant-baseline="middle" font-size="{self.tooltip_font_size}" fill="#FFFFFF">'
                f'{_esc(p.text)}</text></g>'
            )
        raise TypeError(f"Unsupported primitive: {type(p).__name__}")
