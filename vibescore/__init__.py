"""
VibeScore - Weighted Repository Scoring & Radar Chart
=====================================================

Combines per-metric repository sub-scores into one weighted "vibe score" and
presents them on a keyboard and screen-reader accessible radar chart.

Modules:
    - config: Configuration and constants
    - registry: Canonical metric catalogue and default weights
    - scoring: Weighted aggregation, grades and breakdown rows
    - geometry: Polar projection of a breakdown onto the chart
    - layout: Responsive chart sizing per device class
    - interaction: Focus / tooltip state machine
    - narrator: Screen-reader summaries and announcements
    - renderer: Drawing primitives and the SVG surface
    - observers: Logging and test hooks
    - cli: Command-line interface
"""

from .geometry import PolarProjector, RadarPoint
from .interaction import FocusState, InteractionController, Phase
from .layout import DeviceClass, LayoutConfig, ResponsiveLayoutEngine
from .narrator import ChartNarrator
from .registry import DEFAULT_REGISTRY, MetricDefinition, MetricRegistry
from .renderer import RadarChartRenderer, RenderResult, SvgSurface
from .scoring import Grade, OverallScore, ScoreAggregator

__version__ = "1.0.0"
__author__ = "VibeScore Team"
