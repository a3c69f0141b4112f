"""
Configuration and constants for the VibeScore radar system.
"""
import os
from dataclasses import dataclass
from typing import Dict, List, Tuple

# =============================================================================
# ENVIRONMENT OVERRIDES
# =============================================================================
# Read at call time (not import time) so hosts can change them between runs.
GRADE_TABLE_ENV = "VIBESCORE_GRADE_TABLE"
LOG_LEVEL_ENV = "VIBESCORE_LOG_LEVEL"

DEFAULT_GRADE_TABLE = "canonical"
DEFAULT_LOG_LEVEL = "WARNING"

# =============================================================================
# SCORE RANGE
# =============================================================================
MIN_VALUE = 0.0
MAX_VALUE = 100.0

# =============================================================================
# GRADE TABLES
# =============================================================================
# Inclusive lower bounds, highest first. "canonical" is authoritative; "legacy"
# is the older 80/60/40 banding kept for score headers that still use it.
GRADE_TABLES: Dict[str, List[Tuple[float, str]]] = {
    "canonical": [
        (85, "Outstanding"),
        (70, "Excellent"),
        (40, "Good"),
        (0, "NeedsWork"),
    ],
    "legacy": [
        (80, "Excellent"),
        (60, "Good"),
        (40, "Fair"),
        (0, "NeedsWork"),
    ],
}

# Title + description shown next to the overall score, keyed by grade name.
GRADE_MESSAGES: Dict[str, Tuple[str, str]] = {
    "Outstanding": (
        "Outstanding Vibes!",
        "This repository has outstanding vibes across all metrics. It demonstrates "
        "excellent code quality, documentation, and community engagement.",
    ),
    "Excellent": (
        "Excellent Vibes!",
        "This repository shows strong practices and has solid vibes. A few areas "
        "could still improve, but overall quality is commendable.",
    ),
    "Good": (
        "Good Vibes",
        "This repository has some good aspects but could use improvements in several "
        "areas. Focus on the metrics with lower scores.",
    ),
    "Fair": (
        "Decent Vibes",
        "This repository has potential but several metrics lag behind. Start with "
        "the weakest areas.",
    ),
    "NeedsWork": (
        "Room for Improvement",
        "This repository needs work to improve its vibes. Consider addressing the "
        "areas with the lowest scores first.",
    ),
}

# Short phrase used by the score live-region announcement.
GRADE_ANNOUNCEMENTS: Dict[str, str] = {
    "Outstanding": "Outstanding vibes detected.",
    "Excellent": "Excellent vibes detected.",
    "Good": "Good vibes detected.",
    "Fair": "Decent vibes detected.",
    "NeedsWork": "Room for improvement detected.",
}

# Per-metric band (used by the breakdown table and point details)
METRIC_BANDS: List[Tuple[float, str]] = [
    (70, "Excellent"),
    (40, "Good"),
    (0, "Needs Work"),
]

# Display color per score band
SCORE_COLOR_BANDS: List[Tuple[float, str]] = [
    (80, "#22C55E"),  # green
    (60, "#0EA5E9"),  # blue
    (40, "#EAB308"),  # yellow
    (20, "#F97316"),  # orange
    (0, "#EF4444"),   # red
]

# Industry benchmark tiers (minimum overall score, tier label, reference project)
BENCHMARK_TIERS: List[Tuple[float, str, str]] = [
    (55, "Enterprise", "kubernetes"),
    (50, "High Quality", "vscode"),
    (45, "Well Maintained", "rails"),
    (40, "Good Standard", "node"),
]

# =============================================================================
# CHART CONFIGURATION
# =============================================================================
GRID_LEVELS: List[int] = [20, 40, 60, 80, 100]
CHART_COLOR = "#0EA5E9"
CHART_FILL = "rgba(14, 165, 233, 0.15)"
BACKGROUND_FILL = "rgba(248, 250, 252, 0.6)"
GRID_STROKE = "rgba(148, 163, 184, 0.35)"
AXIS_STROKE = "rgba(148, 163, 184, 0.55)"
LABEL_COLOR = "#0F172A"
GRID_LABEL_COLOR = "#64748B"
FOCUS_RING_COLOR = "#F59E0B"
CENTER_DOT_RADIUS = 3.0
FOCUS_RING_GAP = 3.0

# Messages shown in place of the chart
EMPTY_CHART_MESSAGE = "No data available for chart"
ERROR_CHART_MESSAGE = "Unable to render chart"

# Tooltip auto-dismiss delay for keyboard-opened details
TOOLTIP_DISMISS_SECONDS = 5.0

# =============================================================================
# RESPONSIVE LAYOUT
# =============================================================================
# Viewport width breakpoints: mobile < 640 <= tablet < 1024 <= desktop
DEVICE_BREAKPOINTS: Dict[str, int] = {
    "tablet": 640,
    "desktop": 1024,
}

MIN_CONTAINER_SIZE = 200

# Baseline viewport for desktop scaling
BASELINE_VIEWPORT: Tuple[int, int] = (1280, 720)
VIEWPORT_SCALE_BOUNDS: Tuple[float, float] = (0.8, 1.5)
DESKTOP_BASE_SIZE = 500
DESKTOP_SIZE_CAP = 600


@dataclass(frozen=True)
class DevicePreset:
    """Sizing preset for one device class."""
    base_padding: int
    max_size: int
    margin: float
    font_size: float
    grid_font_size: float
    stroke_width: float
    point_radius: float
    point_hover_radius: float
    label_offset: float
    animation_duration_ms: int


DEVICE_PRESETS: Dict[str, DevicePreset] = {
    "mobile": DevicePreset(
        base_padding=20,
        max_size=340,
        margin=25,
        font_size=11,
        grid_font_size=8,
        stroke_width=1.5,
        point_radius=3.0,
        point_hover_radius=5.0,
        label_offset=10,
        animation_duration_ms=400,
    ),
    "tablet": DevicePreset(
        base_padding=30,
        max_size=380,
        margin=55,
        font_size=12,
        grid_font_size=8,
        stroke_width=2.0,
        point_radius=3.0,
        point_hover_radius=4.5,
        label_offset=14,
        animation_duration_ms=600,
    ),
    # Desktop margin and max size are scaled at layout time
    "desktop": DevicePreset(
        base_padding=40,
        max_size=DESKTOP_SIZE_CAP,
        margin=75,
        font_size=12,
        grid_font_size=9,
        stroke_width=2.5,
        point_radius=3.5,
        point_hover_radius=5.0,
        label_offset=15,
        animation_duration_ms=800,
    ),
}

# Desktop margin = max(MIN, min(MAX, size * FACTOR))
DESKTOP_MARGIN_BOUNDS: Tuple[float, float] = (75, 85)
DESKTOP_MARGIN_FACTOR = 0.15


def get_grade_table_name() -> str:
    """Return the grade table selected through the environment."""
    name = os.environ.get(GRADE_TABLE_ENV, DEFAULT_GRADE_TABLE).strip().lower()
    return name if name in GRADE_TABLES else DEFAULT_GRADE_TABLE


def get_log_level() -> str:
    """Return the log level selected through the environment."""
    return os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
