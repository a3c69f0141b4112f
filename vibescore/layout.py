"""
Responsive Layout Engine
========================

Computes chart dimensions from the container size, the viewport, and a coarse
device class. Stateless: the same inputs always give the same LayoutConfig,
so hosts may call it on every (debounced) resize or orientation change.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from .config import (
    BASELINE_VIEWPORT,
    DESKTOP_BASE_SIZE,
    DESKTOP_MARGIN_BOUNDS,
    DESKTOP_MARGIN_FACTOR,
    DESKTOP_SIZE_CAP,
    DEVICE_BREAKPOINTS,
    DEVICE_PRESETS,
    MIN_CONTAINER_SIZE,
    VIEWPORT_SCALE_BOUNDS,
)
from .utils import clamp

Size = Tuple[float, float]


class DeviceClass(Enum):
    MOBILE = "mobile"
    TABLET = "tablet"
    DESKTOP = "desktop"


@dataclass(frozen=True)
class LayoutConfig:
    """Pixel sizing for one render. Replaced wholesale, never mutated."""
    width: float
    height: float
    margin: float
    radius: float
    stroke_width: float
    point_radius: float
    point_hover_radius: float
    font_size: float
    grid_font_size: float
    label_offset: float
    animation_duration_ms: int
    device_class: DeviceClass

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2, self.height / 2


def classify_device(viewport_width: float) -> DeviceClass:
    """mobile < 640 <= tablet < 1024 <= desktop."""
    if viewport_width < DEVICE_BREAKPOINTS["tablet"]:
        return DeviceClass.MOBILE
    if viewport_width < DEVICE_BREAKPOINTS["desktop"]:
        return DeviceClass.TABLET
    return DeviceClass.DESKTOP


def _coerce_device(device_class: Union[DeviceClass, str, None], viewport_width: float) -> DeviceClass:
    if device_class is None:
        return classify_device(viewport_width)
    if isinstance(device_class, DeviceClass):
        return device_class
    try:
        return DeviceClass(str(device_class).lower())
    except ValueError:
        raise ValueError(
            f"Unknown device class '{device_class}' (expected mobile, tablet or desktop)"
        ) from None


def viewport_scale(viewport_size: Size) -> float:
    """Scale factor relative to the 1280x720 baseline, bounded."""
    vw, vh = viewport_size
    base_w, base_h = BASELINE_VIEWPORT
    scale = min(vw / base_w, vh / base_h)
    lo, hi = VIEWPORT_SCALE_BOUNDS
    return clamp(scale, lo, hi)


def chart_radius(size: float, margin: float) -> float:
    """Plot radius; never negative even when the margins eat the whole chart."""
    return max(0.0, (size - 2 * margin) / 2)


def compute_layout(
    container_size: Size,
    viewport_size: Size,
    device_class: Union[DeviceClass, str, None] = None,
    reduced_motion: bool = False,
) -> LayoutConfig:
    """
    Build a LayoutConfig.

    Args:
        container_size: (width, height) of the element hosting the chart
        viewport_size: (width, height) of the whole viewport
        device_class: Overrides the class derived from viewport width
        reduced_motion: Disable animations (user preference)
    """
    device = _coerce_device(device_class, viewport_size[0])
    preset = DEVICE_PRESETS[device.value]

    container_w = max(float(container_size[0]), MIN_CONTAINER_SIZE)
    container_h = max(float(container_size[1]), MIN_CONTAINER_SIZE)

    max_size = float(preset.max_size)
    font_size = preset.font_size
    if device is DeviceClass.DESKTOP:
        scale = viewport_scale(viewport_size)
        max_size = min(float(DESKTOP_SIZE_CAP), DESKTOP_BASE_SIZE * scale)
        font_size = round(preset.font_size * min(scale, 1.25), 1)

    size = min(container_w - preset.base_padding, container_h - preset.base_padding, max_size)

    if device is DeviceClass.DESKTOP:
        lo, hi = DESKTOP_MARGIN_BOUNDS
        margin = max(lo, min(hi, size * DESKTOP_MARGIN_FACTOR))
    else:
        margin = float(preset.margin)

    return LayoutConfig(
        width=size,
        height=size,
        margin=margin,
        radius=chart_radius(size, margin),
        stroke_width=preset.stroke_width,
        point_radius=preset.point_radius,
        point_hover_radius=preset.point_hover_radius,
        font_size=font_size,
        grid_font_size=preset.grid_font_size,
        label_offset=preset.label_offset,
        animation_duration_ms=0 if reduced_motion else preset.animation_duration_ms,
        device_class=device,
    )


class ResponsiveLayoutEngine:
    """
    Thin wrapper that remembers user preferences between calls.

    The engine holds no per-call state; calling layout() at any frequency is
    safe.
    """

    def __init__(self, reduced_motion: bool = False, device_override: Optional[DeviceClass] = None):
        self.reduced_motion = reduced_motion
        self.device_override = device_override

    def layout(self, container_size: Size, viewport_size: Size,
               device_class: Union[DeviceClass, str, None] = None) -> LayoutConfig:
        return compute_layout(
            container_size,
            viewport_size,
            device_class or self.device_override,
            reduced_motion=self.reduced_motion,
        )

