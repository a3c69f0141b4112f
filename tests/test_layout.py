"""Tests for responsive chart sizing."""
import pytest

from vibescore.layout import (
    DeviceClass,
    ResponsiveLayoutEngine,
    chart_radius,
    classify_device,
    compute_layout,
    viewport_scale,
)


class TestClassifyDevice:
    @pytest.mark.parametrize("width,device", [
        (320, DeviceClass.MOBILE),
        (639, DeviceClass.MOBILE),
        (640, DeviceClass.TABLET),
        (1023, DeviceClass.TABLET),
        (1024, DeviceClass.DESKTOP),
        (2560, DeviceClass.DESKTOP),
    ])
    def test_breakpoints(self, width, device):
        assert classify_device(width) is device


class TestComputeLayout:
    def test_desktop_baseline(self, desktop_layout):
        assert desktop_layout.device_class is DeviceClass.DESKTOP
        assert desktop_layout.width == 500
        assert desktop_layout.height == 500
        assert desktop_layout.margin == 75
        assert desktop_layout.radius == 175
        assert desktop_layout.center == (250, 250)
        assert desktop_layout.font_size == 12
        assert desktop_layout.animation_duration_ms == 800

    def test_desktop_large_viewport(self):
        layout = compute_layout((1000, 1000), (2560, 1440))
        assert layout.width == 600
        assert layout.margin == 85
        assert layout.radius == 215
        assert layout.font_size == 15.0

    def test_desktop_small_viewport(self):
        layout = compute_layout((600, 600), (1024, 500))
        assert layout.width == pytest.approx(400)
        assert layout.margin == 75
        assert layout.font_size == 9.6

    def test_mobile(self):
        layout = compute_layout((400, 400), (375, 667))
        assert layout.device_class is DeviceClass.MOBILE
        assert layout.width == 340
        assert layout.margin == 25
        assert layout.radius == 145
        assert layout.font_size == 11

    def test_tablet(self):
        layout = compute_layout((500, 500), (800, 1000))
        assert layout.device_class is DeviceClass.TABLET
        assert layout.width == 380
        assert layout.margin == 55
        assert layout.radius == 135

    def test_container_floor(self):
        layout = compute_layout((50, 120), (375, 667))
        assert layout.width == 180
        assert layout.radius == 65

    def test_size_limited_by_smaller_side(self):
        layout = compute_layout((600, 300), (1280, 720))
        assert layout.width == 260

    def test_device_override(self):
        layout = compute_layout((600, 600), (1280, 720), device_class="mobile")
        assert layout.device_class is DeviceClass.MOBILE
        assert compute_layout((600, 600), (1280, 720), "TABLET").device_class is DeviceClass.TABLET

    def test_unknown_device(self):
        with pytest.raises(ValueError):
            compute_layout((600, 600), (1280, 720), device_class="watch")

    def test_reduced_motion(self):
        assert compute_layout((600, 600), (1280, 720), reduced_motion=True).animation_duration_ms == 0

    def test_idempotent(self):
        assert compute_layout((640, 480), (1366, 768)) == compute_layout((640, 480), (1366, 768))


def test_radius_never_negative():
    assert chart_radius(40, 25) == 0
    assert chart_radius(500, 75) == 175


def test_viewport_scale_bounds():
    assert viewport_scale((1280, 720)) == 1.0
    assert viewport_scale((320, 200)) == 0.8
    assert viewport_scale((5000, 5000)) == 1.5


class TestResponsiveLayoutEngine:
    def test_preferences_applied(self):
        engine = ResponsiveLayoutEngine(reduced_motion=True, device_override=DeviceClass.TABLET)
        layout = engine.layout((600, 600), (1920, 1080))
        assert layout.device_class is DeviceClass.TABLET
        assert layout.animation_duration_ms == 0

    def test_call_override_wins(self):
        engine = ResponsiveLayoutEngine(device_override=DeviceClass.TABLET)
        assert engine.layout((600, 600), (1920, 1080), "mobile").device_class is DeviceClass.MOBILE
