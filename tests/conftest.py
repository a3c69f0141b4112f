"""
Shared pytest fixtures.

Usage:
    pytest
    pytest tests/test_interaction.py -k tooltip
"""
import pytest

from vibescore.geometry import project
from vibescore.interaction import InteractionController, ManualScheduler
from vibescore.layout import compute_layout
from vibescore.observers import RecordingObserver


# === Common fixtures ===

@pytest.fixture
def scenario_breakdown():
    """Four-metric breakdown used across the suite (overall 4390/51)."""
    return {
        "codeQuality": 95,
        "readability": 80,
        "collaboration": 90,
        "innovation": 70,
    }


@pytest.fixture
def scenario_points(scenario_breakdown):
    return project(scenario_breakdown)


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def recorder():
    return RecordingObserver()


@pytest.fixture
def desktop_layout():
    """600x600 container in a 1280x720 viewport: size 500, margin 75, radius 175."""
    return compute_layout((600, 600), (1280, 720))


@pytest.fixture
def controller(scenario_points, manual_scheduler, recorder):
    anchors = [(float(i * 10), float(i * 20)) for i in range(len(scenario_points))]
    return InteractionController(
        scenario_points,
        anchors,
        scheduler=manual_scheduler,
        observer=recorder,
    )
