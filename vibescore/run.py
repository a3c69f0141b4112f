#!/usr/bin/env python
"""
VibeScore - Quick Run Script
============================

Scores a sample breakdown, prints the narration and walks the chart with the
keyboard, the same way a screen reader user would.

Usage:
    python -m vibescore.run [breakdown.json]
"""

import json
import sys

from vibescore.interaction import InteractionController, ManualScheduler
from vibescore.layout import compute_layout
from vibescore.narrator import ChartNarrator, score_announcement
from vibescore.renderer import RadarChartRenderer
from vibescore.scoring import ScoreAggregator

SAMPLE_BREAKDOWN = {
    "codeQuality": 95,
    "readability": 80,
    "collaboration": 90,
    "innovation": 70,
}


def main():
    breakdown = SAMPLE_BREAKDOWN
    if len(sys.argv) > 1:
        with open(sys.argv[1], 'r', encoding='utf-8') as f:
            breakdown = json.load(f)

    aggregator = ScoreAggregator()
    overall = aggregator.aggregate(breakdown)

    print()
    print("=" * 60)
    print("VIBE SCORE")
    print("=" * 60)
    print()
    print(f"  {overall.value}/100  {overall.title}")
    print(f"  (raw {overall.raw_value:.3f}, grade {overall.grade.label})")
    print(f"  {score_announcement(overall)}")
    print()
    print(ChartNarrator().table(breakdown))
    print()

    layout = compute_layout((600, 600), (1280, 720))
    result = RadarChartRenderer().render(breakdown, layout)

    scheduler = ManualScheduler()
    controller = InteractionController(result.points, result.anchors, scheduler=scheduler)

    print("=" * 60)
    print("KEYBOARD WALKTHROUGH")
    print("=" * 60)
    print()
    controller.focus()
    print(f"  [focus]      {controller.announcement}")
    for key in ("ArrowRight", "ArrowRight", "End", "Enter"):
        controller.key(key)
        print(f"  [{key:<10}] {controller.announcement}")
    scheduler.advance(5.0)
    print(f"  [5s later]   tooltip visible: {controller.state.tooltip.visible}")
    print()


if __name__ == '__main__':
    main()
