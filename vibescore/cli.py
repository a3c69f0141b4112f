"""
Command-Line Interface for VibeScore
====================================

Usage:
    python -m vibescore.cli <breakdown.json> [options]

    or

    vibescore - < breakdown.json

Options:
    --weights       JSON file with per-metric weight overrides
    --format        Output format: json, table or simple (default: json)
    --svg           Also write the radar chart as an SVG file
    --width         Chart container width in pixels (default: 600)
    --height        Chart container height in pixels (default: 600)
    --viewport      Viewport size as WIDTHxHEIGHT (default: 1280x720)
    --device        Force a device class: mobile, tablet or desktop
    --grade-table   Grade banding: canonical or legacy
    --output, -o    Output file path (default: stdout)
    --verbose, -v   Verbose output with debug logging
    --help, -h      Show this help message

Input is either {"breakdown": {...}, "weights": {...}} or a bare breakdown
mapping such as {"codeQuality": 95, "readability": 80}.
"""

import argparse
import json
import logging
import sys
import traceback
from typing import Any, Dict, List, Mapping, Optional, Tuple

from vibescore.config import GRADE_TABLES
from vibescore.layout import DeviceClass, ResponsiveLayoutEngine
from vibescore.narrator import ChartNarrator, score_announcement
from vibescore.observers import NULL_OBSERVER, LoggingObserver, configure_logging
from vibescore.renderer import RadarChartRenderer, SvgSurface
from vibescore.scoring import ScoreAggregator, benchmark_tier, distribution

logger = logging.getLogger(__name__)


def parse_size(text: str) -> Tuple[float, float]:
    """Parse 'WIDTHxHEIGHT' into a (width, height) tuple."""
    try:
        width, height = text.lower().split("x", 1)
        size = float(width), float(height)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got '{text}'") from None
    if size[0] <= 0 or size[1] <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got '{text}'")
    return size


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog='vibescore',
        description='📊 VibeScore - Weighted repository vibe score and radar chart',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s breakdown.json
  %(prog)s breakdown.json --format table
  %(prog)s - --svg chart.svg --device mobile < breakdown.json

Environment Variables:
  VIBESCORE_GRADE_TABLE  Default grade table (canonical or legacy)
  VIBESCORE_LOG_LEVEL    Log level when --verbose is not given
        """
    )

    parser.add_argument(
        'input',
        type=str,
        help='Path to a JSON breakdown, or - to read stdin'
    )

    parser.add_argument(
        '--weights',
        type=str,
        default=None,
        help='JSON file with weight overrides (takes precedence over weights in the input)'
    )

    parser.add_argument(
        '--format',
        type=str,
        choices=['json', 'table', 'simple'],
        default='json',
        help='Output format (default: json)'
    )

    parser.add_argument(
        '--svg',
        type=str,
        default=None,
        help='Write the radar chart to this SVG file'
    )

    parser.add_argument(
        '--width',
        type=float,
        default=600.0,
        help='Chart container width in pixels (default: 600)'
    )

    parser.add_argument(
        '--height',
        type=float,
        default=600.0,
        help='Chart container height in pixels (default: 600)'
    )

    parser.add_argument(
        '--viewport',
        type=parse_size,
        default=(1280.0, 720.0),
        help='Viewport size as WIDTHxHEIGHT (default: 1280x720)'
    )

    parser.add_argument(
        '--device',
        type=str,
        choices=[d.value for d in DeviceClass],
        default=None,
        help='Force a device class instead of deriving it from the viewport'
    )

    parser.add_argument(
        '--grade-table',
        type=str,
        choices=sorted(GRADE_TABLES),
        default=None,
        help='Grade banding (default: $VIBESCORE_GRADE_TABLE or canonical)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output file path (default: print to stdout)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    return parser


def _read_json(path: str) -> Any:
    if path == '-':
        return json.load(sys.stdin)
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_payload(data: Any) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """Split an input document into (breakdown, weights)."""
    if not isinstance(data, Mapping):
        raise TypeError(f"input must be a JSON object (got {type(data).__name__})")
    if isinstance(data.get('breakdown'), Mapping):
        weights = data.get('weights')
        if weights is not None and not isinstance(weights, Mapping):
            raise TypeError("'weights' must be a JSON object")
        return dict(data['breakdown']), dict(weights) if weights else None
    return dict(data), None


def build_report(breakdown, weights, aggregator: ScoreAggregator) -> Dict[str, Any]:
    """Collect everything the output formats need."""
    overall = aggregator.aggregate(breakdown, weights)
    rows = aggregator.rows(breakdown, weights)
    return {
        'overall': overall,
        'rows': rows,
        'distribution': distribution(breakdown),
        'benchmark': benchmark_tier(overall.value),
        'announcement': score_announcement(overall),
    }


def format_output(report: Dict[str, Any], fmt: str, table: str = "") -> str:
    """Format a report based on requested format."""
    overall = report['overall']

    if fmt == 'json':
        payload = {
            'overall': overall.to_dict(),
            'raw_value': round(overall.raw_value, 4),
            'breakdown': [row.to_dict() for row in report['rows']],
            'distribution': report['distribution'],
            'benchmark': report['benchmark'],
            'announcement': report['announcement'],
        }
        return json.dumps(payload, indent=2)

    elif fmt == 'table':
        return '\n'.join([
            f"Overall: {overall.value}/100 ({overall.grade.label})",
            "",
            table,
        ])

    elif fmt == 'simple':
        lines = [
            f"📊 Vibe Score: {overall.value}/100",
            f"   {overall.title}",
            f"   {overall.message}",
            "",
        ]
        tier = report['benchmark']
        if tier:
            lines.append(f"   Benchmark: {tier['label']} (like {tier['reference']})")
        dist = report['distribution']
        lines.append(
            f"   Metrics: {dist['strong']} strong, {dist['moderate']} moderate, {dist['weak']} weak"
        )
        lines.append("")
        lines.append("Breakdown:")
        lines.append("-" * 50)
        for row in report['rows']:
            lines.append(f"  {row.label:<32} {row.score:5.0f}  (weight {row.weight:g})")
        return '\n'.join(lines)

    return json.dumps(overall.to_dict())


def write_svg(breakdown, args, observer) -> str:
    """Render the chart to args.svg and return its status."""
    engine = ResponsiveLayoutEngine()
    layout = engine.layout((args.width, args.height), args.viewport, args.device)
    result = RadarChartRenderer(observer=observer).render(breakdown, layout)
    with open(args.svg, 'w', encoding='utf-8') as f:
        f.write(SvgSurface(observer=observer).render(result))
    logger.info("Wrote %s chart to %s", result.status, args.svg)
    return result.status


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging('DEBUG' if args.verbose else None)
    observer = LoggingObserver() if args.verbose else NULL_OBSERVER

    try:
        breakdown, weights = load_payload(_read_json(args.input))
        if args.weights:
            overrides = _read_json(args.weights)
            if not isinstance(overrides, Mapping):
                raise TypeError("--weights must point to a JSON object")
            weights = dict(overrides)

        aggregator = ScoreAggregator(grade_table=args.grade_table, observer=observer)
        report = build_report(breakdown, weights, aggregator)
        table = ChartNarrator(aggregator.registry).table(breakdown, weights)
        output = format_output(report, args.format, table)

        if args.svg:
            status = write_svg(breakdown, args, observer)
            if status != 'ok':
                print(f"⚠️  Chart status: {status}", file=sys.stderr)

        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(output)
            print(f"✅ Report saved to: {args.output}")
        else:
            print(output)

        return 0

    except Exception as e:
        print(f"❌ Error: {str(e)}", file=sys.stderr)
        if args.verbose:
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
