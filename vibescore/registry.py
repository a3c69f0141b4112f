"""
Metric Registry
===============

Static catalog of the twelve canonical vibe metrics: their labels, default
weights (percent of the total, summing to 100), and the descriptions and
improvement tips shown alongside the breakdown.

Callers that supply scores without weights fall back to these defaults.
Unknown keys get a humanized version of the key as their label.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from .utils import humanize_key


@dataclass(frozen=True)
class MetricDefinition:
    """One registered metric."""
    key: str
    label: str
    short_label: str
    weight: float
    description: str = ""
    tip: str = ""


@dataclass(frozen=True)
class MetricDescription:
    """Public view of a metric returned by MetricRegistry.describe()."""
    label: str
    default_weight: float


CANONICAL_METRICS: List[MetricDefinition] = [
    MetricDefinition(
        key="codeQuality",
        label="Code Quality",
        short_label="Code Quality",
        weight=16,
        description="Measures code structure, patterns, and maintainability through static "
                    "analysis and best practices adherence.",
        tip="Refactor complex functions, add proper error handling, and follow "
            "established coding standards.",
    ),
    MetricDefinition(
        key="readability",
        label="Readability & Documentation",
        short_label="Readability",
        weight=12,
        description="Evaluates code clarity, documentation quality, and how easily other "
                    "developers can understand the codebase.",
        tip="Add meaningful comments, use descriptive names, and keep documentation current.",
    ),
    MetricDefinition(
        key="collaboration",
        label="Collaboration & Activity",
        short_label="Collaboration",
        weight=15,
        description="Tracks contribution patterns, code review practices, and community "
                    "engagement.",
        tip="Encourage more contributors and keep code review thorough and responsive.",
    ),
    MetricDefinition(
        key="innovation",
        label="Innovation & Modernity",
        short_label="Innovation",
        weight=8,
        description="Measures adoption of modern practices, technologies, and creative "
                    "problem-solving approaches.",
        tip="Adopt modern tooling and language features where they fit.",
    ),
    MetricDefinition(
        key="maintainability",
        label="Maintainability & Structure",
        short_label="Maintainability",
        weight=8,
        description="Assesses how easy the code is to maintain, extend, and modify over time.",
        tip="Modularize the codebase and document its architecture.",
    ),
    MetricDefinition(
        key="inclusivity",
        label="Inclusivity & Accessibility",
        short_label="Inclusivity",
        weight=5,
        description="Evaluates community openness, accessibility, and contribution guidelines "
                    "for diverse contributors.",
        tip="Add a code of conduct and clear contribution guidelines.",
    ),
    MetricDefinition(
        key="security",
        label="Security & Safety",
        short_label="Security",
        weight=12,
        description="Analyzes security practices, vulnerability management, and adherence to "
                    "security standards.",
        tip="Automate security scanning, keep dependencies updated, and publish a security policy.",
    ),
    MetricDefinition(
        key="performance",
        label="Performance & Scalability",
        short_label="Performance",
        weight=8,
        description="Measures optimization practices, efficiency, and runtime performance "
                    "characteristics.",
        tip="Profile hot paths and add performance monitoring.",
    ),
    MetricDefinition(
        key="testingQuality",
        label="Testing Quality",
        short_label="Testing",
        weight=6,
        description="Evaluates testing practices, coverage, and test automation.",
        tip="Increase coverage on critical paths and run tests in CI.",
    ),
    MetricDefinition(
        key="communityHealth",
        label="Community Health",
        short_label="Community",
        weight=4,
        description="Tracks community engagement, project vitality, and long-term "
                    "sustainability indicators.",
        tip="Respond to issues promptly and keep discussions welcoming.",
    ),
    MetricDefinition(
        key="codeHealth",
        label="Code Health",
        short_label="Code Health",
        weight=4,
        description="Overall codebase health including technical debt and code smells.",
        tip="Pay down technical debt and reduce duplication.",
    ),
    MetricDefinition(
        key="releaseManagement",
        label="Release Management",
        short_label="Releases",
        weight=2,
        description="Evaluates release frequency, versioning strategy, and changelog quality.",
        tip="Use semantic versioning and keep a detailed changelog.",
    ),
]


class MetricRegistry:
    """
    Read-only catalog of metric definitions.

    Usage:
        registry = MetricRegistry(CANONICAL_METRICS)
        registry.describe("security")   # MetricDescription(label=..., default_weight=12)
        registry.label_for("myMetric")  # "My Metric"
    """

    def __init__(self, metrics: Iterable[MetricDefinition]):
        """
        Build a registry.

        Args:
            metrics: Metric definitions; keys must be unique

        Raises:
            ValueError: On duplicate keys
        """
        self._metrics: Dict[str, MetricDefinition] = {}
        for metric in metrics:
            if metric.key in self._metrics:
                raise ValueError(f"Duplicate metric key '{metric.key}'")
            self._metrics[metric.key] = metric

    def __contains__(self, key: object) -> bool:
        return key in self._metrics

    def __iter__(self) -> Iterator[MetricDefinition]:
        return iter(self._metrics.values())

    def __len__(self) -> int:
        return len(self._metrics)

    def get(self, key: str) -> Optional[MetricDefinition]:
        return self._metrics.get(key)

    def describe(self, key: str) -> Optional[MetricDescription]:
        """Return label and default weight for a key, or None if unregistered."""
        metric = self._metrics.get(key)
        if metric is None:
            return None
        return MetricDescription(label=metric.label, default_weight=metric.weight)

    def label_for(self, key: str) -> str:
        """Full label for a key, falling back to the humanized key."""
        metric = self._metrics.get(key)
        return metric.label if metric else humanize_key(key)

    def short_label_for(self, key: str) -> str:
        """Axis label for a key, falling back to the humanized key."""
        metric = self._metrics.get(key)
        return metric.short_label if metric else humanize_key(key)

    def default_weight(self, key: str) -> Optional[float]:
        metric = self._metrics.get(key)
        return metric.weight if metric else None

    def default_weights(self) -> Dict[str, float]:
        return {key: metric.weight for key, metric in self._metrics.items()}

    def total_weight(self) -> float:
        return float(sum(metric.weight for metric in self._metrics.values()))

    def validate(self, tolerance: float = 0.5) -> None:
        """
        Check that default weights sum to 100.

        Raises:
            ValueError: When the sum is off by more than the tolerance
        """
        total = self.total_weight()
        if abs(total - 100.0) > tolerance:
            raise ValueError(f"Default weights must sum to 100, got {total:g}")


DEFAULT_REGISTRY = MetricRegistry(CANONICAL_METRICS)
