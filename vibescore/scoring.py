"""
Weighted Scoring Engine
=======================

Combines a breakdown of per-metric sub-scores into a single composite vibe
score, a qualitative grade, and a short message.

Mathematical Formulation:
-------------------------

Overall = Σ (w_i × s_i) / Σ w_i      for every metric i with w_i > 0

where:
    s_i = clamp(score_i, 0, 100)          (NaN / non-numeric -> 0)
    w_i = supplied weight, else registry default, else 0

Keys without any weight are excluded from the denominator, so a partial
breakdown is renormalized over the metrics actually present. When Σ w_i is 0
the overall score is 0 and the grade is NeedsWork.

The value is kept in floating point and rounded half-up only when the result
is presented; the grade is read from that rounded value.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

from .config import (
    BENCHMARK_TIERS,
    GRADE_MESSAGES,
    GRADE_TABLES,
    METRIC_BANDS,
    SCORE_COLOR_BANDS,
    get_grade_table_name,
)
from .observers import NULL_OBSERVER, ScoreObserver
from .registry import DEFAULT_REGISTRY, MetricRegistry
from .utils import clamp, pick_band, round_half_up, sanitize_score, sanitize_weight


class Grade(Enum):
    OUTSTANDING = "Outstanding"
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_WORK = "NeedsWork"

    @property
    def label(self) -> str:
        return "Needs Work" if self is Grade.NEEDS_WORK else self.value


@dataclass(frozen=True)
class OverallScore:
    """Composite score as presented to the score display."""
    value: int
    raw_value: float
    grade: Grade
    title: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "value": self.value,
            "grade": self.grade.value,
            "title": self.title,
            "message": self.message,
        }


@dataclass(frozen=True)
class ScoreRow:
    """One metric's line in the weighted breakdown."""
    key: str
    label: str
    score: float
    weight: float
    weight_share: float   # percent of the effective total weight
    contribution: float   # points this metric adds to the overall score

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "score": round(self.score, 2),
            "weight": self.weight,
            "weight_share": round(self.weight_share, 2),
            "contribution": round(self.contribution, 2),
        }


def _check_breakdown(breakdown: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if breakdown is None:
        return {}
    if not isinstance(breakdown, Mapping):
        raise TypeError(f"breakdown must be a mapping (got {type(breakdown).__name__})")
    return breakdown


def effective_weights(
    breakdown: Optional[Mapping[str, Any]],
    weights: Optional[Mapping[str, Any]] = None,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> Dict[str, float]:
    """
    Resolve the weight used for every key in the breakdown.

    Supplied weight first; an invalid supplied weight (negative, NaN,
    non-numeric) is ignored and the registry default is used; keys unknown to
    both get 0.
    """
    breakdown = _check_breakdown(breakdown)
    weights = weights or {}
    resolved = {}
    for key in breakdown:
        weight = sanitize_weight(weights.get(key)) if key in weights else None
        if weight is None:
            weight = registry.default_weight(key)
        resolved[key] = float(weight) if weight is not None else 0.0
    return resolved


def _grade_table(grade_table: Optional[str]) -> List[Tuple[float, str]]:
    name = grade_table or get_grade_table_name()
    if name not in GRADE_TABLES:
        raise ValueError(f"Unknown grade table '{name}' (expected one of {sorted(GRADE_TABLES)})")
    return GRADE_TABLES[name]


def _weight_shares(weights: np.ndarray) -> np.ndarray:
    """
    Each weight's fraction of the total, or all zeros when nothing is weighted.

    Weights are divided by the largest one before summing, so even weights
    near the float limit cannot overflow.
    """
    if len(weights) == 0 or weights.max() <= 0:
        return np.zeros(len(weights), dtype=float)
    scaled = weights / weights.max()
    return scaled / scaled.sum()


def grade_for(value: float, grade_table: Optional[str] = None) -> Grade:
    """Map a (rounded) overall value to its grade."""
    return Grade(pick_band(value, _grade_table(grade_table)))


def aggregate(
    breakdown: Optional[Mapping[str, Any]],
    weights: Optional[Mapping[str, Any]] = None,
    registry: MetricRegistry = DEFAULT_REGISTRY,
    grade_table: Optional[str] = None,
) -> OverallScore:
    """
    Compute the overall score for a breakdown.

    Args:
        breakdown: metric key -> raw score
        weights: optional metric key -> weight
        registry: source of default weights
        grade_table: "canonical" or "legacy"; defaults to the environment setting

    Returns:
        OverallScore
    """
    breakdown = _check_breakdown(breakdown)
    resolved = effective_weights(breakdown, weights, registry)

    scores = np.array([sanitize_score(breakdown[key]) for key in breakdown], dtype=float)
    w = np.array([resolved[key] for key in breakdown], dtype=float)

    raw = clamp(float(np.dot(scores, _weight_shares(w)))) if len(w) else 0.0

    value = round_half_up(raw)
    grade = grade_for(value, grade_table)
    title, message = GRADE_MESSAGES[grade.value]

    return OverallScore(value=value, raw_value=raw, grade=grade, title=title, message=message)


def score_rows(
    breakdown: Optional[Mapping[str, Any]],
    weights: Optional[Mapping[str, Any]] = None,
    registry: MetricRegistry = DEFAULT_REGISTRY,
) -> List[ScoreRow]:
    """
    Per-metric rows in breakdown order.

    Contributions are normalized by the effective total weight, so they sum
    to the unrounded overall score.
    """
    breakdown = _check_breakdown(breakdown)
    resolved = effective_weights(breakdown, weights, registry)
    shares = _weight_shares(np.array([resolved[key] for key in breakdown], dtype=float))

    rows = []
    for (key, raw_score), share in zip(breakdown.items(), shares):
        score = sanitize_score(raw_score)
        weight = resolved[key]
        share = float(share)
        rows.append(ScoreRow(
            key=key,
            label=registry.label_for(key),
            score=score,
            weight=weight,
            weight_share=share * 100,
            contribution=score * share,
        ))
    return rows


_SORT_KEYS = {
    "score": lambda row: -row.score,
    "weight": lambda row: -row.weight,
    "contribution": lambda row: -row.contribution,
    "name": lambda row: row.label.lower(),
}


def sort_rows(rows: List[ScoreRow], by: str = "score") -> List[ScoreRow]:
    """Sort rows by score, weight, contribution (all descending) or name. Ties keep input order."""
    if by not in _SORT_KEYS:
        raise ValueError(f"Unknown sort key '{by}' (expected one of {sorted(_SORT_KEYS)})")
    return sorted(rows, key=_SORT_KEYS[by])


def metric_band(score: Any) -> str:
    """Qualitative band for a single metric: Excellent / Good / Needs Work."""
    return pick_band(sanitize_score(score), METRIC_BANDS)


def distribution(breakdown: Optional[Mapping[str, Any]]) -> Dict[str, int]:
    """Count strong (>=70), moderate (40-69) and weak (<40) metrics."""
    counts = {"strong": 0, "moderate": 0, "weak": 0}
    for raw_score in _check_breakdown(breakdown).values():
        score = sanitize_score(raw_score)
        if score >= 70:
            counts["strong"] += 1
        elif score >= 40:
            counts["moderate"] += 1
        else:
            counts["weak"] += 1
    return counts


def benchmark_tier(value: float) -> Optional[Dict[str, Any]]:
    """Highest industry benchmark tier the overall value reaches, if any."""
    for minimum, label, reference in BENCHMARK_TIERS:
        if value >= minimum:
            return {"minimum": minimum, "label": label, "reference": reference}
    return None


def score_color(value: Any) -> str:
    """Display color for a score."""
    return pick_band(sanitize_score(value), SCORE_COLOR_BANDS)


class ScoreAggregator:
    """
    Stateless aggregator bound to a registry, grade table and observer.

    Safe to call on every render; nothing is cached between calls.
    """

    def __init__(
        self,
        registry: MetricRegistry = DEFAULT_REGISTRY,
        grade_table: Optional[str] = None,
        observer: ScoreObserver = NULL_OBSERVER,
    ):
        self.registry = registry
        self.grade_table = grade_table
        self.observer = observer

    def aggregate(
        self,
        breakdown: Optional[Mapping[str, Any]],
        weights: Optional[Mapping[str, Any]] = None,
    ) -> OverallScore:
        result = aggregate(breakdown, weights, self.registry, self.grade_table)
        self.observer.on_aggregate(breakdown, result)
        return result

    def rows(
        self,
        breakdown: Optional[Mapping[str, Any]],
        weights: Optional[Mapping[str, Any]] = None,
        sort_by: Optional[str] = None,
    ) -> List[ScoreRow]:
        rows = score_rows(breakdown, weights, self.registry)
        return sort_rows(rows, sort_by) if sort_by else rows
