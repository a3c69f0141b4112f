"""
Utility Functions
=================

Common utilities used across the VibeScore system.
"""

import math
import re
from numbers import Real
from typing import Any, Iterable, List, Optional, Tuple

from .config import MIN_VALUE, MAX_VALUE


def clamp(value: float, lo: float = MIN_VALUE, hi: float = MAX_VALUE) -> float:
    """Clamp a number into [lo, hi]."""
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def to_real(value: Any) -> Optional[float]:
    """
    float(value) for real numbers, None for NaN, bools and non-numbers.

    Integers too large for a float saturate to +/-inf instead of raising.
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    try:
        number = float(value)
    except OverflowError:
        number = math.inf if value > 0 else -math.inf
    return None if math.isnan(number) else number


def is_number(value: Any) -> bool:
    """True for real numbers that are not NaN. Bools are not numbers here."""
    return to_real(value) is not None


def sanitize_score(value: Any) -> float:
    """
    Coerce a raw sub-score into [0, 100].

    NaN, bools, None and non-numeric values become 0; everything else is
    clamped, including infinities and integers beyond float range. Analysis
    pipelines routinely hand us dirty input, so this never raises.
    """
    number = to_real(value)
    if number is None:
        return 0.0
    return float(clamp(number))


def sanitize_weight(value: Any) -> Optional[float]:
    """Return a usable weight, or None when the value is not a finite non-negative number."""
    weight = to_real(value)
    if weight is None or math.isinf(weight) or weight < 0:
        return None
    return weight


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (85.5 -> 86)."""
    return int(math.floor(value + 0.5))


def pick_band(value: float, bands: Iterable[Tuple[float, Any]]) -> Any:
    """
    Return the label of the first band whose inclusive lower bound is met.

    Bands are (lower_bound, label) pairs ordered highest first; the last one
    is the fallback.
    """
    label = None
    for lower, label in bands:
        if value >= lower:
            return label
    return label


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def humanize_key(key: str) -> str:
    """
    Turn a metric key into a readable label.

    Examples:
        "codeQuality"        -> "Code Quality"
        "release_management" -> "Release Management"
        "CI-speed"           -> "CI Speed"
    """
    text = _CAMEL_BOUNDARY.sub(" ", str(key))
    words: List[str] = [w for w in re.split(r"[\s_\-]+", text) if w]
    return " ".join(w if w.isupper() else w.capitalize() for w in words)
