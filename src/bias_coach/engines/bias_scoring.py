"""
Bias scoring functions - severity buckets and the aggregate discipline score.

Severity boundaries are shared by every bias type and are consumed by the
report, gamification and UI layers, so they must not drift:
- critical: score >= 75
- high:     score >= 50
- medium:   score >= 25
- low:      otherwise
"""
from typing import Iterable

from bias_coach.core.bias_types import Severity
from bias_coach.engines.trade_utils import round_half_up

CRITICAL_THRESHOLD = 75
HIGH_THRESHOLD = 50
MEDIUM_THRESHOLD = 25


def classify_severity(score: float) -> Severity:
    """Map a 0-100 bias score to its severity bucket."""
    if score >= CRITICAL_THRESHOLD:
        return Severity.CRITICAL
    if score >= HIGH_THRESHOLD:
        return Severity.HIGH
    if score >= MEDIUM_THRESHOLD:
        return Severity.MEDIUM
    return Severity.LOW


def clamp_score(score: float) -> float:
    return max(0.0, min(100.0, score))


def discipline_score(raw_scores: Iterable[float]) -> int:
    """
    Inverse of average bias pressure: 100 minus the mean of every detector
    score, zero scores included. Empty input means no pressure.
    """
    scores = list(raw_scores)
    avg_bias_score = sum(scores) / len(scores) if scores else 0.0
    return round_half_up(clamp_score(100 - avg_bias_score))
