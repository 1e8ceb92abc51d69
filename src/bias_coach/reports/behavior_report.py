from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from bias_coach.core.bias_types import BiasDetection, Severity
from bias_coach.core.types import Position, Trade
from bias_coach.engines.bias_engine import analyze

REPORT_VERSION = "1"
TOP_CONCERN_MIN_SCORE = 20
TOP_CONCERN_LIMIT = 3
STRONG_DISCIPLINE = 80


def iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class BehaviorHighlights:
    top_concerns: List[BiasDetection] = field(default_factory=list)
    critical_count: int = 0
    high_count: int = 0
    message: str = ""


@dataclass
class BehaviorReport:
    """
    Versioned wrapper around one analysis pass, shaped for the insights UI
    and the gamification evaluator.
    """
    version: str
    generated_at: str
    discipline_score: int
    biases: List[BiasDetection]
    highlights: BehaviorHighlights

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "generatedAt": self.generated_at,
            "disciplineScore": self.discipline_score,
            "biases": [b.to_dict() for b in self.biases],
            "highlights": {
                "topConcerns": [b.to_dict() for b in self.highlights.top_concerns],
                "criticalCount": self.highlights.critical_count,
                "highCount": self.highlights.high_count,
                "message": self.highlights.message,
            },
        }


def build_focus_message(discipline_score: int, critical_count: int, high_count: int) -> str:
    if critical_count > 0:
        return (
            "Golden Era focus: reduce high-risk behaviors first to build resilient, "
            "sustainable trading discipline over time."
        )
    if high_count > 0:
        return (
            "Golden Era focus: keep compounding disciplined habits and lower remaining "
            "warning patterns to strengthen long-term resilience."
        )
    if discipline_score >= STRONG_DISCIPLINE:
        return (
            "Golden Era focus: you are building sustainable decision habits. Protect "
            "consistency over short-term dopamine-driven trading."
        )
    return (
        "Golden Era focus: steady, disciplined improvements create long-term prosperity "
        "more reliably than chasing quick profits."
    )


def compute_behavior_report(
    trades: Sequence[Trade],
    positions: Optional[Sequence[Position]] = None,
    generated_at: Optional[str] = None,
) -> BehaviorReport:
    generated_at = generated_at or iso_now()
    analysis = analyze(trades, positions, detected_at=generated_at)
    biases = sorted(analysis.biases, key=lambda b: (-b.score, b.id))

    critical_count = sum(1 for b in biases if b.severity == Severity.CRITICAL)
    high_count = sum(1 for b in biases if b.severity == Severity.HIGH)
    top_concerns = [b for b in biases if b.score > TOP_CONCERN_MIN_SCORE][:TOP_CONCERN_LIMIT]

    return BehaviorReport(
        version=REPORT_VERSION,
        generated_at=generated_at,
        discipline_score=analysis.discipline_score,
        biases=biases,
        highlights=BehaviorHighlights(
            top_concerns=top_concerns,
            critical_count=critical_count,
            high_count=high_count,
            message=build_focus_message(analysis.discipline_score, critical_count, high_count),
        ),
    )
