"""
Bias Engine - Detects and scores behavioral biases in a trade history.

Outputs an AnalysisResult each call with the active biases, the aggregate
discipline score and a summary. The engine holds no state between calls.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence

from bias_coach.core.bias_types import (
    AnalysisResult,
    AnalysisSummary,
    BiasDetection,
    BiasType,
    Severity,
)
from bias_coach.core.types import Position, Trade
from bias_coach.engines.bias_identity import bias_id, symbol_context
from bias_coach.engines.bias_scoring import classify_severity, discipline_score
from bias_coach.engines.detectors import DETECTOR_REGISTRY, Detector

logger = logging.getLogger(__name__)


class BiasEngine:
    """Runs every detector over the same (trades, positions) pair."""

    def __init__(self, detectors: Optional[Mapping[BiasType, Detector]] = None):
        self.detectors: Dict[BiasType, Detector] = dict(DETECTOR_REGISTRY if detectors is None else detectors)

    def analyze(
        self,
        trades: Sequence[Trade],
        positions: Optional[Sequence[Position]] = None,
        *,
        detected_at: Optional[str] = None,
    ) -> AnalysisResult:
        """Compute the AnalysisResult for a full trade history."""
        trades = list(trades)
        positions = list(positions or [])
        if detected_at is None:
            detected_at = datetime.now(timezone.utc).isoformat()

        trade_by_id = {t.id: t for t in trades}
        raw_scores: Dict[str, int] = {}
        biases: List[BiasDetection] = []

        for bias_type, detector in self.detectors.items():
            result = detector.detect(trades, positions)
            raw_scores[bias_type.value] = result.score
            logger.debug(f"{detector.name}: score={result.score} affected={len(result.affected_trades)}")

            if result.score <= 0:
                continue

            symbol = symbol_context(result.evidence, result.affected_trades, trade_by_id)
            biases.append(BiasDetection(
                id=bias_id(bias_type, symbol, result.evidence),
                bias_type=bias_type,
                score=result.score,
                severity=classify_severity(result.score),
                evidence=dict(result.evidence),
                affected_trades=list(result.affected_trades),
                intervention=result.intervention,
                detected_at=detected_at,
            ))

        # Highest score first, id breaks ties
        biases.sort(key=lambda b: (-b.score, b.id))

        summary = self._summarize(biases)
        score = discipline_score(raw_scores.values())
        logger.info(
            f"Analyzed {len(trades)} trades / {len(positions)} positions: "
            f"discipline={score} biases={summary.total_biases} top={summary.top_concern}"
        )

        return AnalysisResult(
            biases=biases,
            discipline_score=score,
            summary=summary,
            raw_scores=raw_scores,
        )

    def _summarize(self, biases: List[BiasDetection]) -> AnalysisSummary:
        return AnalysisSummary(
            total_biases=len(biases),
            critical_biases=sum(1 for b in biases if b.severity == Severity.CRITICAL),
            high_biases=sum(1 for b in biases if b.severity == Severity.HIGH),
            top_concern=biases[0].bias_type.value if biases else "none",
        )


def analyze(
    trades: Sequence[Trade],
    positions: Optional[Sequence[Position]] = None,
    *,
    detected_at: Optional[str] = None,
) -> AnalysisResult:
    """Analyze a trade history with the default detector set."""
    return BiasEngine().analyze(trades, positions, detected_at=detected_at)
