from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Dict, Any, Union
from enum import Enum

EvidenceValue = Union[int, float, str]


class BiasType(str, Enum):
    OVERTRADING = "overtrading"
    LOSS_AVERSION = "loss_aversion"
    REVENGE_TRADING = "revenge_trading"
    DISPOSITION_EFFECT = "disposition_effect"
    RISK_ESCALATION = "risk_escalation"
    OVERCONFIDENCE = "overconfidence"
    CONCENTRATION_BIAS = "concentration_bias"
    FEE_DRAG = "fee_drag"
    CHURN = "churn"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class DetectionResult:
    """Raw output of a single detector."""
    score: int = 0
    evidence: Dict[str, EvidenceValue] = field(default_factory=dict)
    intervention: str = ""
    affected_trades: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class BiasDefinition:
    """Static registry definition of a behavioral bias."""
    id: BiasType
    name: str
    description: str
    short_description: str
    metrics: List[str] = field(default_factory=list)
    interventions: List[str] = field(default_factory=list)


@dataclass
class BiasDetection:
    """A detected bias, as exposed to report and coaching consumers."""
    id: str
    bias_type: BiasType
    score: int
    severity: Severity
    evidence: Dict[str, EvidenceValue]
    affected_trades: List[str]
    intervention: str
    detected_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "bias_type": self.bias_type.value,
            "score": self.score,
            "severity": self.severity.value,
            "evidence": dict(self.evidence),
            "affected_trades": list(self.affected_trades),
            "intervention": self.intervention,
            "detected_at": self.detected_at,
        }


@dataclass
class AnalysisSummary:
    total_biases: int = 0
    critical_biases: int = 0
    high_biases: int = 0
    top_concern: str = "none"  # bias_type value or "none"


@dataclass
class AnalysisResult:
    """Ephemeral result of one full analysis pass."""
    biases: List[BiasDetection] = field(default_factory=list)
    discipline_score: int = 100
    summary: AnalysisSummary = field(default_factory=AnalysisSummary)
    raw_scores: Dict[str, int] = field(default_factory=dict)  # bias_type -> score, zeros included

    def to_dict(self) -> Dict[str, Any]:
        return {
            "biases": [b.to_dict() for b in self.biases],
            "disciplineScore": self.discipline_score,
            "summary": {
                "totalBiases": self.summary.total_biases,
                "criticalBiases": self.summary.critical_biases,
                "highBiases": self.summary.high_biases,
                "topConcern": self.summary.top_concern,
            },
        }
