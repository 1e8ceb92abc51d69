"""
Bias Coach Engines - behavioral bias detection and discipline scoring

Core pieces:
- Detectors: nine independent bias detectors + registry
- BiasScoring: severity buckets and the discipline score
- BiasIdentity: symbol context and deterministic bias ids
- BiasEngine: runs every detector and assembles the AnalysisResult
"""

from .detectors import (
    Detector,
    Overtrading,
    LossAversion,
    RevengeTrading,
    DispositionEffect,
    RiskEscalation,
    Overconfidence,
    ConcentrationBias,
    FeeDrag,
    Churn,
    DETECTOR_REGISTRY,
    get_detector,
)
from .bias_scoring import classify_severity, discipline_score
from .bias_identity import bias_id, symbol_context, GLOBAL_CONTEXT
from .bias_engine import BiasEngine, analyze

__all__ = [
    # Detectors
    "Detector",
    "Overtrading",
    "LossAversion",
    "RevengeTrading",
    "DispositionEffect",
    "RiskEscalation",
    "Overconfidence",
    "ConcentrationBias",
    "FeeDrag",
    "Churn",
    "DETECTOR_REGISTRY",
    "get_detector",
    # Scoring
    "classify_severity",
    "discipline_score",
    # Identity
    "bias_id",
    "symbol_context",
    "GLOBAL_CONTEXT",
    # Aggregator
    "BiasEngine",
    "analyze",
]
