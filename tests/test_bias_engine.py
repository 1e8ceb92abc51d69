"""
Tests for the bias engine: determinism, ordering, severity consistency and
the aggregate discipline score.
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

import pytest

from bias_coach.core.bias_types import BiasType, Severity
from bias_coach.core.types import Position, Trade, sha256_hex, stable_json
from bias_coach.engines import BiasEngine, analyze, classify_severity
from bias_coach.engines.detectors import DETECTOR_REGISTRY

DETECTED_AT = "2025-03-20T12:00:00+00:00"
T0 = datetime(2025, 3, 3, 15, 0, tzinfo=timezone.utc)


def trade(tid: str, day: int, pnl=None, symbol: str = "TSLA", action: str = "SELL",
          total_value: float = 1000.0, fees: float = 0.1) -> Trade:
    return Trade(id=tid, symbol=symbol, action=action, quantity=5, price=200.0,
                 total_value=total_value, fees=fees,
                 timestamp=(T0 + timedelta(days=day)).isoformat(), pnl=pnl)


@pytest.fixture
def loss_averse_trades():
    """10 trades on one symbol: 6 losses of $100, 4 wins of $40."""
    pnls = [-100, 40, -100, 40, -100, 40, -100, 40, -100, -100]
    return [trade(f"t{i:02d}", i, float(p)) for i, p in enumerate(pnls)]


def fingerprint(result) -> str:
    return sha256_hex(stable_json(result.to_dict()))


# ==========================================
# DETERMINISM
# ==========================================

def test_analysis_is_deterministic(loss_averse_trades):
    r1 = analyze(loss_averse_trades, detected_at=DETECTED_AT)
    r2 = analyze(loss_averse_trades, detected_at=DETECTED_AT)
    assert fingerprint(r1) == fingerprint(r2)


def test_ids_do_not_depend_on_input_order_or_detection_time(loss_averse_trades):
    r1 = analyze(loss_averse_trades, detected_at=DETECTED_AT)
    r2 = BiasEngine().analyze(list(reversed(loss_averse_trades)), detected_at="2030-01-01T00:00:00+00:00")
    assert [(b.id, b.score) for b in r1.biases] == [(b.id, b.score) for b in r2.biases]


def test_inputs_are_not_mutated(loss_averse_trades):
    shuffled = list(reversed(loss_averse_trades))
    before = [t.to_payload() for t in shuffled]
    analyze(shuffled, [Position("TSLA", 5, 200.0, 210.0, 1050.0)], detected_at=DETECTED_AT)
    assert [t.to_payload() for t in shuffled] == before


# ==========================================
# AGGREGATION
# ==========================================

def test_no_signal_gives_perfect_discipline():
    result = analyze([], [], detected_at=DETECTED_AT)

    assert result.biases == []
    assert result.discipline_score == 100
    assert result.summary.total_biases == 0
    assert result.summary.top_concern == "none"
    assert set(result.raw_scores.values()) == {0}


def test_loss_aversion_end_to_end(loss_averse_trades):
    result = analyze(loss_averse_trades, detected_at=DETECTED_AT)

    top = result.biases[0]
    assert top.bias_type == BiasType.LOSS_AVERSION
    assert top.evidence["loss_win_ratio"] == 2.5
    assert top.score == 80
    assert top.severity == Severity.CRITICAL
    assert re.fullmatch(r"loss_aversion-TSLA-[0-9a-z]{7}", top.id)
    assert top.detected_at == DETECTED_AT

    # 20 + 80 + 10 + 45 + 10 + 15 + 0 + 15 + 10 = 205 over nine detectors
    assert result.raw_scores == {
        "overtrading": 20,
        "loss_aversion": 80,
        "revenge_trading": 10,
        "disposition_effect": 45,
        "risk_escalation": 10,
        "overconfidence": 15,
        "concentration_bias": 0,
        "fee_drag": 15,
        "churn": 10,
    }
    assert result.discipline_score == 77
    assert result.summary.critical_biases == 1
    assert result.summary.high_biases == 0
    assert result.summary.top_concern == "loss_aversion"


def test_zero_score_detectors_are_dropped_but_counted(loss_averse_trades):
    result = analyze(loss_averse_trades, detected_at=DETECTED_AT)

    kinds = {b.bias_type for b in result.biases}
    assert BiasType.CONCENTRATION_BIAS not in kinds
    assert len(result.biases) == 8
    assert len(result.raw_scores) == len(DETECTOR_REGISTRY)


def test_sorted_by_score_then_id(loss_averse_trades):
    result = analyze(loss_averse_trades, detected_at=DETECTED_AT)
    keys = [(-b.score, b.id) for b in result.biases]
    assert keys == sorted(keys)


def test_scores_bounded_and_severity_consistent(loss_averse_trades):
    positions = [Position("TSLA", 5, 200.0, 210.0, 1050.0), Position("SPY", 1, 500.0, 510.0, 510.0)]
    result = analyze(loss_averse_trades, positions, detected_at=DETECTED_AT)

    assert 0 <= result.discipline_score <= 100
    for b in result.biases:
        assert 0 < b.score <= 100
        assert b.severity == classify_severity(b.score)


def test_concentration_uses_top_symbol_context(loss_averse_trades):
    positions = [Position("nvda", 1, 100.0, 100.0, 900.0), Position("SPY", 1, 100.0, 100.0, 100.0)]
    result = analyze(loss_averse_trades, positions, detected_at=DETECTED_AT)

    concentration = next(b for b in result.biases if b.bias_type == BiasType.CONCENTRATION_BIAS)
    assert concentration.id.startswith("concentration_bias-NVDA-")
    assert concentration.score == 95
    assert result.biases[0].bias_type == BiasType.CONCENTRATION_BIAS


def test_biases_without_affected_trades_are_global(loss_averse_trades):
    result = analyze(loss_averse_trades, detected_at=DETECTED_AT)
    fee_drag = next(b for b in result.biases if b.bias_type == BiasType.FEE_DRAG)
    assert fee_drag.affected_trades == []
    assert fee_drag.id.startswith("fee_drag-GLOBAL-")


def test_custom_detector_set():
    engine = BiasEngine({BiasType.FEE_DRAG: DETECTOR_REGISTRY[BiasType.FEE_DRAG]})
    result = engine.analyze([trade("a", 0, pnl=10.0)], detected_at=DETECTED_AT)

    assert list(result.raw_scores) == ["fee_drag"]
    assert [b.bias_type for b in result.biases] == [BiasType.FEE_DRAG]


def test_empty_detector_set_runs_nothing(loss_averse_trades):
    result = BiasEngine({}).analyze(loss_averse_trades, detected_at=DETECTED_AT)

    assert result.raw_scores == {}
    assert result.biases == []
    assert result.discipline_score == 100


def test_detected_at_is_keyword_only(loss_averse_trades):
    with pytest.raises(TypeError):
        analyze(loss_averse_trades, [], DETECTED_AT)
    with pytest.raises(TypeError):
        BiasEngine().analyze(loss_averse_trades, [], DETECTED_AT)


def test_to_dict_wire_shape(loss_averse_trades):
    out = analyze(loss_averse_trades, detected_at=DETECTED_AT).to_dict()

    assert set(out) == {"biases", "disciplineScore", "summary"}
    assert set(out["summary"]) == {"totalBiases", "criticalBiases", "highBiases", "topConcern"}
    first = out["biases"][0]
    assert set(first) == {
        "id", "bias_type", "score", "severity", "evidence", "affected_trades", "intervention", "detected_at",
    }
    assert first["bias_type"] == "loss_aversion"
    assert first["severity"] == "critical"
