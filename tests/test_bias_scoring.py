from __future__ import annotations

import pytest

from bias_coach.core.bias_types import BiasType, Severity
from bias_coach.core.types import Trade
from bias_coach.engines.bias_identity import GLOBAL_CONTEXT, bias_id, symbol_context
from bias_coach.engines.bias_scoring import classify_severity, discipline_score


@pytest.mark.parametrize("score,expected", [
    (100, Severity.CRITICAL),
    (75, Severity.CRITICAL),
    (74, Severity.HIGH),
    (50, Severity.HIGH),
    (49, Severity.MEDIUM),
    (25, Severity.MEDIUM),
    (24, Severity.LOW),
    (0, Severity.LOW),
])
def test_severity_boundaries(score, expected):
    assert classify_severity(score) == expected


def test_discipline_score_all_zero_is_perfect():
    assert discipline_score([0] * 9) == 100


def test_discipline_score_mean_and_rounding():
    assert discipline_score([100] * 9) == 0
    # 100 - 45/9 = 95
    assert discipline_score([45, 0, 0, 0, 0, 0, 0, 0, 0]) == 95
    # 100 - 9/2 = 95.5 rounds up
    assert discipline_score([9, 0]) == 96
    assert discipline_score([]) == 100


def _trade(tid: str, symbol: str) -> Trade:
    return Trade(id=tid, symbol=symbol, action="SELL", quantity=1, price=1.0,
                 total_value=1.0, fees=0.0, timestamp="2025-03-03T10:00:00Z")


def test_symbol_context_prefers_top_symbol():
    assert symbol_context({"top_symbol": " nvda "}, [], {}) == "NVDA"


def test_symbol_context_majority_then_alphabetical():
    trades = {t.id: t for t in [_trade("1", "msft"), _trade("2", "AAPL"), _trade("3", "MSFT"), _trade("4", "aapl")]}
    assert symbol_context({}, ["1", "2", "3"], trades) == "MSFT"
    assert symbol_context({}, ["1", "2"], trades) == "AAPL"
    assert symbol_context({}, ["1", "2", "3", "4"], trades) == "AAPL"


def test_symbol_context_falls_back_to_global():
    assert symbol_context({"top_symbol": "  "}, ["missing"], {}) == GLOBAL_CONTEXT


def test_bias_id_is_pure_function_of_type_symbol_evidence():
    evidence = {"b": 1.25, "a": 3}
    same = bias_id(BiasType.CHURN, "AAPL", {"a": 3, "b": 1.25})

    assert bias_id(BiasType.CHURN, "AAPL", evidence) == same
    assert bias_id("churn", "AAPL", evidence) == same
    assert same.startswith("churn-AAPL-")
    assert bias_id(BiasType.CHURN, "MSFT", evidence) != same
    assert bias_id(BiasType.FEE_DRAG, "AAPL", evidence) != same
    # 3 and 3.0 normalize identically
    assert bias_id(BiasType.CHURN, "AAPL", {"a": 3.0, "b": 1.25}) == same
