from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from bias_coach.core.bias_types import BiasType
from bias_coach.core.types import Trade
from bias_coach.reports.behavior_report import (
    REPORT_VERSION,
    build_focus_message,
    compute_behavior_report,
)

GENERATED_AT = "2025-03-20T12:00:00+00:00"
T0 = datetime(2025, 3, 3, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def loss_averse_trades():
    pnls = [-100, 40, -100, 40, -100, 40, -100, 40, -100, -100]
    return [
        Trade(id=f"t{i:02d}", symbol="TSLA", action="SELL", quantity=5, price=200.0,
              total_value=1000.0, fees=0.1, timestamp=(T0 + timedelta(days=i)).isoformat(), pnl=float(p))
        for i, p in enumerate(pnls)
    ]


def test_report_wraps_analysis(loss_averse_trades):
    report = compute_behavior_report(loss_averse_trades, generated_at=GENERATED_AT)

    assert report.version == REPORT_VERSION
    assert report.generated_at == GENERATED_AT
    assert report.discipline_score == 77
    assert all(b.detected_at == GENERATED_AT for b in report.biases)
    assert report.biases[0].bias_type == BiasType.LOSS_AVERSION


def test_top_concerns_above_twenty_only(loss_averse_trades):
    highlights = compute_behavior_report(loss_averse_trades, generated_at=GENERATED_AT).highlights

    # overtrading sits exactly at 20 and is left out
    assert [b.bias_type for b in highlights.top_concerns] == [
        BiasType.LOSS_AVERSION,
        BiasType.DISPOSITION_EFFECT,
    ]
    assert highlights.critical_count == 1
    assert highlights.high_count == 0
    assert highlights.message.startswith("Golden Era focus: reduce high-risk behaviors first")


def test_empty_history_report():
    report = compute_behavior_report([], [], generated_at=GENERATED_AT)

    assert report.discipline_score == 100
    assert report.biases == []
    assert report.highlights.top_concerns == []
    assert "sustainable decision habits" in report.highlights.message


def test_focus_message_priority():
    assert "reduce high-risk" in build_focus_message(95, critical_count=1, high_count=3)
    assert "lower remaining warning patterns" in build_focus_message(95, critical_count=0, high_count=1)
    assert "sustainable decision habits" in build_focus_message(80, critical_count=0, high_count=0)
    assert "steady, disciplined improvements" in build_focus_message(79, critical_count=0, high_count=0)


def test_report_wire_shape(loss_averse_trades):
    out = compute_behavior_report(loss_averse_trades, generated_at=GENERATED_AT).to_dict()

    assert set(out) == {"version", "generatedAt", "disciplineScore", "biases", "highlights"}
    assert set(out["highlights"]) == {"topConcerns", "criticalCount", "highCount", "message"}
    assert out["highlights"]["topConcerns"][0]["bias_type"] == "loss_aversion"
    assert out["generatedAt"] == GENERATED_AT
