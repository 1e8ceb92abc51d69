from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from bias_coach.core.config import BiasRegistry
from bias_coach.core.types import Position, Trade
from bias_coach.engines.trade_utils import pnl_of, safe_div
from bias_coach.reports.behavior_report import BehaviorReport

DEFAULT_TRADE_LIMIT = 15


def build_coach_context(
    report: Optional[BehaviorReport],
    trades: Sequence[Trade],
    positions: Sequence[Position],
    cash_balance: float,
    total_value: float,
    total_pnl: float,
    total_pnl_percent: float,
    trade_limit: int = DEFAULT_TRADE_LIMIT,
    registry: Optional[BiasRegistry] = None,
) -> Dict[str, Any]:
    """
    Flatten portfolio state, recent trades and bias summaries into the plain
    mapping handed to the coaching assistant. Without a report the trader is
    treated as fully disciplined.
    """
    winners = [t for t in trades if pnl_of(t) > 0]
    losers = [t for t in trades if pnl_of(t) < 0]

    biases = []
    for bias in (report.biases if report else []):
        entry = {
            "bias_type": bias.bias_type.value,
            "score": bias.score,
            "severity": bias.severity.value,
            "intervention": bias.intervention,
        }
        if registry is not None:
            entry["name"] = registry.display_name(bias.bias_type.value)
        biases.append(entry)

    return {
        "cashBalance": cash_balance,
        "totalPortfolioValue": total_value,
        "unrealizedPnL": total_pnl,
        "unrealizedPnLPercent": total_pnl_percent,
        "realizedPnL": sum(pnl_of(t) for t in trades),
        "positions": [
            {
                "symbol": p.symbol,
                "quantity": p.quantity,
                "avgCost": p.avg_cost,
                "currentPrice": p.current_price,
                "currentValue": p.current_value,
                "pnl": p.pnl,
                "pnlPercent": p.pnl_percent,
                "assetType": p.asset_type,
            }
            for p in positions
        ],
        "trades": [
            {
                "id": t.id,
                "symbol": t.symbol,
                "action": t.action,
                "quantity": t.quantity,
                "price": t.price,
                "pnl": t.pnl,
                "timestamp": t.timestamp,
                "assetType": t.asset_type,
            }
            for t in list(trades)[:trade_limit]
        ],
        "biases": biases,
        "disciplineScore": report.discipline_score if report else 100,
        "totalTrades": len(trades),
        "winningTrades": len(winners),
        "losingTrades": len(losers),
        "winRate": safe_div(len(winners), len(trades)) * 100,
    }
