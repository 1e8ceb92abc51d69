"""
Deterministic bias identities.

A recomputed-but-unchanged bias must keep its id so streak trackers and
reactive consumers do not count it twice. The id depends only on the bias
type, its symbol context and its evidence.
"""
from typing import Dict, Iterable, Mapping

from bias_coach.core.bias_types import BiasType, EvidenceValue
from bias_coach.core.types import Trade
from bias_coach.engines.trade_utils import build_evidence_signature, stable_hash

GLOBAL_CONTEXT = "GLOBAL"


def symbol_context(
    evidence: Mapping[str, EvidenceValue],
    affected_trade_ids: Iterable[str],
    trade_by_id: Mapping[str, Trade],
) -> str:
    """
    Symbol a bias is about.

    An explicit evidence 'top_symbol' wins; otherwise the most frequent symbol
    among affected trades (ties alphabetical); otherwise GLOBAL_CONTEXT.
    """
    top_symbol = evidence.get("top_symbol")
    if isinstance(top_symbol, str) and top_symbol.strip():
        return top_symbol.strip().upper()

    counts: Dict[str, int] = {}
    for trade_id in affected_trade_ids:
        trade = trade_by_id.get(trade_id)
        if trade is None:
            continue
        symbol = (trade.symbol or "").strip().upper()
        if not symbol:
            continue
        counts[symbol] = counts.get(symbol, 0) + 1

    if not counts:
        return GLOBAL_CONTEXT
    return min(counts.items(), key=lambda item: (-item[1], item[0]))[0]


def bias_id(bias_type: BiasType, symbol: str, evidence: Mapping[str, EvidenceValue]) -> str:
    signature = build_evidence_signature(dict(evidence))
    bias_key = BiasType(bias_type).value
    return f"{bias_key}-{symbol}-{stable_hash(f'{bias_key}|{symbol}|{signature}')}"
