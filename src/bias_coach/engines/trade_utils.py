"""
Trade Utilities - Shared primitives for the bias detectors.

Grouping, time deltas, P&L accessors and the deterministic hashing used for
bias identities. These are pure functions; none of them mutate their inputs.
"""
from typing import Dict, List, Iterable, Tuple, Union
from decimal import Decimal, ROUND_HALF_UP
import math

from bias_coach.core.types import Trade, parse_timestamp

MINUTE_SECONDS = 60.0
HOUR_SECONDS = 60.0 * 60.0
DAY_SECONDS = 24.0 * 60.0 * 60.0

HASH_SEED = 5381
HASH_WIDTH = 7
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def trade_day(trade: Trade) -> str:
    """Calendar day of a trade, taken from the date part of its timestamp."""
    return trade.timestamp.split("T")[0]


def sort_by_time(trades: Iterable[Trade]) -> List[Trade]:
    """Chronological copy; ties keep input order."""
    return sorted(trades, key=lambda t: parse_timestamp(t.timestamp))


def group_by_day(trades: Iterable[Trade]) -> Dict[str, List[Trade]]:
    groups: Dict[str, List[Trade]] = {}
    for trade in trades:
        groups.setdefault(trade_day(trade), []).append(trade)
    return groups


def group_by_symbol(trades: Iterable[Trade]) -> Dict[str, List[Trade]]:
    groups: Dict[str, List[Trade]] = {}
    for trade in trades:
        groups.setdefault(trade.symbol, []).append(trade)
    return groups


def _seconds_between(ts1: str, ts2: str) -> float:
    return abs((parse_timestamp(ts2) - parse_timestamp(ts1)).total_seconds())


def minutes_between(ts1: str, ts2: str) -> float:
    return _seconds_between(ts1, ts2) / MINUTE_SECONDS


def hours_between(ts1: str, ts2: str) -> float:
    return _seconds_between(ts1, ts2) / HOUR_SECONDS


def days_between(ts1: str, ts2: str) -> float:
    return _seconds_between(ts1, ts2) / DAY_SECONDS


def pnl_of(trade: Trade) -> float:
    """Realized P&L with a missing value counted as flat."""
    return trade.pnl or 0.0


def safe_div(num: float, den: float) -> float:
    """Ratio guard: 0.0 when the denominator is zero."""
    if den == 0:
        return 0.0
    return num / den


def mean(values: List[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def round_half_up(value: float) -> int:
    """Integer rounding with .5 always going up, independent of parity."""
    return int(math.floor(value + 0.5))


def round_to(value: float, digits: int = 0) -> Union[int, float]:
    """
    Fixed-point rounding of an evidence metric.

    Works on the exact binary value (Decimal(float) is exact) and rounds
    halves away from zero, so 36.5 -> 37 and 6.25 -> 6.3. digits=0 yields an int.
    """
    if not math.isfinite(value):
        return value
    quantized = Decimal(value).quantize(Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP)
    if digits == 0:
        return int(quantized)
    return float(quantized)


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def stable_hash(text: str) -> str:
    """
    djb2 over UTF-16 code units, kept to 32 bits.

    Encoded base-36, left-padded with '0' and truncated to HASH_WIDTH chars.
    Ids built from this hash are persisted downstream, so the encoding is fixed.
    """
    data = text.encode("utf-16-le")
    h = HASH_SEED
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) + h + unit) & 0xFFFFFFFF
    return to_base36(h).rjust(HASH_WIDTH, "0")[:HASH_WIDTH]


def normalize_metric_value(value: Union[int, float, str]) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int) or float(value).is_integer():
        return str(int(value))
    return f"{value:.4f}"


def build_evidence_signature(evidence: Dict[str, Union[int, float, str]]) -> str:
    return "|".join(
        f"{key}:{normalize_metric_value(evidence[key])}" for key in sorted(evidence)
    )


def iter_round_trips(trades: Iterable[Trade]) -> Iterable[Tuple[Trade, Trade]]:
    """
    Yield (buy, sell) pairs: within each symbol's chronological sequence,
    every BUY immediately followed by a SELL.
    """
    for ordered in group_by_symbol(sort_by_time(trades)).values():
        for prev, curr in zip(ordered, ordered[1:]):
            if prev.action == "BUY" and curr.action == "SELL":
                yield prev, curr
