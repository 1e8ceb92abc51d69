from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Mapping, Optional
import json
import hashlib

TradeAction = Literal["BUY", "SELL"]
AssetType = Literal["stocks", "forex", "commodities", "etfs", "cash"]

def stable_json(obj: Any) -> str:
    # Deterministic JSON serialization
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)

def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def parse_timestamp(ts: str) -> datetime:
    """
    Parse an ISO8601 timestamp into an aware UTC datetime.
    A trailing 'Z' is accepted; naive timestamps are taken as UTC.
    """
    raw = ts.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    dt = datetime.fromisoformat(raw)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _field(data: Mapping[str, Any], key: str, kind: str) -> Any:
    if key not in data or data[key] is None:
        raise ValueError(f"{kind} record missing required field '{key}'")
    return data[key]


def _number(data: Mapping[str, Any], key: str, kind: str) -> float:
    raw = _field(data, key, kind)
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{kind} field '{key}' is not numeric: {raw!r}") from e


def _timestamp(data: Mapping[str, Any], key: str, kind: str) -> str:
    raw = str(_field(data, key, kind))
    try:
        parse_timestamp(raw)
    except ValueError as e:
        raise ValueError(f"{kind} field '{key}' is not an ISO8601 timestamp: {raw!r}") from e
    return raw


@dataclass(frozen=True)
class Trade:
    id: str
    symbol: str
    action: TradeAction
    quantity: float
    price: float
    total_value: float
    fees: float
    timestamp: str     # ISO8601, parsed lazily by the engines
    asset_type: AssetType = "stocks"
    pnl: Optional[float] = None  # realized P&L, usually on SELL
    session_id: str = ""
    user_id: str = ""
    notes: Optional[str] = None

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Trade":
        action = str(_field(data, "action", "trade")).upper()
        if action not in ("BUY", "SELL"):
            raise ValueError(f"trade field 'action' must be BUY or SELL, got {action!r}")
        quantity = _number(data, "quantity", "trade")
        price = _number(data, "price", "trade")
        total_value = data.get("total_value")
        pnl = data.get("pnl")
        return Trade(
            id=str(_field(data, "id", "trade")),
            symbol=str(_field(data, "symbol", "trade")),
            action=action,  # type: ignore[arg-type]
            quantity=quantity,
            price=price,
            total_value=float(total_value) if total_value is not None else quantity * price,
            fees=float(data.get("fees") or 0.0),
            timestamp=_timestamp(data, "timestamp", "trade"),
            asset_type=data.get("asset_type", "stocks"),
            pnl=float(pnl) if pnl is not None else None,
            session_id=str(data.get("session_id", "")),
            user_id=str(data.get("user_id", "")),
            notes=data.get("notes"),
        )

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Position:
    symbol: str
    quantity: float
    avg_cost: float
    current_price: float
    current_value: float
    pnl: float = 0.0
    pnl_percent: float = 0.0
    asset_type: AssetType = "stocks"

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Position":
        quantity = _number(data, "quantity", "position")
        current_price = _number(data, "current_price", "position")
        current_value = data.get("current_value")
        return Position(
            symbol=str(_field(data, "symbol", "position")),
            quantity=quantity,
            avg_cost=float(data.get("avg_cost") or 0.0),
            current_price=current_price,
            current_value=float(current_value) if current_value is not None else quantity * current_price,
            pnl=float(data.get("pnl") or 0.0),
            pnl_percent=float(data.get("pnl_percent") or 0.0),
            asset_type=data.get("asset_type", "stocks"),
        )

    def to_payload(self) -> Dict[str, Any]:
        return asdict(self)
