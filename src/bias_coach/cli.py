from __future__ import annotations
import argparse
import json
import sys
import logging
from pathlib import Path
from typing import Any, List, Optional

from bias_coach.core.config import load_bias_registry
from bias_coach.core.types import Position, Trade
from bias_coach.engines.bias_engine import analyze
from bias_coach.reports.behavior_report import compute_behavior_report

logger = logging.getLogger("bias_coach.cli")

EXIT_BAD_INPUT = 2


def _read_json_array(path: str, kind: str) -> List[Any]:
    with Path(path).open("r", encoding="utf-8") as f:
        data = json.load(f)
    # Accept either a bare array or {"trades": [...]} / {"positions": [...]}
    if isinstance(data, dict):
        data = data.get(kind, [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of {kind}")
    return data


def load_trades(path: str) -> List[Trade]:
    return [Trade.from_dict(row) for row in _read_json_array(path, "trades")]


def load_positions(path: str) -> List[Position]:
    return [Position.from_dict(row) for row in _read_json_array(path, "positions")]


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser("bias-coach")
    sub = p.add_subparsers(dest="cmd", required=True)

    # analyze a trade history
    s_analyze = sub.add_parser("analyze", help="Detect behavioral biases in a trade history")
    s_analyze.add_argument("--trades", required=True, help="Path to JSON array of trade records")
    s_analyze.add_argument("--positions", help="Path to JSON array of current positions")
    s_analyze.add_argument("--report", action="store_true", help="Emit the versioned behavior report")
    s_analyze.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    # show bias definitions
    s_defs = sub.add_parser("definitions", help="Print the bias registry")
    s_defs.add_argument("--registry", help="Alternate bias_registry.yaml")

    args = p.parse_args(argv)

    log_level = logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.cmd == "analyze":
        try:
            trades = load_trades(args.trades)
            positions = load_positions(args.positions) if args.positions else []
        except (OSError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.error(f"Could not load input: {e}")
            return EXIT_BAD_INPUT

        try:
            if args.report:
                out = compute_behavior_report(trades, positions).to_dict()
            else:
                out = analyze(trades, positions).to_dict()
        except ValueError as e:
            logger.error(f"Could not analyze input: {e}")
            return EXIT_BAD_INPUT
        print(json.dumps(out, indent=2))
        return 0

    if args.cmd == "definitions":
        try:
            registry = load_bias_registry(args.registry)
        except (OSError, ValueError) as e:
            logger.error(f"Could not load bias registry: {e}")
            return EXIT_BAD_INPUT
        print(json.dumps({"config_hash": registry.config_hash, "biases": registry.to_payload()}, indent=2))
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
