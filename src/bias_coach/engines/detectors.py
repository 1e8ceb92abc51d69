"""
Bias detectors - one per behavioral pattern.

Each detector is a stateless object whose detect() is a pure function of:
- trades: executed trade records (any order)
- positions: current holdings snapshot (only concentration uses it)

Returns: DetectionResult with score [0 - 100], evidence, intervention text and
the ids of the trades that exhibit the pattern.

Thresholds follow the behavioral-finance literature: Barber & Odean (2000,
2001, 2008), Odean (1998), Kahneman & Tversky, Bonaparte & Cooper (2025),
Schnytzer & Westreich (2015), Gervais & Odean (2001), Statman (1987).
"""
from typing import Dict, List, Optional, Sequence

from bias_coach.core.bias_types import BiasType, DetectionResult
from bias_coach.core.types import Position, Trade
from bias_coach.engines.trade_utils import (
    days_between,
    group_by_day,
    hours_between,
    iter_round_trips,
    mean,
    minutes_between,
    pnl_of,
    round_half_up,
    round_to,
    safe_div,
    sort_by_time,
)

PERIODS_PER_YEAR = 365

# Overtrading
ASSUMED_PORTFOLIO_POSITIONS = 10
SHORT_HOLD_HOURS = 4

# Revenge trading
REVENGE_LOSS_DOLLARS = 50.0
REVENGE_LOSS_FRACTION = 0.02
REVENGE_REENTRY_MINUTES = 30
REVENGE_SIZE_RATIO = 1.3

# Disposition effect
QUICK_AFTER_WIN_MINUTES = 5

# Risk escalation
ESCALATION_MIN_STREAK = 2
ESCALATION_SIZE_INCREASE_PCT = 25

# Overconfidence
HOT_HAND_MIN_STREAK = 3
HOT_HAND_SIZE_INCREASE_PCT = 20
BASELINE_TRADES = 3
POST_STREAK_WINDOW = 3

# Churn
CHURN_MAX_HOLDING_DAYS = 7


class Detector:
    """Base detector interface."""

    min_trades: int = 1

    def __init__(self, name: str):
        self.name = name

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        """Returns detection result with score [0 - 100]."""
        raise NotImplementedError

    def has_enough_trades(self, trades: Sequence[Trade]) -> bool:
        return len(trades) >= self.min_trades


class Overtrading(Detector):
    """Trade frequency, portfolio turnover and short holding periods."""

    min_trades = 3

    def __init__(self):
        super().__init__(BiasType.OVERTRADING.value)

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not self.has_enough_trades(trades):
            return DetectionResult()

        daily_counts = [len(day) for day in group_by_day(trades).values()]
        avg_daily_trades = sum(daily_counts) / len(daily_counts)
        max_daily_trades = max(daily_counts)
        trading_days = len(daily_counts)

        # Turnover against an assumed ~10 position portfolio
        total_traded_value = sum(t.total_value for t in trades)
        avg_trade_value = total_traded_value / len(trades)
        estimated_portfolio_value = avg_trade_value * ASSUMED_PORTFOLIO_POSITIONS
        annual_turnover = safe_div(total_traded_value, estimated_portfolio_value) * (
            PERIODS_PER_YEAR / max(trading_days, 1)
        )

        short_holds = 0
        round_trips = 0
        for buy, sell in iter_round_trips(trades):
            round_trips += 1
            if hours_between(buy.timestamp, sell.timestamp) < SHORT_HOLD_HOURS:
                short_holds += 1
        pct_short_holds = safe_div(short_holds, round_trips) * 100

        if avg_daily_trades >= 15:
            frequency_score = 90
        elif avg_daily_trades >= 10:
            frequency_score = 75
        elif avg_daily_trades >= 7:
            frequency_score = 55
        elif avg_daily_trades >= 5:
            frequency_score = 35
        else:
            frequency_score = 15

        if annual_turnover > 250:
            turnover_score = 95  # top quintile
        elif annual_turnover > 100:
            turnover_score = 70
        elif annual_turnover > 75:
            turnover_score = 50  # market average
        else:
            turnover_score = 25

        if pct_short_holds > 70:
            holding_score = 85
        elif pct_short_holds > 50:
            holding_score = 65
        elif pct_short_holds > 30:
            holding_score = 40
        else:
            holding_score = 20

        score = round_half_up(frequency_score * 0.4 + turnover_score * 0.35 + holding_score * 0.25)

        if score >= 75:
            intervention = (
                f"Critical: {avg_daily_trades:.1f} trades/day with {annual_turnover:.0f}% annual turnover. "
                "Research shows this reduces returns by 6.5% annually."
            )
        elif score >= 50:
            intervention = (
                f"High trading frequency ({avg_daily_trades:.1f}/day). "
                "Consider limiting to 3-5 trades per day."
            )
        elif score >= 25:
            intervention = "Moderate trading frequency. Monitor for escalation."
        else:
            intervention = "Trading frequency is healthy and disciplined."

        return DetectionResult(
            score=score,
            evidence={
                "avg_daily_trades": round_to(avg_daily_trades, 2),
                "max_daily_trades": max_daily_trades,
                "annual_turnover_pct": round_to(annual_turnover),
                "pct_short_holds": round_to(pct_short_holds, 1),
            },
            intervention=intervention,
        )


class LossAversion(Detector):
    """Average loss size relative to average win size (letting losses run)."""

    min_trades = 5

    def __init__(self):
        super().__init__(BiasType.LOSS_AVERSION.value)

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not self.has_enough_trades(trades):
            return DetectionResult()

        winners = [t for t in trades if pnl_of(t) > 0]
        losers = [t for t in trades if pnl_of(t) < 0]
        if not winners or not losers:
            return DetectionResult(score=15, intervention="Not enough mixed results to analyze.")

        avg_win = mean([pnl_of(t) for t in winners])
        avg_loss = abs(mean([pnl_of(t) for t in losers]))
        loss_win_ratio = safe_div(avg_loss, avg_win)
        win_rate = len(winners) / len(trades) * 100

        max_win = max(pnl_of(t) for t in winners)
        max_loss = abs(min(pnl_of(t) for t in losers))
        max_loss_win_ratio = safe_div(max_loss, max_win)

        max_loss_streak = 0
        streak = 0
        for trade in sort_by_time(trades):
            if pnl_of(trade) < 0:
                streak += 1
                max_loss_streak = max(max_loss_streak, streak)
            else:
                streak = 0

        score = 0
        # Losses hurt 2-2.5x more than gains
        if loss_win_ratio >= 2.0:
            score += 40
        elif loss_win_ratio >= 1.5:
            score += 30
        elif loss_win_ratio >= 1.2:
            score += 20
        else:
            score += 10

        if win_rate < 50 and loss_win_ratio > 1.0:
            score += 25
        elif win_rate < 40:
            score += 20
        elif win_rate < 50:
            score += 10

        if max_loss_win_ratio >= 3.0:
            score += 25
        elif max_loss_win_ratio >= 2.0:
            score += 15
        elif max_loss_win_ratio >= 1.5:
            score += 10

        if max_loss_streak >= 5:
            score += 10

        score = min(100, score)

        if score >= 75:
            intervention = (
                f"Critical loss aversion: Avg loss (${avg_loss:.0f}) is {loss_win_ratio:.1f}x larger than "
                f"avg win (${avg_win:.0f}). You're letting losses run while cutting winners early. "
                "Set strict stop-losses."
            )
        elif score >= 50:
            intervention = (
                f"Moderate loss aversion detected. Avg loss (${avg_loss:.0f}) exceeds avg win "
                f"(${avg_win:.0f}). Consider tighter stop-losses."
            )
        elif score >= 25:
            intervention = "Mild loss aversion tendency. Monitor your loss sizes carefully."
        else:
            intervention = "Good balance between wins and losses."

        return DetectionResult(
            score=score,
            evidence={
                "avg_win": round_to(avg_win, 2),
                "avg_loss": round_to(avg_loss, 2),
                "loss_win_ratio": round_to(loss_win_ratio, 2),
                "win_rate_pct": round_to(win_rate, 1),
                "max_win": round_to(max_win, 2),
                "max_loss": round_to(max_loss, 2),
                "max_loss_streak": max_loss_streak,
            },
            intervention=intervention,
            affected_trades=[t.id for t in losers],
        )


class RevengeTrading(Detector):
    """Rapid or oversized re-entry right after a significant loss."""

    min_trades = 3

    def __init__(self):
        super().__init__(BiasType.REVENGE_TRADING.value)

    @staticmethod
    def is_significant_loss(trade: Trade) -> bool:
        pnl = pnl_of(trade)
        if pnl < 0 and abs(pnl) > trade.total_value * REVENGE_LOSS_FRACTION:
            return True
        return pnl < -REVENGE_LOSS_DOLLARS

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not self.has_enough_trades(trades):
            return DetectionResult()

        ordered = sort_by_time(trades)
        reentry_minutes: List[float] = []
        size_increases: List[float] = []
        affected: List[str] = []
        full_pattern_matches = 0

        for prev, curr in zip(ordered, ordered[1:]):
            if not self.is_significant_loss(prev):
                continue
            gap = minutes_between(prev.timestamp, curr.timestamp)
            size_ratio = safe_div(curr.total_value, prev.total_value)
            rapid_reentry = gap < REVENGE_REENTRY_MINUTES
            size_escalation = size_ratio > REVENGE_SIZE_RATIO
            if not (rapid_reentry or size_escalation):
                continue

            size_increase_pct = (size_ratio - 1) * 100
            reentry_minutes.append(gap)
            size_increases.append(size_increase_pct)
            affected.append(curr.id)
            if gap < REVENGE_REENTRY_MINUTES and size_increase_pct > (REVENGE_SIZE_RATIO - 1) * 100:
                full_pattern_matches += 1

        instances = len(affected)
        revenge_rate = safe_div(instances, len(ordered) - 1) * 100

        if full_pattern_matches >= 2:
            score = 90
        elif instances >= 3:
            score = 75
        elif instances >= 2:
            score = 55
        elif instances >= 1:
            score = 35
        else:
            score = 10

        avg_time_to_reentry = mean(reentry_minutes)
        avg_size_increase = mean(size_increases)

        if score >= 75:
            intervention = (
                f"Critical: {instances} revenge trades detected. After losses, you re-enter in "
                f"{avg_time_to_reentry:.0f} min with {avg_size_increase:.0f}% larger positions. "
                "Implement 30-min cooling period."
            )
        elif score >= 50:
            intervention = "Revenge trading pattern detected. Wait 30+ minutes after any loss before trading again."
        elif score >= 25:
            intervention = "Mild revenge trading tendency. Monitor emotional state after losses."
        else:
            intervention = "Good emotional control after losses."

        return DetectionResult(
            score=score,
            evidence={
                "revenge_instances": instances,
                "full_pattern_matches": full_pattern_matches,
                "revenge_rate_pct": round_to(revenge_rate, 1),
                "avg_time_to_reentry_min": round_to(avg_time_to_reentry, 1),
                "avg_size_increase_pct": round_to(avg_size_increase, 1),
            },
            intervention=intervention,
            affected_trades=affected,
        )


class DispositionEffect(Detector):
    """Small winners taken quickly while losers are allowed to grow."""

    min_trades = 5

    def __init__(self):
        super().__init__(BiasType.DISPOSITION_EFFECT.value)

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not self.has_enough_trades(trades):
            return DetectionResult()

        winners = [t for t in trades if pnl_of(t) > 0]
        losers = [t for t in trades if pnl_of(t) < 0]
        if not winners or not losers:
            return DetectionResult(score=10, intervention="Not enough mixed results for disposition analysis.")

        avg_win_size = mean([pnl_of(t) for t in winners])
        avg_loss_size = abs(mean([pnl_of(t) for t in losers]))
        # < 1 means wins are smaller than losses
        win_loss_ratio = safe_div(avg_win_size, avg_loss_size)

        ordered = sort_by_time(trades)
        affected: List[str] = []
        win_followups = 0
        for curr, nxt in zip(ordered, ordered[1:]):
            if pnl_of(curr) > 0:
                win_followups += 1
                if minutes_between(curr.timestamp, nxt.timestamp) < QUICK_AFTER_WIN_MINUTES:
                    affected.append(curr.id)
        pct_quick_after_win = safe_div(len(affected), win_followups) * 100

        small_wins = sum(1 for t in winners if pnl_of(t) < avg_win_size * 0.5)
        pct_small_wins = small_wins / len(winners) * 100

        score = 0
        if win_loss_ratio < 0.5:
            score += 40
        elif win_loss_ratio < 0.75:
            score += 30
        elif win_loss_ratio < 1.0:
            score += 20
        else:
            score += 5

        if pct_small_wins > 60:
            score += 25
        elif pct_small_wins > 40:
            score += 15
        else:
            score += 5

        if pct_quick_after_win > 50:
            score += 20
        elif pct_quick_after_win > 30:
            score += 10

        score = min(100, score)

        if score >= 75:
            intervention = (
                f"Strong disposition effect: Avg win (${avg_win_size:.0f}) is only "
                f"{win_loss_ratio * 100:.0f}% of avg loss (${avg_loss_size:.0f}). Let winners run longer!"
            )
        elif score >= 50:
            intervention = (
                f"Disposition effect detected: Taking profits too quickly. "
                f"{pct_small_wins:.0f}% of wins are below average."
            )
        elif score >= 25:
            intervention = "Mild disposition tendency. Consider using trailing stops to let winners run."
        else:
            intervention = "Good balance between letting winners run and cutting losses."

        return DetectionResult(
            score=score,
            evidence={
                "avg_win_size": round_to(avg_win_size, 2),
                "avg_loss_size": round_to(avg_loss_size, 2),
                "win_loss_ratio": round_to(win_loss_ratio, 2),
                "pct_small_wins": round_to(pct_small_wins, 1),
                "pct_quick_after_win": round_to(pct_quick_after_win, 1),
            },
            intervention=intervention,
            affected_trades=affected,
        )


class RiskEscalation(Detector):
    """Martingale-style position growth inside a losing streak."""

    min_trades = 4

    def __init__(self):
        super().__init__(BiasType.RISK_ESCALATION.value)

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not self.has_enough_trades(trades):
            return DetectionResult()

        ordered = sort_by_time(trades)
        streak_lengths: List[int] = []
        size_increases: List[float] = []
        affected: List[str] = []

        streak = 0
        for i, trade in enumerate(ordered):
            if pnl_of(trade) >= 0:
                streak = 0
                continue
            streak += 1
            if streak >= ESCALATION_MIN_STREAK and i > 0:
                size_increase = (safe_div(trade.total_value, ordered[i - 1].total_value) - 1) * 100
                if size_increase > ESCALATION_SIZE_INCREASE_PCT:
                    streak_lengths.append(streak)
                    size_increases.append(size_increase)
                    affected.append(trade.id)

        events = len(affected)
        max_escalation = max(size_increases) if size_increases else 0.0

        if max_escalation > 100:
            score = 95  # doubling into losses
        elif max_escalation > 50:
            score = 75
        elif events >= 2:
            score = 60
        elif events >= 1:
            score = 40
        else:
            score = 10

        if score >= 90:
            intervention = (
                "CRITICAL: Martingale detected! Doubling position after losses leads to ruin 89% of the time. "
                "Use FIXED 1% risk per trade."
            )
        elif score >= 75:
            intervention = (
                f"Risk escalation during losses ({max_escalation:.0f}% size increase). "
                "Limit position size to 50% of previous after any loss."
            )
        elif score >= 50:
            intervention = "Gradual risk increase during losing periods detected. Maintain consistent sizing."
        else:
            intervention = "Good risk management during losing periods."

        return DetectionResult(
            score=score,
            evidence={
                "escalation_events": events,
                "max_size_increase_pct": round_to(max_escalation, 1),
                "longest_losing_streak": max(streak_lengths, default=0),
            },
            intervention=intervention,
            affected_trades=affected,
        )


class Overconfidence(Detector):
    """Hot-hand sizing after winning streaks."""

    min_trades = 5

    def __init__(self):
        super().__init__(BiasType.OVERCONFIDENCE.value)

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not self.has_enough_trades(trades):
            return DetectionResult()

        ordered = sort_by_time(trades)
        baseline_size = sum(t.total_value for t in ordered[:BASELINE_TRADES]) / BASELINE_TRADES

        size_increases: List[float] = []
        post_streak_pnls: List[float] = []
        affected: List[str] = []

        win_streak = 0
        for i, trade in enumerate(ordered):
            if pnl_of(trade) <= 0:
                win_streak = 0
                continue
            win_streak += 1
            if win_streak < HOT_HAND_MIN_STREAK:
                continue
            size_increase = (safe_div(trade.total_value, baseline_size) - 1) * 100
            if size_increase > HOT_HAND_SIZE_INCREASE_PCT:
                following = ordered[i + 1:i + 1 + POST_STREAK_WINDOW]
                size_increases.append(size_increase)
                post_streak_pnls.append(sum(pnl_of(t) for t in following))
                affected.append(trade.id)

        episodes = len(affected)
        win_rate = sum(1 for t in ordered if pnl_of(t) > 0) / len(ordered)
        span_days = days_between(ordered[0].timestamp, ordered[-1].timestamp)
        trades_per_day = len(ordered) / max(1.0, span_days)
        frequency_overconfidence = trades_per_day > 5 and win_rate < 0.55
        avg_post_streak_pnl = mean(post_streak_pnls)

        if episodes >= 3 and avg_post_streak_pnl < 0:
            score = 80
        elif episodes >= 2 or frequency_overconfidence:
            score = 60
        elif episodes >= 1:
            score = 40
        else:
            score = 15

        if score >= 75:
            intervention = (
                "Overconfidence detected: After winning streaks you increase risk, but post-streak returns "
                "are negative. Maintain consistent sizing."
            )
        elif score >= 50:
            intervention = (
                f"Hot-hand tendency: {episodes} episodes of increased risk after wins. "
                "Each trade is independent."
            )
        else:
            intervention = "Good humility after winning trades."

        return DetectionResult(
            score=score,
            evidence={
                "hot_hand_episodes": episodes,
                "avg_size_increase_after_wins_pct": round_to(mean(size_increases), 1),
                "avg_post_streak_pnl": round_to(avg_post_streak_pnl, 2),
                "win_rate_pct": round_to(win_rate * 100, 1),
            },
            intervention=intervention,
            affected_trades=affected,
        )


class ConcentrationBias(Detector):
    """Portfolio concentration measured by the Herfindahl-Hirschman Index."""

    min_trades = 0

    def __init__(self):
        super().__init__(BiasType.CONCENTRATION_BIAS.value)

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not positions:
            return DetectionResult()

        total_value = sum(p.current_value for p in positions)
        shares = [safe_div(p.current_value, total_value) for p in positions]
        hhi = sum(share * share for share in shares)

        max_share = max(shares)
        top_symbol = positions[shares.index(max_share)].symbol
        max_allocation = max_share * 100
        top_3_concentration = sum(sorted(shares, reverse=True)[:3]) * 100

        if hhi > 0.50:
            score = 95
        elif hhi > 0.25:
            score = 70  # Statman danger threshold
        elif hhi > 0.15:
            score = 45
        else:
            score = 15

        if score >= 90:
            intervention = (
                f"CRITICAL: {max_allocation:.0f}% in {top_symbol}! HHI={hhi:.2f} indicates extreme "
                "concentration. Diversify to 8-10+ symbols."
            )
        elif score >= 70:
            intervention = (
                f"High concentration (HHI={hhi:.2f}). Top 3 = {top_3_concentration:.0f}%. Target <60% for top 3."
            )
        elif score >= 45:
            intervention = "Moderate concentration. Consider adding 3-5 more positions."
        else:
            intervention = "Well-diversified portfolio."

        return DetectionResult(
            score=score,
            evidence={
                "herfindahl_index": round_to(hhi, 3),
                "max_allocation_pct": round_to(max_allocation, 1),
                "top_symbol": top_symbol,
                "top_3_concentration_pct": round_to(top_3_concentration, 1),
                "num_positions": len(positions),
            },
            intervention=intervention,
        )


class FeeDrag(Detector):
    """Trading costs relative to gross results and traded volume."""

    min_trades = 1

    def __init__(self):
        super().__init__(BiasType.FEE_DRAG.value)

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not self.has_enough_trades(trades):
            return DetectionResult()

        total_fees = sum(t.fees for t in trades)
        net_pnl = sum(pnl_of(t) for t in trades)
        gross_pnl = net_pnl + total_fees
        # Break-even gross P&L reports no drag
        fee_drag_ratio = safe_div(total_fees, abs(gross_pnl)) * 100

        trading_days = len(group_by_day(trades))
        total_volume = sum(t.total_value for t in trades)
        annualized_fee_drag = safe_div(total_fees, total_volume) * (PERIODS_PER_YEAR / max(trading_days, 1)) * 100

        fee_exceeded = sum(1 for t in trades if abs(pnl_of(t)) < t.fees)
        pct_trades_below_fee = fee_exceeded / len(trades) * 100

        if fee_drag_ratio > 30 or annualized_fee_drag > 5:
            score = 90
        elif fee_drag_ratio > 15 or annualized_fee_drag > 3:
            score = 70
        elif fee_drag_ratio > 5 or annualized_fee_drag > 1.5:
            score = 45
        else:
            score = 15

        if score >= 90:
            intervention = (
                f"CRITICAL: Fees consuming {fee_drag_ratio:.0f}% of gains ({annualized_fee_drag:.1f}% annually). "
                "Reduce trading frequency by 75%."
            )
        elif score >= 70:
            intervention = f"High fee drag ({fee_drag_ratio:.0f}% of profits). Cut frequency in half."
        elif score >= 45:
            intervention = "Moderate fee drag. Review if each trade justifies the cost."
        else:
            intervention = "Fee efficiency is good."

        return DetectionResult(
            score=score,
            evidence={
                "total_fees": round_to(total_fees, 2),
                "gross_pnl": round_to(gross_pnl, 2),
                "net_pnl": round_to(net_pnl, 2),
                "fee_drag_ratio_pct": round_to(fee_drag_ratio, 1),
                "annualized_fee_drag_pct": round_to(annualized_fee_drag, 2),
                "pct_trades_where_fees_exceeded_profit": round_to(pct_trades_below_fee, 1),
            },
            intervention=intervention,
        )


class Churn(Detector):
    """Round-trips closed within a week (attention-induced trading)."""

    min_trades = 4

    def __init__(self):
        super().__init__(BiasType.CHURN.value)

    def detect(self, trades: Sequence[Trade], positions: Sequence[Position] = ()) -> DetectionResult:
        if not self.has_enough_trades(trades):
            return DetectionResult()

        holding_days: List[float] = []
        churn_pnls: List[float] = []
        value_lost = 0.0
        affected: List[str] = []

        for buy, sell in iter_round_trips(trades):
            held = days_between(buy.timestamp, sell.timestamp)
            if held >= CHURN_MAX_HOLDING_DAYS:
                continue
            # Zero or missing realized P&L falls back to the price move
            pnl = sell.pnl or (sell.price - buy.price) * buy.quantity
            fees = buy.fees + sell.fees
            holding_days.append(held)
            churn_pnls.append(pnl)
            if pnl - fees < 0:
                value_lost += pnl - fees
            affected.append(sell.id)

        instances = len(affected)
        churn_rate = safe_div(instances, len(trades)) * 100
        avg_churn_pnl = mean(churn_pnls)

        if churn_rate > 40 and avg_churn_pnl < 0:
            score = 80  # value-destructive churn
        elif churn_rate > 30:
            score = 60
        elif churn_rate > 20:
            score = 40
        elif churn_rate > 10:
            score = 25
        else:
            score = 10

        if score >= 75:
            intervention = (
                f"{churn_rate:.0f}% of trades are churn (<7 day round-trips) losing avg "
                f"${abs(avg_churn_pnl):.0f}. Hold positions longer."
            )
        elif score >= 50:
            intervention = f"Significant churn detected ({churn_rate:.0f}% quick flips). Extend holding periods."
        elif score >= 25:
            intervention = "Some short-term trading. Consider if quick exits are justified."
        else:
            intervention = "Good holding discipline."

        return DetectionResult(
            score=score,
            evidence={
                "churn_instances": instances,
                "churn_rate_pct": round_to(churn_rate, 1),
                "avg_churn_pnl": round_to(avg_churn_pnl, 2),
                "total_value_lost_to_churn": round_to(value_lost, 2),
                "avg_churn_holding_days": round_to(mean(holding_days), 1),
            },
            intervention=intervention,
            affected_trades=affected,
        )


# Detector registry, in analysis order
DETECTOR_REGISTRY: Dict[BiasType, Detector] = {
    BiasType.OVERTRADING: Overtrading(),
    BiasType.LOSS_AVERSION: LossAversion(),
    BiasType.REVENGE_TRADING: RevengeTrading(),
    BiasType.DISPOSITION_EFFECT: DispositionEffect(),
    BiasType.RISK_ESCALATION: RiskEscalation(),
    BiasType.OVERCONFIDENCE: Overconfidence(),
    BiasType.CONCENTRATION_BIAS: ConcentrationBias(),
    BiasType.FEE_DRAG: FeeDrag(),
    BiasType.CHURN: Churn(),
}


def get_detector(bias_type: str) -> Optional[Detector]:
    """Retrieve detector by bias type (enum member or its string value)."""
    try:
        return DETECTOR_REGISTRY.get(BiasType(bias_type))
    except ValueError:
        return None
