"""Pure metric computation functions — no DB, no SQLAlchemy.

Money stays ``Decimal`` through every aggregation; only the dimensionless
outputs (ratios, percentages, Sharpe statistics) are converted to float, and
only on the way out of each function.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, timedelta
from decimal import Decimal

import numpy as np

from strategy_dashboard.metrics.errors import InvalidWindowError, TradeOutsideWindowError
from strategy_dashboard.metrics.results import (
    DrawdownResult,
    ExpectancyResult,
    NetsSummary,
    ProfitFactorResult,
    RecoveryFactorResult,
    SharpeResult,
)
from strategy_dashboard.models.trade import TradeRecord

ZERO = Decimal("0")

DailySeries = dict[date, Decimal]
EquityCurve = list[tuple[date, Decimal]]


def derive_nets(trades: Iterable[TradeRecord]) -> NetsSummary:
    """Net result per trade (gross - fee) and the win/loss accumulators.

    Break-even trades count towards ``trade_count`` but neither bucket.
    """
    nets: list[Decimal] = []
    wins_sum = ZERO
    losses_sum_abs = ZERO
    wins_count = 0
    losses_count = 0

    for trade in trades:
        net = trade.net_pnl
        if net > 0:
            wins_sum += net
            wins_count += 1
        elif net < 0:
            losses_sum_abs += -net
            losses_count += 1
        nets.append(net)

    return NetsSummary(
        nets=tuple(nets),
        wins_sum=wins_sum,
        losses_sum_abs=losses_sum_abs,
        wins_count=wins_count,
        losses_count=losses_count,
    )


def validate_window(start: date, end: date) -> None:
    if start > end:
        raise InvalidWindowError(f"window start {start} is after end {end}")


def daily_series(trades: Iterable[TradeRecord], start: date, end: date) -> DailySeries:
    """Zero-filled net PnL per exit date over ``[start, end]`` inclusive."""
    validate_window(start, end)

    daily: DailySeries = {}
    day = start
    while day <= end:
        daily[day] = ZERO
        day += timedelta(days=1)

    for trade in trades:
        exit_day = trade.exit_date
        if exit_day not in daily:
            raise TradeOutsideWindowError(
                f"trade {trade.local_id} exits on {exit_day}, outside {start}..{end}"
            )
        daily[exit_day] += trade.net_pnl
    return daily


def equity_curve(daily: Mapping[date, Decimal]) -> EquityCurve:
    """Running cumulative PnL, one point per day in series order."""
    curve: EquityCurve = []
    cumulative = ZERO
    for day, value in daily.items():
        cumulative += value
        curve.append((day, cumulative))
    return curve


def max_drawdown(equity: Sequence[tuple[date, Decimal]], base_capital: float) -> DrawdownResult:
    """Largest peak-to-trough decline of the equity curve, with recovery timing.

    The running peak starts at zero rather than the first equity value, so a
    window that opens in the red is already in drawdown.  Ties neither move
    the peak nor replace an earlier maximum.
    """
    peak = ZERO
    peak_date: date | None = None
    max_dd = ZERO
    max_dd_peak_date: date | None = None
    max_dd_trough_date: date | None = None

    for day, value in equity:
        if value > peak:
            peak = value
            peak_date = day
        dd = peak - value
        if dd > max_dd:
            max_dd = dd
            max_dd_peak_date = peak_date
            max_dd_trough_date = day

    recovery_days = None
    if max_dd_peak_date is not None and max_dd_trough_date is not None:
        recovery_days = _recovery_steps(equity, max_dd_peak_date, max_dd_trough_date)

    pct_base = float(max_dd) / base_capital if base_capital > 0 else 0.0

    return DrawdownResult(
        max_dd_abs=max_dd,
        max_dd_pct_base=pct_base,
        peak_date=max_dd_peak_date,
        trough_date=max_dd_trough_date,
        recovery_days=recovery_days,
    )


def _recovery_steps(
    equity: Sequence[tuple[date, Decimal]],
    peak_date: date,
    trough_date: date,
) -> int | None:
    """Curve steps from the trough until equity is back at the prior peak."""
    days = [day for day, _ in equity]
    prior_peak_val = equity[days.index(peak_date)][1]
    trough_idx = days.index(trough_date)

    for idx in range(trough_idx, len(equity)):
        if equity[idx][1] >= prior_peak_val:
            return idx - trough_idx
    return None


def sharpe_ratio(
    daily: Mapping[date, Decimal],
    rf_annual: float,
    base_capital: float,
    periods_per_year: int = 252,
) -> SharpeResult:
    """Annualised Sharpe ratio of daily returns on *base_capital* (ddof=1)."""
    sample_days = len(daily)
    if sample_days < 2:
        return SharpeResult(rf_annual=rf_annual, sample_days=sample_days)

    returns = np.array([float(v) for v in daily.values()], dtype=np.float64) / base_capital
    excess = returns - rf_annual / periods_per_year
    mean = float(np.mean(excess))
    std = float(np.std(excess, ddof=1))

    # Identical samples have zero variance; np.std can leave rounding residue
    if std == 0 or np.ptp(excess) == 0:
        return SharpeResult(
            mean_daily=mean,
            vol_daily=0.0,
            rf_annual=rf_annual,
            sample_days=sample_days,
        )

    return SharpeResult(
        sharpe=float(mean / std * np.sqrt(periods_per_year)),
        mean_daily=mean,
        vol_daily=std,
        rf_annual=rf_annual,
        sample_days=sample_days,
    )


def median(values: Sequence[Decimal]) -> Decimal:
    """Median of *values*; the two central values are averaged on even counts."""
    if not values:
        return ZERO
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def expectancy(summary: NetsSummary) -> ExpectancyResult:
    """Mean and median net result per trade, plus average win / loss."""
    count = summary.trade_count
    if count == 0:
        return ExpectancyResult()

    avg_win = summary.wins_sum / summary.wins_count if summary.wins_count else ZERO
    avg_loss = -summary.losses_sum_abs / summary.losses_count if summary.losses_count else ZERO

    return ExpectancyResult(
        expectancy=sum(summary.nets, ZERO) / count,
        median=median(summary.nets),
        win_rate=summary.wins_count / count,
        avg_win=avg_win,
        avg_loss=avg_loss,
        trade_count=count,
    )


def profit_factor(summary: NetsSummary) -> ProfitFactorResult:
    """Gross profit / gross loss.  Absent (not infinite) when nothing was lost."""
    ratio = None
    if summary.losses_sum_abs > 0:
        ratio = float(summary.wins_sum) / float(summary.losses_sum_abs)

    return ProfitFactorResult(
        profit_factor=ratio,
        gross_profit=summary.wins_sum,
        gross_loss=summary.losses_sum_abs,
        wins=summary.wins_count,
        losses=summary.losses_count,
        trade_count=summary.trade_count,
    )


def recovery_factor(net_profit: Decimal, max_dd_abs: Decimal) -> RecoveryFactorResult:
    """Net profit / max drawdown; absent when there was no drawdown."""
    ratio = None
    if max_dd_abs > 0:
        ratio = float(net_profit) / float(max_dd_abs)
    return RecoveryFactorResult(
        recovery_factor=ratio,
        net_profit=net_profit,
        reference_max_dd=max_dd_abs,
    )


def net_profit(equity: Sequence[tuple[date, Decimal]]) -> Decimal:
    """Last cumulative value of the curve, zero when empty."""
    if not equity:
        return ZERO
    return equity[-1][1]
