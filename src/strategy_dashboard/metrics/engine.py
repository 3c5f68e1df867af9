"""Metrics facade that runs the formula pipeline for one request."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

import structlog

from strategy_dashboard.config.schema import MetricsConfig
from strategy_dashboard.metrics import formulas
from strategy_dashboard.metrics.errors import TradeStatusError
from strategy_dashboard.metrics.results import MetricsResponse, WatermarkHeatmap
from strategy_dashboard.metrics.watermarks import build_watermark_heatmap
from strategy_dashboard.models.trade import TradeRecord, WatermarkObservation

logger = structlog.get_logger(__name__)


def latest_risk_free_rate(trades: Sequence[TradeRecord]) -> float:
    """Risk-free rate of the most recently exited trade (0.0 if none)."""
    if not trades:
        return 0.0
    return max(trades, key=lambda t: t.exit_time).risk_free_annual


class MetricsEngine:
    """Stateless apart from its configuration; safe to share across requests."""

    def __init__(self, config: MetricsConfig | None = None) -> None:
        self.config = config or MetricsConfig()

    def compute_metrics(
        self,
        trades: Sequence[TradeRecord],
        start: date,
        end: date,
        rf_annual: float | None = None,
    ) -> MetricsResponse:
        """Drawdown, Sharpe, expectancy, profit and recovery factor for a window.

        *trades* must already be closed and exit within ``[start, end]``.
        When *rf_annual* is omitted the latest trade's account rate is used.
        """
        formulas.validate_window(start, end)
        trades = list(trades)
        for trade in trades:
            if trade.status != "CLOSED":
                raise TradeStatusError(f"trade {trade.local_id} is {trade.status}, expected CLOSED")

        if rf_annual is None:
            rf_annual = latest_risk_free_rate(trades)

        summary = formulas.derive_nets(trades)
        daily = formulas.daily_series(trades, start, end)
        equity = formulas.equity_curve(daily)

        drawdown = formulas.max_drawdown(equity, self.config.base_capital)
        sharpe = formulas.sharpe_ratio(
            daily,
            rf_annual,
            self.config.base_capital,
            self.config.periods_per_year,
        )
        recovery = formulas.recovery_factor(formulas.net_profit(equity), drawdown.max_dd_abs)

        logger.debug(
            "Metrics computed",
            start=start.isoformat(),
            end=end.isoformat(),
            trades=summary.trade_count,
            max_dd=str(drawdown.max_dd_abs),
        )

        return MetricsResponse(
            start=start,
            end=end,
            drawdown=drawdown,
            sharpe=sharpe,
            expectancy=formulas.expectancy(summary),
            recovery=recovery,
            profit_factor=formulas.profit_factor(summary),
        )

    def compute_watermark_heatmap(
        self,
        observations: Iterable[WatermarkObservation],
        end: date,
    ) -> WatermarkHeatmap:
        return build_watermark_heatmap(observations, end, self.config)


def compute_metrics(
    trades: Sequence[TradeRecord],
    start: date,
    end: date,
    rf_annual: float | None = None,
) -> MetricsResponse:
    """Default-configured :meth:`MetricsEngine.compute_metrics`."""
    return MetricsEngine().compute_metrics(trades, start, end, rf_annual)


def compute_watermark_heatmap(
    observations: Iterable[WatermarkObservation],
    end: date,
) -> WatermarkHeatmap:
    """Default-configured :meth:`MetricsEngine.compute_watermark_heatmap`."""
    return MetricsEngine().compute_watermark_heatmap(observations, end)
