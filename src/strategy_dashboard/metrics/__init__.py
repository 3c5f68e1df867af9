"""Performance metrics engine and its DB query bridge."""

from strategy_dashboard.metrics.cache import MetricsCache
from strategy_dashboard.metrics.engine import (
    MetricsEngine,
    compute_metrics,
    compute_watermark_heatmap,
)
from strategy_dashboard.metrics.errors import (
    InvalidWindowError,
    MetricsError,
    TradeOutsideWindowError,
    TradeStatusError,
)
from strategy_dashboard.metrics.formulas import (
    daily_series,
    derive_nets,
    equity_curve,
    expectancy,
    max_drawdown,
    profit_factor,
    recovery_factor,
    sharpe_ratio,
)
from strategy_dashboard.metrics.queries import (
    compute_window_heatmap,
    compute_window_metrics,
)
from strategy_dashboard.metrics.results import (
    DrawdownResult,
    ExpectancyResult,
    MetricsResponse,
    ProfitFactorResult,
    RecoveryFactorResult,
    SharpeResult,
    WatermarkHeatmap,
)

__all__ = [
    "DrawdownResult",
    "ExpectancyResult",
    "InvalidWindowError",
    "MetricsCache",
    "MetricsEngine",
    "MetricsError",
    "MetricsResponse",
    "ProfitFactorResult",
    "RecoveryFactorResult",
    "SharpeResult",
    "TradeOutsideWindowError",
    "TradeStatusError",
    "WatermarkHeatmap",
    "compute_metrics",
    "compute_watermark_heatmap",
    "compute_window_heatmap",
    "compute_window_metrics",
    "daily_series",
    "derive_nets",
    "equity_curve",
    "expectancy",
    "max_drawdown",
    "profit_factor",
    "recovery_factor",
    "sharpe_ratio",
]
