"""Pydantic domain models."""

from strategy_dashboard.models.trade import (
    STATUS_CODES,
    STATUS_NAMES,
    PerformanceRow,
    TradeRecord,
    TradeStatus,
    WatermarkObservation,
    symbol_alias,
    utc_date,
)

__all__ = [
    "STATUS_CODES",
    "STATUS_NAMES",
    "PerformanceRow",
    "TradeRecord",
    "TradeStatus",
    "WatermarkObservation",
    "symbol_alias",
    "utc_date",
]
