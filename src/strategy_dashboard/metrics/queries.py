"""DB query bridge — fetches strategy rows and delegates to the engine."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from strategy_dashboard.db.tables.strategy import StrategyRow
from strategy_dashboard.metrics.engine import MetricsEngine
from strategy_dashboard.metrics.errors import TradeStatusError
from strategy_dashboard.metrics.formulas import validate_window
from strategy_dashboard.metrics.results import MetricsResponse, WatermarkHeatmap
from strategy_dashboard.models.trade import (
    STATUS_CODES,
    STATUS_NAMES,
    PerformanceRow,
    TradeRecord,
    WatermarkObservation,
    symbol_alias,
    utc_date,
)


def _to_decimal(val: Any, default: Decimal | None = Decimal("0")) -> Decimal | None:
    """Safely cast a JSON number/string/None to Decimal."""
    if val is None or val == "":
        return default
    try:
        return Decimal(str(val))
    except InvalidOperation:
        return default


def _section(row: StrategyRow, name: str) -> dict:
    return (row.risk or {}).get(name) or {}


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _status_name(row: StrategyRow) -> str:
    try:
        return STATUS_NAMES[row.status]
    except KeyError:
        raise TradeStatusError(f"strategy {row.local_id} has unknown status code {row.status}") from None


def _symbol_filter(symbol: str):
    # Futures aliases ("/ES") match every contract month ("/ESZ4", "/ESH5", ...)
    if symbol.startswith("/"):
        return StrategyRow.symbol.startswith(symbol)
    return StrategyRow.symbol == symbol


def trade_from_row(row: StrategyRow) -> TradeRecord:
    stats = _section(row, "stats")
    account = row.account or {}
    return TradeRecord(
        local_id=row.local_id,
        symbol=symbol_alias(row.symbol),
        entry_time=row.entry_time,
        exit_time=row.exit_time,
        status=_status_name(row),
        gross_pnl=_to_decimal(stats.get("pnl")),
        fee=_to_decimal(stats.get("fee")),
        watermark=_to_decimal(_section(row, "loss").get("watermark"), default=None),
        risk_free_annual=float(account.get("risk_free_annual") or 0.0),
    )


def performance_from_row(row: StrategyRow) -> PerformanceRow:
    gain = _section(row, "gain")
    stats = _section(row, "stats")
    return PerformanceRow(
        strategy=symbol_alias(row.symbol),
        start_date=utc_date(row.entry_time),
        exit_date=utc_date(row.exit_time),
        start_price=_to_decimal(gain.get("open")),
        end_price=_to_decimal(gain.get("current")),
        pnl=_to_decimal(stats.get("pnl")),
        roi=_to_decimal(stats.get("roi")),
    )


def strategy_to_dict(row: StrategyRow) -> dict[str, Any]:
    """JSON shape served by ``/universe`` and ``/strategy/{symbol}``."""
    return {
        "local_id": str(row.local_id),
        "symbol": symbol_alias(row.symbol),
        "entry_time": row.entry_time.isoformat(),
        "exit_time": row.exit_time.isoformat(),
        # Unknown codes are reported as-is rather than guessed
        "status": STATUS_NAMES.get(row.status, row.status),
        "meta": row.metadata_ or {},
        "risk": row.risk or {},
        "account": row.account or {},
    }


def fetch_closed_trades(
    session: Session,
    start: date,
    end: date,
    symbol: str | None = None,
) -> list[TradeRecord]:
    """Closed trades whose exit date lies in ``[start, end]``, oldest exit first."""
    query = select(StrategyRow).where(
        StrategyRow.exit_time >= _day_start(start),
        StrategyRow.exit_time < _day_start(end + timedelta(days=1)),
        StrategyRow.status == STATUS_CODES["CLOSED"],
    )
    if symbol:
        query = query.where(_symbol_filter(symbol))

    rows = session.execute(query.order_by(StrategyRow.exit_time)).scalars().all()
    return [trade_from_row(row) for row in rows]


def fetch_watermark_observations(
    session: Session,
    end: date,
    lookback_days: int = 365,
) -> list[WatermarkObservation]:
    """Winning closed trades with a watermark, entered within the lookback year."""
    year_start = end - timedelta(days=lookback_days)
    rows = session.execute(
        select(StrategyRow).where(
            StrategyRow.entry_time >= _day_start(year_start),
            StrategyRow.exit_time < _day_start(end + timedelta(days=1)),
            StrategyRow.status == STATUS_CODES["CLOSED"],
        )
    ).scalars().all()

    observations = []
    for row in rows:
        pnl = _to_decimal(_section(row, "stats").get("pnl"), default=None)
        watermark = _to_decimal(_section(row, "loss").get("watermark"), default=None)
        if pnl is None or pnl <= 0 or watermark is None:
            continue
        observations.append(WatermarkObservation(exit_time=row.exit_time, pnl=pnl, watermark=watermark))
    return observations


def fetch_strategies(
    session: Session,
    start: date,
    end: date,
    symbol: str | None = None,
    status: str | None = None,
) -> list[StrategyRow]:
    """Strategies entered on/after *start* and exited on/before *end*."""
    query = select(StrategyRow).where(
        StrategyRow.entry_time >= _day_start(start),
        StrategyRow.exit_time < _day_start(end + timedelta(days=1)),
    )
    if symbol:
        query = query.where(_symbol_filter(symbol))
    if status:
        query = query.where(StrategyRow.status == STATUS_CODES[status])
    return list(session.execute(query.order_by(StrategyRow.entry_time)).scalars().all())


def list_symbols(session: Session) -> list[str]:
    """Distinct symbol aliases, sorted."""
    symbols = session.execute(select(StrategyRow.symbol).distinct()).scalars().all()
    return sorted({symbol_alias(s) for s in symbols})


def compute_window_metrics(
    session: Session,
    start: date,
    end: date,
    engine: MetricsEngine,
    symbol: str | None = None,
) -> MetricsResponse:
    """Fetch closed trades for the window and run the metrics engine."""
    validate_window(start, end)
    trades = fetch_closed_trades(session, start, end, symbol)
    return engine.compute_metrics(trades, start, end)


def compute_window_heatmap(
    session: Session,
    end: date,
    engine: MetricsEngine,
) -> WatermarkHeatmap:
    observations = fetch_watermark_observations(session, end, engine.config.lookback_days)
    return engine.compute_watermark_heatmap(observations, end)
