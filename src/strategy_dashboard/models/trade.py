"""Trade models consumed by the metrics engine."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

TradeStatus = Literal["OPEN", "CLOSED"]

# Integer codes used by the ``strategy.status`` column
STATUS_CODES: dict[str, int] = {"OPEN": 1, "CLOSED": 2}
STATUS_NAMES: dict[int, str] = {code: name for name, code in STATUS_CODES.items()}


def symbol_alias(symbol: str) -> str:
    """Collapse futures contracts to their root, e.g. ``/ESZ4`` -> ``/ES``."""
    if symbol.startswith("/"):
        return symbol[:3]
    return symbol


def utc_date(ts: datetime) -> date:
    """Calendar date of *ts* in UTC; naive timestamps are taken as UTC."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.date()


class TradeRecord(BaseModel):
    """A single strategy position as seen by the metrics engine."""

    model_config = ConfigDict(frozen=True)

    local_id: UUID
    symbol: str
    entry_time: datetime
    exit_time: datetime
    status: TradeStatus = "CLOSED"
    gross_pnl: Decimal
    fee: Decimal = Decimal("0")
    watermark: Decimal | None = None
    risk_free_annual: float = 0.0

    @property
    def net_pnl(self) -> Decimal:
        return self.gross_pnl - self.fee

    @property
    def exit_date(self) -> date:
        return utc_date(self.exit_time)


class WatermarkObservation(BaseModel):
    """Projection of a trade used by the watermark heatmap."""

    model_config = ConfigDict(frozen=True)

    exit_time: datetime
    pnl: Decimal
    watermark: Decimal | None = None

    @property
    def exit_date(self) -> date:
        return utc_date(self.exit_time)


class PerformanceRow(BaseModel):
    """Per-strategy price/return summary served by ``/performance``."""

    strategy: str
    start_date: date
    exit_date: date
    start_price: Decimal
    end_price: Decimal
    pnl: Decimal
    roi: Decimal
