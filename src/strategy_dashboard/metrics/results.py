"""Immutable result structures returned by the metrics engine."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from typing import Any


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, date):
        return value.isoformat()
    return value


class _Serializable:
    """``to_dict`` for result dataclasses; absent optional fields are omitted."""

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, _Serializable):
                out[f.name] = value.to_dict()
            else:
                out[f.name] = _jsonable(value)
        return out


@dataclass(frozen=True)
class NetsSummary:
    """Per-trade net results plus win/loss accumulators."""

    nets: tuple[Decimal, ...] = ()
    wins_sum: Decimal = Decimal("0")
    losses_sum_abs: Decimal = Decimal("0")
    wins_count: int = 0
    losses_count: int = 0

    @property
    def trade_count(self) -> int:
        return len(self.nets)


@dataclass(frozen=True)
class DrawdownResult(_Serializable):
    max_dd_abs: Decimal = Decimal("0")
    max_dd_pct_base: float = 0.0
    peak_date: date | None = None
    trough_date: date | None = None
    recovery_days: int | None = None


@dataclass(frozen=True)
class SharpeResult(_Serializable):
    sharpe: float | None = None
    mean_daily: float | None = None
    vol_daily: float | None = None
    rf_annual: float = 0.0
    sample_days: int = 0


@dataclass(frozen=True)
class ExpectancyResult(_Serializable):
    expectancy: Decimal = Decimal("0")
    median: Decimal = Decimal("0")
    win_rate: float | None = None
    avg_win: Decimal = Decimal("0")
    avg_loss: Decimal = Decimal("0")
    trade_count: int = 0


@dataclass(frozen=True)
class ProfitFactorResult(_Serializable):
    profit_factor: float | None = None
    gross_profit: Decimal = Decimal("0")
    gross_loss: Decimal = Decimal("0")
    wins: int = 0
    losses: int = 0
    trade_count: int = 0


@dataclass(frozen=True)
class RecoveryFactorResult(_Serializable):
    recovery_factor: float | None = None
    net_profit: Decimal = Decimal("0")
    reference_max_dd: Decimal = Decimal("0")


@dataclass(frozen=True)
class MetricsResponse(_Serializable):
    """Everything ``/metrics`` reports for one window."""

    start: date
    end: date
    drawdown: DrawdownResult = field(default_factory=DrawdownResult)
    sharpe: SharpeResult = field(default_factory=SharpeResult)
    expectancy: ExpectancyResult = field(default_factory=ExpectancyResult)
    recovery: RecoveryFactorResult = field(default_factory=RecoveryFactorResult)
    profit_factor: ProfitFactorResult = field(default_factory=ProfitFactorResult)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        # ``from``/``to`` are keywords in the wire format but not valid field names
        out = {"from": out.pop("start"), "to": out.pop("end"), **out}
        return out


@dataclass(frozen=True)
class WatermarkHeatmap:
    """Sparse (week label, band label) -> trade count matrix."""

    cells: dict[tuple[str, str], int]
    min_watermark: float
    max_watermark: float

    def points(self) -> list[dict[str, Any]]:
        ordered = sorted(self.cells.items(), key=lambda kv: (kv[0][0], float(kv[0][1])))
        return [{"x": x, "y": y, "value": count} for (x, y), count in ordered]

    def to_dict(self) -> dict[str, Any]:
        return {
            "watermarks": self.points(),
            "min_watermark": self.min_watermark,
            "max_watermark": self.max_watermark,
        }
