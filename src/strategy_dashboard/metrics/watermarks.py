"""Weekly distribution of winning trades' watermarks."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from strategy_dashboard.config.schema import MetricsConfig
from strategy_dashboard.metrics.results import WatermarkHeatmap
from strategy_dashboard.models.trade import WatermarkObservation

ONE = Decimal("1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class WatermarkBand:
    """Half-open ``[lower, upper)`` band labelled by its integer lower bound."""

    lower: Decimal
    upper: Decimal
    label: str

    def contains(self, value: Decimal) -> bool:
        return self.lower <= value < self.upper


def normalize_watermark(value: Decimal) -> Decimal:
    """Fractions strictly inside (0, 1) become percentage points."""
    if 0 < value < ONE:
        return value * HUNDRED
    return value


def _band_label(lower: Decimal) -> str:
    # Integral bounds read "25"; fractional steps keep their fraction ("20.5")
    if lower == lower.to_integral_value():
        return str(int(lower))
    return str(lower.normalize())


def watermark_bands(lower: float, upper: float, step: float) -> list[WatermarkBand]:
    start = Decimal(str(lower))
    stop = Decimal(str(upper))
    width = Decimal(str(step))

    bands = []
    current = start
    while current < stop:
        nxt = current + width
        bands.append(WatermarkBand(current, nxt, _band_label(current)))
        current = nxt
    return bands


def week_bucket(exit_day: date, year_start: date, week_buckets: int) -> tuple[int, str]:
    """Zero-based week index from *year_start* (clamped) and its label."""
    week = (exit_day - year_start).days // 7
    week = max(0, min(week, week_buckets - 1))
    week_start = year_start + timedelta(days=week * 7)
    return week, f"W{week + 1:02d}-{week_start:%m/%d}"


def build_watermark_heatmap(
    observations: Iterable[WatermarkObservation],
    end: date,
    config: MetricsConfig,
) -> WatermarkHeatmap:
    """Count winning trades per (week, watermark band) over the lookback year.

    Observations without a watermark or without a positive PnL are skipped,
    as are values that fall outside the configured band range.
    """
    year_start = end - timedelta(days=config.lookback_days)
    bands = watermark_bands(config.watermark_min, config.watermark_max, config.watermark_step)

    cells: dict[tuple[str, str], int] = {}
    for obs in observations:
        if obs.watermark is None or obs.pnl <= 0:
            continue
        value = normalize_watermark(obs.watermark)
        band = next((b for b in bands if b.contains(value)), None)
        if band is None:
            continue
        _, week_label = week_bucket(obs.exit_date, year_start, config.week_buckets)
        key = (week_label, band.label)
        cells[key] = cells.get(key, 0) + 1

    return WatermarkHeatmap(
        cells=cells,
        min_watermark=config.watermark_min,
        max_watermark=config.watermark_max,
    )
