"""Tests for Pydantic domain models."""

import uuid
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from strategy_dashboard.models import (
    STATUS_CODES,
    STATUS_NAMES,
    TradeRecord,
    WatermarkObservation,
    symbol_alias,
    utc_date,
)

NOW = datetime(2024, 6, 14, 19, 45, tzinfo=timezone.utc)


def _record(**overrides) -> TradeRecord:
    data = dict(
        local_id=uuid.uuid4(),
        symbol="SPY",
        entry_time=NOW - timedelta(days=3),
        exit_time=NOW,
        gross_pnl=Decimal("120.50"),
        fee=Decimal("1.30"),
    )
    data.update(overrides)
    return TradeRecord(**data)


class TestTradeRecord:
    def test_net_pnl(self):
        assert _record().net_pnl == Decimal("119.20")

    def test_defaults(self):
        r = _record()
        assert r.status == "CLOSED"
        assert r.watermark is None
        assert r.risk_free_annual == 0.0

    def test_exit_date(self):
        assert _record().exit_date == date(2024, 6, 14)

    def test_frozen(self):
        r = _record()
        with pytest.raises(ValidationError):
            r.gross_pnl = Decimal("1")

    def test_invalid_status(self):
        with pytest.raises(ValidationError):
            _record(status="PENDING")

    def test_decimal_from_string(self):
        assert _record(gross_pnl="10.10", fee="0.10").net_pnl == Decimal("10.00")


class TestWatermarkObservation:
    def test_optional_watermark(self):
        obs = WatermarkObservation(exit_time=NOW, pnl=Decimal("5"))
        assert obs.watermark is None
        assert obs.exit_date == date(2024, 6, 14)


class TestHelpers:
    @pytest.mark.parametrize(
        "symbol, alias",
        [("/ESZ4", "/ES"), ("/NQH25", "/NQ"), ("SPY", "SPY"), ("/ES", "/ES")],
    )
    def test_symbol_alias(self, symbol, alias):
        assert symbol_alias(symbol) == alias

    def test_status_codes_round_trip(self):
        assert STATUS_CODES == {"OPEN": 1, "CLOSED": 2}
        assert STATUS_NAMES[2] == "CLOSED"

    def test_utc_date_naive_treated_as_utc(self):
        assert utc_date(datetime(2024, 1, 1, 23, 59)) == date(2024, 1, 1)

    def test_utc_date_converts_offset(self):
        ts = datetime(2024, 1, 1, 22, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert utc_date(ts) == date(2024, 1, 2)
