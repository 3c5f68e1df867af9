"""Shared test fixtures."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import JSON, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from strategy_dashboard.api.app import create_app, get_db
from strategy_dashboard.config.schema import AppConfig
from strategy_dashboard.db.base import Base
from strategy_dashboard.db.tables.strategy import StrategyRow
from strategy_dashboard.models.trade import STATUS_CODES


@pytest.fixture
def db_session():
    """In-memory SQLite session with all tables created.

    Patches JSONB→JSON for SQLite compatibility.  StaticPool keeps one
    connection so the TestClient threadpool sees the same database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    for table in Base.metadata.tables.values():
        for col in table.columns:
            if isinstance(col.type, JSONB):
                col.type = JSON()

    Base.metadata.create_all(engine)

    session = Session(engine)
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def client(db_session):
    """TestClient over a fresh app whose DB dependency is the SQLite session."""
    app = create_app(AppConfig())

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    return TestClient(app)


def seed_strategy(
    session: Session,
    exit_time: datetime,
    pnl: float | str = 100,
    fee: float | str = 0,
    symbol: str = "SPY",
    entry_time: datetime | None = None,
    status: str = "CLOSED",
    watermark: float | str | None = None,
    risk_free_annual: float = 0.0,
    gain_open: float = 1.0,
    gain_current: float = 1.5,
    roi: float = 0.5,
) -> StrategyRow:
    """Insert one ``strategy`` row shaped like the trader writes it."""
    loss = {"target": 0}
    if watermark is not None:
        loss["watermark"] = watermark
    row = StrategyRow(
        local_id=uuid.uuid4(),
        symbol=symbol,
        entry_time=entry_time or exit_time.replace(hour=0, minute=5),
        exit_time=exit_time,
        status=STATUS_CODES[status],
        metadata_={"underlying": symbol},
        risk={
            "side": "Put",
            "gain": {"open": gain_open, "current": gain_current, "target": 0},
            "loss": loss,
            "stats": {"pnl": pnl, "fee": fee, "roi": roi},
        },
        account={"account_id": "5WX00000", "risk_free_annual": risk_free_annual},
    )
    session.add(row)
    session.commit()
    return row


def utc(year: int, month: int, day: int, hour: int = 15) -> datetime:
    return datetime(year, month, day, hour, 0, tzinfo=timezone.utc)
