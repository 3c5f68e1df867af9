"""SQLAlchemy ORM model for the ``strategy`` table written by the trader."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Integer, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from strategy_dashboard.db.base import Base


class StrategyRow(Base):
    """One traded strategy (position) and its JSON risk/account envelopes.

    ``risk`` holds ``stats.{pnl,fee,roi}``, ``gain.{open,current,target}`` and
    ``loss.{target,watermark}``; ``account`` holds the daily account snapshot,
    including ``risk_free_annual``.
    """

    __tablename__ = "strategy"

    local_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    symbol: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    entry_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    exit_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    status: Mapped[int] = mapped_column(Integer, nullable=False)
    cfg: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSONB, nullable=True)
    risk: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    orders: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    account: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
