"""Database layer — engine, session, ORM base."""

from strategy_dashboard.db.base import Base
from strategy_dashboard.db.engine import get_engine, get_session, init_engine

__all__ = ["Base", "get_engine", "get_session", "init_engine"]
