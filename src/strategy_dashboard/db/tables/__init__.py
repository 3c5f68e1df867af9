"""Import all table modules so Base.metadata knows about them."""

from strategy_dashboard.db.tables.strategy import StrategyRow

__all__ = ["StrategyRow"]
