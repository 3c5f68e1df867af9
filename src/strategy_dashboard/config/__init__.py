"""Configuration system."""

from strategy_dashboard.config.loader import load_config
from strategy_dashboard.config.schema import (
    ApiConfig,
    AppConfig,
    DatabaseConfig,
    LoggingConfig,
    MetricsConfig,
)

__all__ = [
    "ApiConfig",
    "AppConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "MetricsConfig",
    "load_config",
]
