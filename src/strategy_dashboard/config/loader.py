"""Config loader — reads YAML, applies DASHBOARD_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from strategy_dashboard.config.schema import AppConfig

# env var -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "DASHBOARD_DATABASE_URL": ("database", "url"),
    "DASHBOARD_LOG_LEVEL": ("logging", "level"),
    "DASHBOARD_LOG_FORMAT": ("logging", "format"),
    "DASHBOARD_BASE_CAPITAL": ("metrics", "base_capital"),
    "DASHBOARD_API_PORT": ("api", "port"),
}


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        DASHBOARD_DATABASE_URL  -> database.url
        DASHBOARD_LOG_LEVEL     -> logging.level
        DASHBOARD_LOG_FORMAT    -> logging.format
        DASHBOARD_BASE_CAPITAL  -> metrics.base_capital
        DASHBOARD_API_PORT      -> api.port

    Values from the environment are strings; Pydantic coerces numeric ones.
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data.setdefault(section, {})[key] = value

    return AppConfig.model_validate(data)
