"""Application configuration.

Values can be overridden with ``PORTFOLIO_BUILDER_*`` environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "PortfolioBuilder"
BUILD_VERSION = "1.0.0"

# Durable slots owned by the application. Reset clears these and nothing else.
STATE_KEY = "portfolio-content"
THEME_KEY = "theme"
APP_KEYS = (STATE_KEY, THEME_KEY)

EXPORT_VERSION = 1
DEFAULT_EXPORT_NAME = "my-portfolio.json"
SITE_ARCHIVE_NAME = "portfolio.zip"

_DEFAULT_HISTORY_LIMIT = 100


def _history_limit() -> int:
    try:
        value = int(os.getenv("PORTFOLIO_BUILDER_HISTORY_LIMIT", str(_DEFAULT_HISTORY_LIMIT)))
    except ValueError:
        return _DEFAULT_HISTORY_LIMIT
    return value if value >= 1 else _DEFAULT_HISTORY_LIMIT


HISTORY_LIMIT = _history_limit()
LOG_LEVEL = os.getenv("PORTFOLIO_BUILDER_LOG_LEVEL", "INFO").upper()


def app_data_dir() -> Path:
    """Return the directory holding the application's durable slots."""
    override = os.getenv("PORTFOLIO_BUILDER_DATA_DIR")
    if override:
        target = Path(override)
    elif os.name == "nt":
        target = Path(os.getenv("LOCALAPPDATA", Path.home())) / APP_NAME
    else:
        target = Path.home() / ".local" / "share" / APP_NAME
    target.mkdir(parents=True, exist_ok=True)
    return target
