"""Configuration for the finance manager.

Paths, defaults and environment overrides live here so the store, the
seed loader and the Streamlit app agree on where data is kept.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("FINANCE_DATA_DIR", _PROJECT_ROOT / "data" / "store"))
SEED_PATH = Path(os.getenv("FINANCE_SEED_PATH", _PROJECT_ROOT / "data" / "seed.json"))

LOG_LEVEL = os.getenv("FINANCE_LOG_LEVEL", "INFO").upper()
LOGIN_DELAY = float(os.getenv("FINANCE_LOGIN_DELAY", "1.0"))

# storage keys
ACCOUNTS_KEY = "accounts"
CATEGORIES_KEY = "categories"
TRANSACTIONS_KEY = "transactions"
CALENDAR_EVENTS_KEY = "calendarEvents"
DARK_MODE_KEY = "darkMode"
CURRENCY_KEY = "currency"
LANGUAGE_KEY = "language"
EMAIL_REPORTS_KEY = "emailReports"
USERS_KEY = "users"

FINANCIAL_KEYS = (ACCOUNTS_KEY, CATEGORIES_KEY, TRANSACTIONS_KEY, CALENDAR_EVENTS_KEY)

DEFAULT_PREFERENCES = {
    DARK_MODE_KEY: False,
    CURRENCY_KEY: "BRL",
    LANGUAGE_KEY: "pt-BR",
    EMAIL_REPORTS_KEY: False,
}

_logging_configured = False


def ensure_data_directories() -> None:
    """Create the store directory if it doesn't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | None = None) -> None:
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(
        level=getattr(logging, level or LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logging_configured = True
