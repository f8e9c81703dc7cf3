import logging

from core import config
from core.domain import AppPreferences
from core.storage import LocalStore

logger = logging.getLogger(__name__)

_DEFAULTS = AppPreferences(
    dark_mode=config.DEFAULT_PREFERENCES[config.DARK_MODE_KEY],
    currency=config.DEFAULT_PREFERENCES[config.CURRENCY_KEY],
    language=config.DEFAULT_PREFERENCES[config.LANGUAGE_KEY],
    email_reports=config.DEFAULT_PREFERENCES[config.EMAIL_REPORTS_KEY],
)


def load_preferences(store: LocalStore) -> AppPreferences:
    return AppPreferences(
        dark_mode=bool(store.get(config.DARK_MODE_KEY, _DEFAULTS.dark_mode)),
        currency=str(store.get(config.CURRENCY_KEY, _DEFAULTS.currency)),
        language=str(store.get(config.LANGUAGE_KEY, _DEFAULTS.language)),
        email_reports=bool(store.get(config.EMAIL_REPORTS_KEY, _DEFAULTS.email_reports)),
    )


def save_preferences(store: LocalStore, prefs: AppPreferences) -> None:
    store.set(config.DARK_MODE_KEY, prefs.dark_mode)
    store.set(config.CURRENCY_KEY, prefs.currency)
    store.set(config.LANGUAGE_KEY, prefs.language)
    store.set(config.EMAIL_REPORTS_KEY, prefs.email_reports)


def preferences_to_dict(prefs: AppPreferences) -> dict:
    return {
        config.DARK_MODE_KEY: prefs.dark_mode,
        config.CURRENCY_KEY: prefs.currency,
        config.LANGUAGE_KEY: prefs.language,
        config.EMAIL_REPORTS_KEY: prefs.email_reports,
    }


def preferences_from_dict(data: dict, base: AppPreferences = _DEFAULTS) -> AppPreferences:
    """Overlay the known keys of ``data`` on ``base``."""
    return AppPreferences(
        dark_mode=bool(data.get(config.DARK_MODE_KEY, base.dark_mode)),
        currency=str(data.get(config.CURRENCY_KEY, base.currency)),
        language=str(data.get(config.LANGUAGE_KEY, base.language)),
        email_reports=bool(data.get(config.EMAIL_REPORTS_KEY, base.email_reports)),
    )


def reset_financial_data(store: LocalStore) -> None:
    """Drop the financial collections; they reseed on next read.

    Preferences and registered users are kept.
    """
    for key in config.FINANCIAL_KEYS:
        store.remove(key)
    logger.info("Financial data reset")
