"""JSON backup and restore of the financial collections.

The document layout is::

    {"accounts": [...], "categories": [...], "transactions": [...],
     "calendarEvents": [...], "preferences": {"darkMode": ..., ...}}

Import checks the whole document before writing anything.
"""

import json
import logging
from typing import Any, Dict, Union

from core import config
from core.functional import Either, Right, failure
from core.preferences import (
    load_preferences, preferences_from_dict, preferences_to_dict, save_preferences,
)
from core.services import Ledger
from core.transforms import (
    account_from_dict, account_to_dict, category_from_dict, category_to_dict,
    event_from_dict, event_to_dict, transaction_from_dict, transaction_to_dict,
)

logger = logging.getLogger(__name__)

_CODECS = {
    config.ACCOUNTS_KEY: (account_from_dict, account_to_dict),
    config.CATEGORIES_KEY: (category_from_dict, category_to_dict),
    config.TRANSACTIONS_KEY: (transaction_from_dict, transaction_to_dict),
    config.CALENDAR_EVENTS_KEY: (event_from_dict, event_to_dict),
}


def export_backup(ledger: Ledger) -> str:
    document: Dict[str, Any] = {
        config.ACCOUNTS_KEY: [account_to_dict(a) for a in ledger.accounts.all()],
        config.CATEGORIES_KEY: [category_to_dict(c) for c in ledger.categories.all()],
        config.TRANSACTIONS_KEY: [transaction_to_dict(t) for t in ledger.transactions.all()],
        config.CALENDAR_EVENTS_KEY: [event_to_dict(e) for e in ledger.calendar.all()],
        "preferences": preferences_to_dict(load_preferences(ledger.store)),
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def import_backup(ledger: Ledger, text: Union[str, bytes]) -> Either[dict, Dict[str, int]]:
    """Replace the four collections with the backup's; preferences only if present.

    ``text`` may be the raw bytes of an uploaded file; they must be UTF-8.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            return failure("import_error", f"Backup is not UTF-8 text: {exc.reason}")
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        return failure("import_error", f"Backup is not valid JSON: {exc}")
    if not isinstance(document, dict):
        return failure("import_error", "Backup must be a JSON object")

    missing = [k for k in config.FINANCIAL_KEYS if k not in document]
    if missing:
        return failure("import_error", f"Backup is missing {', '.join(missing)}", missing=missing)

    decoded = {}
    for key, (from_dict, to_dict) in _CODECS.items():
        rows = document[key]
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            return failure("import_error", f"{key} must be a list of objects")
        try:
            decoded[key] = [to_dict(from_dict(r)) for r in rows]
        except (KeyError, ValueError, TypeError) as exc:
            return failure("import_error", f"Invalid entry in {key}: {exc}")

    prefs = document.get("preferences")
    if prefs is not None and not isinstance(prefs, dict):
        return failure("import_error", "preferences must be an object")

    for key, rows in decoded.items():
        ledger.store.set(key, rows)
    if prefs is not None:
        save_preferences(ledger.store, preferences_from_dict(prefs, load_preferences(ledger.store)))

    counts = {key: len(rows) for key, rows in decoded.items()}
    logger.info("Imported backup: %s", counts)
    return Right(counts)
