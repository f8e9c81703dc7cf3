from typing import Callable, Optional

from core.domain import Transaction, TransactionType

Predicate = Callable[[Transaction], bool]


def by_type(tx_type: TransactionType) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.type == tx_type

    return _filter


def by_category(cat_id: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category == cat_id

    return _filter


def by_account(acc_id: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.account_id == acc_id

    return _filter


def by_date_range(start: str, end: str) -> Predicate:
    # ISO dates compare correctly as strings
    def _filter(t: Transaction) -> bool:
        return start <= t.date <= end

    return _filter


def by_amount_range(min: float, max: float) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return min <= t.amount <= max

    return _filter


REPORT_FILTERS = ("all", "income", "expense", "category", "account")


def report_filter(kind: str, value: Optional[str] = None) -> Predicate:
    """Predicate for the report screen's filter selector."""
    if kind == "all":
        return lambda t: True
    if kind in ("income", "expense"):
        return by_type(TransactionType(kind))
    if kind == "category":
        return by_category(value or "")
    if kind == "account":
        return by_account(value or "")
    raise ValueError(f"Unknown report filter: {kind}")
