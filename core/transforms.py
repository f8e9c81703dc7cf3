import json
from dataclasses import replace
from datetime import date
from functools import reduce
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, TypeVar

from core.domain import (
    Account, AccountType, CalendarEvent, Category, EventType, Recurrence,
    Transaction, TransactionType,
)

T = TypeVar("T")


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _iso_date(value: Any) -> str:
    """Normalise a stored date; raises ValueError or TypeError for anything but ISO dates."""
    return date.fromisoformat(value).isoformat()


def account_from_dict(d: Dict[str, Any]) -> Account:
    return Account(
        id=str(d["id"]),
        name=d.get("name", ""),
        balance=float(d.get("balance", 0)),
        type=AccountType(d.get("type", "bank")),
        color=d.get("color", "#3B82F6"),
        close_date=_iso_date(d["closeDate"]) if d.get("closeDate") else None,
    )


def account_to_dict(a: Account) -> Dict[str, Any]:
    d = {"id": a.id, "name": a.name, "balance": a.balance, "type": a.type.value, "color": a.color}
    if a.close_date:
        d["closeDate"] = a.close_date
    return d


def category_from_dict(d: Dict[str, Any]) -> Category:
    return Category(
        id=str(d["id"]),
        name=d.get("name", ""),
        color=d.get("color", "#3B82F6"),
        type=TransactionType(d.get("type", "expense")),
        budget=_optional_float(d.get("budget")),
    )


def category_to_dict(c: Category) -> Dict[str, Any]:
    d = {"id": c.id, "name": c.name, "color": c.color, "type": c.type.value}
    if c.budget is not None:
        d["budget"] = c.budget
    return d


def transaction_from_dict(d: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=str(d["id"]),
        description=d.get("description", ""),
        amount=float(d.get("amount", 0)),
        date=_iso_date(d["date"]),
        category=str(d.get("category", "")),
        type=TransactionType(d.get("type", "expense")),
        account_id=str(d.get("accountId", "")),
    )


def transaction_to_dict(t: Transaction) -> Dict[str, Any]:
    return {
        "id": t.id,
        "description": t.description,
        "amount": t.amount,
        "date": t.date,
        "category": t.category,
        "type": t.type.value,
        "accountId": t.account_id,
    }


def event_from_dict(d: Dict[str, Any]) -> CalendarEvent:
    return CalendarEvent(
        id=str(d["id"]),
        title=d.get("title", ""),
        date=_iso_date(d["date"]),
        amount=float(d.get("amount", 0)),
        type=EventType(d.get("type", "expense")),
        recurrence=Recurrence(d.get("recurrence", "once")),
        description=d.get("description") or "",
        paid_dates=tuple(_iso_date(p) for p in d.get("paidDates") or ()),
    )


def event_to_dict(e: CalendarEvent) -> Dict[str, Any]:
    d = {
        "id": e.id,
        "title": e.title,
        "date": e.date,
        "amount": e.amount,
        "type": e.type.value,
        "recurrence": e.recurrence.value,
    }
    if e.description:
        d["description"] = e.description
    if e.paid_dates:
        d["paidDates"] = list(e.paid_dates)
    return d


def load_seed(
    path: str,
) -> Tuple[
    Tuple[Account, ...],
    Tuple[Category, ...],
    Tuple[Transaction, ...],
    Tuple[CalendarEvent, ...],
]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    accounts = tuple(account_from_dict(a) for a in data["accounts"])
    categories = tuple(category_from_dict(c) for c in data["categories"])
    transactions = tuple(transaction_from_dict(t) for t in data["transactions"])
    events = tuple(event_from_dict(e) for e in data["calendarEvents"])

    return accounts, categories, transactions, events


def next_id(items: Iterable[Any]) -> str:
    """Monotonic counter id: one past the largest numeric id in the collection."""
    numeric = [int(i.id) for i in items if str(i.id).isdigit()]
    return str(max(numeric, default=0) + 1)


def add_item(items: Tuple[T, ...], item: T) -> Tuple[T, ...]:
    return items + (item,)


def replace_item(items: Tuple[T, ...], item_id: str, new: T) -> Tuple[T, ...]:
    return tuple(new if i.id == item_id else i for i in items)


def remove_item(items: Tuple[T, ...], item_id: str) -> Tuple[T, ...]:
    return tuple(filter(lambda i: i.id != item_id, items))


def retype_category_transactions(
    trans: Tuple[Transaction, ...], cat_id: str, new_type: TransactionType
) -> Tuple[Transaction, ...]:
    return tuple(
        replace(t, type=new_type) if t.category == cat_id and t.type != new_type else t
        for t in trans
    )


def sum_amounts(trans: Iterable[Transaction], pred: Callable[[Transaction], bool] = lambda t: True) -> float:
    return reduce(lambda acc, t: acc + t.amount if pred(t) else acc, trans, 0.0)
