"""Derived views over transactions, accounts and categories.

All functions are pure; they feed the dashboard cards, the category pie,
the per-account bars, the monthly line chart and the reports.  Sums are
plain additions, rounding happens only when amounts are displayed.
"""

import calendar
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

from core.domain import Account, Category, Transaction, TransactionType
from core.filters import by_date_range, by_type
from core.transforms import sum_amounts


PERIODS = ("month", "quarter", "year", "custom")

MONTH_LABELS = {
    "pt-BR": ("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez"),
    "en-US": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
}


def total_balance(accounts: Iterable[Account]) -> float:
    """Sum of account balances, independent of recorded transactions."""
    return sum((a.balance for a in accounts), 0.0)


def totals_by_type(trans: Iterable[Transaction]) -> Dict[str, float]:
    trans = tuple(trans)
    income = sum_amounts(trans, by_type(TransactionType.INCOME))
    expense = sum_amounts(trans, by_type(TransactionType.EXPENSE))
    return {"income": income, "expense": expense, "net": income - expense}


def category_expense_distribution(
    cats: Iterable[Category], trans: Iterable[Transaction]
) -> List[Dict[str, object]]:
    totals: Dict[str, float] = defaultdict(float)
    for t in trans:
        if t.type == TransactionType.EXPENSE:
            totals[t.category] += t.amount

    rows = []
    for c in cats:
        if c.type != TransactionType.EXPENSE:
            continue
        value = totals.get(c.id, 0.0)
        if value > 0:
            rows.append({"id": c.id, "name": c.name, "value": value, "color": c.color})
    return rows


def account_flows(accounts: Iterable[Account], trans: Iterable[Transaction]) -> List[Dict[str, object]]:
    flows: Dict[str, Dict[str, float]] = defaultdict(lambda: {"income": 0.0, "expense": 0.0})
    for t in trans:
        flows[t.account_id][t.type.value] += t.amount
    return [
        {"id": a.id, "name": a.name, "color": a.color, **flows.get(a.id, {"income": 0.0, "expense": 0.0})}
        for a in accounts
    ]


def monthly_series(trans: Iterable[Transaction], year: int, language: str = "pt-BR") -> List[Dict[str, object]]:
    """Twelve buckets (Jan-Dec) of income and expense for ``year``."""
    labels = MONTH_LABELS.get(language, MONTH_LABELS["en-US"])
    buckets = [{"month": m, "label": labels[m - 1], "income": 0.0, "expense": 0.0} for m in range(1, 13)]
    for t in trans:
        day = date.fromisoformat(t.date)
        if day.year != year:
            continue
        buckets[day.month - 1][t.type.value] += t.amount
    return buckets


def budget_usage(cats: Iterable[Category], trans: Iterable[Transaction]) -> List[Dict[str, object]]:
    """Amount recorded against each category that has a budget."""
    trans = tuple(trans)
    rows = []
    for c in cats:
        if not c.budget:
            continue
        spent = sum_amounts(trans, lambda t: t.category == c.id and t.type == c.type)
        rows.append({
            "id": c.id,
            "name": c.name,
            "type": c.type.value,
            "budget": c.budget,
            "spent": spent,
            "progress": min(100.0, spent / c.budget * 100),
        })
    return rows


def period_range(
    period: str,
    today: Optional[date] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> Tuple[str, str]:
    """Inclusive ISO bounds for a report period computed from ``today``."""
    today = today or date.today()
    if period == "month":
        last = calendar.monthrange(today.year, today.month)[1]
        return date(today.year, today.month, 1).isoformat(), date(today.year, today.month, last).isoformat()
    if period == "quarter":
        first_month = 3 * ((today.month - 1) // 3) + 1
        last_month = first_month + 2
        last = calendar.monthrange(today.year, last_month)[1]
        return date(today.year, first_month, 1).isoformat(), date(today.year, last_month, last).isoformat()
    if period == "year":
        return date(today.year, 1, 1).isoformat(), date(today.year, 12, 31).isoformat()
    if period == "custom":
        if start is None or end is None:
            raise ValueError("custom period needs both start and end")
        if start > end:
            raise ValueError(f"period start {start} is after end {end}")
        return start.isoformat(), end.isoformat()
    raise ValueError(f"Unknown period: {period}")


def filter_by_range(trans: Iterable[Transaction], start: str, end: str) -> Tuple[Transaction, ...]:
    return tuple(filter(by_date_range(start, end), trans))
