import pytest

from core.domain import Transaction, TransactionType
from core.filters import (
    REPORT_FILTERS, by_account, by_amount_range, by_category, by_date_range, by_type, report_filter,
)

TRANS = (
    Transaction("1", "Salário", 5000.0, "2023-12-05", "1", TransactionType.INCOME, "1"),
    Transaction("2", "Supermercado", 350.0, "2023-12-10", "2", TransactionType.EXPENSE, "1"),
    Transaction("3", "Gasolina", 200.0, "2023-12-12", "3", TransactionType.EXPENSE, "2"),
)


def ids(pred):
    return [t.id for t in TRANS if pred(t)]


def test_basic_predicates():
    assert ids(by_type(TransactionType.EXPENSE)) == ["2", "3"]
    assert ids(by_category("3")) == ["3"]
    assert ids(by_account("1")) == ["1", "2"]
    assert ids(by_amount_range(100, 400)) == ["2", "3"]


def test_date_range_is_inclusive():
    assert ids(by_date_range("2023-12-05", "2023-12-10")) == ["1", "2"]
    assert ids(by_date_range("2024-01-01", "2024-01-31")) == []


@pytest.mark.parametrize("kind,value,expected", [
    ("all", None, ["1", "2", "3"]),
    ("income", None, ["1"]),
    ("expense", None, ["2", "3"]),
    ("category", "2", ["2"]),
    ("account", "2", ["3"]),
    ("category", None, []),
])
def test_report_filter(kind, value, expected):
    assert ids(report_filter(kind, value)) == expected


def test_report_filter_kinds():
    assert set(REPORT_FILTERS) == {"all", "income", "expense", "category", "account"}
    with pytest.raises(ValueError):
        report_filter("tag")
