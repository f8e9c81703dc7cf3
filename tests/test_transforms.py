import pytest

from core import config
from core.domain import Account, AccountType, Category, Transaction, TransactionType
from core.transforms import (
    account_from_dict, account_to_dict, add_item, category_from_dict, category_to_dict,
    event_from_dict, event_to_dict, load_seed,
    next_id, remove_item, replace_item, retype_category_transactions, sum_amounts,
    transaction_from_dict,
)


def test_load_seed():
    accounts, categories, transactions, events = load_seed(str(config.SEED_PATH))

    assert len(accounts) == 3
    assert accounts[2].type == AccountType.CREDIT
    assert accounts[2].close_date == "2023-12-20"
    assert len(categories) == 6
    assert transactions[0].account_id == "1"
    assert len(events) == 3


def test_optional_fields_are_omitted():
    cash = Account("2", "Dinheiro", 500.0, AccountType.CASH, "#10B981")
    no_budget = Category("7", "Outros", "#6B7280", TransactionType.EXPENSE)

    assert "closeDate" not in account_to_dict(cash)
    assert "budget" not in category_to_dict(no_budget)
    assert category_from_dict({"id": "7", "name": "Outros", "budget": ""}).budget is None


def test_event_paid_dates():
    raw = {"id": "1", "title": "Aluguel", "date": "2023-12-10", "amount": 1200,
           "type": "expense", "recurrence": "monthly", "paidDates": ["2024-01-10"]}

    event = event_from_dict(raw)
    assert event.paid_dates == ("2024-01-10",)
    assert event.description == ""
    assert event_to_dict(event)["paidDates"] == ["2024-01-10"]


def test_ids_are_stringified_and_enums_checked():
    assert account_from_dict({"id": 4, "name": "X"}).id == "4"
    with pytest.raises(ValueError):
        transaction_from_dict({"id": "1", "date": "2023-12-01", "type": "transfer"})


def test_next_id():
    items = (Account("1", "a", 0.0, AccountType.BANK, "#fff"), Account("7", "b", 0.0, AccountType.BANK, "#fff"))

    assert next_id(items) == "8"
    assert next_id(()) == "1"
    assert next_id(remove_item(items, "7")) == "2"


def test_collection_helpers_do_not_mutate():
    a = Account("1", "a", 0.0, AccountType.BANK, "#fff")
    b = Account("2", "b", 0.0, AccountType.BANK, "#fff")
    items = (a,)

    assert add_item(items, b) == (a, b)
    assert replace_item((a, b), "2", a) == (a, a)
    assert remove_item((a, b), "1") == (b,)
    assert items == (a,)


def test_retype_and_sums():
    trans = (
        Transaction("1", "Salário", 5000.0, "2023-12-05", "1", TransactionType.INCOME, "1"),
        Transaction("2", "Mercado", 350.0, "2023-12-10", "2", TransactionType.EXPENSE, "1"),
        Transaction("3", "Feira", 50.0, "2023-12-11", "2", TransactionType.EXPENSE, "2"),
    )

    retyped = retype_category_transactions(trans, "2", TransactionType.INCOME)
    assert [t.type for t in retyped] == [TransactionType.INCOME] * 3
    assert retyped[0] is trans[0]

    assert sum_amounts(trans) == 5400.0
    assert sum_amounts(trans, lambda t: t.type == TransactionType.EXPENSE) == 400.0


@pytest.mark.parametrize("raw", ["05/12/2023", "yesterday", "", None, 20231205])
def test_codecs_reject_non_iso_dates(raw):
    with pytest.raises((ValueError, TypeError)):
        transaction_from_dict({"id": "1", "date": raw, "type": "expense"})
    with pytest.raises((ValueError, TypeError)):
        event_from_dict({"id": "1", "title": "Aluguel", "date": raw})


def test_codecs_check_close_and_paid_dates():
    with pytest.raises(ValueError):
        account_from_dict({"id": "3", "type": "credit", "closeDate": "dia 20"})
    with pytest.raises(ValueError):
        event_from_dict({"id": "1", "title": "Aluguel", "date": "2023-12-10", "paidDates": ["jan"]})
