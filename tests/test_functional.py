import math

from core.domain import Account, AccountType, CalendarEvent, Category, EventType, Recurrence, Transaction, TransactionType
from core.functional import (
    Left, Nothing, Right, Some, failure, find_by_id, pipe,
    validate_account, validate_category, validate_event, validate_transaction,
)

ACCS = (Account("1", "Conta", 100.0, AccountType.BANK, "#3B82F6"),)
CATS = (Category("1", "Lazer", "#EC4899", TransactionType.EXPENSE, 300.0),)


def make_tx(**kw):
    fields = dict(id="1", description="Cinema", amount=40.0, date="2023-12-01",
                  category="1", type=TransactionType.EXPENSE, account_id="1")
    fields.update(kw)
    return Transaction(**fields)


def test_maybe():
    assert Some(2).get_or_else(0) == 2
    assert Nothing().get_or_else(0) == 0
    assert Nothing().is_none() and not Some(None).is_none()


def test_either():
    assert Right(2).map(lambda x: x + 1) == Right(3)
    assert Left("e").map(lambda x: x + 1) == Left("e")
    assert Right(2).bind(lambda x: Left("boom")).get_error() == "boom"
    assert Left("first").bind(lambda x: Left("second")) == Left("first")
    assert Right(1).is_right() and not Left("e").is_right()


def test_failure_shape():
    err = failure("in_use", "Account is in use", account_id="1").get_error()

    assert err == {"error": "in_use", "message": "Account is in use", "account_id": "1"}


def test_find_by_id():
    assert find_by_id(ACCS, "1") == Some(ACCS[0])
    assert find_by_id(ACCS, "9").is_none()


def test_validate_account():
    assert validate_account(ACCS[0]).is_right()
    assert validate_account(Account("2", "", 0.0, AccountType.CASH, "#fff")).is_left()
    assert validate_account(Account("2", "X", math.nan, AccountType.CASH, "#fff")).is_left()
    assert validate_account(Account("2", "X", -50.0, AccountType.CREDIT, "#fff", "2024-01-10")).is_right()
    assert validate_account(Account("2", "X", -50.0, AccountType.CREDIT, "#fff", "20/01/2024")).is_left()


def test_validate_category():
    assert validate_category(CATS[0]).is_right()
    assert validate_category(Category("2", "Sem orçamento", "#fff", TransactionType.EXPENSE)).is_right()
    assert validate_category(Category("2", "X", "#fff", TransactionType.EXPENSE, -1.0)).get_error()["field"] == "budget"


def test_validate_event():
    event = CalendarEvent("1", "Aluguel", "2023-12-10", 1200.0, EventType.EXPENSE, Recurrence.MONTHLY)

    assert validate_event(event).is_right()
    assert validate_event(CalendarEvent("1", " ", "2023-12-10", 1.0, EventType.OTHER, Recurrence.ONCE)).is_left()
    assert validate_event(CalendarEvent("1", "X", "2023-12-10", math.inf, EventType.OTHER, Recurrence.ONCE)).is_left()
    assert validate_event(CalendarEvent("1", "X", "05/12/2023", 1.0, EventType.OTHER, Recurrence.ONCE)).get_error()["field"] == "date"


def test_validate_transaction():
    assert validate_transaction(make_tx(), ACCS, CATS).is_right()
    assert validate_transaction(make_tx(description=""), ACCS, CATS).get_error()["field"] == "description"
    assert validate_transaction(make_tx(amount=-1.0), ACCS, CATS).is_left()
    assert validate_transaction(make_tx(account_id="9"), ACCS, CATS).get_error()["account_id"] == "9"
    assert validate_transaction(make_tx(category="9"), ACCS, CATS).get_error()["category_id"] == "9"
    assert validate_transaction(make_tx(date="yesterday"), ACCS, CATS).get_error()["field"] == "date"
    # field errors win over missing references
    assert validate_transaction(make_tx(amount=-1.0, account_id="9"), ACCS, CATS).get_error()["field"] == "amount"


def test_pipe():
    assert pipe(2, lambda x: x + 1, lambda x: x * 10) == 30
    assert pipe("x") == "x"
