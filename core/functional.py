import math
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from core.domain import Account, CalendarEvent, Category, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):
    """Result of a lookup by id."""

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_none(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_none(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def get_or_else(self, default: T) -> T:
        return default

    def is_none(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    """Outcome of a ledger operation: Right carries the value, Left the error payload.

    Validation steps are chained with ``bind``; the first Left short-circuits
    the rest of the chain.
    """

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_left(self) -> bool:
        pass

    def is_right(self) -> bool:
        return not self.is_left()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_left(self) -> bool:
        return False

    def get_error(self) -> E:
        raise ValueError("Right has no error")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def is_left(self) -> bool:
        return True

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def failure(code: str, message: str, **extra: Any) -> Left:
    return Left({"error": code, "message": message, **extra})


def find_by_id(items: Iterable[T], item_id: str) -> Maybe[T]:
    for item in items:
        if item.id == item_id:
            return Some(item)
    return Nothing()


def _blank(text: Optional[str]) -> bool:
    return not text or not text.strip()


def _bad_amount(value: float) -> bool:
    return not math.isfinite(value) or value < 0


def _bad_date(text: Optional[str]) -> bool:
    try:
        date.fromisoformat(text)
    except (TypeError, ValueError):
        return True
    return False


def validate_account(a: Account) -> Either[dict, Account]:
    if _blank(a.name):
        return failure("validation_error", "Account name is required", field="name")
    if not math.isfinite(a.balance):
        return failure("validation_error", "Account balance must be a number", field="balance")
    if a.close_date and _bad_date(a.close_date):
        return failure("validation_error", f"Close date {a.close_date} is not a YYYY-MM-DD date", field="closeDate")
    return Right(a)


def validate_category(c: Category) -> Either[dict, Category]:
    if _blank(c.name):
        return failure("validation_error", "Category name is required", field="name")
    if c.budget is not None and _bad_amount(c.budget):
        return failure("validation_error", f"Budget for {c.name} cannot be negative", field="budget")
    return Right(c)


def validate_event(e: CalendarEvent) -> Either[dict, CalendarEvent]:
    if _blank(e.title):
        return failure("validation_error", "Event title is required", field="title")
    if _bad_amount(e.amount):
        return failure("validation_error", f"Amount for {e.title} cannot be negative", field="amount")
    if _bad_date(e.date):
        return failure("validation_error", f"Date {e.date} is not a YYYY-MM-DD date", field="date")
    return Right(e)


def _transaction_fields(t: Transaction) -> Either[dict, Transaction]:
    if _blank(t.description):
        return failure("validation_error", "Transaction description is required", field="description")
    if _bad_amount(t.amount):
        return failure("validation_error", "Transaction amount cannot be negative", field="amount")
    if _bad_date(t.date):
        return failure("validation_error", f"Date {t.date} is not a YYYY-MM-DD date", field="date")
    return Right(t)


def _account_exists(accs: tuple[Account, ...]) -> Callable[[Transaction], Either[dict, Transaction]]:
    def _check(t: Transaction) -> Either[dict, Transaction]:
        if find_by_id(accs, t.account_id).is_none():
            return failure(
                "not_found",
                f"Account with ID {t.account_id} does not exist",
                account_id=t.account_id,
            )
        return Right(t)

    return _check


def _category_exists(cats: tuple[Category, ...]) -> Callable[[Transaction], Either[dict, Transaction]]:
    def _check(t: Transaction) -> Either[dict, Transaction]:
        if find_by_id(cats, t.category).is_none():
            return failure(
                "not_found",
                f"Category with ID {t.category} does not exist",
                category_id=t.category,
            )
        return Right(t)

    return _check


def validate_transaction(
    t: Transaction,
    accs: tuple[Account, ...],
    cats: tuple[Category, ...]
) -> Either[dict, Transaction]:
    return (
        _transaction_fields(t)
        .bind(_account_exists(accs))
        .bind(_category_exists(cats))
    )


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
