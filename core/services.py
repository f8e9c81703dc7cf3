import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from core import config
from core.aggregation import (
    account_flows, category_expense_distribution, filter_by_range, monthly_series,
    period_range, totals_by_type,
)
from core.domain import (
    Account, AccountType, CalendarEvent, Category, Transaction, TransactionType,
)
from core.events import TRANSACTION_ADDED, register_default_handlers
from core.filters import report_filter
from core.functional import (
    Either, Maybe, Right, failure, find_by_id, pipe,
    validate_account, validate_category, validate_event, validate_transaction,
)
from core.projection import current_occurrence
from core.storage import LocalStore
from core.transforms import (
    account_from_dict, account_to_dict, add_item, category_from_dict, category_to_dict,
    event_from_dict, event_to_dict, load_seed, next_id, remove_item, replace_item,
    retype_category_transactions, sum_amounts, transaction_from_dict, transaction_to_dict,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityService(Generic[T]):
    """Create/update/delete for one persisted collection.

    Subclasses set the storage key and codecs, and override ``validate`` and
    ``guard_remove``.  Every operation returns an Either; refusals are Left
    values carrying ``{"error", "message"}`` and leave the collection untouched.
    """

    key: str = ""
    label: str = "item"
    from_dict: Callable[[Dict[str, Any]], T]
    to_dict: Callable[[T], Dict[str, Any]]

    def __init__(self, ledger: "Ledger", defaults: Sequence[T] = ()):
        self.ledger = ledger
        self.store = ledger.store
        self._defaults = [type(self).to_dict(d) for d in defaults]

    def all(self) -> Tuple[T, ...]:
        raw = self.store.get(self.key, self._defaults)
        try:
            return tuple(type(self).from_dict(d) for d in raw)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Stored %s are unreadable, using defaults: %s", self.key, exc)
            return tuple(type(self).from_dict(d) for d in self._defaults)

    def get(self, item_id: str) -> Maybe[T]:
        return find_by_id(self.all(), item_id)

    def _save(self, items: Tuple[T, ...]) -> None:
        self.store.set(self.key, [type(self).to_dict(i) for i in items])

    def validate(self, item: T) -> Either[dict, T]:
        return Right(item)

    def guard_remove(self, item_id: str) -> Either[dict, str]:
        return Right(item_id)

    def normalize(self, item: T) -> T:
        return item

    def add(self, draft: T) -> Either[dict, T]:
        def _insert(checked: T) -> T:
            items = self.all()
            item = replace(checked, id=next_id(items))
            self._save(add_item(items, item))
            logger.info("Added %s %s", self.label, item.id)
            self.after_add(item)
            return item

        result = self.validate(self.normalize(draft)).map(_insert)
        if result.is_left():
            logger.warning("Refused to add %s: %s", self.label, result.get_error()["message"])
        return result

    def after_add(self, item: T) -> None:
        pass

    def update(self, item_id: str, **changes: Any) -> Either[dict, Optional[T]]:
        items = self.all()
        old = find_by_id(items, item_id).get_or_else(None)
        if old is None:
            logger.debug("No %s %s to update", self.label, item_id)
            return Right(None)
        changes.pop("id", None)

        def _store(new: T) -> T:
            self._save(replace_item(items, item_id, new))
            logger.info("Updated %s %s", self.label, item_id)
            self.after_update(old, new)
            return new

        result = self.validate(self.normalize(replace(old, **changes))).map(_store)
        if result.is_left():
            logger.warning("Refused to update %s %s: %s", self.label, item_id, result.get_error()["message"])
        return result

    def after_update(self, old: T, new: T) -> None:
        pass

    def remove(self, item_id: str) -> Either[dict, Optional[str]]:
        items = self.all()
        if find_by_id(items, item_id).is_none():
            return Right(None)
        guard = self.guard_remove(item_id)
        if guard.is_left():
            logger.warning("Refused to remove %s %s: %s", self.label, item_id, guard.get_error()["message"])
            return guard
        self._save(remove_item(items, item_id))
        logger.info("Removed %s %s", self.label, item_id)
        return Right(item_id)


class AccountService(EntityService[Account]):
    key = config.ACCOUNTS_KEY
    label = "account"
    from_dict = staticmethod(account_from_dict)
    to_dict = staticmethod(account_to_dict)

    def normalize(self, item: Account) -> Account:
        if item.type != AccountType.CREDIT and item.close_date:
            return replace(item, close_date=None)
        return item

    def validate(self, item: Account) -> Either[dict, Account]:
        return validate_account(item)

    def guard_remove(self, item_id: str) -> Either[dict, str]:
        if any(t.account_id == item_id for t in self.ledger.transactions.all()):
            return failure("in_use", "Account is still in use by transactions", account_id=item_id)
        return Right(item_id)


class CategoryService(EntityService[Category]):
    key = config.CATEGORIES_KEY
    label = "category"
    from_dict = staticmethod(category_from_dict)
    to_dict = staticmethod(category_to_dict)

    def validate(self, item: Category) -> Either[dict, Category]:
        return validate_category(item)

    def guard_remove(self, item_id: str) -> Either[dict, str]:
        if any(t.category == item_id for t in self.ledger.transactions.all()):
            return failure("in_use", "Category is still in use by transactions", category_id=item_id)
        return Right(item_id)

    def after_update(self, old: Category, new: Category) -> None:
        # referencing transactions follow the category's type
        if old.type == new.type:
            return
        trans = self.ledger.transactions.all()
        retyped = retype_category_transactions(trans, new.id, new.type)
        if retyped != trans:
            self.ledger.transactions._save(retyped)
            logger.info("Retyped transactions of category %s to %s", new.id, new.type.value)


class TransactionService(EntityService[Transaction]):
    key = config.TRANSACTIONS_KEY
    label = "transaction"
    from_dict = staticmethod(transaction_from_dict)
    to_dict = staticmethod(transaction_to_dict)

    def __init__(self, ledger: "Ledger", defaults: Sequence[Transaction] = ()):
        super().__init__(ledger, defaults)
        self.alerts: List[dict] = []

    def validate(self, item: Transaction) -> Either[dict, Transaction]:
        return validate_transaction(item, self.ledger.accounts.all(), self.ledger.categories.all())

    def after_add(self, item: Transaction) -> None:
        category = self.ledger.categories.get(item.category).get_or_else(None)
        if category is None:
            return
        spent_before = sum_amounts(
            self.all(),
            lambda t: t.category == item.category and t.type == TransactionType.EXPENSE and t.id != item.id,
        )
        payload = {
            "type": item.type.value,
            "amount": item.amount,
            "category_id": category.id,
            "category_name": category.name,
            "budget": category.budget or 0,
            "spent": spent_before,
        }
        for result in self.store.bus.publish(TRANSACTION_ADDED, payload):
            if "alert" in result:
                logger.warning(result["alert"])
                self.alerts.append(result)


class CalendarService(EntityService[CalendarEvent]):
    key = config.CALENDAR_EVENTS_KEY
    label = "calendar event"
    from_dict = staticmethod(event_from_dict)
    to_dict = staticmethod(event_to_dict)

    def validate(self, item: CalendarEvent) -> Either[dict, CalendarEvent]:
        return validate_event(item)

    def mark_paid(self, item_id: str, today: Optional[date] = None) -> Either[dict, CalendarEvent]:
        """Record the event's current occurrence as paid."""
        event = self.get(item_id).get_or_else(None)
        if event is None:
            return failure("not_found", f"Calendar event {item_id} does not exist")
        occurrence = current_occurrence(event, today or date.today()).isoformat()
        if occurrence in event.paid_dates:
            return Right(event)
        paid = tuple(sorted(event.paid_dates + (occurrence,)))
        return self.update(item_id, paid_dates=paid)

    def unmark_paid(self, item_id: str, today: Optional[date] = None) -> Either[dict, CalendarEvent]:
        event = self.get(item_id).get_or_else(None)
        if event is None:
            return failure("not_found", f"Calendar event {item_id} does not exist")
        occurrence = current_occurrence(event, today or date.today()).isoformat()
        return self.update(item_id, paid_dates=tuple(d for d in event.paid_dates if d != occurrence))


class Ledger:
    """The four financial collections over one store, seeded from the seed file."""

    def __init__(self, store: LocalStore, seed_path: Optional[str] = None):
        self.store = store
        if not store.bus.has_subscribers(TRANSACTION_ADDED):
            register_default_handlers(store.bus)
        accounts, categories, transactions, events = load_seed(str(seed_path or config.SEED_PATH))
        self.accounts = AccountService(self, accounts)
        self.categories = CategoryService(self, categories)
        self.transactions = TransactionService(self, transactions)
        self.calendar = CalendarService(self, events)


def agg_totals(trans, accounts, categories, acc=None):
    return {"totals": totals_by_type(trans)}


def agg_categories(trans, accounts, categories, acc=None):
    return {"categories": category_expense_distribution(categories, trans)}


def agg_accounts(trans, accounts, categories, acc=None):
    return {"accounts": account_flows(accounts, trans)}


def agg_monthly(trans, accounts, categories, acc=None):
    year = int(acc["period"]["start"][:4]) if acc and "period" in acc else date.today().year
    return {"monthly": monthly_series(trans, year)}


def agg_rows(trans, accounts, categories, acc=None):
    acc_names = {a.id: a.name for a in accounts}
    cat_names = {c.id: c.name for c in categories}
    rows = [
        {
            "date": t.date,
            "description": t.description,
            "category": cat_names.get(t.category, t.category),
            "account": acc_names.get(t.account_id, t.account_id),
            "type": t.type.value,
            "amount": t.amount,
        }
        for t in sorted(trans, key=lambda t: t.date)
    ]
    return {"rows": rows}


DEFAULT_AGGREGATORS = (agg_totals, agg_categories, agg_accounts, agg_monthly, agg_rows)


class ReportService:
    """Facade for generating period reports using injected aggregators.

    aggregators: sequence of functions taking (transactions, accounts, categories, acc) -> dict
    """

    def __init__(self, ledger: Ledger, aggregators: Sequence[Callable[..., Dict[str, Any]]] = DEFAULT_AGGREGATORS):
        self.ledger = ledger
        self.aggregators = aggregators

    def generate(
        self,
        period: str = "month",
        filter_kind: str = "all",
        filter_value: Optional[str] = None,
        today: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Filter transactions to the period and selector, then run the aggregators."""
        first, last = period_range(period, today, start, end)
        trans = pipe(
            self.ledger.transactions.all(),
            lambda ts: filter_by_range(ts, first, last),
            lambda ts: tuple(filter(report_filter(filter_kind, filter_value), ts)),
        )
        accounts = self.ledger.accounts.all()
        categories = self.ledger.categories.all()

        report = {
            "period": {"name": period, "start": first, "end": last},
            "filter": {"kind": filter_kind, "value": filter_value},
            "steps": [],
            "result": {},
        }
        acc: Dict[str, Any] = {"period": report["period"]}
        for agg in self.aggregators:
            out = agg(trans, accounts, categories, acc)
            report["steps"].append({"aggregator": getattr(agg, "__name__", str(agg)), "output": out})
            if isinstance(out, dict):
                acc.update(out)
        acc.pop("period")
        report["result"] = acc
        logger.info("Generated %s report over %d transactions", period, len(trans))
        return report
