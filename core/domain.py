from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class AccountType(str, Enum):
    BANK = "bank"
    CASH = "cash"
    CREDIT = "credit"


class EventType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    INVOICE = "invoice"
    OTHER = "other"


class Recurrence(str, Enum):
    ONCE = "once"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PendingType(str, Enum):
    BILL = "bill"
    INCOME = "income"
    GOAL = "goal"


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    balance: float               # negative means debt (credit cards)
    type: AccountType
    color: str
    close_date: Optional[str] = None  # billing-cycle close, credit only


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str
    type: TransactionType
    budget: Optional[float] = None  # spending budget or expected income


@dataclass(frozen=True)
class Transaction:
    id: str
    description: str
    amount: float      # non-negative, sign comes from type
    date: str          # "2023-12-05"
    category: str      # Category.id
    type: TransactionType
    account_id: str    # Account.id


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    title: str
    date: str          # anchor occurrence, "yyyy-MM-dd"
    amount: float
    type: EventType
    recurrence: Recurrence
    description: str = ""
    paid_dates: Tuple[str, ...] = ()  # occurrences marked as paid


# Derived from a CalendarEvent, never persisted
@dataclass(frozen=True)
class PendingItem:
    id: str
    title: str
    amount: float
    due_date: str
    type: PendingType
    is_paid: bool
    is_overdue: bool


@dataclass(frozen=True)
class AppPreferences:
    dark_mode: bool = False
    currency: str = "BRL"
    language: str = "pt-BR"
    email_reports: bool = False


@dataclass(frozen=True)
class User:
    username: str
    password_hash: str  # "salt$hexdigest"
    full_name: str = ""
