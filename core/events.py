from typing import Callable, Dict, List, NamedTuple
from datetime import datetime

__all__ = [
    'STORE_UPDATED', 'TRANSACTION_ADDED',
    'Event', 'EventBus', 'store_topic', 'check_budget_handler', 'register_default_handlers',
]


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[Event, dict], dict]]] = {}

    def subscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        if name not in self._subscribers:
            self._subscribers[name] = []
        self._subscribers[name].append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        results = []
        # copy: handlers may unsubscribe themselves
        for handler in list(self._subscribers[name]):
            result = handler(event, payload)
            results.append(result if result is not None else {})
        return results

    def unsubscribe(self, name: str, handler: Callable[[Event, dict], dict]) -> None:
        if name in self._subscribers:
            if handler in self._subscribers[name]:
                self._subscribers[name].remove(handler)

    def has_subscribers(self, name: str) -> bool:
        return bool(self._subscribers.get(name))


STORE_UPDATED = "STORE_UPDATED"
TRANSACTION_ADDED = "TRANSACTION_ADDED"


def store_topic(key: str) -> str:
    return f"{STORE_UPDATED}:{key}"


def check_budget_handler(event: Event, payload: dict) -> dict:
    """Flag an expense that pushes its category past the budget.

    payload: type, amount, category_id, category_name, budget, spent (before this transaction)
    """
    if payload.get("type") != "expense":
        return {}
    budget = payload.get("budget") or 0
    new_spent = payload.get("spent", 0) + payload.get("amount", 0)
    name = payload.get("category_name") or payload.get("category_id", "")
    if budget > 0 and new_spent > budget:
        return {
            "alert": f"Budget exceeded for category {name}: {new_spent:,.2f} / {budget:,.2f}",
            "category_id": payload.get("category_id"),
            "spent": new_spent,
            "limit": budget,
        }
    return {"spent": new_spent}


def register_default_handlers(bus: EventBus) -> EventBus:
    bus.subscribe(TRANSACTION_ADDED, check_budget_handler)
    return bus
