from core.events import (
    TRANSACTION_ADDED, EventBus, check_budget_handler, register_default_handlers, store_topic,
)


def test_publish_collects_handler_results():
    bus = EventBus()
    bus.subscribe("PING", lambda e, p: {"seen": p["n"]})
    bus.subscribe("PING", lambda e, p: None)

    assert bus.publish("PING", {"n": 1}) == [{"seen": 1}, {}]
    assert bus.publish("NOBODY", {}) == []


def test_handler_may_unsubscribe_itself():
    bus = EventBus()
    calls = []

    def once(event, payload):
        calls.append(event.name)
        bus.unsubscribe("PING", once)

    bus.subscribe("PING", once)
    bus.publish("PING", {})
    bus.publish("PING", {})

    assert calls == ["PING"]
    assert not bus.has_subscribers("PING")


def test_store_topic():
    assert store_topic("accounts") == "STORE_UPDATED:accounts"


def test_budget_handler_flags_overspend():
    payload = {"type": "expense", "amount": 200, "category_id": "5", "category_name": "Lazer",
               "budget": 300, "spent": 150}

    result = check_budget_handler(None, payload)

    assert result["spent"] == 350
    assert result["limit"] == 300
    assert result["category_id"] == "5"


def test_budget_handler_within_budget_or_no_budget():
    within = {"type": "expense", "amount": 100, "budget": 300, "spent": 150}
    no_budget = {"type": "expense", "amount": 1000, "budget": 0, "spent": 0}

    assert check_budget_handler(None, within) == {"spent": 250}
    assert "alert" not in check_budget_handler(None, no_budget)
    assert check_budget_handler(None, {"type": "income", "amount": 1}) == {}


def test_register_default_handlers():
    bus = register_default_handlers(EventBus())

    assert bus.has_subscribers(TRANSACTION_ADDED)
