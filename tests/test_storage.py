import json

from core.storage import LocalStore


def test_get_seeds_default_on_first_access(tmp_path):
    store = LocalStore(tmp_path)
    value = store.get("accounts", [{"id": "1"}])

    assert value == [{"id": "1"}]
    assert json.loads((tmp_path / "accounts.json").read_text(encoding="utf-8")) == [{"id": "1"}]


def test_get_is_idempotent_without_set(tmp_path):
    store = LocalStore(tmp_path)
    first = store.get("darkMode", False)
    second = store.get("darkMode", True)

    assert first is False
    assert second is False


def test_default_is_copied_not_shared(tmp_path):
    default = [{"id": "1"}]
    store = LocalStore(tmp_path)
    store.get("accounts", default).append({"id": "2"})

    assert default == [{"id": "1"}]


def test_set_persists_for_a_new_store(tmp_path):
    LocalStore(tmp_path).set("currency", "USD")

    assert LocalStore(tmp_path).get("currency", "BRL") == "USD"


def test_malformed_json_falls_back_to_default(tmp_path):
    (tmp_path / "transactions.json").write_text("{not json", encoding="utf-8")
    store = LocalStore(tmp_path)

    assert store.get("transactions", []) == []
    assert (tmp_path / "transactions.json").read_text(encoding="utf-8") == "{not json"


def test_unserializable_value_is_kept_in_memory(tmp_path):
    store = LocalStore(tmp_path)
    store.set("weird", {1, 2})

    assert store.get("weird", None) == {1, 2}
    assert not (tmp_path / "weird.json").exists()


def test_unwritable_directory_does_not_raise(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = LocalStore(blocker)

    store.set("darkMode", True)
    assert store.get("darkMode", False) is True
    assert store.get("currency", "BRL") == "BRL"


def test_subscribers_receive_new_values(tmp_path):
    store = LocalStore(tmp_path)
    seen = []

    def on_change(value):
        seen.append(value)

    store.subscribe("darkMode", on_change)
    store.set("darkMode", True)
    store.set("currency", "USD")
    store.unsubscribe("darkMode", on_change)
    store.set("darkMode", False)

    assert seen == [True]


def test_remove_and_keys(tmp_path):
    store = LocalStore(tmp_path)
    store.set("accounts", [])
    store.set("darkMode", True)
    store.remove("accounts")

    assert store.keys() == ["darkMode"]
    assert store.get("accounts", ["seed"]) == ["seed"]


def test_writes_replace_the_file_whole(tmp_path):
    store = LocalStore(tmp_path)
    store.set("accounts", [{"id": "1"}])
    store.set("accounts", [{"id": "1"}, {"id": "2"}])

    assert json.loads((tmp_path / "accounts.json").read_text(encoding="utf-8")) == [{"id": "1"}, {"id": "2"}]
    assert list(tmp_path.glob("*.tmp")) == []


def test_failed_write_keeps_previous_file(tmp_path):
    store = LocalStore(tmp_path)
    store.set("accounts", [{"id": "1"}])
    store.set("accounts", [{"id": "1", "tags": {"x"}}])

    assert json.loads((tmp_path / "accounts.json").read_text(encoding="utf-8")) == [{"id": "1"}]
    assert LocalStore(tmp_path).get("accounts", []) == [{"id": "1"}]
