import pytest

from core.services import Ledger
from core.storage import LocalStore


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "store")


@pytest.fixture
def ledger(store):
    return Ledger(store)
