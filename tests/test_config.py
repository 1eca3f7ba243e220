import pytest

from brickyard.config import Settings
from brickyard.schemas.bricks import BrickCreate
from brickyard.storage.factory import build_store
from brickyard.storage.memory_provider import MemoryStore
from brickyard.storage.sql_provider import SqlStore


def test_defaults():
    s = Settings()
    assert s.enforce_stock_floor is True
    assert s.single_invoice_per_order is True
    assert s.invoice_due_days == 30


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "sql")
    monkeypatch.setenv("INVOICE_DUE_DAYS", "45")
    s = Settings()
    assert s.storage_backend == "sql"
    assert s.invoice_due_days == 45


def test_build_memory_store():
    assert isinstance(build_store(Settings(storage_backend="memory")), MemoryStore)


def test_build_sql_store_creates_tables():
    store = build_store(Settings(storage_backend="sql", database_url="sqlite://"))
    try:
        assert isinstance(store, SqlStore)
        brick = store.bricks.create(BrickCreate(type="Red Clay", description="x", unit_price="12.00"))
        assert store.bricks.get(brick.id).type == "Red Clay"
    finally:
        store.close()


def test_unknown_backend():
    with pytest.raises(RuntimeError):
        build_store(Settings(storage_backend="redis"))
