"""
Shared fixtures.

Stores are built per test so sequence numbers always start at ORD001/INV001.
The SQL store runs against in-memory SQLite.
"""
import os

# Must be set before brickyard.config is imported
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("ENABLE_METRICS", "false")
os.environ.setdefault("RATE_LIMIT", "10000/minute")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from brickyard.db import create_db_engine
from brickyard.main import create_app
from brickyard.schemas.bricks import BrickCreate
from brickyard.schemas.orders import OrderCreate
from brickyard.storage.memory_provider import MemoryStore
from brickyard.storage.sql_provider import SqlStore


class TickingClock:
    """Returns a strictly increasing UTC time, one second per call."""

    def __init__(self, start=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture()
def clock():
    return TickingClock()


@pytest.fixture()
def memory_store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture()
def sql_store(clock):
    store = SqlStore(create_db_engine("sqlite://"), clock=clock)
    store.create_all()
    yield store
    store.close()


@pytest.fixture(params=["memory", "sql"])
def store(request, clock):
    if request.param == "memory":
        yield MemoryStore(clock=clock)
        return
    store = SqlStore(create_db_engine("sqlite://"), clock=clock)
    store.create_all()
    yield store
    store.close()


@pytest.fixture()
def client(memory_store):
    app = create_app(store=memory_store)
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def red_clay():
    return BrickCreate(type="Red Clay", description="Standard fired clay", current_stock=5000, min_stock=1000, unit_price="12.00")


def make_order(brick_id, **overrides):
    data = {
        "customer_name": "Ahmed Traders",
        "customer_phone": "0300-0000000",
        "customer_address": "12 Mall Road",
        "delivery_address": "Plot 7, Site Area",
        "brick_type": brick_id,
        "quantity": 100,
        "unit_price": "12.00",
        "total_amount": "1200.00",
    }
    data.update(overrides)
    return OrderCreate(**data)


@pytest.fixture()
def order_factory():
    return make_order
