"""
In-process storage backend.
Keeps every collection in a dict; nothing survives a restart.
"""
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from ..schemas.bricks import Brick
from ..schemas.invoices import Invoice
from ..schemas.laborers import Laborer
from ..schemas.orders import Order
from ..schemas.settings import Setting
from ..schemas.tractors import Tractor
from .provider import (
    BrickRepository,
    DuplicateKeyError,
    EntityStore,
    InvoiceRepository,
    LaborerRepository,
    OrderRepository,
    SettingRepository,
    TractorRepository,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _MemoryCollection:
    record_type = None
    sort_field: Optional[str] = None

    def __init__(self, store: "MemoryStore"):
        self._store = store
        self._records: Dict[str, object] = {}

    def _build(self, id: str, data) -> object:
        return self.record_type(id=id, **data.model_dump())

    def _check_unique(self, record, exclude_id: Optional[str] = None) -> None:
        pass

    def list(self) -> List:
        with self._store._lock:
            records = list(self._records.values())
        if self.sort_field:
            # Newest first; later inserts win ties
            records.reverse()
            records.sort(key=lambda r: getattr(r, self.sort_field), reverse=True)
        return records

    def get(self, id: str):
        return self._records.get(id)

    def create(self, data):
        with self._store._lock:
            record = self._build(str(uuid.uuid4()), data)
            self._check_unique(record)
            self._records[record.id] = record
            return record

    def update(self, id: str, patch):
        with self._store._lock:
            current = self._records.get(id)
            if current is None:
                return None
            record = current.model_copy(update=self._changes(patch))
            self._check_unique(record, exclude_id=id)
            self._records[id] = record
            return record

    def _changes(self, patch) -> dict:
        return patch.changes()

    def delete(self, id: str) -> bool:
        with self._store._lock:
            return self._records.pop(id, None) is not None


class MemoryBrickRepository(_MemoryCollection, BrickRepository):
    record_type = Brick

    def _build(self, id, data):
        return Brick(id=id, last_updated=self._store.clock(), **data.model_dump())

    def _changes(self, patch) -> dict:
        changes = patch.changes()
        changes["last_updated"] = self._store.clock()
        return changes


class MemoryTractorRepository(_MemoryCollection, TractorRepository):
    record_type = Tractor

    def _check_unique(self, record, exclude_id=None):
        for other in self._records.values():
            if other.id != exclude_id and other.registration_number == record.registration_number:
                raise DuplicateKeyError(f"Registration number {record.registration_number} already exists")


class MemoryLaborerRepository(_MemoryCollection, LaborerRepository):
    record_type = Laborer


class MemoryOrderRepository(_MemoryCollection, OrderRepository):
    record_type = Order
    sort_field = "order_date"

    def _build(self, id, data):
        return Order(
            id=id,
            order_number=self._store.next_number("order", "ORD"),
            order_date=self._store.clock(),
            **data.model_dump(),
        )


class MemoryInvoiceRepository(_MemoryCollection, InvoiceRepository):
    record_type = Invoice
    sort_field = "invoice_date"

    def _build(self, id, data):
        return Invoice(
            id=id,
            invoice_number=self._store.next_number("invoice", "INV"),
            invoice_date=self._store.clock(),
            **data.model_dump(),
        )

    def get_by_order_id(self, order_id: str) -> Optional[Invoice]:
        # First match in insertion order, not the newest-first listing
        with self._store._lock:
            for invoice in self._records.values():
                if invoice.order_id == order_id:
                    return invoice
        return None


class MemorySettingRepository(SettingRepository):
    def __init__(self, store: "MemoryStore"):
        self._store = store
        self._records: Dict[str, Setting] = {}

    def list(self) -> List[Setting]:
        return list(self._records.values())

    def update_settings(self, items: Iterable[Setting]) -> List[Setting]:
        with self._store._lock:
            for item in items:
                self._records[item.key] = Setting(key=item.key, value=item.value)
        return self.list()


class MemoryStore(EntityStore):
    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or utcnow
        self._lock = threading.RLock()
        self._counters: Dict[str, int] = {"order": 0, "invoice": 0}
        self.bricks = MemoryBrickRepository(self)
        self.tractors = MemoryTractorRepository(self)
        self.laborers = MemoryLaborerRepository(self)
        self.orders = MemoryOrderRepository(self)
        self.invoices = MemoryInvoiceRepository(self)
        self.settings = MemorySettingRepository(self)

    def _collections(self):
        return (self.bricks, self.tractors, self.laborers, self.orders, self.invoices, self.settings)

    def next_number(self, name: str, prefix: str) -> str:
        with self._lock:
            self._counters[name] += 1
            return f"{prefix}{self._counters[name]:03d}"

    @contextmanager
    def transaction(self):
        with self._lock:
            # Records are replaced, never mutated, so shallow copies are enough to roll back
            snapshot = [dict(c._records) for c in self._collections()]
            counters = dict(self._counters)
            try:
                yield
            except BaseException:
                for collection, records in zip(self._collections(), snapshot):
                    collection._records = records
                self._counters = counters
                raise
