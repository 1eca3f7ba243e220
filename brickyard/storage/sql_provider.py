"""
SQLAlchemy storage backend.
One table per entity; ORD/INV numbers come from the sequences table and are
bumped inside the same transaction as the row they label.
"""
import enum
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import Base, make_session_factory
from ..models.models import (
    BrickRow,
    TractorRow,
    LaborerRow,
    OrderRow,
    InvoiceRow,
    SettingRow,
    SequenceRow,
)
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


def _plain(values: dict) -> dict:
    return {k: (v.value if isinstance(v, enum.Enum) else v) for k, v in values.items()}


def _row_dict(row) -> dict:
    return {c.key: getattr(row, c.key) for c in row.__table__.columns}


class _SqlCollection:
    row_type = None
    record_type = None
    sort_column: Optional[str] = None
    duplicate_message = "Record violates a unique constraint"

    def __init__(self, store: "SqlStore"):
        self._store = store

    def _to_record(self, row):
        return self.record_type.model_validate(_row_dict(row))

    def _new_row(self, db: Session, data):
        return self.row_type(**_plain(data.model_dump()))

    def _changes(self, patch) -> dict:
        return patch.changes()

    def _flush(self, db: Session) -> None:
        try:
            db.flush()
        except IntegrityError as e:
            raise DuplicateKeyError(self.duplicate_message) from e

    def list(self) -> List:
        with self._store.session() as db:
            query = select(self.row_type)
            if self.sort_column:
                query = query.order_by(getattr(self.row_type, self.sort_column).desc())
            return [self._to_record(row) for row in db.scalars(query).all()]

    def get(self, id: str):
        with self._store.session() as db:
            row = db.get(self.row_type, id)
            return self._to_record(row) if row is not None else None

    def create(self, data):
        with self._store.session() as db:
            row = self._new_row(db, data)
            db.add(row)
            self._flush(db)
            return self._to_record(row)

    def update(self, id: str, patch):
        with self._store.session() as db:
            row = db.get(self.row_type, id)
            if row is None:
                return None
            for key, value in _plain(self._changes(patch)).items():
                setattr(row, key, value)
            self._flush(db)
            return self._to_record(row)

    def delete(self, id: str) -> bool:
        with self._store.session() as db:
            row = db.get(self.row_type, id)
            if row is None:
                return False
            db.delete(row)
            return True


class SqlBrickRepository(_SqlCollection, BrickRepository):
    row_type = BrickRow
    record_type = Brick

    def _new_row(self, db, data):
        return BrickRow(last_updated=self._store.clock(), **_plain(data.model_dump()))

    def _changes(self, patch) -> dict:
        changes = patch.changes()
        changes["last_updated"] = self._store.clock()
        return changes


class SqlTractorRepository(_SqlCollection, TractorRepository):
    row_type = TractorRow
    record_type = Tractor
    duplicate_message = "Registration number already exists"

    def list_available(self) -> List[Tractor]:
        with self._store.session() as db:
            rows = db.scalars(select(TractorRow).where(TractorRow.status == "available")).all()
            return [self._to_record(row) for row in rows]


class SqlLaborerRepository(_SqlCollection, LaborerRepository):
    row_type = LaborerRow
    record_type = Laborer

    def list_active(self) -> List[Laborer]:
        with self._store.session() as db:
            rows = db.scalars(select(LaborerRow).where(LaborerRow.status == "active")).all()
            return [self._to_record(row) for row in rows]


class SqlOrderRepository(_SqlCollection, OrderRepository):
    row_type = OrderRow
    record_type = Order
    sort_column = "order_date"

    def _new_row(self, db, data):
        return OrderRow(
            order_number=self._store.next_number(db, "order", "ORD"),
            order_date=self._store.clock(),
            **_plain(data.model_dump()),
        )

    def list_by_status(self, status: str) -> List[Order]:
        with self._store.session() as db:
            query = select(OrderRow).where(OrderRow.status == status).order_by(OrderRow.order_date.desc())
            return [self._to_record(row) for row in db.scalars(query).all()]


class SqlInvoiceRepository(_SqlCollection, InvoiceRepository):
    row_type = InvoiceRow
    record_type = Invoice
    sort_column = "invoice_date"

    def _new_row(self, db, data):
        return InvoiceRow(
            invoice_number=self._store.next_number(db, "invoice", "INV"),
            invoice_date=self._store.clock(),
            **_plain(data.model_dump()),
        )

    def get_by_order_id(self, order_id: str) -> Optional[Invoice]:
        with self._store.session() as db:
            query = select(InvoiceRow).where(InvoiceRow.order_id == order_id).order_by(InvoiceRow.invoice_date)
            row = db.scalars(query).first()
            return self._to_record(row) if row is not None else None


class SqlSettingRepository(SettingRepository):
    def __init__(self, store: "SqlStore"):
        self._store = store

    def _all(self, db: Session) -> List[Setting]:
        rows = db.scalars(select(SettingRow).order_by(SettingRow.key)).all()
        return [Setting(key=row.key, value=row.value) for row in rows]

    def list(self) -> List[Setting]:
        with self._store.session() as db:
            return self._all(db)

    def update_settings(self, items: Iterable[Setting]) -> List[Setting]:
        with self._store.session() as db:
            for item in items:
                row = db.get(SettingRow, item.key)
                if row is None:
                    db.add(SettingRow(key=item.key, value=item.value))
                else:
                    row.value = item.value
                db.flush()
            return self._all(db)


class SqlStore(EntityStore):
    def __init__(self, engine: Engine, clock: Optional[Callable[[], datetime]] = None):
        self.engine = engine
        self.clock = clock or utcnow
        self._session_factory = make_session_factory(engine)
        self._active: ContextVar[Optional[Session]] = ContextVar(f"sql_store_{id(self)}", default=None)
        self.bricks = SqlBrickRepository(self)
        self.tractors = SqlTractorRepository(self)
        self.laborers = SqlLaborerRepository(self)
        self.orders = SqlOrderRepository(self)
        self.invoices = SqlInvoiceRepository(self)
        self.settings = SqlSettingRepository(self)

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def close(self) -> None:
        self.engine.dispose()

    @contextmanager
    def session(self):
        """Session of the enclosing transaction, or a fresh one committed on exit."""
        active = self._active.get()
        if active is not None:
            yield active
            return
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @contextmanager
    def transaction(self):
        if self._active.get() is not None:
            yield
            return
        db = self._session_factory()
        token = self._active.set(db)
        try:
            yield
            db.commit()
        except BaseException:
            db.rollback()
            raise
        finally:
            self._active.reset(token)
            db.close()

    def next_number(self, db: Session, name: str, prefix: str) -> str:
        seq = db.get(SequenceRow, name, with_for_update=True)
        if seq is None:
            seq = SequenceRow(name=name, value=0)
            db.add(seq)
        seq.value += 1
        db.flush()
        return f"{prefix}{seq.value:03d}"
