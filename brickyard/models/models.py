import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Integer,
    JSON,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


def uuid_pk() -> Mapped[str]:
    return mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))


# Money columns keep the submitted decimal text; the API never recomputes amounts


class BrickRow(Base):
    __tablename__ = "bricks"

    id: Mapped[str] = uuid_pk()
    type: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    current_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    min_stock: Mapped[int] = mapped_column(Integer, nullable=False, default=1000)
    unit_price: Mapped[str] = mapped_column(String(32), nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class TractorRow(Base):
    __tablename__ = "tractors"

    id: Mapped[str] = uuid_pk()
    registration_number: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    model: Mapped[str] = mapped_column(Text, nullable=False)
    driver_name: Mapped[Optional[str]] = mapped_column(Text)
    driver_phone: Mapped[Optional[str]] = mapped_column(String(50))
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="available", index=True)  # available|assigned|maintenance
    last_maintenance: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    next_maintenance: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class LaborerRow(Base):
    __tablename__ = "laborers"

    id: Mapped[str] = uuid_pk()
    name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(Text)
    monthly_salary: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="active", index=True)  # active|inactive|on_leave


class OrderRow(Base):
    __tablename__ = "orders"

    id: Mapped[str] = uuid_pk()
    order_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(50))
    customer_address: Mapped[str] = mapped_column(Text, nullable=False)
    delivery_address: Mapped[str] = mapped_column(Text, nullable=False)
    brick_type: Mapped[str] = mapped_column(String(36), nullable=False)  # brick id, not enforced
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[str] = mapped_column(String(32), nullable=False)
    total_amount: Mapped[str] = mapped_column(String(32), nullable=False)
    assigned_tractor_id: Mapped[Optional[str]] = mapped_column(String(36))
    assigned_laborer_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending", index=True)  # pending|in_transit|delivered|cancelled
    order_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    delivery_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class InvoiceRow(Base):
    __tablename__ = "invoices"

    id: Mapped[str] = uuid_pk()
    invoice_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    order_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False)
    customer_address: Mapped[str] = mapped_column(Text, nullable=False)
    delivery_address: Mapped[str] = mapped_column(Text, nullable=False)
    items: Mapped[str] = mapped_column(Text, nullable=False)  # JSON string of line items
    subtotal: Mapped[str] = mapped_column(String(32), nullable=False)
    tax_amount: Mapped[str] = mapped_column(String(32), nullable=False)
    total_amount: Mapped[str] = mapped_column(String(32), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending", index=True)  # pending|paid|overdue
    invoice_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    due_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))


class SettingRow(Base):
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)


class SequenceRow(Base):
    """Named counters behind ORD/INV numbers; bumped inside the owning transaction."""
    __tablename__ = "sequences"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
