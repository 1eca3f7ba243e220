import json
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from .common import ApiModel, PatchModel, money_str, reject_null


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    overdue = "overdue"


class LineItem(ApiModel):
    description: str
    quantity: int
    rate: str
    amount: str


def _parse_date(value: str) -> Optional[datetime]:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def coerce_date_fields(payload: Any) -> Any:
    """Turn ISO strings under any key ending in "date" into datetimes.

    Strings that do not parse are left untouched for validation to reject.
    """
    if not isinstance(payload, dict):
        return payload
    coerced = dict(payload)
    for key, value in payload.items():
        if isinstance(value, str) and key.lower().endswith("date"):
            parsed = _parse_date(value)
            if parsed is not None:
                coerced[key] = parsed
    return coerced


def serialize_items(v):
    if v is None:
        return None
    if isinstance(v, str):
        try:
            decoded = json.loads(v)
        except ValueError:
            raise ValueError("items must be a JSON array")
        if not isinstance(decoded, list):
            raise ValueError("items must be a JSON array")
        return v
    if isinstance(v, list):
        return json.dumps([
            item.model_dump() if isinstance(item, LineItem) else item
            for item in v
        ])
    raise ValueError("items must be a JSON array")


class InvoiceBase(ApiModel):
    order_id: str = Field(min_length=1)
    customer_name: str
    customer_address: str
    delivery_address: str
    items: str = Field(description="JSON-serialized list of line items")
    subtotal: str
    tax_amount: str
    total_amount: str
    payment_status: PaymentStatus = PaymentStatus.pending
    due_date: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def coerce_dates(cls, data):
        return coerce_date_fields(data)

    @field_validator("items", mode="before")
    @classmethod
    def check_items(cls, v):
        return serialize_items(v)

    @field_validator("subtotal", "tax_amount", "total_amount", mode="before")
    @classmethod
    def check_money(cls, v):
        return money_str(v)


class InvoiceCreate(InvoiceBase):
    pass


class InvoicePatch(PatchModel):
    order_id: Optional[str] = Field(default=None, min_length=1)
    customer_name: Optional[str] = None
    customer_address: Optional[str] = None
    delivery_address: Optional[str] = None
    items: Optional[str] = None
    subtotal: Optional[str] = None
    tax_amount: Optional[str] = None
    total_amount: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    due_date: Optional[datetime] = None

    @model_validator(mode="before")
    @classmethod
    def coerce_dates(cls, data):
        return coerce_date_fields(data)

    @field_validator("items", mode="before")
    @classmethod
    def check_items(cls, v):
        return serialize_items(v)

    @field_validator("subtotal", "tax_amount", "total_amount", mode="before")
    @classmethod
    def check_money(cls, v):
        return money_str(v)

    @field_validator(
        "order_id",
        "customer_name",
        "customer_address",
        "delivery_address",
        "items",
        "subtotal",
        "tax_amount",
        "total_amount",
        "payment_status",
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class Invoice(InvoiceBase):
    id: str
    invoice_number: str
    invoice_date: datetime

    def line_items(self) -> List[LineItem]:
        return [LineItem.model_validate(item) for item in json.loads(self.items)]


class InvoiceDraft(ApiModel):
    """A priced invoice computed from an order, not yet stored."""

    order_id: str
    invoice_number: str
    customer_name: str
    customer_address: str
    delivery_address: str
    items: List[LineItem]
    subtotal: str
    tax_amount: str
    total_amount: str
    payment_status: PaymentStatus = PaymentStatus.pending
    due_date: datetime

    def to_create(self) -> InvoiceCreate:
        return InvoiceCreate(
            order_id=self.order_id,
            customer_name=self.customer_name,
            customer_address=self.customer_address,
            delivery_address=self.delivery_address,
            items=[item.model_dump() for item in self.items],
            subtotal=self.subtotal,
            tax_amount=self.tax_amount,
            total_amount=self.total_amount,
            payment_status=self.payment_status,
            due_date=self.due_date,
        )
