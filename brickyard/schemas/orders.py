from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from .common import MAX_QUANTITY, ApiModel, PatchModel, empty_str_to_none, money_str, reject_null


class OrderStatus(str, Enum):
    pending = "pending"
    in_transit = "in_transit"
    delivered = "delivered"
    cancelled = "cancelled"


class OrderBase(ApiModel):
    customer_name: str = Field(min_length=1)
    customer_phone: Optional[str] = None
    customer_address: str
    delivery_address: str
    brick_type: str = Field(min_length=1, description="Id of the ordered brick")
    quantity: int = Field(gt=0, le=MAX_QUANTITY)
    unit_price: str
    total_amount: str
    assigned_tractor_id: Optional[str] = None
    assigned_laborer_ids: List[str] = []
    status: OrderStatus = OrderStatus.pending
    delivery_date: Optional[datetime] = None

    @field_validator("customer_phone", "assigned_tractor_id", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return empty_str_to_none(v)

    @field_validator("assigned_laborer_ids", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("unit_price", "total_amount", mode="before")
    @classmethod
    def check_money(cls, v):
        return money_str(v)


class OrderCreate(OrderBase):
    pass


class OrderPatch(PatchModel):
    customer_name: Optional[str] = Field(default=None, min_length=1)
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    delivery_address: Optional[str] = None
    brick_type: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, gt=0, le=MAX_QUANTITY)
    unit_price: Optional[str] = None
    total_amount: Optional[str] = None
    assigned_tractor_id: Optional[str] = None
    assigned_laborer_ids: Optional[List[str]] = None
    status: Optional[OrderStatus] = None
    delivery_date: Optional[datetime] = None

    @field_validator("customer_phone", "assigned_tractor_id", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return empty_str_to_none(v)

    @field_validator("unit_price", "total_amount", mode="before")
    @classmethod
    def check_money(cls, v):
        return money_str(v)

    @field_validator(
        "customer_name",
        "customer_address",
        "delivery_address",
        "brick_type",
        "quantity",
        "unit_price",
        "total_amount",
        "assigned_laborer_ids",
        "status",
    )
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class Order(OrderBase):
    id: str
    order_number: str
    order_date: datetime
