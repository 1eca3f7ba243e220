from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .common import ApiModel, PatchModel, money_str, reject_null


class BrickBase(ApiModel):
    type: str = Field(min_length=1)
    description: str
    current_stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=1000, ge=0)
    unit_price: str

    @field_validator("unit_price", mode="before")
    @classmethod
    def check_price(cls, v):
        return money_str(v)


class BrickCreate(BrickBase):
    pass


class BrickPatch(PatchModel):
    type: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    current_stock: Optional[int] = None
    min_stock: Optional[int] = Field(default=None, ge=0)
    unit_price: Optional[str] = None

    @field_validator("unit_price", mode="before")
    @classmethod
    def check_price(cls, v):
        return money_str(v)

    @field_validator("type", "description", "current_stock", "min_stock", "unit_price")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class StockUpdate(ApiModel):
    current_stock: int


class Brick(BrickBase):
    id: str
    # Stock may be driven below zero by direct stock updates
    current_stock: int = 0
    last_updated: datetime
