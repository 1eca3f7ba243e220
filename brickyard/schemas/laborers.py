from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from .common import ApiModel, PatchModel, empty_str_to_none, money_str, reject_null


class LaborerStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    on_leave = "on_leave"


class LaborerBase(ApiModel):
    name: str = Field(min_length=1)
    phone: str
    address: Optional[str] = None
    monthly_salary: str
    status: LaborerStatus = LaborerStatus.active

    @field_validator("address", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return empty_str_to_none(v)

    @field_validator("monthly_salary", mode="before")
    @classmethod
    def check_salary(cls, v):
        return money_str(v)


class LaborerCreate(LaborerBase):
    pass


class LaborerPatch(PatchModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    monthly_salary: Optional[str] = None
    status: Optional[LaborerStatus] = None

    @field_validator("address", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return empty_str_to_none(v)

    @field_validator("monthly_salary", mode="before")
    @classmethod
    def check_salary(cls, v):
        return money_str(v)

    @field_validator("name", "phone", "monthly_salary", "status")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class Laborer(LaborerBase):
    id: str
