from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from .common import ApiModel, PatchModel, empty_str_to_none, reject_null


class TractorStatus(str, Enum):
    available = "available"
    assigned = "assigned"
    maintenance = "maintenance"


class TractorBase(ApiModel):
    registration_number: str = Field(min_length=1)
    model: str
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    status: TractorStatus = TractorStatus.available
    last_maintenance: Optional[datetime] = None
    next_maintenance: Optional[datetime] = None

    @field_validator("driver_name", "driver_phone", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return empty_str_to_none(v)

    @field_validator("registration_number", mode="before")
    @classmethod
    def strip_registration(cls, v):
        return v.strip() if isinstance(v, str) else v


class TractorCreate(TractorBase):
    pass


class TractorPatch(PatchModel):
    registration_number: Optional[str] = Field(default=None, min_length=1)
    model: Optional[str] = None
    driver_name: Optional[str] = None
    driver_phone: Optional[str] = None
    status: Optional[TractorStatus] = None
    last_maintenance: Optional[datetime] = None
    next_maintenance: Optional[datetime] = None

    @field_validator("driver_name", "driver_phone", mode="before")
    @classmethod
    def empty_to_none(cls, v):
        return empty_str_to_none(v)

    @field_validator("registration_number", "model", "status")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class Tractor(TractorBase):
    id: str
