"""Flat rows projected out of the ledger tables for the report aggregators."""

from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from enums.rent_period_status import RentPeriodStatus


class UnpaidPeriodRow(BaseModel):
    id: str
    status: RentPeriodStatus
    days_overdue: Optional[int] = None
    amount: float = 0.0

    model_config = ConfigDict(frozen=True)


class BuildingRef(BaseModel):
    id: str
    name: str
    address: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class BuildingPeriodRow(BaseModel):
    status: RentPeriodStatus
    amount: float = 0.0
    building: BuildingRef

    model_config = ConfigDict(frozen=True)


class DuePeriodRow(BaseModel):
    id: str
    amount: float = 0.0

    model_config = ConfigDict(frozen=True)


class PaymentRow(BaseModel):
    rent_period_id: str
    amount: float
    paid_at: datetime

    model_config = ConfigDict(frozen=True)
