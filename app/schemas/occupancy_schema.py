from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime


class OccupancyForm(BaseModel):
    """Raw occupancy input; presence and date checks happen in the service."""

    unit_id: Optional[str] = None
    tenant_id: Optional[str] = None
    active_from: Optional[str] = None
    active_to: Optional[str] = None


class OccupancyValues(BaseModel):
    unit_id: str
    tenant_id: str
    active_from: date
    active_to: Optional[date] = None


class OccupancyResponse(BaseModel):
    id: str
    organization_id: str
    unit_id: str
    tenant_id: str
    active_from: date
    active_to: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
