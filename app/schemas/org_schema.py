from pydantic import BaseModel, ConfigDict

from enums.org_role import OrgRole


class OrgContext(BaseModel):
    organization_id: str
    role: OrgRole

    model_config = ConfigDict(frozen=True)


class OrgStats(BaseModel):
    buildings: int = 0
    units: int = 0
    tenants: int = 0
    occupancies: int = 0
    rent_configs: int = 0
    rent_periods: int = 0
    overdue_periods: int = 0
