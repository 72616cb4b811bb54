from .user_model import User
from .organization_model import Organization, Membership
from .property_model import Building, Unit
from .tenant_model import Tenant
from .occupancy_model import Occupancy
from .rent_model import RentConfig, RentPeriod
from .payment_model import Payment

__all__ = ["User", "Organization", "Membership", "Building", "Unit", "Tenant", "Occupancy", "RentConfig", "RentPeriod", "Payment"]
