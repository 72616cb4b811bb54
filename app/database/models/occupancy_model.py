from sqlalchemy import Column, String, Date, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.init import Base
from utils.id_generator import generate_entity_id


class Occupancy(Base):
    __tablename__ = "occupancies"
    __table_args__ = (
        CheckConstraint(
            "active_to IS NULL OR active_to >= active_from",
            name="occupancies_active_range_check",
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_entity_id)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_id = Column(String(36), ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = Column(String(36), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    active_from = Column(Date, nullable=False)
    active_to = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    unit = relationship("Unit")
    tenant = relationship("Tenant")
