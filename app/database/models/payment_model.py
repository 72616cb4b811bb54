from sqlalchemy import Column, String, Float, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.init import Base
from utils.id_generator import generate_entity_id


class Payment(Base):
    __tablename__ = "payments"
    __table_args__ = (CheckConstraint("amount > 0", name="payments_amount_check"),)

    id = Column(String(36), primary_key=True, default=generate_entity_id)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    rent_period_id = Column(String(36), ForeignKey("rent_periods.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    # naive UTC
    paid_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    reference = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    rent_period = relationship("RentPeriod", back_populates="payments")
