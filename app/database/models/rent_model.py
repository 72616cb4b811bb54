from sqlalchemy import (
    Column,
    String,
    Integer,
    Float,
    Date,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database.init import Base
from enums.rent_cycle import RentCycle
from enums.rent_period_status import RentPeriodStatus
from utils.id_generator import generate_entity_id


class RentConfig(Base):
    __tablename__ = "rent_configs"
    __table_args__ = (
        CheckConstraint("amount > 0", name="rent_configs_amount_check"),
        CheckConstraint("due_day >= 1 AND due_day <= 31", name="rent_configs_due_day_check"),
    )

    id = Column(String(36), primary_key=True, default=generate_entity_id)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    occupancy_id = Column(String(36), ForeignKey("occupancies.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    cycle = Column(SQLAlchemyEnum(RentCycle, native_enum=False), nullable=False, default=RentCycle.MONTHLY)
    due_day = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    occupancy = relationship("Occupancy")
    rent_periods = relationship("RentPeriod", back_populates="rent_config", cascade="all, delete-orphan")


class RentPeriod(Base):
    __tablename__ = "rent_periods"
    __table_args__ = (
        CheckConstraint("period_end >= period_start", name="rent_periods_date_range_check"),
    )

    id = Column(String(36), primary_key=True, default=generate_entity_id)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    rent_config_id = Column(String(36), ForeignKey("rent_configs.id", ondelete="CASCADE"), nullable=False, index=True)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    status = Column(
        SQLAlchemyEnum(RentPeriodStatus, native_enum=False),
        nullable=False,
        default=RentPeriodStatus.DUE,
        index=True,
    )
    days_overdue = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    rent_config = relationship("RentConfig", back_populates="rent_periods")
    payments = relationship("Payment", back_populates="rent_period", cascade="all, delete-orphan")
