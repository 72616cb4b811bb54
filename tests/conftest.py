"""
Shared fixtures: an in-memory SQLite ledger per test and a small seeding
helper for building organizations and their rent ledger.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date, datetime
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.init import Base
from database.models import (
    Building,
    Membership,
    Occupancy,
    Organization,
    Payment,
    RentConfig,
    RentPeriod,
    Tenant,
    Unit,
    User,
)
from enums.org_role import OrgRole
from enums.rent_period_status import RentPeriodStatus

GENERATED_AT = datetime(2024, 3, 1, 12, 0, 0)


class LedgerSeeder:
    """Creates ledger rows with sensible defaults; every call commits."""

    def __init__(self, db):
        self.db = db

    def _add(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def organization(self, slug: str = "acme", name: Optional[str] = None) -> Organization:
        return self._add(Organization(slug=slug, name=name or slug.title()))

    def user(self, email: str = "owner@example.com", name: str = "Owner") -> User:
        return self._add(User(email=email, name=name))

    def member(self, org: Organization, role: OrgRole = OrgRole.OWNER, email: Optional[str] = None) -> User:
        user = self.user(email=email or f"{role.value.lower()}@{org.slug}.example.com", name=role.value.title())
        self._add(Membership(user_id=user.id, organization_id=org.id, role=role))
        return user

    def building(self, org: Organization, name: str = "Oak Tower", address: Optional[str] = None) -> Building:
        return self._add(Building(organization_id=org.id, name=name, address=address))

    def unit(self, org: Organization, building: Building, unit_number: str = "101") -> Unit:
        return self._add(Unit(organization_id=org.id, building_id=building.id, unit_number=unit_number))

    def tenant(self, org: Organization, full_name: str = "Ada Tenant") -> Tenant:
        return self._add(Tenant(organization_id=org.id, full_name=full_name))

    def occupancy(
        self,
        org: Organization,
        unit: Unit,
        tenant: Tenant,
        active_from: date = date(2024, 1, 1),
        active_to: Optional[date] = None,
    ) -> Occupancy:
        return self._add(
            Occupancy(
                organization_id=org.id,
                unit_id=unit.id,
                tenant_id=tenant.id,
                active_from=active_from,
                active_to=active_to,
            )
        )

    def rent_config(self, org: Organization, occupancy: Occupancy, amount: float) -> RentConfig:
        return self._add(RentConfig(organization_id=org.id, occupancy_id=occupancy.id, amount=amount))

    def rent_period(
        self,
        org: Organization,
        rent_config: RentConfig,
        due_date: date = date(2024, 1, 15),
        status: RentPeriodStatus = RentPeriodStatus.DUE,
        days_overdue: Optional[int] = None,
    ) -> RentPeriod:
        return self._add(
            RentPeriod(
                organization_id=org.id,
                rent_config_id=rent_config.id,
                period_start=due_date.replace(day=1),
                period_end=due_date,
                due_date=due_date,
                status=status,
                days_overdue=days_overdue,
            )
        )

    def payment(self, org: Organization, period: RentPeriod, amount: float, paid_at: datetime) -> Payment:
        return self._add(
            Payment(organization_id=org.id, rent_period_id=period.id, amount=amount, paid_at=paid_at)
        )

    def lease(self, org: Organization, building: Building, amount: float, unit_number: str = "101"):
        """Unit + tenant + occupancy + rent config in one go; returns the rent config."""
        unit = self.unit(org, building, unit_number=unit_number)
        tenant = self.tenant(org, full_name=f"Tenant {unit_number}")
        occupancy = self.occupancy(org, unit, tenant)
        return self.rent_config(org, occupancy, amount)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seed(db):
    return LedgerSeeder(db)


@pytest.fixture
def org(seed):
    return seed.organization("acme")


@pytest.fixture
def owner(seed, org):
    return seed.member(org, OrgRole.OWNER)
