import logging
from sqlalchemy import and_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import date, datetime
from typing import Iterable, List, Optional

from database.models.organization_model import Membership, Organization
from database.models.property_model import Building, Unit
from database.models.tenant_model import Tenant
from database.models.occupancy_model import Occupancy
from database.models.rent_model import RentConfig, RentPeriod
from database.models.payment_model import Payment
from enums.rent_period_status import RentPeriodStatus, UNPAID_STATUSES
from schemas.ledger_schema import (
    BuildingPeriodRow,
    BuildingRef,
    DuePeriodRow,
    PaymentRow,
    UnpaidPeriodRow,
)
from schemas.occupancy_schema import OccupancyValues
from schemas.org_schema import OrgStats

logger = logging.getLogger(__name__)


class LedgerStore:
    """
    Organization-scoped reads and writes against the ledger tables.

    Every statement filters on ``organization_id``. Report reads return
    flat DTOs; rows that cannot be projected are dropped here so the
    aggregators only ever see complete records. SQLAlchemy errors
    propagate to the calling service.
    """

    def __init__(self, db: Session):
        self.db = db

    # Membership

    def find_membership(self, user_id: str, org_slug: str) -> Optional[Membership]:
        return (
            self.db.query(Membership)
            .join(Organization, Membership.organization_id == Organization.id)
            .filter(Organization.slug == org_slug, Membership.user_id == user_id)
            .first()
        )

    # Report reads

    def fetch_unpaid_periods(self, organization_id: str) -> List[UnpaidPeriodRow]:
        rows = (
            self.db.query(
                RentPeriod.id,
                RentPeriod.status,
                RentPeriod.days_overdue,
                RentConfig.amount,
            )
            .join(RentConfig, RentPeriod.rent_config_id == RentConfig.id)
            .filter(
                RentPeriod.organization_id == organization_id,
                RentConfig.organization_id == organization_id,
                RentPeriod.status.in_(UNPAID_STATUSES),
            )
            .all()
        )
        return [
            UnpaidPeriodRow(
                id=str(row.id),
                status=row.status,
                days_overdue=row.days_overdue,
                amount=float(row.amount or 0),
            )
            for row in rows
        ]

    def fetch_unpaid_periods_by_building(self, organization_id: str) -> List[BuildingPeriodRow]:
        rows = (
            self.db.query(
                RentPeriod.status,
                RentConfig.amount,
                Building.id.label("building_id"),
                Building.name.label("building_name"),
                Building.address.label("building_address"),
            )
            .join(RentConfig, RentPeriod.rent_config_id == RentConfig.id)
            .outerjoin(
                Occupancy,
                and_(
                    RentConfig.occupancy_id == Occupancy.id,
                    Occupancy.organization_id == organization_id,
                ),
            )
            .outerjoin(
                Unit,
                and_(Occupancy.unit_id == Unit.id, Unit.organization_id == organization_id),
            )
            .outerjoin(
                Building,
                and_(Unit.building_id == Building.id, Building.organization_id == organization_id),
            )
            .filter(
                RentPeriod.organization_id == organization_id,
                RentConfig.organization_id == organization_id,
                RentPeriod.status.in_(UNPAID_STATUSES),
            )
            .all()
        )

        projected = []
        for row in rows:
            if not row.building_id or not row.building_name:
                continue
            projected.append(
                BuildingPeriodRow(
                    status=row.status,
                    amount=float(row.amount or 0),
                    building=BuildingRef(
                        id=str(row.building_id),
                        name=str(row.building_name),
                        address=row.building_address,
                    ),
                )
            )

        dropped = len(rows) - len(projected)
        if dropped:
            logger.warning(
                "Dropped %d unpaid rent periods with no resolvable building (org=%s)",
                dropped,
                organization_id,
            )
        return projected

    def fetch_periods_due_between(
        self, organization_id: str, start: date, end: date
    ) -> List[DuePeriodRow]:
        rows = (
            self.db.query(RentPeriod.id, RentConfig.amount)
            .join(RentConfig, RentPeriod.rent_config_id == RentConfig.id)
            .filter(
                RentPeriod.organization_id == organization_id,
                RentConfig.organization_id == organization_id,
                RentPeriod.due_date >= start,
                RentPeriod.due_date <= end,
            )
            .all()
        )
        return [DuePeriodRow(id=str(row.id), amount=float(row.amount or 0)) for row in rows]

    def fetch_payments_for_periods(
        self,
        organization_id: str,
        period_ids: Iterable[str],
        paid_from: datetime,
        paid_to: datetime,
    ) -> List[PaymentRow]:
        period_ids = list(period_ids)
        if not period_ids:
            return []
        rows = (
            self.db.query(Payment.rent_period_id, Payment.amount, Payment.paid_at)
            .filter(
                Payment.organization_id == organization_id,
                Payment.rent_period_id.in_(period_ids),
                Payment.paid_at >= paid_from,
                Payment.paid_at <= paid_to,
            )
            .all()
        )
        return [
            PaymentRow(
                rent_period_id=str(row.rent_period_id),
                amount=float(row.amount or 0),
                paid_at=row.paid_at,
            )
            for row in rows
        ]

    def count_entities(self, organization_id: str) -> OrgStats:
        def scoped_count(model, *criteria):
            return (
                self.db.query(func.count(model.id))
                .filter(model.organization_id == organization_id, *criteria)
                .scalar_subquery()
            )

        row = self.db.query(
            scoped_count(Building).label("buildings"),
            scoped_count(Unit).label("units"),
            scoped_count(Tenant).label("tenants"),
            scoped_count(Occupancy).label("occupancies"),
            scoped_count(RentConfig).label("rent_configs"),
            scoped_count(RentPeriod).label("rent_periods"),
            scoped_count(RentPeriod, RentPeriod.status == RentPeriodStatus.OVERDUE).label("overdue_periods"),
        ).one()
        return OrgStats(**{key: int(value or 0) for key, value in row._mapping.items()})

    # Occupancies

    def find_unit(self, organization_id: str, unit_id: str) -> Optional[Unit]:
        return (
            self.db.query(Unit)
            .filter(Unit.id == unit_id, Unit.organization_id == organization_id)
            .first()
        )

    def find_tenant(self, organization_id: str, tenant_id: str) -> Optional[Tenant]:
        return (
            self.db.query(Tenant)
            .filter(Tenant.id == tenant_id, Tenant.organization_id == organization_id)
            .first()
        )

    def find_occupancy(self, organization_id: str, occupancy_id: str) -> Optional[Occupancy]:
        return (
            self.db.query(Occupancy)
            .filter(Occupancy.id == occupancy_id, Occupancy.organization_id == organization_id)
            .first()
        )

    def list_occupancies(
        self,
        organization_id: str,
        unit_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
    ) -> List[Occupancy]:
        query = self.db.query(Occupancy).filter(Occupancy.organization_id == organization_id)
        if unit_id:
            query = query.filter(Occupancy.unit_id == unit_id)
        if tenant_id:
            query = query.filter(Occupancy.tenant_id == tenant_id)
        return query.order_by(Occupancy.active_from.desc()).all()

    def insert_occupancy(self, organization_id: str, values: OccupancyValues) -> Occupancy:
        occupancy = Occupancy(organization_id=organization_id, **values.model_dump())
        try:
            self.db.add(occupancy)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(occupancy)
        return occupancy

    def update_occupancy(
        self, organization_id: str, occupancy_id: str, values: OccupancyValues
    ) -> Optional[Occupancy]:
        try:
            updated = (
                self.db.query(Occupancy)
                .filter(Occupancy.id == occupancy_id, Occupancy.organization_id == organization_id)
                .update(values.model_dump(), synchronize_session="fetch")
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        if not updated:
            return None
        return self.find_occupancy(organization_id, occupancy_id)

    def delete_occupancy(self, organization_id: str, occupancy_id: str) -> bool:
        try:
            deleted = (
                self.db.query(Occupancy)
                .filter(Occupancy.id == occupancy_id, Occupancy.organization_id == organization_id)
                .delete(synchronize_session="fetch")
            )
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return deleted > 0
