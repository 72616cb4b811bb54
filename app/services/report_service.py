import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from datetime import datetime
from typing import Optional

from database.models.user_model import User
from enums.error_code import ErrorCode
from schemas.report_schema import (
    BuildingRollupsReport,
    CollectionRateReport,
    DelinquencyAgingReport,
)
from schemas.result_schema import ServiceResult, failure, storage_failure, success
from services.ledger_aggregations import (
    build_building_rollups,
    build_collection_rate,
    build_delinquency_aging,
)
from services.ledger_store import LedgerStore
from services.org_context_service import authorize_org_action
from utils.date_utils import DateInput, day_window, parse_calendar_date, utc_now
from utils.permissions import Operation

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, db: Session):
        self.db = db
        self.store = LedgerStore(db)

    def get_delinquency_aging(
        self, user: Optional[User], org_slug: str, now: Optional[datetime] = None
    ) -> ServiceResult[DelinquencyAgingReport]:
        """
        Bucket the organization's unpaid rent periods by days overdue.

        Args:
            user: Authenticated caller, or None
            org_slug: Slug of the organization to report on
            now: Generation timestamp; defaults to the current UTC time

        Returns:
            ServiceResult carrying a DelinquencyAgingReport
        """
        access = authorize_org_action(self.db, user, org_slug, Operation.VIEW_REPORTS)
        if access.error is not None:
            return access
        organization_id = access.data.organization_id

        try:
            rows = self.store.fetch_unpaid_periods(organization_id)
        except SQLAlchemyError:
            logger.exception("Error fetching unpaid rent periods (org=%s)", organization_id)
            return storage_failure("Failed to fetch rent periods")

        logger.debug("Delinquency aging over %d unpaid periods (org=%s)", len(rows), organization_id)
        return success(build_delinquency_aging(rows, now or utc_now()))

    def get_building_rollups(
        self, user: Optional[User], org_slug: str, now: Optional[datetime] = None
    ) -> ServiceResult[BuildingRollupsReport]:
        """
        Group unpaid rent periods by building, ranked by unpaid amount.

        Args:
            user: Authenticated caller, or None
            org_slug: Slug of the organization to report on
            now: Generation timestamp; defaults to the current UTC time

        Returns:
            ServiceResult carrying a BuildingRollupsReport
        """
        access = authorize_org_action(self.db, user, org_slug, Operation.VIEW_REPORTS)
        if access.error is not None:
            return access
        organization_id = access.data.organization_id

        try:
            rows = self.store.fetch_unpaid_periods_by_building(organization_id)
        except SQLAlchemyError:
            logger.exception("Error fetching building rollups (org=%s)", organization_id)
            return storage_failure("Failed to fetch rent periods")

        logger.debug("Building rollups over %d unpaid periods (org=%s)", len(rows), organization_id)
        return success(build_building_rollups(rows, now or utc_now()))

    def get_collection_rate(
        self,
        user: Optional[User],
        org_slug: str,
        start_date: DateInput,
        end_date: DateInput,
        now: Optional[datetime] = None,
    ) -> ServiceResult[CollectionRateReport]:
        """
        Compare rent due against rent collected for an inclusive date window.

        Only periods with a due date inside the window are counted, and only
        payments for those periods whose own timestamp also falls inside the
        window are treated as collected.

        Args:
            user: Authenticated caller, or None
            org_slug: Slug of the organization to report on
            start_date: First day of the window (ISO 8601)
            end_date: Last day of the window (ISO 8601)
            now: Generation timestamp; defaults to the current UTC time

        Returns:
            ServiceResult carrying a CollectionRateReport
        """
        access = authorize_org_action(self.db, user, org_slug, Operation.VIEW_REPORTS)
        if access.error is not None:
            return access
        organization_id = access.data.organization_id

        start = parse_calendar_date(start_date)
        end = parse_calendar_date(end_date)
        if start is None or end is None:
            return failure(
                ErrorCode.INVALID_DATE_RANGE, "Start and end dates must be valid calendar dates"
            )
        if start > end:
            return failure(ErrorCode.INVALID_DATE_RANGE, "Start date must be on or before end date")

        generated_at = now or utc_now()
        try:
            periods = self.store.fetch_periods_due_between(organization_id, start, end)
            if not periods:
                return success(build_collection_rate([], [], start, end, generated_at))

            paid_from, paid_to = day_window(start, end)
            payments = self.store.fetch_payments_for_periods(
                organization_id, [period.id for period in periods], paid_from, paid_to
            )
        except SQLAlchemyError:
            logger.exception(
                "Error computing collection rate (org=%s, window=%s..%s)", organization_id, start, end
            )
            return storage_failure("Failed to fetch collection data")

        return success(build_collection_rate(periods, payments, start, end, generated_at))
