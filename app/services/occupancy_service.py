import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional

from database.models.user_model import User
from enums.error_code import ErrorCode
from schemas.occupancy_schema import OccupancyForm, OccupancyResponse, OccupancyValues
from schemas.result_schema import ServiceResult, failure, storage_failure, success
from services.ledger_store import LedgerStore
from services.org_context_service import authorize_org_action
from utils.date_utils import parse_calendar_date
from utils.permissions import Operation

logger = logging.getLogger(__name__)

OCCUPANCY_NOT_FOUND = "Occupancy not found or access denied"
UNIT_NOT_FOUND = "Unit not found or does not belong to this organization"
TENANT_NOT_FOUND = "Tenant not found or does not belong to this organization"


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_occupancy_form(form: OccupancyForm) -> ServiceResult[OccupancyValues]:
    """Field presence first, then date parsing, then the date range."""
    if _blank(form.unit_id):
        return failure(ErrorCode.VALIDATION_ERROR, "Unit is required")
    if _blank(form.tenant_id):
        return failure(ErrorCode.VALIDATION_ERROR, "Tenant is required")
    if _blank(form.active_from):
        return failure(ErrorCode.VALIDATION_ERROR, "Active from date is required")

    active_from = parse_calendar_date(form.active_from)
    if active_from is None:
        return failure(ErrorCode.VALIDATION_ERROR, "Active from date is invalid")

    active_to = None
    if not _blank(form.active_to):
        active_to = parse_calendar_date(form.active_to)
        if active_to is None:
            return failure(ErrorCode.VALIDATION_ERROR, "Active to date is invalid")
        if active_to < active_from:
            return failure(
                ErrorCode.VALIDATION_ERROR,
                "Active to date must be after or equal to active from date",
            )

    return success(
        OccupancyValues(
            unit_id=form.unit_id.strip(),
            tenant_id=form.tenant_id.strip(),
            active_from=active_from,
            active_to=active_to,
        )
    )


class OccupancyService:
    def __init__(self, db: Session):
        self.db = db
        self.store = LedgerStore(db)

    def _check_references(self, organization_id: str, values: OccupancyValues) -> Optional[ServiceResult]:
        if self.store.find_unit(organization_id, values.unit_id) is None:
            return failure(ErrorCode.NOT_FOUND, UNIT_NOT_FOUND)
        if self.store.find_tenant(organization_id, values.tenant_id) is None:
            return failure(ErrorCode.NOT_FOUND, TENANT_NOT_FOUND)
        return None

    def list_occupancies(
        self,
        user: Optional[User],
        org_slug: str,
        unit_id: Optional[str] = None,
        tenant_id: Optional[str] = None,
    ) -> ServiceResult[List[OccupancyResponse]]:
        access = authorize_org_action(self.db, user, org_slug, Operation.LIST_OCCUPANCIES)
        if access.error is not None:
            return access
        organization_id = access.data.organization_id

        try:
            occupancies = self.store.list_occupancies(organization_id, unit_id=unit_id, tenant_id=tenant_id)
        except SQLAlchemyError:
            logger.exception("Error fetching occupancies (org=%s)", organization_id)
            return storage_failure("Failed to fetch occupancies")

        return success([OccupancyResponse.model_validate(o) for o in occupancies])

    def create_occupancy(
        self, user: Optional[User], org_slug: str, form: OccupancyForm
    ) -> ServiceResult[OccupancyResponse]:
        access = authorize_org_action(self.db, user, org_slug, Operation.CREATE_OCCUPANCY)
        if access.error is not None:
            return access
        organization_id = access.data.organization_id

        validated = validate_occupancy_form(form)
        if validated.error is not None:
            return validated
        values = validated.data

        try:
            missing = self._check_references(organization_id, values)
            if missing is not None:
                return missing
            occupancy = self.store.insert_occupancy(organization_id, values)
        except SQLAlchemyError:
            logger.exception("Error creating occupancy (org=%s)", organization_id)
            return storage_failure("Failed to create occupancy")

        logger.info("Created occupancy %s (org=%s)", occupancy.id, organization_id)
        return success(OccupancyResponse.model_validate(occupancy))

    def update_occupancy(
        self, user: Optional[User], org_slug: str, occupancy_id: str, form: OccupancyForm
    ) -> ServiceResult[OccupancyResponse]:
        access = authorize_org_action(self.db, user, org_slug, Operation.UPDATE_OCCUPANCY)
        if access.error is not None:
            return access
        organization_id = access.data.organization_id

        validated = validate_occupancy_form(form)
        if validated.error is not None:
            return validated
        values = validated.data

        try:
            missing = self._check_references(organization_id, values)
            if missing is not None:
                return missing
            if self.store.find_occupancy(organization_id, occupancy_id) is None:
                return failure(ErrorCode.NOT_FOUND, OCCUPANCY_NOT_FOUND)
            occupancy = self.store.update_occupancy(organization_id, occupancy_id, values)
        except SQLAlchemyError:
            logger.exception("Error updating occupancy %s (org=%s)", occupancy_id, organization_id)
            return storage_failure("Failed to update occupancy")

        # deleted between the existence check and the write
        if occupancy is None:
            return failure(ErrorCode.NOT_FOUND, OCCUPANCY_NOT_FOUND)

        logger.info("Updated occupancy %s (org=%s)", occupancy_id, organization_id)
        return success(OccupancyResponse.model_validate(occupancy))

    def delete_occupancy(
        self, user: Optional[User], org_slug: str, occupancy_id: str
    ) -> ServiceResult[None]:
        access = authorize_org_action(self.db, user, org_slug, Operation.DELETE_OCCUPANCY)
        if access.error is not None:
            return access
        organization_id = access.data.organization_id

        try:
            if self.store.find_occupancy(organization_id, occupancy_id) is None:
                return failure(ErrorCode.NOT_FOUND, OCCUPANCY_NOT_FOUND)
            deleted = self.store.delete_occupancy(organization_id, occupancy_id)
        except SQLAlchemyError:
            logger.exception("Error deleting occupancy %s (org=%s)", occupancy_id, organization_id)
            return storage_failure("Failed to delete occupancy")

        if not deleted:
            return failure(ErrorCode.NOT_FOUND, OCCUPANCY_NOT_FOUND)

        logger.info("Deleted occupancy %s (org=%s)", occupancy_id, organization_id)
        return success()
