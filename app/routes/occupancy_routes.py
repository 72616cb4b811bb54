import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from database.init import get_db
from schemas.occupancy_schema import OccupancyForm
from services.occupancy_service import OccupancyService
from utils.dependencies import get_current_user
from responses.error import internal_server_error
from responses.result import result_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orgs/{org_slug}/occupancies", tags=["Occupancies"])


@router.get("")
def list_occupancies(
    org_slug: str,
    unit_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """List occupancies, newest first, optionally narrowed to a unit or tenant."""
    try:
        result = OccupancyService(db).list_occupancies(
            current_user, org_slug, unit_id=unit_id, tenant_id=tenant_id
        )
        return result_response(result)
    except Exception:
        logger.exception("Unhandled error listing occupancies for %s", org_slug)
        return internal_server_error("Failed to fetch occupancies")


@router.post("")
def create_occupancy(
    org_slug: str,
    payload: OccupancyForm,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    try:
        result = OccupancyService(db).create_occupancy(current_user, org_slug, payload)
        return result_response(result)
    except Exception:
        logger.exception("Unhandled error creating occupancy for %s", org_slug)
        return internal_server_error("Failed to create occupancy")


@router.put("/{occupancy_id}")
def update_occupancy(
    org_slug: str,
    occupancy_id: str,
    payload: OccupancyForm,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    try:
        result = OccupancyService(db).update_occupancy(current_user, org_slug, occupancy_id, payload)
        return result_response(result)
    except Exception:
        logger.exception("Unhandled error updating occupancy %s for %s", occupancy_id, org_slug)
        return internal_server_error("Failed to update occupancy")


@router.delete("/{occupancy_id}")
def delete_occupancy(
    org_slug: str,
    occupancy_id: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """Delete an occupancy. Organization owners only."""
    try:
        result = OccupancyService(db).delete_occupancy(current_user, org_slug, occupancy_id)
        return result_response(result, message="Occupancy deleted")
    except Exception:
        logger.exception("Unhandled error deleting occupancy %s for %s", occupancy_id, org_slug)
        return internal_server_error("Failed to delete occupancy")
