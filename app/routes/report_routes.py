import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from config import COLLECTION_RATE_DEFAULT_DAYS
from database.init import get_db
from services.report_service import ReportService
from utils.date_utils import format_calendar_date, trailing_days
from utils.dependencies import get_current_user
from responses.error import internal_server_error
from responses.result import result_response

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/orgs/{org_slug}/reports",
    tags=["reports"],
    responses={404: {"description": "Not found"}},
)


@router.get("/delinquency-aging")
def get_delinquency_aging(
    org_slug: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """
    Unpaid rent periods bucketed by days overdue (0–7, 8–15, 16–30, 31+).
    """
    try:
        return result_response(ReportService(db).get_delinquency_aging(current_user, org_slug))
    except Exception:
        logger.exception("Unhandled error building delinquency aging for %s", org_slug)
        return internal_server_error("Failed to generate report")


@router.get("/building-rollups")
def get_building_rollups(
    org_slug: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """
    Buildings with unpaid rent, highest unpaid amount first.
    """
    try:
        return result_response(ReportService(db).get_building_rollups(current_user, org_slug))
    except Exception:
        logger.exception("Unhandled error building rollups for %s", org_slug)
        return internal_server_error("Failed to generate report")


@router.get("/collection-rate")
def get_collection_rate(
    org_slug: str,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    """
    Rent due vs. collected for periods due between start_date and end_date.

    Missing bounds default to the trailing window ending today (UTC).
    """
    default_start, default_end = trailing_days(COLLECTION_RATE_DEFAULT_DAYS)
    start_date = start_date or format_calendar_date(default_start)
    end_date = end_date or format_calendar_date(default_end)
    try:
        return result_response(
            ReportService(db).get_collection_rate(current_user, org_slug, start_date, end_date)
        )
    except Exception:
        logger.exception("Unhandled error computing collection rate for %s", org_slug)
        return internal_server_error("Failed to generate report")
