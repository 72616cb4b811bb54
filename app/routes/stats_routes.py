import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from services.stats_service import StatsService
from utils.dependencies import get_current_user
from responses.error import internal_server_error
from responses.result import result_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orgs/{org_slug}/stats", tags=["Stats"])


@router.get("")
def get_org_stats(
    org_slug: str,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_user),
):
    try:
        return result_response(StatsService(db).get_org_stats(current_user, org_slug))
    except Exception:
        logger.exception("Unhandled error fetching stats for %s", org_slug)
        return internal_server_error("Failed to fetch organization statistics")
