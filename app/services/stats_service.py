import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional

from database.models.user_model import User
from schemas.org_schema import OrgStats
from schemas.result_schema import ServiceResult, storage_failure, success
from services.ledger_store import LedgerStore
from services.org_context_service import authorize_org_action
from utils.permissions import Operation

logger = logging.getLogger(__name__)


class StatsService:
    def __init__(self, db: Session):
        self.db = db
        self.store = LedgerStore(db)

    def get_org_stats(self, user: Optional[User], org_slug: str) -> ServiceResult[OrgStats]:
        """Entity counts for the organization, read in a single statement."""
        access = authorize_org_action(self.db, user, org_slug, Operation.VIEW_STATS)
        if access.error is not None:
            return access
        organization_id = access.data.organization_id

        try:
            stats = self.store.count_entities(organization_id)
        except SQLAlchemyError:
            logger.exception("Error counting organization entities (org=%s)", organization_id)
            return storage_failure("Failed to fetch organization statistics")

        return success(stats)
