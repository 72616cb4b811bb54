import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional

from database.models.user_model import User
from enums.error_code import ErrorCode
from enums.org_role import OrgRole
from schemas.org_schema import OrgContext
from schemas.result_schema import ServiceResult, failure, success, unauthenticated
from services.ledger_store import LedgerStore
from utils.permissions import Operation, denial_message, is_allowed

logger = logging.getLogger(__name__)

ORG_ACCESS_DENIED = "Organization not found or access denied"


def get_org_context(db: Session, user_id: str, org_slug: str) -> ServiceResult[OrgContext]:
    """
    Resolve a user's membership in the organization identified by slug.

    An unknown slug and a missing membership are reported identically so
    that callers cannot discover organizations they do not belong to.
    """
    if not org_slug:
        return failure(ErrorCode.ORG_RESOLUTION_FAILED, ORG_ACCESS_DENIED)
    try:
        membership = LedgerStore(db).find_membership(user_id, org_slug)
    except SQLAlchemyError:
        logger.exception("Error resolving organization %r for user %s", org_slug, user_id)
        return failure(ErrorCode.ORG_RESOLUTION_FAILED, ORG_ACCESS_DENIED)

    if membership is None:
        return failure(ErrorCode.ORG_RESOLUTION_FAILED, ORG_ACCESS_DENIED)

    try:
        role = OrgRole(membership.role)
    except ValueError:
        logger.warning("Membership %s carries unknown role %r", membership.id, membership.role)
        return failure(ErrorCode.ORG_RESOLUTION_FAILED, ORG_ACCESS_DENIED)

    return success(OrgContext(organization_id=membership.organization_id, role=role))


def authorize_org_action(
    db: Session, user: Optional[User], org_slug: str, operation: Operation
) -> ServiceResult[OrgContext]:
    """Authenticate, resolve the org context and check the role, in that order."""
    if user is None:
        return unauthenticated()

    context = get_org_context(db, user.id, org_slug)
    if context.error is not None:
        return context

    if not is_allowed(operation, context.data.role):
        return failure(ErrorCode.INSUFFICIENT_PERMISSIONS, denial_message(operation))

    return context
