from enum import Enum

from enums.org_role import OrgRole


class Operation(str, Enum):
    LIST_OCCUPANCIES = "list_occupancies"
    CREATE_OCCUPANCY = "create_occupancy"
    UPDATE_OCCUPANCY = "update_occupancy"
    DELETE_OCCUPANCY = "delete_occupancy"
    VIEW_REPORTS = "view_reports"
    VIEW_STATS = "view_stats"


ALL_ROLES = frozenset(OrgRole)
WRITE_ROLES = frozenset({OrgRole.OWNER, OrgRole.MANAGER, OrgRole.OPS})
OWNER_ONLY = frozenset({OrgRole.OWNER})

CAPABILITIES = {
    Operation.LIST_OCCUPANCIES: ALL_ROLES,
    Operation.CREATE_OCCUPANCY: WRITE_ROLES,
    Operation.UPDATE_OCCUPANCY: WRITE_ROLES,
    Operation.DELETE_OCCUPANCY: OWNER_ONLY,
    Operation.VIEW_REPORTS: ALL_ROLES,
    Operation.VIEW_STATS: ALL_ROLES,
}

DENIAL_MESSAGES = {
    Operation.DELETE_OCCUPANCY: "Only organization owners can delete occupancies",
}


def is_allowed(operation: Operation, role) -> bool:
    """Check the capability table. Unknown roles are never allowed."""
    try:
        role = OrgRole(role)
    except ValueError:
        return False
    return role in CAPABILITIES.get(operation, frozenset())


def denial_message(operation: Operation) -> str:
    return DENIAL_MESSAGES.get(operation, "Insufficient permissions")
