from enum import Enum


class OrgRole(str, Enum):
    OWNER = "OWNER"
    MANAGER = "MANAGER"
    OPS = "OPS"
    DIRECTOR = "DIRECTOR"
    VIEWER = "VIEWER"
