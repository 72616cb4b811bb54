from enum import Enum


class ErrorCode(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    ORG_RESOLUTION_FAILED = "org_resolution_failed"
    INSUFFICIENT_PERMISSIONS = "insufficient_permissions"
    VALIDATION_ERROR = "validation_error"
    INVALID_DATE_RANGE = "invalid_date_range"
    NOT_FOUND = "not_found"
    STORAGE_ERROR = "storage_error"
