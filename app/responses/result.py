from enums.error_code import ErrorCode
from schemas.result_schema import ServiceResult
from .error import (
    bad_request_error,
    forbidden_error,
    internal_server_error,
    not_found_error,
    unauthorized_error,
)
from .success import data_response, success_response

ERROR_RESPONSES = {
    ErrorCode.UNAUTHENTICATED: unauthorized_error,
    ErrorCode.ORG_RESOLUTION_FAILED: forbidden_error,
    ErrorCode.INSUFFICIENT_PERMISSIONS: forbidden_error,
    ErrorCode.VALIDATION_ERROR: bad_request_error,
    ErrorCode.INVALID_DATE_RANGE: bad_request_error,
    ErrorCode.NOT_FOUND: not_found_error,
    ErrorCode.STORAGE_ERROR: internal_server_error,
}


def result_response(result: ServiceResult, message: str = None):
    """Render a service envelope; the error code becomes the ``error`` field."""
    if result.error is not None:
        respond = ERROR_RESPONSES.get(result.error.code, internal_server_error)
        return respond(result.error.message, code=result.error.code.value)
    if message is not None:
        return success_response(message=message, data=result.data)
    return data_response(result.data)
