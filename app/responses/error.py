from fastapi import status
from .base import build_response


def bad_request_error(error: str = "Bad request", code: str = "bad_request"):
    return build_response(
        status.HTTP_400_BAD_REQUEST,
        "failure",
        error=code,
        message=error,
    )


def not_found_error(error: str = "Resource not found", code: str = "not_found"):
    return build_response(
        status.HTTP_404_NOT_FOUND,
        "failure",
        error=code,
        message=error,
    )


def unauthorized_error(error: str = "Not authenticated", code: str = "unauthorized"):
    return build_response(
        status.HTTP_401_UNAUTHORIZED,
        "failure",
        error=code,
        message=error,
    )


def internal_server_error(error: str = "Internal server error", code: str = "internal_server_error"):
    return build_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "failure",
        error=code,
        message=error,
    )


def forbidden_error(error: str = "Access denied", code: str = "forbidden"):
    return build_response(
        status.HTTP_403_FORBIDDEN,
        "failure",
        error=code,
        message=error,
    )
