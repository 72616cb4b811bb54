from pydantic import BaseModel
from typing import Generic, Optional, TypeVar

from enums.error_code import ErrorCode

DataT = TypeVar("DataT")


class ServiceError(BaseModel):
    code: ErrorCode
    message: str


class ServiceResult(BaseModel, Generic[DataT]):
    """Envelope returned by every service entry point.

    Exactly one of ``data`` and ``error`` is set, except for operations
    with no payload (deletes), which succeed with both unset.
    """

    data: Optional[DataT] = None
    error: Optional[ServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def success(data=None) -> ServiceResult:
    return ServiceResult(data=data)


def failure(code: ErrorCode, message: str) -> ServiceResult:
    return ServiceResult(error=ServiceError(code=code, message=message))


def unauthenticated() -> ServiceResult:
    return failure(ErrorCode.UNAUTHENTICATED, "Not authenticated")


def storage_failure(message: str) -> ServiceResult:
    return failure(ErrorCode.STORAGE_ERROR, message)
