# orgrbac/shared/exceptions.py
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """HTTP error rendered as {"error": {"message", "code", "statusCode"}}."""

    def __init__(
        self,
        status_code: int,
        message: str,
        code: str,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.extra = extra or {}

    def to_body(self) -> Dict[str, Any]:
        return {
            "error": {
                "message": self.detail,
                "code": self.code,
                "statusCode": self.status_code,
                **self.extra,
            }
        }


# Authorization Exceptions
class AuthorizationDeniedError(ApiError):
    """Raised by route guards when the authorization gate denies a request."""


class RoleEscalationError(ApiError):
    def __init__(
        self, message: str = "Cannot assign a role higher than your own"
    ) -> None:
        super().__init__(status.HTTP_403_FORBIDDEN, message, "ROLE_ESCALATION")


# Resource Exceptions
class NotFoundError(ApiError):
    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(
            status.HTTP_404_NOT_FOUND, f"{resource} not found", "NOT_FOUND"
        )


class ConflictError(ApiError):
    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(status.HTTP_409_CONFLICT, message, "CONFLICT")


# Validation / Request Exceptions
class InvalidDataError(ApiError):
    def __init__(self, message: str = "Invalid request data") -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, message, "VALIDATION_ERROR")


class LastOwnerError(ApiError):
    def __init__(self, message: str = "Cannot remove the last owner") -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, message, "LAST_OWNER")


# Infrastructure Exceptions
class DatabaseError(ApiError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(
            status.HTTP_500_INTERNAL_SERVER_ERROR, message, "SERVICE_ERROR"
        )


class MembershipLookupError(Exception):
    """The membership store could not answer; distinct from "not a member"."""

    def __init__(self, user_id: str, organization_id: str, detail: str) -> None:
        super().__init__(
            f"Membership lookup failed for user {user_id} "
            f"in organization {organization_id}: {detail}"
        )
        self.user_id = user_id
        self.organization_id = organization_id
        self.detail = detail


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = ", ".join(str(error.get("msg", "Invalid value")) for error in exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=InvalidDataError(message).to_body(),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "message": "Internal server error",
                "code": "INTERNAL_ERROR",
                "statusCode": status.HTTP_500_INTERNAL_SERVER_ERROR,
            }
        },
    )
