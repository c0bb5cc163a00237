"""Error taxonomy shared by the gateway, the services and the HTTP layer.

Every error carries a user-facing message and converts to an
``HTTPException`` so route handlers can re-raise it unchanged.
"""

from typing import Any

from fastapi import HTTPException, status


class GatewayError(Exception):
    """Base class for failures reported by the gateway or the services."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def code(self) -> str:
        return self.__class__.__name__

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class AuthError(GatewayError):
    """Bad credentials, or a missing, expired or revoked session."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ValidationError(GatewayError):
    """Malformed create/update payload."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateError(GatewayError):
    """A unique key is already taken (email, booked slot)."""

    status_code = status.HTTP_409_CONFLICT


class NetworkError(GatewayError):
    """The data store could not be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class NotFoundError(GatewayError):
    status_code = status.HTTP_404_NOT_FOUND
