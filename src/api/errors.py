# normalized failures raised out of the api package
from typing import Dict, Optional


class ApiError(Exception):
    """
    Base for every failure a remote call (or the local gate in front of it)
    can produce. `message` is safe to show to the user.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class ValidationError(ApiError):
    """Form input rejected, either before sending or by the backend (400)."""

    def __init__(
        self,
        message: str,
        field_errors: Optional[Dict[str, str]] = None,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(message, status)
        self.field_errors = dict(field_errors or {})


class AuthorizationError(ApiError):
    """401, the credential is missing, expired or invalid."""


class PermissionDeniedError(ApiError):
    """Admin-only operation attempted without an admin session, or a 403."""


class RequestRejectedError(ApiError):
    """Any other 4xx, e.g. purchasing more than is in stock."""


class NotFoundError(RequestRejectedError):
    pass


class ServiceUnavailableError(ApiError):
    """5xx, timeout, or the backend could not be reached at all."""
