# linkforge/core/errors.py
"""
Service-level exceptions.

Routers translate policy decisions and ordering results themselves; these
exceptions cover the cases a service cannot express as a return value
(missing rows on the write path, storage outages). main.py renders every
ServiceError as {"detail": {"code": ..., "message": ...}}, the same shape
routers produce with HTTPException(detail={...}).
"""
from fastapi import status


class ServiceError(Exception):
    """Base class for all service exceptions."""
    code = "SERVICE_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "", code: str | None = None):
        self.message = message or self.code
        if code:
            self.code = code
        super().__init__(self.message)


class NotFound(ServiceError):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND


class ProfileNotFound(NotFound):
    code = "PROFILE_NOT_FOUND"


class Conflict(ServiceError):
    code = "CONFLICT"
    status_code = status.HTTP_409_CONFLICT


class ValidationFailed(ServiceError):
    """Input that passed the request schema but not a model constraint."""
    code = "VALIDATION_ERROR"
    status_code = 422


class StoreUnavailable(ServiceError):
    """Timeout or connection failure talking to the database."""
    code = "TRANSIENT_STORE_ERROR"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
