"""
Error taxonomy shared by every marketplace service.

Services raise these; the DRF exception handler in project.utils renders them
with the standardized response envelope. None of them is retried by the core.
"""
from rest_framework import status


class MarketplaceError(Exception):
    """Base class for deterministic, caller-facing failures"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed"

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class NotFound(MarketplaceError):
    """An entity id does not resolve"""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class AuthorizationError(MarketplaceError):
    """The actor lacks the role or ownership the transition requires"""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class ConflictError(MarketplaceError):
    """Uniqueness violation or illegal state transition"""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflicting state"


class ValidationError(MarketplaceError):
    """Malformed input, rejected before any store interaction"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation failed"
