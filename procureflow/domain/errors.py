"""Domain Errors - Exception hierarchy mapped onto HTTP statuses"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """
    Base class for every error the service reports to a client

    Subclasses pin an error code and HTTP status; routes translate them with
    to_dict() into {"error": {"code", "message", "details"}}.
    """

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.error_code}: {self.message})"


# 401 / 403
class AuthenticationError(DomainError):
    """Bearer token missing, unverifiable, expired, or carrying bad claims"""
    error_code = "AUTHENTICATION_ERROR"
    http_status = 401


class AuthorizationError(DomainError):
    """Actor's role is not entitled at the request's current status"""
    error_code = "AUTHORIZATION_ERROR"
    http_status = 403


class PermissionDeniedError(AuthorizationError):
    """Ownership or role check outside the approval pipeline (create, view, edit)"""
    error_code = "PERMISSION_DENIED"


# 400
class ValidationError(DomainError):
    """Malformed input or an action/context combination that makes no sense"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class InvalidActionError(ValidationError):
    """Action verb is not one of approve / reject / clarify / forward"""
    error_code = "INVALID_ACTION"


class TransitionNotFoundError(ValidationError):
    """Authorized actor, but no rule routes this action from the current status"""
    error_code = "TRANSITION_NOT_FOUND"


# 404
class NotFoundError(DomainError):
    error_code = "NOT_FOUND"
    http_status = 404


class RequestNotFoundError(NotFoundError):
    error_code = "REQUEST_NOT_FOUND"


# 409
class ConflictError(DomainError):
    error_code = "CONFLICT"
    http_status = 409


class ConcurrencyError(ConflictError):
    """Request changed between load and write; reload and retry"""
    error_code = "CONCURRENCY_CONFLICT"


class InvalidStateError(ConflictError):
    """Edit or delete attempted while the request is under review"""
    error_code = "INVALID_STATE"
