"""
Expected failure modes of an admin action.

Services raise these from inside an action; the action envelope turns them
into a failed ActionResult and the HTTP adapter maps the code to a status.
"""
import enum
from typing import Any, Optional


class ErrorCode(str, enum.Enum):
    VALIDATION = "validation_error"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    DATABASE = "database_error"
    UNEXPECTED = "unexpected_error"


class ActionError(Exception):
    """
    Base class for expected, user-visible failures.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code.
        details: Optional structured context returned to the caller.
    """

    code = ErrorCode.CONFLICT

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(ActionError):
    """Target entity does not exist"""
    code = ErrorCode.NOT_FOUND


class ConflictError(ActionError):
    """Domain rule violation: already published, has dependents, already exists"""
    code = ErrorCode.CONFLICT


class ForbiddenError(ActionError):
    """Authenticated actor may not act on this particular entity"""
    code = ErrorCode.FORBIDDEN


class InvalidInputError(ActionError):
    """Input passed schema validation but breaks a cross-field rule"""
    code = ErrorCode.VALIDATION
