"""
Error taxonomy for the assessment and progression engine.

NotFound / InvalidInput are data errors and always reach the caller.
ExternalServiceError is raised inside the advisory client only and is
replaced by a fallback value before it leaves that module.
"""

from typing import Optional

from pydantic import BaseModel


class CogniError(Exception):
    """Base class for platform errors."""


class NotFoundError(CogniError, LookupError):
    """A referenced user, exam, content, step or attempt does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")


class InvalidInputError(CogniError, ValueError):
    """Out-of-range score, malformed scenario transition, bad answer shape."""


class GradeConflictError(InvalidInputError):
    """An already graded attempt was re-graded with a different score."""


class DuplicateEmailError(InvalidInputError):
    """Registration with an email that already exists."""


class PermissionDeniedError(CogniError):
    """The access gate or a role check refused the operation."""


class ExternalServiceError(CogniError):
    """The advisory text service was unreachable or returned garbage."""


class AuthFailure(BaseModel):
    """Returned (not raised) when credentials do not match."""

    reason: str = "invalid_credentials"
    email: Optional[str] = None
