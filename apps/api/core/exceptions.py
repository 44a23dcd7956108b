"""
Custom exception classes and error handling.

Provides consistent, renderable errors across the progression engine:
- ValidationError: malformed input to a value object constructor
- BusinessRuleViolation: an operation the domain rules reject
- ForbiddenError / ConflictError: application-level outcomes

None of these are transient; callers must not retry them.
"""
from typing import Optional


class DomainException(Exception):
    """Base domain exception with consistent structure."""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code


class ValidationError(DomainException):
    """Validation error."""

    def __init__(self, detail: str, field: Optional[str] = None):
        error_code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(detail=detail, error_code=error_code)
        self.field = field


class BusinessRuleViolation(DomainException):
    """
    A domain rule rejected the operation.

    `rule` names the rule that failed (e.g. "workout_not_active") and
    `entity` identifies what it failed on, so the caller can render a
    user-facing message.
    """

    def __init__(self, rule: str, detail: str, entity: Optional[str] = None):
        super().__init__(detail=detail, error_code=f"RULE_{rule.upper()}")
        self.rule = rule
        self.entity = entity


class ForbiddenError(DomainException):
    """Access denied."""

    def __init__(self, detail: str = "Access denied"):
        super().__init__(detail=detail, error_code="FORBIDDEN")


class ConflictError(DomainException):
    """Resource conflict (e.g., duplicate entry)."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, error_code="CONFLICT")


class ConcurrencyConflictError(ConflictError):
    """A stale copy of an aggregate was saved over a newer version."""

    def __init__(self, resource: str, identifier: str, expected: int, actual: int):
        super().__init__(
            detail=(
                f"{resource} {identifier} was modified concurrently "
                f"(expected version {expected}, found {actual})"
            )
        )
        self.expected_version = expected
        self.actual_version = actual
