"""Error Hierarchy — typed, categorized exceptions for all CRM failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory) and http_status
    - to_response() produces the wire envelope {"message": str} and nothing else
    - Credential failures share one message regardless of the failing check
    - No stack traces or internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CrmError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - Validation errors carry per-field reasons so the message names the field
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """High-level error categories for routing and logging."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass(frozen=True)
class FieldViolation:
    """One violated schema rule, addressed by its wire field name."""
    field: str
    reason: str


class CrmError(Exception):
    """Base exception for all CRM errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {"message": self.message}


# ─── Request Errors (400-level) ─────────────────────────────────

class RequestValidationFailed(CrmError):
    """Input violated the request schema. Nothing was persisted."""
    def __init__(self, violations: list[FieldViolation]):
        super().__init__(
            format_violations(violations), "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, 400,
        )
        self.violations = violations


class InvalidIdentifierError(CrmError):
    """Path identifier is not a valid integer id."""
    def __init__(self, label: str = "ID"):
        super().__init__(
            f"Invalid {label}", "INVALID_ID", ErrorCategory.VALIDATION, 400,
        )


class InvalidCredentialsError(CrmError):
    """Unknown username, inactive account or wrong password — deliberately indistinguishable."""
    def __init__(self):
        super().__init__(
            "Invalid username or password", "INVALID_CREDENTIALS",
            ErrorCategory.AUTHENTICATION, 401,
        )


class UnauthorizedError(CrmError):
    """No session, or the session expired or was revoked."""
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION, 401,
        )


class ForbiddenError(CrmError):
    """Authenticated, but the role does not permit the operation."""
    def __init__(self):
        super().__init__(
            "Forbidden", "FORBIDDEN", ErrorCategory.AUTHORIZATION, 403,
        )


class ResourceNotFoundError(CrmError):
    """Requested entity does not exist."""
    def __init__(self, resource_type: str, resource_id: int | None = None):
        super().__init__(
            f"{resource_type} not found", "RESOURCE_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class UsernameTakenError(CrmError):
    """Admin.username is globally unique."""
    def __init__(self, username: str):
        super().__init__(
            f"Username '{username}' is already taken", "USERNAME_TAKEN",
            ErrorCategory.CONFLICT, 400,
        )


class AdminDeactivationRefused(CrmError):
    """Deactivation would lock the caller out or leave no active admin."""
    def __init__(self, reason: str):
        super().__init__(
            reason, "ADMIN_DEACTIVATION_REFUSED", ErrorCategory.CONFLICT, 400,
        )


class SchemaMismatchError(CrmError):
    """Store schema no longer matches what the caller submitted."""
    def __init__(self):
        super().__init__(
            "The client schema has changed. Please refresh the page and try again.",
            "SCHEMA_MISMATCH", ErrorCategory.CONFLICT, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(CrmError):
    """Database operation failed for an unrecognised reason."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Database {operation} failed: {message}", "DATABASE_ERROR",
            ErrorCategory.DATABASE, 500,
        )
        self.operation = operation


def format_violations(violations: list[FieldViolation]) -> str:
    """Render violations as one human-readable line, one clause per field."""
    if not violations:
        return "Validation error"
    clauses = [f'{v.reason} at "{v.field}"' for v in violations]
    return "Validation error: " + "; ".join(clauses)
