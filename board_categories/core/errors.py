"""Error Hierarchy — typed, categorized exceptions for all category failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - Errors carry the scope (user_id, team_id, category_id) in ErrorContext
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BoardsError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERMISSION_DENIED = "permission_denied"
    PROTECTED_ENTITY = "protected_entity"
    INTEGRITY = "integrity"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Scope identifiers and debug data attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    team_id: str | None = None
    category_id: str | None = None
    debug_info: dict[str, Any] | None = None


class BoardsError(Exception):
    """Base exception for all category errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "user_id": self.context.user_id,
                    "team_id": self.context.team_id,
                    "category_id": self.context.category_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidCategoryError(BoardsError):
    """Category failed structural validation or targets the wrong team."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_CATEGORY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class CategoryNotFoundError(BoardsError):
    """Category does not exist, or does not exist for this user and team."""
    def __init__(self, category_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.category_id = category_id
        message = f"Category '{category_id}' not found"
        if ctx.user_id:
            message += f" for userID: {ctx.user_id}, teamID: {ctx.team_id}"
        super().__init__(
            message,
            "CATEGORY_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class BoardNotInCategoryError(BoardsError):
    """Board ID in a board reorder request is not in the category."""
    def __init__(self, board_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Board '{board_id}' does not belong to category",
            "BOARD_NOT_IN_CATEGORY", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.board_id = board_id


class CategoryPermissionDeniedError(BoardsError):
    """Category belongs to another user or team."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Category doesn't belong to user",
            "CATEGORY_PERMISSION_DENIED", ErrorCategory.PERMISSION_DENIED,
            ErrorSeverity.ERROR, context, 403,
        )


class CategoryDeletedError(BoardsError):
    """Update targeted a soft-deleted category."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Category is deleted",
            "CATEGORY_DELETED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class CannotDeleteSystemCategoryError(BoardsError):
    """Delete targeted a system category."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Cannot delete a system category",
            "SYSTEM_CATEGORY_PROTECTED", ErrorCategory.PROTECTED_ENTITY,
            ErrorSeverity.ERROR, context, 400,
        )


class CategoriesLengthMismatchError(BoardsError):
    """Reorder request size differs from the stored set."""
    def __init__(
        self, new_length: int, existing_length: int,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        super().__init__(
            "Cannot update category order, passed list of categories different "
            f"size than in database. length new categories: {new_length}, "
            f"length existing categories: {existing_length}, "
            f"userID: {ctx.user_id}, teamID: {ctx.team_id}",
            "CATEGORIES_LENGTH_MISMATCH", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.new_length = new_length
        self.existing_length = existing_length


class DuplicateCategoryIdError(BoardsError):
    """Reorder request lists the same ID more than once."""
    def __init__(self, duplicate_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"ID '{duplicate_id}' specified more than once in new order",
            "DUPLICATE_CATEGORY_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.duplicate_id = duplicate_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class NoDefaultCategoryError(BoardsError):
    """User scope has no default category. Indicates corrupt data."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No default category found for user",
            "NO_DEFAULT_CATEGORY", ErrorCategory.INTEGRITY,
            ErrorSeverity.CRITICAL, context, 500,
        )


class DatabaseError(BoardsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class IntegrityConflictError(DatabaseError):
    """Write rejected by a unique constraint."""
    def __init__(self, operation: str, context: ErrorContext | None = None):
        super().__init__("Integrity constraint violated", operation, context)
        self.code = "INTEGRITY_CONFLICT"
        self.category = ErrorCategory.INTEGRITY
        self.severity = ErrorSeverity.ERROR
        self.http_status = 409


class ConcurrencyError(BoardsError):
    """Concurrent modification detected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
