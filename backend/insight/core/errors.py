"""Error Hierarchy: typed, categorized exceptions for every Insight failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Generation failures (transport, parse, schema) are recoverable by the store:
      they become the store's error string, never crash the process
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with InsightError base: FastAPI global handler catches all
    - ParseError/SchemaError are also carried as values inside validator results
      (core/result.py), so they are constructed without being raised
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERSISTENCE = "persistence"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    domain: str | None = None
    entity_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    retry_after_ms: int | None = None


class InsightError(Exception):
    """Base exception for all Insight errors."""

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
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "domain": self.context.domain,
                    "entity_id": self.context.entity_id,
                    "retry_after_ms": self.context.retry_after_ms,
                },
            }
        }


# ─── Generation Errors (caught at the store boundary) ───────────

class TransportError(InsightError):
    """Inference service unreachable, refused the call, or returned nothing."""
    def __init__(
        self,
        message: str,
        failure_code: str,
        retry_after_ms: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.retry_after_ms = retry_after_ms
        super().__init__(
            f"Generation service error ({failure_code}): {message}",
            "TRANSPORT_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, ctx, 502,
        )
        self.failure_code = failure_code


class ParseError(InsightError):
    """Generated text is not a parseable JSON object."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to parse AI response: {detail}",
            "PARSE_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.detail = detail


class SchemaError(InsightError):
    """Parsed reply violates the domain shape; names the offending field."""
    def __init__(self, field: str, reason: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid analysis data structure: '{field}' {reason}",
            "SCHEMA_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.field = field
        self.reason = reason


class GenerationInFlightError(InsightError):
    """Submit rejected because a generation is already running on this store."""
    def __init__(self, domain: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.domain = domain
        super().__init__(
            f"A generation is already in progress for '{domain}'",
            "GENERATION_IN_FLIGHT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )


# ─── Domain Errors ──────────────────────────────────────────────

class ResourceNotFoundError(InsightError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class DuplicateEntityError(InsightError):
    """Entity id already present in the collection."""
    def __init__(self, entity_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.entity_id = entity_id
        super().__init__(
            f"Entity '{entity_id}' already exists in collection",
            "DUPLICATE_ENTITY", ErrorCategory.CONFLICT,
            ErrorSeverity.CRITICAL, ctx, 409,
        )


# ─── Infrastructure Errors ──────────────────────────────────────

class PersistenceError(InsightError):
    """Persistent storage read or write failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Persistence {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.PERSISTENCE,
            ErrorSeverity.WARNING, context, 503,
        )
        self.operation = operation


class SnapshotDecodeError(InsightError):
    """Persisted snapshot is corrupt or in an unknown format."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Stored collection snapshot is unreadable: {detail}",
            "SNAPSHOT_CORRUPT", ErrorCategory.PERSISTENCE,
            ErrorSeverity.WARNING, context, 500,
        )
        self.detail = detail
