"""Error Hierarchy: typed, categorized exceptions for all ReqDeck failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - ValidationWarning subclasses abort an operation before any mutation
    - ConversionFailure never leaves the coercion layer
    - PersistenceFailure never rolls back in-memory state
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with ReqDeckError base: FastAPI global handler catches all
    - ErrorContext as dataclass: addressing info for logs without coupling to logging
    - Severity doubles as notification severity so the shell can notify straight from an error
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
    CONVERSION = "conversion"
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERSISTENCE = "persistence"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Addressing context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    collection_id: str | None = None
    request_id: str | None = None
    table_kind: str | None = None
    row_index: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class ReqDeckError(Exception):
    """Base exception for all ReqDeck errors."""

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

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "recoverable": self.recoverable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "collection_id": self.context.collection_id,
                    "request_id": self.context.request_id,
                    "table_kind": self.context.table_kind,
                    "row_index": self.context.row_index,
                },
            }
        }


# ─── Validation Warnings (recoverable, zero mutation) ───────────

class ValidationWarning(ReqDeckError):
    """Operation rejected before mutating anything."""
    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_WARNING",
        severity: ErrorSeverity = ErrorSeverity.WARNING,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION, severity, context, 400,
        )


class IncompatibleDropError(ValidationWarning):
    """Body rows dropped on a flat table (or vice versa) where no coercion runs."""
    def __init__(
        self, source_kind: str, dest_kind: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Cannot drop {source_kind} item to {dest_kind} tab",
            "INCOMPATIBLE_DROP", ErrorSeverity.WARNING, context,
        )
        self.source_kind = source_kind
        self.dest_kind = dest_kind


class EmptyClipboardError(ValidationWarning):
    """Paste attempted with nothing on the clipboard."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No data in clipboard to paste",
            "CLIPBOARD_EMPTY", ErrorSeverity.INFO, context,
        )


class NothingSelectedError(ValidationWarning):
    """Copy attempted with an empty selection."""
    def __init__(self, what: str = "items", context: ErrorContext | None = None):
        super().__init__(
            f"No {what} selected to copy",
            "NOTHING_SELECTED", ErrorSeverity.INFO, context,
        )


class EmptyKeyError(ValidationWarning):
    """A non-trailing row's key was cleared; only the sentinel may have an empty key."""
    def __init__(self, row_index: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.row_index = row_index
        super().__init__(
            f"Row {row_index + 1} needs a key. Delete the row instead of clearing its key.",
            "EMPTY_KEY", ErrorSeverity.WARNING, ctx,
        )


class RowIndexError(ValidationWarning):
    """A row address points past the end of its table (stale UI state)."""
    def __init__(self, table_kind: str, row_index: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.table_kind = table_kind
        ctx.row_index = row_index
        super().__init__(
            f"Row {row_index} does not exist in {table_kind}",
            "ROW_OUT_OF_RANGE", ErrorSeverity.WARNING, ctx,
        )


class MalformedRawTableError(ValidationWarning):
    """Raw JSON editor content could not be parsed into rows."""
    def __init__(self, table_kind: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.table_kind = table_kind
        super().__init__(
            f"Invalid JSON for {table_kind}; table left unchanged",
            "MALFORMED_RAW_TABLE", ErrorSeverity.WARNING, ctx,
        )


class NoActiveRequestError(ValidationWarning):
    """An operation needs an active request but none is displayed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No request is open", "NO_ACTIVE_REQUEST",
            ErrorSeverity.WARNING, context,
        )


# ─── Conversion ─────────────────────────────────────────────────

class ConversionFailure(ReqDeckError):
    """Text could not be decoded as JSON. Caught inside the coercion layer."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONVERSION_FAILURE", ErrorCategory.CONVERSION,
            ErrorSeverity.INFO, context, 422,
        )


class PasteConversionError(ReqDeckError):
    """A clipboard item could not be converted for the destination table."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Failed to paste data: {message}",
            "PASTE_CONVERSION_FAILED", ErrorCategory.CONVERSION,
            ErrorSeverity.ERROR, context, 422,
        )


# ─── Lookup ─────────────────────────────────────────────────────

class ResourceNotFoundError(ReqDeckError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


# ─── Infrastructure ─────────────────────────────────────────────

class PersistenceFailure(ReqDeckError):
    """Loading or saving the workspace document failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Persistence {operation} failed: {message}",
            "PERSISTENCE_FAILURE", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
