"""Error Hierarchy — the few things that can actually go wrong on a local board.

Invariants:
    - Expected rejections (blank name, campaign cap, missing link) are NOT errors:
      domain operations return the unchanged snapshot instead of raising
    - Every OpsMapError has a stable code, a category and a severity
    - A TransferFormatError always carries the user-facing reason; nothing is partially imported
    - Storage errors are CRITICAL (not recoverable by retrying the same call)

Design Decisions:
    - Subclasses declare code/category/severity as class attributes; the base
      constructor only takes the message and optional context
    - ErrorContext as dataclass: structured detail for logs without importing logging here
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    STORAGE = "storage"


class ErrorSeverity(str, Enum):
    ERROR = "error"
    CRITICAL = "critical"


@dataclass
class ErrorContext:
    """Where the error happened and what to show the user."""
    operation: str | None = None
    entity_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class OpsMapError(Exception):
    """Base exception for Ops Map failures."""

    code: str = "OPS_MAP_ERROR"
    category: ErrorCategory = ErrorCategory.VALIDATION
    severity: ErrorSeverity = ErrorSeverity.ERROR

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()

    @property
    def recoverable(self) -> bool:
        return self.severity is not ErrorSeverity.CRITICAL

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "recoverable": self.recoverable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "entity_id": self.context.entity_id,
                },
            }
        }


class TransferFormatError(OpsMapError):
    """Import rejected: bad JSON, wrong envelope, or malformed state."""
    code = "TRANSFER_FORMAT_ERROR"

    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(reason, context)
        self.reason = reason


class UnknownLayoutStrategyError(OpsMapError):
    code = "UNKNOWN_LAYOUT_STRATEGY"
    category = ErrorCategory.CONFIGURATION

    def __init__(self, name: object, known: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Unknown layout strategy {name!r}. Expected one of: {', '.join(known)}", context,
        )
        self.name = name


class SnapshotStoreError(OpsMapError):
    """Reading or writing the stored board failed."""
    code = "SNAPSHOT_STORE_ERROR"
    category = ErrorCategory.STORAGE
    severity = ErrorSeverity.CRITICAL

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        context = context or ErrorContext()
        context.operation = context.operation or operation
        super().__init__(f"Snapshot store {operation} failed: {message}", context)
        self.operation = operation
