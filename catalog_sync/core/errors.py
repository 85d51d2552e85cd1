"""Error Hierarchy: typed, categorized exceptions for every catalog-sync failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error maps to one MessageKey, localized only when rendered
    - Domain errors (400-level) are the caller's problem; infrastructure errors (500-level) are ours
    - to_response() never leaks internal details into the user-facing message

Design Decisions:
    - Single hierarchy with CatalogSyncError base: the FastAPI global handler catches all
    - ErrorContext carries the affected entity identifiers for logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from catalog_sync.core.domain_types import Locale, ReferenceKind, RemoteService
from catalog_sync.core.message_strings import MessageKey, get_message


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
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Identifiers of the entity an error concerns."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    publication_id: str | None = None
    isbn: str | None = None
    product_id: int | None = None
    order_id: str | None = None
    debug_info: dict[str, Any] | None = None

    def as_log_extra(self) -> dict[str, Any]:
        """Non-empty identifiers, ready for logger(..., extra=...)."""
        return {
            key: value for key, value in (
                ("publication_id", self.publication_id),
                ("isbn", self.isbn),
                ("product_id", self.product_id),
                ("order_id", self.order_id),
            ) if value is not None
        }


class CatalogSyncError(Exception):
    """Base exception for all catalog-sync errors."""

    message_key: MessageKey = MessageKey.UNEXPECTED

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

    def user_message(self, locale: str | Locale | None = None) -> str:
        return get_message(self.message_key, locale)

    def to_response(self, locale: str | Locale | None = None) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.user_message(locale),
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "product_id": self.context.product_id,
                    "order_id": self.context.order_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(CatalogSyncError):
    """Referenced publication or sale does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.message_key = (
            MessageKey.SALE_NOT_FOUND if resource_type == "Sale"
            else MessageKey.PRODUCT_NOT_FOUND
        )


class StaleMetadataError(CatalogSyncError):
    """Rights service reports the publication metadata is out of date."""
    message_key = MessageKey.PRODUCT_DATA_UPDATED

    def __init__(self, isbn: str, context: ErrorContext | None = None):
        super().__init__(
            f"Publication metadata for ISBN {isbn} is stale",
            "STALE_METADATA", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 409,
        )
        self.isbn = isbn


class RemoteRejectedError(CatalogSyncError):
    """A remote service answered with an unexpected status."""

    def __init__(
        self,
        service: RemoteService,
        operation: str,
        status_code: int,
        message_key: MessageKey = MessageKey.STOREFRONT_REJECTED,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{service.value} {operation} returned HTTP {status_code}",
            "REMOTE_REJECTED", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 400,
        )
        self.service = service
        self.operation = operation
        self.status_code = status_code
        self.message_key = message_key


class SaleTokenExpiredError(CatalogSyncError):
    """Sale token presented after its download window closed."""
    message_key = MessageKey.DOWNLOAD_EXPIRED

    def __init__(self, expired_at: datetime, context: ErrorContext | None = None):
        super().__init__(
            f"Download window closed at {expired_at.isoformat()}",
            "SALE_TOKEN_EXPIRED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.expired_at = expired_at


class SaleAlreadyDownloadedError(CatalogSyncError):
    """Sale token was already exchanged for a download URL."""
    message_key = MessageKey.DOWNLOAD_ALREADY_USED

    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Sale was already downloaded",
            "SALE_ALREADY_DOWNLOADED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class DuplicateSaleError(CatalogSyncError):
    """A sale for the same order id is already registered."""
    message_key = MessageKey.SALE_ALREADY_REGISTERED

    def __init__(self, order_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Sale for order '{order_id}' already registered",
            "DUPLICATE_SALE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.order_id = order_id


class UnreconciledReferenceError(CatalogSyncError):
    """Publication references a tag or category with no remote id."""
    message_key = MessageKey.REFERENCE_NOT_RECONCILED

    def __init__(
        self, kind: ReferenceKind, key: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{kind.value} '{key}' has no remote identifier",
            "UNRECONCILED_REFERENCE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.kind = kind
        self.key = key


class InvalidCatalogDataError(CatalogSyncError):
    """Publication carries a code or amount the rights service has no term for."""
    message_key = MessageKey.INVALID_PRODUCT_DATA

    def __init__(self, isbn: str, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Publication {isbn} has invalid catalog data: {detail}",
            "INVALID_CATALOG_DATA", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 422,
        )
        self.isbn = isbn
        self.detail = detail


# ─── Infrastructure Errors (500-level) ──────────────────────────

class RemoteTransportError(CatalogSyncError):
    """The remote call itself failed (connection, timeout, bad payload)."""
    message_key = MessageKey.SERVICE_UNAVAILABLE

    def __init__(
        self,
        service: RemoteService,
        operation: str,
        message: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{service.value} {operation} failed: {message}",
            "REMOTE_TRANSPORT_FAILURE", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.service = service
        self.operation = operation


class ReconciliationError(CatalogSyncError):
    """Tag/category reconciliation left entities without remote ids."""
    message_key = MessageKey.SYNCHRONIZATION_FAILED

    def __init__(self, failed: list[tuple[ReferenceKind, str]], context: ErrorContext | None = None):
        names = ", ".join(f"{kind.value}:{key}" for kind, key in failed)
        super().__init__(
            f"Reconciliation failed for {len(failed)} entities ({names})",
            "RECONCILIATION_FAILED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.failed = failed


class DatabaseError(CatalogSyncError):
    """Database operation failed."""
    message_key = MessageKey.STORAGE_UNAVAILABLE

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
