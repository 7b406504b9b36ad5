"""
More Than Trip Core — Exception Hierarchy
===========================================

What:  Application-specific exceptions for every error scenario.
Why:   Services raise typed errors; global handlers in main.py turn them into
       HTTP responses with the right status code and a consistent body.
How:   Each exception carries a client-safe message and a context dict that
       is logged server-side.

Exception Hierarchy:
    MoreThanTripError (base)
    ├── InvalidInputError        → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    ├── DatabaseError            → 500 Internal Server Error
    │   └── ForeignKeyViolationError   (raised by repositories)
    ├── BlobStoreFailure         → 500 Internal Server Error
    ├── MetadataStoreFailure     → 500 Internal Server Error
    └── DeadlineExceededError    → 504 Gateway Timeout

Upload error kinds:
    The ingest workflow can fail in exactly four ways, listed in
    UploadErrorKind. The upload-related exceptions expose their kind so
    callers can switch on it instead of comparing messages.
"""

from enum import Enum
from typing import Any, Dict, Optional


class UploadErrorKind(str, Enum):
    """Closed set of outcomes other than success for a photo upload."""

    INVALID_INPUT = "invalid_input"
    BLOB_STORE_FAILURE = "blob_store_failure"
    METADATA_STORE_FAILURE = "metadata_store_failure"
    DEADLINE_EXCEEDED = "deadline_exceeded"


class MetadataFailureReason(str, Enum):
    """Why the metadata insert failed after the blob was written."""

    UNKNOWN_REFERENCE = "unknown_reference"
    WRITE_FAILED = "write_failed"


class MoreThanTripError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only where the
                  handler explicitly allows it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class InvalidInputError(MoreThanTripError):
    """
    Raised when client input fails validation.

    When:  Missing multipart parts, unparseable metadata JSON, empty or
           oversized file, unknown foreign keys on plain CRUD writes.
    HTTP:  400 Bad Request

    Detected before any store is touched on the upload path.
    """

    kind = UploadErrorKind.INVALID_INPUT

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(MoreThanTripError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing records; services convert that into
    this exception so routes stay free of None checks.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(MoreThanTripError):
    """Raised when a unique constraint (region name, username, tag name) is violated."""

    def __init__(
        self,
        message: str = "The resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(MoreThanTripError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. Constraint
        names and SQL live in context and are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForeignKeyViolationError(DatabaseError):
    """
    Raised by repositories when a row references a region, trip, user or
    tag that does not exist.

    Kept distinct from the generic DatabaseError so callers can tell "bad
    reference from the client" apart from "the database is unwell".
    """

    def __init__(
        self,
        message: str = "A referenced record does not exist",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class BlobStoreFailure(MoreThanTripError):
    """
    The blob write failed; nothing was persisted.

    Safe for the client to retry the whole upload.
    HTTP: 500 Internal Server Error
    """

    kind = UploadErrorKind.BLOB_STORE_FAILURE

    def __init__(
        self,
        message: str = "Failed to store the photo. Please try again.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MetadataStoreFailure(MoreThanTripError):
    """
    The blob write succeeded but the metadata insert failed.

    The blob is now orphaned: it sits in the bucket with no photo row
    pointing at it. No compensating delete is issued, so a blind retry
    creates a second orphan. Cleanup needs a reconciliation sweep over the
    bucket.

    HTTP: 500 Internal Server Error
    """

    kind = UploadErrorKind.METADATA_STORE_FAILURE

    def __init__(
        self,
        message: str = "The photo was uploaded but its details could not be saved.",
        reason: MetadataFailureReason = MetadataFailureReason.WRITE_FAILED,
        orphaned_key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["reason"] = reason.value
        if orphaned_key:
            ctx["orphaned_key"] = orphaned_key
        super().__init__(message=message, context=ctx)
        self.reason = reason
        self.orphaned_key = orphaned_key


class DeadlineExceededError(MoreThanTripError):
    """
    The upload did not finish within the configured deadline.

    The store calls may still complete after the response is sent; their
    result is discarded.
    HTTP: 504 Gateway Timeout
    """

    kind = UploadErrorKind.DEADLINE_EXCEEDED

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The upload did not complete within {timeout_seconds:g} seconds."
        ctx = context or {}
        ctx["timeout_seconds"] = timeout_seconds
        super().__init__(message=message, context=ctx)
        self.timeout_seconds = timeout_seconds
