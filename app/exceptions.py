from typing import Any, Mapping, Optional


class LedgerError(Exception):
    """Base class for the typed failures returned across the ledger boundary.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (ids, dates, bounds)
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 400
    default_code = "LEDGER_ERROR"

    def __init__(self, message: str = "Ledger error", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ConstraintViolation(LedgerError):
    """Raised when a write would break a value bound (quantity outside 1..3)."""

    http_status = 400
    default_code = "CONSTRAINT_VIOLATION"


class DuplicateKey(LedgerError):
    """Raised when a write collides with a uniqueness constraint.

    Covers the (student, release date) pair of a permission and the
    registration code of a student.
    """

    http_status = 409
    default_code = "DUPLICATE_KEY"


class AlreadyDeliveredOrNotFound(LedgerError):
    """Raised when a delivery confirmation matched no pending permission."""

    http_status = 400
    default_code = "ALREADY_DELIVERED_OR_NOT_FOUND"


class PermissionLocked(LedgerError):
    """Raised when updating or deleting a permission that was already delivered."""

    http_status = 409
    default_code = "PERMISSION_LOCKED"


class UnknownStudent(LedgerError):
    """Raised when a permission references a student the directory does not hold."""

    http_status = 404
    default_code = "UNKNOWN_STUDENT"


class StudentInUse(LedgerError):
    """Raised when deleting a student that permissions still reference."""

    http_status = 409
    default_code = "STUDENT_IN_USE"


class StoreUnavailable(LedgerError):
    """Raised when the backing store is unreachable, times out or errors."""

    http_status = 503
    default_code = "STORE_UNAVAILABLE"


class NotFoundError(LedgerError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_code = "NOT_FOUND"
