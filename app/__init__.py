"""
App package - Application configuration and core utilities.
Contains settings, exceptions, and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    LedgerError,
    ConstraintViolation,
    DuplicateKey,
    AlreadyDeliveredOrNotFound,
    PermissionLocked,
    UnknownStudent,
    StudentInUse,
    StoreUnavailable,
    NotFoundError,
)

__all__ = [
    "settings",
    "LedgerError",
    "ConstraintViolation",
    "DuplicateKey",
    "AlreadyDeliveredOrNotFound",
    "PermissionLocked",
    "UnknownStudent",
    "StudentInUse",
    "StoreUnavailable",
    "NotFoundError",
]
