"""Services package - Business logic layer"""

from services.ledger_service import PermissionLedger
from services.student_service import StudentDirectory

__all__ = [
    "PermissionLedger",
    "StudentDirectory",
]
