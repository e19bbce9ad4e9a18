"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.student_schemas import StudentCreate, StudentRecord
from domain.schemas.permission_schemas import (
    PermissionCreate,
    PermissionRecord,
    DeliveryCreate,
    DeliveryResponse,
    CreatedResponse,
    UpdatedResponse,
    DeletedResponse,
)

__all__ = [
    # Student schemas
    "StudentCreate",
    "StudentRecord",
    # Permission schemas
    "PermissionCreate",
    "PermissionRecord",
    "DeliveryCreate",
    "DeliveryResponse",
    # Write results
    "CreatedResponse",
    "UpdatedResponse",
    "DeletedResponse",
]
