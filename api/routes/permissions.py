"""Lunch permission routes"""

from datetime import date
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import get_ledger
from domain.schemas.permission_schemas import (
    PermissionCreate,
    PermissionRecord,
    CreatedResponse,
    UpdatedResponse,
    DeletedResponse,
)
from services import PermissionLedger

router = APIRouter(prefix="/lunch_permissions", tags=["Lunch Permissions"])
logger = logging.getLogger("lunchledger.api.permissions")


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_permission(
    payload: PermissionCreate, ledger: PermissionLedger = Depends(get_ledger)
):
    """Authorize a student to receive lunch on a date"""
    permission_id = ledger.create_permission(
        payload.student_id, payload.release_date, payload.quantity
    )
    return CreatedResponse(id=permission_id)


@router.get("", response_model=List[PermissionRecord])
def list_permissions(
    release_date: Optional[date] = Query(
        None, alias="date", description="Only permissions released on this date"
    ),
    ledger: PermissionLedger = Depends(get_ledger),
):
    """
    List permissions joined with student name and photo.

    Rows are ordered by release date, then student id.

    Examples:
    - GET /lunch_permissions - every permission
    - GET /lunch_permissions?date=2024-05-01 - permissions for one day
    """
    return ledger.list_permissions(release_date)


@router.put("/{permission_id}", response_model=UpdatedResponse)
def update_permission(
    permission_id: int,
    payload: PermissionCreate,
    ledger: PermissionLedger = Depends(get_ledger),
):
    """Replace student, date and quantity of a permission"""
    changed = ledger.update_permission(
        permission_id, payload.student_id, payload.release_date, payload.quantity
    )
    return UpdatedResponse(updated=changed)


@router.delete("/{permission_id}", response_model=DeletedResponse)
def delete_permission(permission_id: int, ledger: PermissionLedger = Depends(get_ledger)):
    """Delete a permission; a missing id reports zero deleted rows"""
    return DeletedResponse(deleted=ledger.delete_permission(permission_id))
