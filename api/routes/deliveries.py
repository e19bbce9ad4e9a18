"""Delivery confirmation routes"""

from datetime import date
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_ledger
from domain.schemas.permission_schemas import (
    DeliveryCreate,
    DeliveryResponse,
    PermissionRecord,
)
from services import PermissionLedger

router = APIRouter(prefix="/deliveries", tags=["Deliveries"])
logger = logging.getLogger("lunchledger.api.deliveries")


@router.post("", response_model=DeliveryResponse)
def confirm_delivery(payload: DeliveryCreate, ledger: PermissionLedger = Depends(get_ledger)):
    """
    Mark a lunch permission as delivered.

    Succeeds once per permission. Any later attempt, or an unknown id,
    returns 400 with code ALREADY_DELIVERED_OR_NOT_FOUND.
    """
    return DeliveryResponse(delivered=ledger.confirm_delivery(payload.permission_id))


@router.get("", response_model=List[PermissionRecord])
def list_deliveries(
    release_date: Optional[date] = Query(
        None, alias="date", description="Only deliveries for this release date"
    ),
    ledger: PermissionLedger = Depends(get_ledger),
):
    """List delivered permissions joined with student name and photo"""
    return ledger.list_deliveries(release_date)
