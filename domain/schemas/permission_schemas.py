from pydantic import BaseModel, Field, StrictInt
from typing import Optional
from datetime import date


class PermissionCreate(BaseModel):
    """Schema for creating or replacing a lunch permission.

    The quantity bound is checked by the ledger so that an out-of-range value
    is reported as a constraint violation rather than a request validation
    failure. Booleans, floats and numeric strings are not coerced.
    """

    student_id: int = Field(..., description="Id of the authorized student")
    release_date: date = Field(..., description="Calendar date the lunch is released")
    quantity: StrictInt = Field(..., description="Number of lunch items, 1 to 3")


class PermissionRecord(BaseModel):
    """A permission joined with the display fields of its student"""

    id: int
    student_id: int
    release_date: date
    quantity: int
    delivered: bool
    name: Optional[str] = None
    photo_ref: Optional[str] = None
    registration_code: Optional[str] = None

    model_config = {"from_attributes": True}


class DeliveryCreate(BaseModel):
    """Schema for confirming a delivery"""

    permission_id: int


class DeliveryResponse(BaseModel):
    delivered: bool


class CreatedResponse(BaseModel):
    id: int


class UpdatedResponse(BaseModel):
    updated: int


class DeletedResponse(BaseModel):
    deleted: int
