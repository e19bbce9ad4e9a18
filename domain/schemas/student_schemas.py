from pydantic import AliasChoices, BaseModel, Field


class StudentCreate(BaseModel):
    """Schema for creating or replacing a student.

    ``ra`` and ``photo`` are accepted as aliases for older mobile clients.
    """

    registration_code: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("registration_code", "ra"),
        description="School registration code, unique per student",
    )
    name: str = Field(..., min_length=1, description="Display name")
    photo_ref: str = Field(
        ...,
        validation_alias=AliasChoices("photo_ref", "photo"),
        description="Reference to the student's photo (URI or data reference)",
    )


class StudentRecord(BaseModel):
    """Schema for student response"""

    id: int
    registration_code: str
    name: str
    photo_ref: str

    model_config = {"from_attributes": True}
