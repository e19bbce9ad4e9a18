"""Student directory routes"""

from fastapi import APIRouter, Depends, status
import logging
from typing import List

from api.dependencies import get_directory
from app.exceptions import NotFoundError
from domain.schemas.permission_schemas import (
    CreatedResponse,
    UpdatedResponse,
    DeletedResponse,
)
from domain.schemas.student_schemas import StudentCreate, StudentRecord
from services import StudentDirectory

router = APIRouter(prefix="/students", tags=["Students"])
logger = logging.getLogger("lunchledger.api.students")


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    student: StudentCreate, directory: StudentDirectory = Depends(get_directory)
):
    """Register a student from JSON body"""
    student_id = directory.create_student(
        student.registration_code, student.name, student.photo_ref
    )
    return CreatedResponse(id=student_id)


@router.get("", response_model=List[StudentRecord])
def list_students(directory: StudentDirectory = Depends(get_directory)):
    return directory.list_students()


@router.get("/{student_id}", response_model=StudentRecord)
def get_student(student_id: int, directory: StudentDirectory = Depends(get_directory)):
    student = directory.get_student(student_id)
    if not student:
        raise NotFoundError(f"Student {student_id} not found")
    return student


@router.put("/{student_id}", response_model=UpdatedResponse)
def update_student(
    student_id: int,
    student: StudentCreate,
    directory: StudentDirectory = Depends(get_directory),
):
    changed = directory.update_student(
        student_id, student.registration_code, student.name, student.photo_ref
    )
    return UpdatedResponse(updated=changed)


@router.delete("/{student_id}", response_model=DeletedResponse)
def delete_student(student_id: int, directory: StudentDirectory = Depends(get_directory)):
    """Delete a student that no lunch permission references."""
    return DeletedResponse(deleted=directory.delete_student(student_id))
