"""
Student Repository - Data access layer for the student directory
"""

from sqlalchemy import update
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Student


class StudentRepository(BaseRepository[Student]):
    """Repository for student data access"""

    def __init__(self, db: Session):
        super().__init__(db, Student)

    def create_student(self, registration_code: str, name: str, photo_ref: str) -> Student:
        """Create a new student"""
        student = Student(registration_code=registration_code, name=name, photo_ref=photo_ref)
        return self.create(student)

    def update_student(
        self, student_id: int, registration_code: str, name: str, photo_ref: str
    ) -> int:
        """Overwrite a student's fields, returns the number of updated rows"""
        result = self.db.execute(
            update(Student)
            .where(Student.id == student_id)
            .values(registration_code=registration_code, name=name, photo_ref=photo_ref)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount
