"""Student directory - identity and display data consumed by the ledger"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from app.exceptions import DuplicateKey, StudentInUse
from domain.schemas.student_schemas import StudentRecord
from repositories import PermissionRepository, StudentRepository
from services.base_service import BaseService, FOREIGN_KEY, UNIQUE, classify_integrity_error


class StudentDirectory(BaseService):
    def __init__(self, session_factory: sessionmaker):
        super().__init__(session_factory, "lunchledger.students")

    def _duplicate_code(self, registration_code: str) -> DuplicateKey:
        self.log_warning("Duplicate registration code", registration_code=registration_code)
        return DuplicateKey(
            f"Student with registration code {registration_code} already exists",
            details={"registration_code": registration_code},
        )

    def create_student(self, registration_code: str, name: str, photo_ref: str) -> int:
        """Register a student, returns its id"""
        with self.session_scope() as db:
            try:
                student = StudentRepository(db).create_student(
                    registration_code, name, photo_ref
                )
            except IntegrityError as exc:
                db.rollback()
                if classify_integrity_error(exc) == UNIQUE:
                    raise self._duplicate_code(registration_code) from exc
                raise
            student_id = student.id

        self.log_info("Student created", student_id=student_id)
        return student_id

    def list_students(self) -> List[StudentRecord]:
        with self.session_scope() as db:
            students = StudentRepository(db).get_all()
            return [StudentRecord.model_validate(s) for s in students]

    def get_student(self, student_id: int) -> Optional[StudentRecord]:
        """Get one student by id, None when it does not exist"""
        with self.session_scope() as db:
            student = StudentRepository(db).get_by_id(student_id)
            return StudentRecord.model_validate(student) if student else None

    def update_student(
        self, student_id: int, registration_code: str, name: str, photo_ref: str
    ) -> int:
        with self.session_scope() as db:
            try:
                changed = StudentRepository(db).update_student(
                    student_id, registration_code, name, photo_ref
                )
            except IntegrityError as exc:
                db.rollback()
                if classify_integrity_error(exc) == UNIQUE:
                    raise self._duplicate_code(registration_code) from exc
                raise

        self.log_info("Student updated", student_id=student_id, changed=changed)
        return changed

    def delete_student(self, student_id: int) -> int:
        """
        Delete a student.

        Students referenced by lunch permissions are kept: the call raises
        StudentInUse so the ledger never holds dangling references. The store
        foreign key backs the check against concurrent inserts.
        """
        with self.session_scope() as db:
            references = PermissionRepository(db).count_by_student(student_id)
            if references:
                raise StudentInUse(
                    f"Student {student_id} is referenced by {references} lunch permission(s)",
                    details={"student_id": student_id, "permissions": references},
                )
            try:
                changed = StudentRepository(db).delete_by_id(student_id)
            except IntegrityError as exc:
                db.rollback()
                if classify_integrity_error(exc) == FOREIGN_KEY:
                    raise StudentInUse(
                        f"Student {student_id} is referenced by lunch permissions",
                        details={"student_id": student_id},
                    ) from exc
                raise

        self.log_info("Student deleted", student_id=student_id, changed=changed)
        return changed
