"""
Permission Repository - Data access layer for lunch permissions

Every write here is one statement. Guards on ``delivered`` are part of the
WHERE clause so the store evaluates them atomically with the write.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import LunchPermission, Student


class PermissionRepository(BaseRepository[LunchPermission]):
    """Repository for lunch permission data access"""

    def __init__(self, db: Session):
        super().__init__(db, LunchPermission)

    def create_permission(
        self, student_id: int, release_date: date, quantity: int
    ) -> LunchPermission:
        """Insert a pending permission"""
        permission = LunchPermission(
            student_id=student_id,
            release_date=release_date,
            quantity=quantity,
            delivered=False,
        )
        return self.create(permission)

    def update_permission(
        self,
        permission_id: int,
        student_id: int,
        release_date: date,
        quantity: int,
        pending_only: bool = False,
    ) -> int:
        """Overwrite student, date and quantity; ``delivered`` is left untouched"""
        stmt = update(LunchPermission).where(LunchPermission.id == permission_id)
        if pending_only:
            stmt = stmt.where(LunchPermission.delivered.is_(False))
        result = self.db.execute(
            stmt.values(
                student_id=student_id, release_date=release_date, quantity=quantity
            ).execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def delete_permission(self, permission_id: int, pending_only: bool = False) -> int:
        """Delete a permission, returns the number of deleted rows"""
        stmt = delete(LunchPermission).where(LunchPermission.id == permission_id)
        if pending_only:
            stmt = stmt.where(LunchPermission.delivered.is_(False))
        result = self.db.execute(stmt.execution_options(synchronize_session=False))
        self.db.commit()
        return result.rowcount

    def mark_delivered(self, permission_id: int) -> int:
        """Flip ``delivered`` to true if and only if it is currently false"""
        result = self.db.execute(
            update(LunchPermission)
            .where(
                LunchPermission.id == permission_id,
                LunchPermission.delivered.is_(False),
            )
            .values(delivered=True)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount

    def count_by_student(self, student_id: int) -> int:
        """Number of permissions referencing a student"""
        return self.db.scalar(
            select(func.count())
            .select_from(LunchPermission)
            .where(LunchPermission.student_id == student_id)
        )

    def _joined_query(self):
        return select(
            LunchPermission.id,
            LunchPermission.student_id,
            LunchPermission.release_date,
            LunchPermission.quantity,
            LunchPermission.delivered,
            Student.name,
            Student.photo_ref,
            Student.registration_code,
        ).join(Student, Student.id == LunchPermission.student_id)

    def get_joined(self, permission_id: int) -> Optional[Row]:
        """Get one permission with its student's display fields"""
        return self.db.execute(
            self._joined_query().where(LunchPermission.id == permission_id)
        ).first()

    def list_joined(
        self, release_date: Optional[date] = None, delivered_only: bool = False
    ) -> List[Row]:
        """List permissions with student display fields, ordered by date then student"""
        query = self._joined_query()
        if release_date is not None:
            query = query.where(LunchPermission.release_date == release_date)
        if delivered_only:
            query = query.where(LunchPermission.delivered.is_(True))
        query = query.order_by(
            LunchPermission.release_date,
            LunchPermission.student_id,
            LunchPermission.id,
        )
        return list(self.db.execute(query).all())
