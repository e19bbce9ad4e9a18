"""
Permission ledger - lunch permissions and delivery confirmation.

Each operation runs as a single statement in its own short transaction. The
delivery confirmation is a conditional update guarded by ``delivered = false``
so concurrent confirmations of the same permission yield exactly one success.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from app.config import MIN_QUANTITY, MAX_QUANTITY
from app.exceptions import (
    AlreadyDeliveredOrNotFound,
    ConstraintViolation,
    DuplicateKey,
    PermissionLocked,
    UnknownStudent,
)
from domain.schemas.permission_schemas import PermissionRecord
from repositories import PermissionRepository
from services.base_service import (
    BaseService,
    CHECK,
    FOREIGN_KEY,
    UNIQUE,
    classify_integrity_error,
)


class PermissionLedger(BaseService):
    """Owns lunch permission records and their invariants.

    Args:
        session_factory: session factory bound to the store engine
        lock_delivered: refuse update and delete once a permission is delivered
    """

    def __init__(self, session_factory: sessionmaker, lock_delivered: bool = True):
        super().__init__(session_factory, "lunchledger.ledger")
        self.lock_delivered = lock_delivered

    @staticmethod
    def validate_quantity(quantity: int):
        """Reject quantities outside the permitted bound before any write."""
        if (
            isinstance(quantity, bool)
            or not isinstance(quantity, int)
            or not MIN_QUANTITY <= quantity <= MAX_QUANTITY
        ):
            raise ConstraintViolation(
                f"Quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}",
                details={
                    "quantity": quantity,
                    "min": MIN_QUANTITY,
                    "max": MAX_QUANTITY,
                },
            )

    def _integrity_failure(
        self, exc: IntegrityError, student_id: int, release_date: date
    ):
        kind = classify_integrity_error(exc)
        self.log_warning(
            "Permission write rejected by store",
            kind=kind,
            student_id=student_id,
            release_date=release_date,
        )
        if kind == UNIQUE:
            return DuplicateKey(
                f"Student {student_id} already has a permission for {release_date}",
                details={"student_id": student_id, "release_date": str(release_date)},
            )
        if kind == FOREIGN_KEY:
            return UnknownStudent(
                f"Student {student_id} not found", details={"student_id": student_id}
            )
        if kind == CHECK:
            return ConstraintViolation(
                "Permission violates a store constraint",
                details={"student_id": student_id},
            )
        return ConstraintViolation(str(exc.orig) if exc.orig else str(exc))

    def create_permission(
        self, student_id: int, release_date: date, quantity: int
    ) -> int:
        """
        Authorize a student to receive lunch on a date.

        Returns:
            int: id of the new, pending permission

        Raises:
            ConstraintViolation: quantity outside 1..3
            DuplicateKey: the student already has a permission for that date
            UnknownStudent: the student does not exist
            StoreUnavailable: the store could not be reached
        """
        self.validate_quantity(quantity)
        with self.session_scope() as db:
            try:
                permission = PermissionRepository(db).create_permission(
                    student_id, release_date, quantity
                )
            except IntegrityError as exc:
                db.rollback()
                raise self._integrity_failure(exc, student_id, release_date) from exc
            permission_id = permission.id

        self.log_info(
            "Permission created",
            permission_id=permission_id,
            student_id=student_id,
            release_date=release_date,
            quantity=quantity,
        )
        return permission_id

    def update_permission(
        self, permission_id: int, student_id: int, release_date: date, quantity: int
    ) -> int:
        """
        Overwrite student, date and quantity of a permission.

        ``delivered`` is never touched. With ``lock_delivered`` the update only
        applies to pending permissions.

        Returns:
            int: number of updated rows, 0 if the permission does not exist

        Raises:
            ConstraintViolation, DuplicateKey, UnknownStudent,
            PermissionLocked, StoreUnavailable
        """
        self.validate_quantity(quantity)
        with self.session_scope() as db:
            repo = PermissionRepository(db)
            try:
                changed = repo.update_permission(
                    permission_id,
                    student_id,
                    release_date,
                    quantity,
                    pending_only=self.lock_delivered,
                )
            except IntegrityError as exc:
                db.rollback()
                raise self._integrity_failure(exc, student_id, release_date) from exc

            if changed == 0 and self.lock_delivered and repo.exists(permission_id):
                self.log_warning(
                    "Update refused on delivered permission", permission_id=permission_id
                )
                raise PermissionLocked(
                    f"Permission {permission_id} was already delivered",
                    details={"permission_id": permission_id},
                )

        self.log_info("Permission updated", permission_id=permission_id, changed=changed)
        return changed

    def delete_permission(self, permission_id: int) -> int:
        """
        Delete a permission.

        A missing permission is not an error: the call returns 0. With
        ``lock_delivered`` a delivered permission is kept and PermissionLocked
        is raised.
        """
        with self.session_scope() as db:
            repo = PermissionRepository(db)
            changed = repo.delete_permission(
                permission_id, pending_only=self.lock_delivered
            )
            if changed == 0 and self.lock_delivered and repo.exists(permission_id):
                self.log_warning(
                    "Delete refused on delivered permission", permission_id=permission_id
                )
                raise PermissionLocked(
                    f"Permission {permission_id} was already delivered",
                    details={"permission_id": permission_id},
                )

        self.log_info("Permission deleted", permission_id=permission_id, changed=changed)
        return changed

    def confirm_delivery(self, permission_id: int) -> bool:
        """
        Mark a pending permission as delivered.

        The transition is a single conditional update. Callers cannot tell an
        already delivered permission from a missing one through this call;
        use ``get_permission`` beforehand when the distinction matters.

        Raises:
            AlreadyDeliveredOrNotFound: nothing pending matched the id
            StoreUnavailable: the store could not be reached
        """
        with self.session_scope() as db:
            changed = PermissionRepository(db).mark_delivered(permission_id)

        if changed == 0:
            self.log_warning("Delivery not applied", permission_id=permission_id)
            raise AlreadyDeliveredOrNotFound(
                "Lunch already delivered or not found",
                details={"permission_id": permission_id},
            )

        self.log_info("Delivery confirmed", permission_id=permission_id)
        return True

    def get_permission(self, permission_id: int) -> Optional[PermissionRecord]:
        """Get one permission with its student's display fields"""
        with self.session_scope() as db:
            row = PermissionRepository(db).get_joined(permission_id)
        if row is None:
            return None
        return PermissionRecord.model_validate(dict(row._mapping))

    def list_permissions(
        self, release_date: Optional[date] = None, delivered_only: bool = False
    ) -> List[PermissionRecord]:
        """
        List permissions joined with student display data.

        Ordered by release date, then student id, then permission id.
        """
        with self.session_scope() as db:
            rows = PermissionRepository(db).list_joined(release_date, delivered_only)
        return [PermissionRecord.model_validate(dict(r._mapping)) for r in rows]

    def list_deliveries(self, release_date: Optional[date] = None) -> List[PermissionRecord]:
        """List delivered permissions, optionally for one date"""
        return self.list_permissions(release_date, delivered_only=True)
