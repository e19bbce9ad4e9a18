"""
Lunch permission model.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Integer,
    UniqueConstraint,
    false,
)

from app.config import MIN_QUANTITY, MAX_QUANTITY
from domain.models.database import Base


class LunchPermission(Base):
    """Authorization for one student to receive lunch items on one date.

    The student is referenced by id only; display data is joined in at query
    time and never owned by the permission.
    """

    __tablename__ = "lunch_permissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False)
    release_date = Column(Date, nullable=False)
    quantity = Column(Integer, nullable=False)
    delivered = Column(Boolean, nullable=False, default=False, server_default=false())

    __table_args__ = (
        UniqueConstraint(
            "student_id", "release_date", name="uq_permission_student_release_date"
        ),
        CheckConstraint(
            f"quantity >= {MIN_QUANTITY} AND quantity <= {MAX_QUANTITY}",
            name="ck_permission_quantity_range",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<LunchPermission(id={self.id}, student_id={self.student_id}, "
            f"release_date={self.release_date}, delivered={self.delivered})>"
        )
