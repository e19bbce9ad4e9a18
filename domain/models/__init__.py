"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    create_store_engine,
    make_session_factory,
    init_database,
)
from domain.models.student import Student
from domain.models.permission import LunchPermission

__all__ = [
    # Database
    "Base",
    "create_store_engine",
    "make_session_factory",
    "init_database",
    # Models
    "Student",
    "LunchPermission",
]
