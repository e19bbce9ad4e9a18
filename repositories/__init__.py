"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.student_repository import StudentRepository
from repositories.permission_repository import PermissionRepository

__all__ = [
    "BaseRepository",
    "StudentRepository",
    "PermissionRepository",
]
