"""API routes package"""

from . import students, permissions, deliveries, health

__all__ = ["students", "permissions", "deliveries", "health"]
