"""
API dependencies for dependency injection
"""

from fastapi import Request

from services import PermissionLedger, StudentDirectory


def get_ledger(request: Request) -> PermissionLedger:
    """
    Ledger dependency for FastAPI routes.

    The ledger is built once at startup and kept on ``app.state``.

    Usage:
        @router.get("/example")
        def example(ledger: PermissionLedger = Depends(get_ledger)):
            pass
    """
    return request.app.state.ledger


def get_directory(request: Request) -> StudentDirectory:
    """Student directory dependency for FastAPI routes."""
    return request.app.state.directory
