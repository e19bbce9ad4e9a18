"""
Base service interface for business logic layer.
Services orchestrate business operations using repositories.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Iterator
import logging

from sqlalchemy.exc import DBAPIError, IntegrityError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from app.exceptions import LedgerError, StoreUnavailable


UNIQUE = "unique"
FOREIGN_KEY = "foreign_key"
CHECK = "check"
OTHER = "other"


def classify_integrity_error(exc: IntegrityError) -> str:
    """
    Tell which store constraint an IntegrityError comes from.

    Works on the driver messages of SQLite ("UNIQUE constraint failed",
    "FOREIGN KEY constraint failed", "CHECK constraint failed") and PostgreSQL
    ("duplicate key value violates unique constraint", "violates foreign key
    constraint", "violates check constraint").
    """
    message = str(getattr(exc, "orig", None) or exc).lower()
    if "unique" in message or "duplicate key" in message:
        return UNIQUE
    if "foreign key" in message:
        return FOREIGN_KEY
    if "check constraint" in message:
        return CHECK
    return OTHER


class BaseService(ABC):
    """
    Base service providing common functionality.
    All service classes should inherit from this class.

    A service owns a session factory bound to the store engine and opens one
    short-lived session per operation.
    """

    def __init__(self, session_factory: sessionmaker, logger_name: str):
        self._session_factory = session_factory
        self.logger = logging.getLogger(logger_name)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Yield a session for one operation.

        Rolls back on any failure. Integrity errors are re-raised for the
        service to classify; every other driver or pool error becomes
        StoreUnavailable.
        """
        db = self._session_factory()
        try:
            yield db
        except LedgerError:
            db.rollback()
            raise
        except IntegrityError:
            db.rollback()
            raise
        except (DBAPIError, PoolTimeoutError) as exc:
            self._safe_rollback(db)
            self.logger.error("Store operation failed: %s", exc, exc_info=True)
            raise StoreUnavailable(
                "Store unavailable", details={"reason": exc.__class__.__name__}
            ) from exc
        finally:
            db.close()

    def _safe_rollback(self, db: Session):
        # The connection may already be gone
        try:
            db.rollback()
        except (DBAPIError, PoolTimeoutError):
            self.logger.debug("Rollback after store failure did not complete")

    def log_info(self, message: str, **kwargs):
        """Log info message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.info(f"{message} {extra_data}".strip())

    def log_warning(self, message: str, **kwargs):
        """Log warning message with structured data"""
        extra_data = " ".join([f"{k}={v}" for k, v in kwargs.items()])
        self.logger.warning(f"{message} {extra_data}".strip())
