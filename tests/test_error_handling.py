"""
Error handling and edge case tests.

This test suite covers:
- store outages and lock timeouts surfacing as StoreUnavailable
- classification of store integrity errors
- the store CHECK constraint backing the quantity bound
- error payloads carried by the typed failures
"""

import sqlite3

import pytest
from sqlalchemy.exc import IntegrityError

from test_fixtures import (
    engine,
    session_factory,
    ledger,
    directory,
    make_student,
    sqlite_url,
    RELEASE_DATE,
)
from app.exceptions import (
    ConstraintViolation,
    DuplicateKey,
    StoreUnavailable,
)
from domain.models import (
    LunchPermission,
    create_store_engine,
    init_database,
    make_session_factory,
)
from repositories import PermissionRepository
from services import PermissionLedger, StudentDirectory
from services.base_service import (
    CHECK,
    FOREIGN_KEY,
    OTHER,
    UNIQUE,
    classify_integrity_error,
)


# =============================================================================
# STORE UNAVAILABLE
# =============================================================================


def test_unreachable_store_raises_store_unavailable(tmp_path):
    """A database file in a missing directory cannot be opened"""
    eng = create_store_engine(
        f"sqlite:///{tmp_path / 'missing' / 'nested' / 'ledger.db'}", timeout_sec=0.5
    )
    try:
        ledger = PermissionLedger(make_session_factory(eng))

        with pytest.raises(StoreUnavailable) as exc_info:
            ledger.list_permissions()
        assert exc_info.value.http_status == 503

        with pytest.raises(StoreUnavailable):
            ledger.confirm_delivery(1)

        with pytest.raises(StoreUnavailable):
            StudentDirectory(make_session_factory(eng)).list_students()
    finally:
        eng.dispose()


def test_locked_store_times_out_as_store_unavailable(tmp_path):
    """
    A writer holding the database lock longer than the store timeout.

    Verifies:
    - confirm_delivery gives up after the timeout with StoreUnavailable
    - the permission is still pending once the lock is released
    """
    url = sqlite_url(tmp_path, "locked.db")
    eng = create_store_engine(url, timeout_sec=0.2)
    init_database(eng)
    factory = make_session_factory(eng)
    ledger = PermissionLedger(factory)
    student_id = make_student(StudentDirectory(factory))
    permission_id = ledger.create_permission(student_id, RELEASE_DATE, 1)

    blocker = sqlite3.connect(str(tmp_path / "locked.db"), isolation_level=None)
    try:
        blocker.execute("BEGIN EXCLUSIVE")
        with pytest.raises(StoreUnavailable):
            ledger.confirm_delivery(permission_id)
        blocker.execute("ROLLBACK")

        assert ledger.get_permission(permission_id).delivered is False
        assert ledger.confirm_delivery(permission_id) is True
    finally:
        blocker.close()
        eng.dispose()


# =============================================================================
# INTEGRITY CLASSIFICATION
# =============================================================================


@pytest.mark.parametrize(
    "message,expected",
    [
        ("UNIQUE constraint failed: lunch_permissions.student_id", UNIQUE),
        ('duplicate key value violates unique constraint "uq_x"', UNIQUE),
        ("FOREIGN KEY constraint failed", FOREIGN_KEY),
        ('insert or update on table "x" violates foreign key constraint "fk"', FOREIGN_KEY),
        ("CHECK constraint failed: ck_permission_quantity_range", CHECK),
        ('new row violates check constraint "ck_permission_quantity_range"', CHECK),
        ("NOT NULL constraint failed: lunch_permissions.quantity", OTHER),
    ],
)
def test_classify_integrity_error(message, expected):
    exc = IntegrityError("INSERT ...", {}, Exception(message))
    assert classify_integrity_error(exc) == expected


def test_store_check_constraint_backs_quantity_bound(session_factory, directory):
    """Writes bypassing the ledger are still rejected by the store"""
    student_id = make_student(directory)

    with session_factory() as db:
        with pytest.raises(IntegrityError) as exc_info:
            PermissionRepository(db).create(
                LunchPermission(student_id=student_id, release_date=RELEASE_DATE, quantity=5)
            )
        db.rollback()

    assert classify_integrity_error(exc_info.value) == CHECK


def test_rejected_write_leaves_ledger_usable(ledger, directory):
    student_id = make_student(directory)
    ledger.create_permission(student_id, RELEASE_DATE, 1)

    with pytest.raises(DuplicateKey):
        ledger.create_permission(student_id, RELEASE_DATE, 1)

    # The failed session was rolled back and later operations proceed
    assert len(ledger.list_permissions()) == 1


# =============================================================================
# ERROR PAYLOADS
# =============================================================================


def test_constraint_violation_payload():
    exc = ConstraintViolation("Quantity must be between 1 and 3", details={"quantity": 4})

    assert exc.to_dict() == {
        "code": "CONSTRAINT_VIOLATION",
        "message": "Quantity must be between 1 and 3",
        "details": {"quantity": 4},
    }
    assert str(exc) == "Quantity must be between 1 and 3"
    assert exc.http_status == 400


def test_error_code_override():
    exc = DuplicateKey("taken", code="STUDENT_DATE_TAKEN")

    assert exc.code == "STUDENT_DATE_TAKEN"
    assert "details" not in exc.to_dict()
    assert exc.http_status == 409
