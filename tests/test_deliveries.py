"""
Tests for delivery confirmation.

The confirmation must apply exactly once per permission, including when
several callers race on the same id.
"""

import threading

import pytest

from test_fixtures import (
    engine,
    session_factory,
    ledger,
    directory,
    make_student,
    RELEASE_DATE,
)
from app.exceptions import AlreadyDeliveredOrNotFound


def test_delivery_scenario(ledger, directory):
    """
    Scenario from create to delivered listing.

    1. create permission (S1, 2024-05-01, 2) -> P1
    2. list for the date shows P1 pending
    3. confirm P1 succeeds
    4. confirm P1 again fails
    5. deliveries for the date show P1 delivered
    """
    s1 = make_student(directory)
    p1 = ledger.create_permission(s1, RELEASE_DATE, 2)

    [row] = ledger.list_permissions(RELEASE_DATE)
    assert (row.id, row.student_id, row.quantity, row.delivered) == (p1, s1, 2, False)

    assert ledger.confirm_delivery(p1) is True

    with pytest.raises(AlreadyDeliveredOrNotFound):
        ledger.confirm_delivery(p1)

    [delivered] = ledger.list_deliveries(RELEASE_DATE)
    assert delivered.id == p1
    assert delivered.delivered is True


def test_confirm_delivery_unknown_id(ledger):
    with pytest.raises(AlreadyDeliveredOrNotFound) as exc_info:
        ledger.confirm_delivery(31337)

    assert exc_info.value.code == "ALREADY_DELIVERED_OR_NOT_FOUND"
    assert exc_info.value.details == {"permission_id": 31337}


def test_repeated_confirmations_keep_failing(ledger, directory):
    student_id = make_student(directory)
    permission_id = ledger.create_permission(student_id, RELEASE_DATE, 1)
    ledger.confirm_delivery(permission_id)

    for _ in range(3):
        with pytest.raises(AlreadyDeliveredOrNotFound):
            ledger.confirm_delivery(permission_id)

    assert ledger.get_permission(permission_id).delivered is True


def test_confirm_only_touches_target(ledger, directory):
    ana = make_student(directory)
    bruno = make_student(directory, "second")
    target = ledger.create_permission(ana, RELEASE_DATE, 1)
    other = ledger.create_permission(bruno, RELEASE_DATE, 1)

    ledger.confirm_delivery(target)

    assert ledger.get_permission(target).delivered is True
    assert ledger.get_permission(other).delivered is False


@pytest.mark.parametrize("callers", [2, 8])
def test_concurrent_confirmations_exactly_one_wins(ledger, directory, callers):
    """
    N threads confirm the same pending permission at once.

    Verifies:
    - exactly one call succeeds
    - N-1 calls raise AlreadyDeliveredOrNotFound
    - the stored state ends delivered
    """
    student_id = make_student(directory)
    permission_id = ledger.create_permission(student_id, RELEASE_DATE, 2)

    barrier = threading.Barrier(callers)
    successes = []
    failures = []
    unexpected = []
    lock = threading.Lock()

    def confirm():
        barrier.wait()
        try:
            result = ledger.confirm_delivery(permission_id)
            with lock:
                successes.append(result)
        except AlreadyDeliveredOrNotFound as exc:
            with lock:
                failures.append(exc)
        except Exception as exc:  # surfaced through the assertion below
            with lock:
                unexpected.append(exc)

    threads = [threading.Thread(target=confirm) for _ in range(callers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)

    assert unexpected == []
    assert successes == [True]
    assert len(failures) == callers - 1
    assert ledger.get_permission(permission_id).delivered is True
