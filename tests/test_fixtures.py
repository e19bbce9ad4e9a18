"""
Shared test fixtures and utilities for the Lunch Ledger test suite.

Every test gets its own SQLite database file under pytest's tmp_path, so
constraints, foreign keys and locking behave as they do in a running service.
"""

import uuid
from datetime import date
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from domain.models import create_store_engine, make_session_factory, init_database
from services import PermissionLedger, StudentDirectory


RELEASE_DATE = date(2024, 5, 1)
NEXT_DAY = date(2024, 5, 2)

# Realistic default students
REALISTIC_STUDENTS = {
    "default": {"name": "Ana Souza", "photo_ref": "photos/ana.jpg"},
    "second": {"name": "Bruno Lima", "photo_ref": "photos/bruno.jpg"},
    "third": {"name": "Carla Mendes", "photo_ref": "photos/carla.jpg"},
}


def unique_code(prefix: str = "RA") -> str:
    """Generate a unique registration code to avoid conflicts"""
    return f"{prefix}-{uuid.uuid4().hex[:10]}"


def sqlite_url(tmp_path, name: str = "ledger.db") -> str:
    return f"sqlite:///{tmp_path / name}"


@pytest.fixture(scope="function")
def engine(tmp_path) -> Generator[Engine, None, None]:
    """Engine on a fresh SQLite file with the ledger schema created"""
    eng = create_store_engine(sqlite_url(tmp_path), timeout_sec=5.0)
    init_database(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture(scope="function")
def ledger(session_factory) -> PermissionLedger:
    return PermissionLedger(session_factory, lock_delivered=True)


@pytest.fixture(scope="function")
def unlocked_ledger(session_factory) -> PermissionLedger:
    return PermissionLedger(session_factory, lock_delivered=False)


@pytest.fixture(scope="function")
def directory(session_factory) -> StudentDirectory:
    return StudentDirectory(session_factory)


def make_student(directory: StudentDirectory, profile_type: str = "default", registration_code=None) -> int:
    """
    Register a student with realistic data and return its id.

    Example:
        >>> sid = make_student(directory)  # Ana Souza with a unique code
        >>> other = make_student(directory, "second")  # Bruno Lima
    """
    profile = REALISTIC_STUDENTS.get(profile_type, REALISTIC_STUDENTS["default"])
    return directory.create_student(
        registration_code or unique_code(), profile["name"], profile["photo_ref"]
    )


@pytest.fixture(scope="function")
def client(engine, session_factory, ledger, directory) -> Generator[TestClient, None, None]:
    """
    TestClient wired to the per-test store.

    The client is not used as a context manager, so the application lifespan
    (which would build its own engine from settings) does not run.
    """
    from main import app

    app.state.engine = engine
    app.state.ledger = ledger
    app.state.directory = directory
    try:
        yield TestClient(app)
    finally:
        del app.state.engine
        del app.state.ledger
        del app.state.directory
