# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
import os
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Set test environment before importing app
os.environ["TIJDBALANS_DATABASE_URL"] = "sqlite:///./test.db"

from tijdbalans.api.deps import get_db
from tijdbalans.engine.enums import ApprovalStatus, ContractType, WorkType
from tijdbalans.main import app
from tijdbalans.models import Base, TimeEntry, User

# Test database setup
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def second_session(db_session):
    """Open another session on the test database, like a concurrent request."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_user(
    db_session,
    name: str = "Sanne de Vries",
    contract_type: ContractType = ContractType.FULL_TIME,
    created_at: datetime | None = None,
    **kwargs,
) -> User:
    user = User(
        name=name,
        email=f"{name.lower().replace(' ', '.')}@example.com",
        contract_type=contract_type.value,
        created_at=created_at or datetime(2024, 1, 1),
        **kwargs,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def add_entry(
    db_session,
    user: User,
    start: datetime,
    end: datetime | None,
    work_type: WorkType | None = WorkType.REGULAR,
    break_minutes: int = 0,
    status: ApprovalStatus = ApprovalStatus.APPROVED,
    **kwargs,
) -> TimeEntry:
    entry = TimeEntry(
        user_id=user.id,
        start_time=start,
        end_time=end,
        total_break_minutes=break_minutes,
        work_type=work_type.value if work_type else None,
        approval_status=status.value,
        **kwargs,
    )
    db_session.add(entry)
    db_session.commit()
    db_session.refresh(entry)
    return entry


@pytest.fixture
def make_user(db_session):
    """Factory creating users in the test database."""

    def _make(*args, **kwargs) -> User:
        return create_user(db_session, *args, **kwargs)

    return _make


@pytest.fixture
def make_entry(db_session):
    """Factory creating time entries in the test database."""

    def _make(*args, **kwargs) -> TimeEntry:
        return add_entry(db_session, *args, **kwargs)

    return _make


@pytest.fixture
def employee(db_session) -> User:
    """Create a full-time employee."""
    return create_user(db_session)


@pytest.fixture
def part_timer(db_session) -> User:
    """Create a part-time employee."""
    return create_user(db_session, "Jan Bakker", ContractType.PART_TIME)


@pytest.fixture
def zero_hours_worker(db_session) -> User:
    """Create an employee on a zero-hours contract."""
    return create_user(db_session, "Fleur Jansen", ContractType.ZERO_HOURS)
