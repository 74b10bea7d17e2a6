"""Shared fixtures: in-memory database, API client and sample data."""

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from condoflow.core.database import Base, get_db
from condoflow.main import app
from condoflow.models.enums import ReadingStatus, ResidentRole, UtilityType
from condoflow.models.reading import Reading
from condoflow.models.unit import Unit
from condoflow.models.user import User
from condoflow.services.auth import create_access_token, get_password_hash
from condoflow.store.sqlalchemy_store import SqlAlchemyStore


@pytest.fixture
def test_db():
    """Create an in-memory test database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def store(test_db):
    """Record store over the test database."""
    return SqlAlchemyStore(test_db)


@pytest.fixture
def client(test_db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def test_user(test_db):
    """Create a test user in the database."""
    user = User(
        username="testuser",
        email="test@example.com",
        hashed_password=get_password_hash("testpassword123"),
    )
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    """Bearer header for the test user."""
    token = create_access_token(data={"sub": test_user.username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_unit(test_db):
    """Factory inserting a unit row."""

    def _make_unit(
        number: str,
        block: str = "A",
        resident_name: str = "",
        resident_role: ResidentRole = ResidentRole.PROPRIETARIO,
    ) -> Unit:
        unit = Unit(
            number=number,
            block=block,
            resident_name=resident_name,
            resident_role=resident_role.value,
        )
        test_db.add(unit)
        test_db.commit()
        test_db.refresh(unit)
        return unit

    return _make_unit


@pytest.fixture
def make_reading(test_db):
    """Factory inserting a reading row."""

    def _make_reading(
        unit: Unit,
        utility_type: UtilityType,
        previous: str,
        current: str | None,
        date: datetime,
    ) -> Reading:
        reading = Reading(
            unit_id=unit.id,
            type=utility_type.value,
            previous_value=Decimal(previous),
            current_value=Decimal(current) if current is not None else None,
            date=date,
            status=(ReadingStatus.LIDO if current is not None else ReadingStatus.PENDENTE).value,
        )
        test_db.add(reading)
        test_db.commit()
        test_db.refresh(reading)
        return reading

    return _make_reading

