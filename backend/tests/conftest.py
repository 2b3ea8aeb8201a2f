"""
Test configuration and shared fixtures for the Clinic Booking test suite.

Uses an in-memory SQLite database. Each test gets a fresh schema, so tests
are isolated without relying on migrations or an external server.
"""

import pytest
from typing import Dict, Generator, List

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base

# Import all models to ensure they're registered with SQLAlchemy before any relationships are resolved
from models.system_setting import SystemSetting
from models.location import Location, LocationAvailability
from models.procedure import Procedure
from models.discount_rule import DiscountRule
from models.appointment import Appointment
from models.whatsapp_template import WhatsAppTemplate


TEST_DATABASE_URL = "sqlite://"


@pytest.fixture(scope="function")
def db_engine():
    """
    Create an in-memory database engine with the full schema.

    StaticPool keeps a single connection so every session (including the
    ones opened in worker threads by the settings store) sees the same data.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return sessionmaker(bind=db_engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Provide a database session for a test."""
    session = session_factory()
    yield session
    session.close()


class FakeConfigurationSource:
    """
    In-memory configuration source that counts reads.

    Set fail_reads / fail_writes to simulate an unreachable store.
    """

    def __init__(self, values: Dict[str, str] | None = None):
        self.values: Dict[str, str] = dict(values or {})
        self.read_calls: List[List[str]] = []
        self.writes: List[tuple[str, str]] = []
        self.fail_reads = False
        self.fail_writes = False

    async def read(self, keys: List[str]) -> Dict[str, str]:
        self.read_calls.append(list(keys))
        if self.fail_reads:
            raise ConnectionError("configuration store unavailable")
        return {key: self.values[key] for key in keys if key in self.values}

    async def write(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise ConnectionError("configuration store unavailable")
        self.writes.append((key, value))
        self.values[key] = value


@pytest.fixture
def fake_source() -> FakeConfigurationSource:
    """Empty in-memory configuration source."""
    return FakeConfigurationSource()


@pytest.fixture
def sample_location(db_session) -> Location:
    """A location with address and map link."""
    location = Location(
        city_name="Tefé-AM",
        clinic_name="Clínica Dra. Karoline Ferreira",
        address="Rua Olavo Bilac, 123 - Centro",
        map_url="https://maps.example.com/tefe",
        display_order=1,
    )
    db_session.add(location)
    db_session.commit()
    return location


@pytest.fixture
def sample_procedure(db_session) -> Procedure:
    """A single-session procedure."""
    procedure = Procedure(name="Depilação a Laser", price=150.0, duration_minutes=60, sessions=1)
    db_session.add(procedure)
    db_session.commit()
    return procedure
