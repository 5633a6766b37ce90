"""
Pytest configuration and fixtures.
"""

import os
import itertools
from datetime import date

import pytest
from fastapi.testclient import TestClient

# Set test environment - use in-memory SQLite for tests
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["LOG_LEVEL"] = "INFO"

from blotter.core.database import engine, SessionLocal, get_db
from blotter.api.main import create_app

# Import all models to register them with Base.metadata
from blotter.core.models import Base, BlotterCase, BlotterParty
from blotter.core.workflow.statuses import CaseStatus, PartyType


@pytest.fixture(scope="function")
def db_engine():
    """Create the schema on the shared in-memory engine for one test."""
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a new database session for each test."""
    session = SessionLocal()

    yield session

    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create test client with database override."""
    app = create_app()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    """Headers for admin API authentication."""
    return {"X-API-Key": "test-admin-key"}


@pytest.fixture
def make_case(db_session):
    """
    Insert a case directly in a given status.

    Usage:
        case = make_case(CaseStatus.MEDIATION, mediation_start_date=date(2024, 2, 1))
    """
    counter = itertools.count(1)

    def _make_case(status=CaseStatus.FILED, **fields):
        number = next(counter)
        values = dict(
            case_number=f"BLT-2024-{number:04d}",
            status=CaseStatus(status).value,
            priority="MEDIUM",
            incident_type="Noise complaint",
            incident_date=date(2024, 1, 5),
            incident_location="Purok 3, Barangay San Isidro",
            incident_description="Karaoke past midnight on consecutive nights",
            report_date=date(2024, 1, 6),
            filing_fee=100.0,
            filing_fee_paid=False,
        )
        values.update(fields)
        case = BlotterCase(**values)
        case.parties.append(BlotterParty(
            party_type=PartyType.COMPLAINANT.value,
            first_name="Maria",
            last_name="Santos",
            address="12 Mabini St.",
        ))
        case.parties.append(BlotterParty(
            party_type=PartyType.RESPONDENT.value,
            first_name="Jose",
            last_name="Reyes",
            address="14 Mabini St.",
        ))
        db_session.add(case)
        db_session.commit()
        db_session.refresh(case)
        return case

    return _make_case
