"""
shared pytest fixtures.

provides an in-memory sqlite database, a session bound to it, record
factories and a flask test client wired to that session.
"""

from datetime import date, datetime, timedelta
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cdss.models.base import Base
from cdss.models.anc import AncEnrollment, AncVisit, Patient
from cdss.models.app_log import AppLog  # noqa: F401 (registers table)
from cdss.models.vitals import Vital


@pytest.fixture
def db_engine():
    """
    create an in-memory database with all clinic tables.

    yields:
        sqlalchemy engine
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """
    create a session on the in-memory database.

    yields:
        sqlalchemy session for testing
    """
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    yield session
    session.close()


@pytest.fixture
def client(db_session):
    """
    create flask test client whose endpoints use the test session.

    yields:
        flask test client for making requests
    """
    from cdss.app import app

    app.config['TESTING'] = True
    with patch('cdss.app.get_db_session', return_value=db_session):
        with app.test_client() as test_client:
            yield test_client


@pytest.fixture
def add_vital(db_session):
    """factory fixture storing a vitals row."""

    def _add_vital(appointment_id: str = "APPT_001", created_at: datetime = None, **values) -> Vital:
        vital = Vital(
            appointment_id=appointment_id,
            created_at=created_at or datetime(2024, 3, 1, 9, 0),
            **values
        )
        db_session.add(vital)
        db_session.commit()
        return vital

    return _add_vital


@pytest.fixture
def add_pregnancy(db_session):
    """
    factory fixture storing a patient with an active anc enrollment.

    visits are (visit_date, systolic, diastolic) tuples or dicts of AncVisit
    columns.
    """

    def _add_pregnancy(
        patient_id: str = "PATIENT_001",
        dob: date = date(1990, 6, 15),
        lmp: date = date(2024, 1, 1),
        gravida: int = 2,
        para: int = 1,
        visits=(),
    ) -> AncEnrollment:
        patient = Patient(id=patient_id, first_name="Amina", last_name="Bello", dob=dob, gender="F")
        db_session.add(patient)

        enrollment = AncEnrollment(
            patient_id=patient_id,
            lmp=lmp,
            edd=lmp + timedelta(days=280),
            gravida=gravida,
            para=para,
            blood_group="O+",
            genotype="AA",
            hiv_status="Negative",
            is_active=True,
            created_at=datetime(2024, 2, 1, 10, 0),
        )
        db_session.add(enrollment)
        db_session.flush()

        for visit in visits:
            columns = visit if isinstance(visit, dict) else {
                "visit_date": visit[0],
                "blood_pressure_systolic": visit[1],
                "blood_pressure_diastolic": visit[2],
            }
            db_session.add(AncVisit(enrollment_id=enrollment.id, patient_id=patient_id, **columns))

        db_session.commit()
        return enrollment

    return _add_pregnancy
