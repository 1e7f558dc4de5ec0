"""Pytest configuration and fixtures for the campus parking API tests."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db
from main import app
from models import CampusUser, Faculty, ParkingLot, ParkingZone


@pytest.fixture
def engine():
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
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    """Test client whose requests run against the per-test in-memory database."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def campus(db_session):
    """One faculty with a zone of each bookable type and a few campus users.

    Returns a dict of ids keyed by short names.
    """
    faculty = Faculty(name="Faculty of Computing", code="FC")
    db_session.add(faculty)
    db_session.flush()

    zones = {}
    lots = {}
    for zone_type in ("Staff", "Student", "Visitor", "Mixed"):
        zone = ParkingZone(faculty_id=faculty.id, name=f"{zone_type} Zone", zone_type=zone_type, capacity=3)
        db_session.add(zone)
        db_session.flush()
        zones[zone_type] = zone.id
        for n in (1, 2):
            lot = ParkingLot(zone_id=zone.id, lot_number=f"{zone_type[0]}{n:02d}")
            db_session.add(lot)
            db_session.flush()
            lots[f"{zone_type}{n}"] = lot.id

    maintenance = ParkingLot(zone_id=zones["Student"], lot_number="S99", status="Maintenance")
    db_session.add(maintenance)
    db_session.flush()
    lots["StudentMaintenance"] = maintenance.id

    db_session.add_all([
        CampusUser(faculty_id=faculty.id, full_name="Aina Rahman", user_type="Student",
                   student_no="A21CS0001", email="aina@student.campus.edu", phone_num="0123456789"),
        CampusUser(faculty_id=faculty.id, full_name="Old Student", user_type="Student",
                   student_no="A15CS0099", email="old@student.campus.edu", status="Inactive"),
        CampusUser(faculty_id=faculty.id, full_name="Dr. Siti Noor", user_type="Staff",
                   staff_no="S1001", email="siti@campus.edu"),
    ])
    db_session.commit()
    return {"faculty": faculty.id, "zones": zones, "lots": lots}


@pytest.fixture
def booking(campus):
    """Factory for public booking payloads; defaults to a student booking in the Student zone."""
    def make(**overrides):
        payload = {
            "userType": "Student",
            "studentNo": "A21CS0001",
            "plateNum": "WXY 1234",
            "vehicleType": "Car",
            "reservationDate": "2024-01-10",
            "startTime": "09:00",
            "endTime": "11:00",
            "facultyID": campus["faculty"],
            "zoneID": campus["zones"]["Student"],
            "lotID": campus["lots"]["Student1"],
        }
        payload.update(overrides)
        return payload
    return make
