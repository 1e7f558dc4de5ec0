"""Concurrent bookings for one lot and window must yield exactly one reservation."""
import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import booking as booking_module
from booking import create_reservation
from database import Base
from errors import LotConflict
from models import CampusUser, Faculty, ParkingLot, ParkingZone, Reservation, Vehicle
from schemas.reservationsSchema import ReservationCreate

BOOKERS = 6


@pytest.fixture
def file_sessions(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def lot_ids(file_sessions):
    db = file_sessions()
    faculty = Faculty(name="Faculty of Engineering", code="FE")
    db.add(faculty)
    db.flush()
    zone = ParkingZone(faculty_id=faculty.id, name="Mixed Zone", zone_type="Mixed", capacity=1)
    db.add(zone)
    db.flush()
    lot = ParkingLot(zone_id=zone.id, lot_number="M01")
    db.add(lot)
    db.add(CampusUser(faculty_id=faculty.id, full_name="Daniel Lim", user_type="Student",
                      student_no="A21EE0042", email="daniel@student.campus.edu"))
    db.commit()
    ids = {"faculty": faculty.id, "zone": zone.id, "lot": lot.id}
    db.close()
    return ids


def test_only_one_of_many_concurrent_bookings_wins(file_sessions, lot_ids):
    barrier = threading.Barrier(BOOKERS)
    results = []
    results_lock = threading.Lock()

    def book(n):
        req = ReservationCreate.model_validate({
            "userType": "Visitor" if n % 2 else "Student",
            "studentNo": "A21EE0042",
            "name": f"Visitor {n}",
            "plateNum": f"RACE {n}",
            "vehicleType": "Car",
            "reservationDate": "2024-01-10",
            "startTime": "09:00" if n % 2 else "10:00",
            "endTime": "11:00",
            "facultyID": lot_ids["faculty"],
            "zoneID": lot_ids["zone"],
            "lotID": lot_ids["lot"],
        })
        db = file_sessions()
        try:
            barrier.wait()
            create_reservation(db, req)
            outcome = "ok"
        except LotConflict:
            outcome = "conflict"
        except Exception as exc:  # surfaced through the assertion below
            outcome = repr(exc)
        finally:
            db.close()
        with results_lock:
            results.append(outcome)

    threads = [threading.Thread(target=book, args=(n,)) for n in range(BOOKERS)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)

    assert sorted(results) == ["conflict"] * (BOOKERS - 1) + ["ok"]

    db = file_sessions()
    try:
        assert db.query(Reservation).filter(Reservation.lot_id == lot_ids["lot"]).count() == 1
        # losers are rejected before their vehicle is registered
        assert db.query(Vehicle).count() == 1
    finally:
        db.close()


def test_lot_lock_is_taken_with_a_fresh_transaction(db_session, booking, monkeypatch):
    in_transaction = []
    real_lot_lock = booking_module.lot_lock

    def recording_lot_lock(lot_id):
        in_transaction.append(db_session.in_transaction())
        return real_lot_lock(lot_id)

    monkeypatch.setattr(booking_module, "lot_lock", recording_lot_lock)
    create_reservation(db_session, ReservationCreate.model_validate(booking()))

    # reads made before the lock must not pin the snapshot the conflict check sees
    assert in_transaction == [False]
    assert db_session.query(Reservation).count() == 1
