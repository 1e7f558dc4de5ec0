"""Populate an empty database with demo faculties, zones, lots and campus users.

Run with ``python seed.py``; existing rows are left untouched.
"""
import logging

from database import Base, SessionLocal, engine
from models import CampusUser, Faculty, ParkingLot, ParkingZone
from routers.users import create_default_admin_if_not_exists

logger = logging.getLogger(__name__)

FACULTIES = [
    ("Faculty of Computing", "FC", "Block N28"),
    ("Faculty of Engineering", "FE", "Block P19"),
]

# (faculty code, zone name, zone type, lot count, disabled-friendly lots)
ZONES = [
    ("FC", "Zone A", "Staff", 10, 1),
    ("FC", "Zone B", "Student", 20, 2),
    ("FC", "Zone C", "Visitor", 8, 1),
    ("FE", "Zone D", "Mixed", 12, 2),
    ("FE", "Zone E", "Disabled", 4, 4),
]

CAMPUS_USERS = [
    ("FC", "Aina Rahman", "Student", "A21CS0001", None, "aina@student.campus.edu", "0123456789"),
    ("FE", "Daniel Lim", "Student", "A21EE0042", None, "daniel@student.campus.edu", None),
    ("FC", "Dr. Siti Noor", "Staff", None, "S1001", "siti@campus.edu", "0198765432"),
]


def seed(db):
    faculties = {}
    for name, code, location in FACULTIES:
        faculty = db.query(Faculty).filter(Faculty.code == code).first()
        if not faculty:
            faculty = Faculty(name=name, code=code, location_desc=location)
            db.add(faculty)
            db.flush()
        faculties[code] = faculty

    for code, zone_name, zone_type, count, disabled in ZONES:
        faculty = faculties[code]
        zone = db.query(ParkingZone).filter(
            ParkingZone.faculty_id == faculty.id, ParkingZone.name == zone_name
        ).first()
        if zone:
            continue
        zone = ParkingZone(faculty_id=faculty.id, name=zone_name, zone_type=zone_type, capacity=count)
        db.add(zone)
        db.flush()
        prefix = zone_name.split()[-1]
        db.add_all([
            ParkingLot(
                zone_id=zone.id,
                lot_number=f"{prefix}{n:02d}",
                is_disabled_friendly=n <= disabled,
            )
            for n in range(1, count + 1)
        ])

    for code, full_name, user_type, student_no, staff_no, email, phone in CAMPUS_USERS:
        if db.query(CampusUser).filter(CampusUser.email == email).first():
            continue
        db.add(CampusUser(
            faculty_id=faculties[code].id,
            full_name=full_name,
            user_type=user_type,
            student_no=student_no,
            staff_no=staff_no,
            email=email,
            phone_num=phone,
        ))

    db.commit()
    create_default_admin_if_not_exists(db)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        seed(session)
        logger.info("Seed data loaded")
    finally:
        session.close()
