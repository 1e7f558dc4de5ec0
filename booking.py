"""Reservation core: window parsing, zone eligibility, conflict-safe creation
and the reservation status machine.

Check-then-insert for a lot runs under a per-lot mutex and inside a single
transaction that also row-locks the lot, so two bookers racing for the same
window cannot both pass the conflict check.
"""
import logging
import secrets
import string
import threading
from collections import defaultdict
from datetime import date, datetime
from typing import NamedTuple, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import config
from crud import find_lot_conflict, get_or_404, get_vehicle_by_plate
from errors import (
    InvalidTransition, LotConflict, NotFound, StorageError,
    UserNotFound, ValidationError, ZoneNotAllowed
)
from models import CampusUser, ParkingLot, ParkingSession, ParkingZone, Reservation, Vehicle

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMATS = ("%H:%M", "%H:%M:%S")

ZONE_ELIGIBILITY = {
    "Staff": ("Staff", "Mixed"),
    "Student": ("Student", "Mixed"),
    "Visitor": ("Visitor", "Mixed"),
}

ALLOWED_TRANSITIONS = {
    "Reserved": ("CheckedIn", "Cancelled"),
    "CheckedIn": ("Completed", "Cancelled"),
    "Completed": (),
    "Cancelled": (),
}

PROOF_CODE_ALPHABET = string.ascii_uppercase + string.digits

_lot_locks = defaultdict(threading.Lock)
_lot_locks_guard = threading.Lock()


def lot_lock(lot_id: int) -> threading.Lock:
    with _lot_locks_guard:
        return _lot_locks[lot_id]


def campus_now() -> datetime:
    """Current campus wall-clock time as a naive datetime, matching reservation times."""
    return datetime.now(config.CAMPUS_TIMEZONE).replace(tzinfo=None)


def combine_date_time(date_str: str, time_str: str) -> datetime:
    """Combine ``YYYY-MM-DD`` and ``HH:MM`` into a naive campus-local datetime."""
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(f"{date_str} {time_str}", f"{DATE_FORMAT} {fmt}")
        except (TypeError, ValueError):
            continue
    raise ValidationError(f"Invalid date or time: '{date_str}' '{time_str}'")


def parse_window(date_str: str, start_str: str, end_str: str) -> Tuple[date, datetime, datetime]:
    if not all([date_str, start_str, end_str]):
        raise ValidationError("date, startTime and endTime are required")
    start = combine_date_time(date_str, start_str)
    end = combine_date_time(date_str, end_str)
    if end <= start:
        raise ValidationError("End time must be after start time.")
    return start.date(), start, end


def is_zone_allowed(user_type: str, zone_type: str) -> bool:
    return zone_type in ZONE_ELIGIBILITY.get(user_type, ())


def generate_proof_code(length: Optional[int] = None) -> str:
    length = length or config.PROOF_CODE_LENGTH
    return ''.join(secrets.choice(PROOF_CODE_ALPHABET) for _ in range(length))


class Identity(NamedTuple):
    campus_user_id: Optional[int]
    owner_name: str
    contact_num: Optional[str]


def find_campus_user(db: Session, user_type: str, student_no: Optional[str], staff_no: Optional[str]):
    query = db.query(CampusUser).filter(
        CampusUser.user_type == user_type,
        CampusUser.status == "Active",
    )
    if user_type == "Student":
        if not student_no:
            raise ValidationError("studentNo is required for Student reservations")
        query = query.filter(CampusUser.student_no == student_no)
    elif user_type == "Staff":
        if not staff_no:
            raise ValidationError("staffNo is required for Staff reservations")
        query = query.filter(CampusUser.staff_no == staff_no)
    else:
        raise ValidationError(f"Unsupported campus user type '{user_type}'")

    user = query.first()
    if not user:
        raise UserNotFound("User not found or inactive")
    return user


def resolve_identity(db: Session, req) -> Identity:
    if req.user_type == "Visitor":
        if not req.name:
            raise ValidationError("name is required for Visitor reservations")
        return Identity(None, req.name, req.phone_num)

    user = find_campus_user(db, req.user_type, req.student_no, req.staff_no)
    return Identity(user.id, user.full_name, user.phone_num or req.phone_num)


def upsert_vehicle(db: Session, plate_num: str, vehicle_type: str, owner_type: str, identity: Identity) -> Vehicle:
    vehicle = get_vehicle_by_plate(db, plate_num)
    if vehicle:
        return vehicle

    vehicle = Vehicle(
        plate_num=plate_num,
        vehicle_type=vehicle_type,
        owner_name=identity.owner_name,
        owner_type=owner_type,
        contact_num=identity.contact_num,
        campus_user_id=identity.campus_user_id,
    )
    try:
        with db.begin_nested():
            db.add(vehicle)
    except IntegrityError:
        # registered by a concurrent booking between lookup and insert
        vehicle = get_vehicle_by_plate(db, plate_num)
        if vehicle is None:
            raise StorageError("Could not register vehicle")
    return vehicle


def _insert_with_proof_code(db: Session, **fields) -> Reservation:
    for attempt in range(1, config.PROOF_CODE_MAX_ATTEMPTS + 1):
        reservation = Reservation(proof_code=generate_proof_code(), status="Reserved", **fields)
        try:
            with db.begin_nested():
                db.add(reservation)
            return reservation
        except IntegrityError:
            logger.warning("Proof code collision on attempt %d, retrying", attempt)
    raise StorageError("Could not allocate a unique proof code")


def create_reservation(db: Session, req) -> Reservation:
    identity = resolve_identity(db, req)

    zone = get_or_404(db, ParkingZone, req.zone_id, "Parking zone")
    if not is_zone_allowed(req.user_type, zone.zone_type):
        logger.warning("Rejected %s booking for %s zone %s", req.user_type, zone.zone_type, zone.id)
        raise ZoneNotAllowed(f"Zone type {zone.zone_type} not allowed for {req.user_type}")
    if zone.faculty_id != req.faculty_id:
        raise ValidationError("Zone does not belong to the selected faculty")

    reservation_date, start, end = parse_window(req.reservation_date, req.start_time, req.end_time)

    lot = db.get(ParkingLot, req.lot_id)
    if lot is None or lot.zone_id != zone.id:
        raise NotFound(f"Parking lot {req.lot_id} not found in zone {zone.id}")
    if lot.status == "Maintenance":
        raise ValidationError(f"Parking lot {lot.lot_number} is under maintenance")

    lot_id = lot.id
    # end the read transaction so the conflict check below sees bookings committed meanwhile
    db.commit()

    with lot_lock(lot_id):
        try:
            db.query(ParkingLot).filter(ParkingLot.id == lot_id).with_for_update().one()

            conflict = find_lot_conflict(db, lot_id, reservation_date, start, end)
            if conflict:
                logger.warning("Lot %s already reserved for %s %s-%s", lot_id, reservation_date, start.time(), end.time())
                raise LotConflict("Lot already reserved for this time")

            vehicle = upsert_vehicle(db, req.plate_num, req.vehicle_type, req.user_type, identity)
            reservation = _insert_with_proof_code(
                db,
                faculty_id=req.faculty_id,
                zone_id=req.zone_id,
                lot_id=lot_id,
                vehicle_id=vehicle.id,
                reservation_date=reservation_date,
                start_time=start,
                end_time=end,
                user_type=req.user_type,
            )
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(reservation)
    logger.info("Reservation %s created for lot %s on %s %s-%s",
                reservation.proof_code, lot_id, reservation_date, start.time(), end.time())
    return reservation


def transition_reservation(db: Session, reservation: Reservation, new_status: str) -> Reservation:
    """Move ``reservation`` to ``new_status`` if the transition table allows it.

    Does not commit; callers own the transaction.
    """
    if new_status not in ALLOWED_TRANSITIONS:
        raise ValidationError(f"Unknown reservation status '{new_status}'")
    if new_status not in ALLOWED_TRANSITIONS[reservation.status]:
        raise InvalidTransition(f"Cannot change reservation from {reservation.status} to {new_status}")
    logger.info("Reservation %s: %s -> %s", reservation.proof_code, reservation.status, new_status)
    reservation.status = new_status
    return reservation


def update_reservation_status(db: Session, reservation_id: int, new_status: str) -> Reservation:
    reservation = get_or_404(db, Reservation, reservation_id, "Reservation")
    transition_reservation(db, reservation, new_status)
    if new_status in ("Cancelled", "Completed"):
        reservation.lot.status = "Available"
        # a freed lot must not keep an open session
        open_sessions = (
            db.query(ParkingSession)
              .filter(ParkingSession.reservation_id == reservation.id, ParkingSession.exit_time.is_(None))
              .all()
        )
        for session in open_sessions:
            session.exit_time = campus_now()
            logger.info("Closed session %s with reservation %s", session.id, reservation.proof_code)
    db.commit()
    db.refresh(reservation)
    return reservation
