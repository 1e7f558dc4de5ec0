from datetime import date, datetime
from sqlalchemy.orm import Session, joinedload
from models import (
    ACTIVE_RESERVATION_STATUSES, ParkingLot, ParkingSession, Reservation, Vehicle
)
from errors import NotFound


def get_or_404(db: Session, model, obj_id: int, label: str):
    obj = db.get(model, obj_id)
    if obj is None:
        raise NotFound(f"{label} {obj_id} not found")
    return obj


def intervals_overlap(a_start, a_end, b_start, b_end) -> bool:
    return a_start < b_end and a_end > b_start


def overlapping_reservations(db: Session, reservation_date: date, start: datetime, end: datetime):
    """Active reservations on ``reservation_date`` whose window intersects [start, end).

    Half-open test: ``existing.start < end AND existing.end > start``, so a
    booking ending exactly when another starts does not overlap it.
    """
    return (
        db.query(Reservation)
          .filter(Reservation.reservation_date == reservation_date)
          .filter(Reservation.status.in_(ACTIVE_RESERVATION_STATUSES))
          .filter(Reservation.start_time < end)
          .filter(Reservation.end_time > start)
    )


def find_lot_conflict(db: Session, lot_id: int, reservation_date: date, start: datetime, end: datetime):
    return (
        overlapping_reservations(db, reservation_date, start, end)
          .filter(Reservation.lot_id == lot_id)
          .first()
    )


def get_available_lots(db: Session, zone_id: int, reservation_date: date, start: datetime, end: datetime):
    lots = (
        db.query(ParkingLot)
          .filter(ParkingLot.zone_id == zone_id, ParkingLot.status == "Available")
          .order_by(ParkingLot.lot_number)
          .all()
    )
    booked = (
        db.query(Reservation.lot_id, Reservation.start_time, Reservation.end_time)
          .filter(Reservation.reservation_date == reservation_date)
          .filter(Reservation.status.in_(ACTIVE_RESERVATION_STATUSES))
          .filter(Reservation.lot_id.in_([lot.id for lot in lots]))
          .all()
    )
    reserved_ids = {
        row.lot_id for row in booked
        if intervals_overlap(row.start_time, row.end_time, start, end)
    }
    return [(lot, lot.id in reserved_ids) for lot in lots]


def get_reservation_by_proof_code(db: Session, proof_code: str):
    return (
        db.query(Reservation)
          .filter(Reservation.proof_code == proof_code)
          .options(
              joinedload(Reservation.faculty),
              joinedload(Reservation.zone),
              joinedload(Reservation.lot),
              joinedload(Reservation.vehicle),
          )
          .first()
    )


def get_vehicle_by_plate(db: Session, plate_num: str):
    return db.query(Vehicle).filter(Vehicle.plate_num == plate_num).first()


def get_open_session_for_lot(db: Session, lot_id: int):
    return (
        db.query(ParkingSession)
          .filter(ParkingSession.lot_id == lot_id, ParkingSession.exit_time.is_(None))
          .first()
    )


def settle_fine(db: Session, fine):
    """Mark ``fine`` Paid once its payments cover the amount. Does not commit."""
    total_paid = sum(p.amount_paid for p in fine.payments)
    if total_paid >= fine.amount:
        fine.status = "Paid"
    return total_paid
