import logging
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from booking import campus_now, lot_lock, transition_reservation
from crud import get_open_session_for_lot, get_or_404, get_reservation_by_proof_code, get_vehicle_by_plate
from database import get_db
from errors import LotConflict, NotFound, ValidationError
from models import ParkingLot, ParkingSession
from schemas.sessionSchema import CheckInRequest, SessionRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/sessions", tags=["sessions"])


@router.get("", response_model=List[SessionRead])
def list_sessions(
    active_only: bool = Query(False),
    limit: int = Query(100, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = db.query(ParkingSession)
    if active_only:
        query = query.filter(ParkingSession.exit_time.is_(None))
    return query.order_by(ParkingSession.entry_time.desc()).limit(limit).all()


@router.post("/check-in", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
def check_in(s: CheckInRequest, db: Session = Depends(get_db)):
    vehicle = get_vehicle_by_plate(db, s.plate_num)
    if not vehicle:
        raise NotFound("Vehicle not found. Please register vehicle first.")

    reservation = None
    if s.proof_code:
        reservation = get_reservation_by_proof_code(db, s.proof_code.strip().upper())
        if not reservation:
            raise NotFound("Reservation not found")
        if reservation.vehicle_id != vehicle.id:
            raise ValidationError("Reservation does not match vehicle")
        if s.lot_id is not None and s.lot_id != reservation.lot_id:
            raise ValidationError("Reservation is for a different lot")

    lot_id = s.lot_id if s.lot_id is not None else (reservation.lot_id if reservation else None)
    if lot_id is None:
        raise ValidationError("lot_id is required for walk-in check-in")

    with lot_lock(lot_id):
        try:
            lot = db.query(ParkingLot).filter(ParkingLot.id == lot_id).with_for_update().first()
            if not lot:
                raise NotFound(f"Parking lot {lot_id} not found")
            if lot.status in ("Occupied", "Maintenance") or get_open_session_for_lot(db, lot_id):
                raise LotConflict(f"Lot {lot.lot_number} is not available for check-in. Current status: {lot.status}")

            if reservation:
                transition_reservation(db, reservation, "CheckedIn")

            db_session = ParkingSession(
                lot_id=lot_id,
                vehicle_id=vehicle.id,
                reservation_id=reservation.id if reservation else None,
                entry_time=campus_now(),
                session_type="Reservation" if reservation else "WalkIn",
            )
            db.add(db_session)
            lot.status = "Occupied"
            db.commit()
        except Exception:
            db.rollback()
            raise

    db.refresh(db_session)
    logger.info("Vehicle %s checked in to lot %s (session %s)", vehicle.plate_num, lot_id, db_session.id)
    return db_session


@router.post("/{session_id}/check-out", response_model=SessionRead)
def check_out(session_id: int, db: Session = Depends(get_db)):
    ses = get_or_404(db, ParkingSession, session_id, "Parking session")
    if ses.exit_time is not None:
        raise NotFound("Active session not found or already checked out.")

    ses.exit_time = campus_now()
    ses.lot.status = "Available"
    if ses.reservation and ses.reservation.status == "CheckedIn":
        transition_reservation(db, ses.reservation, "Completed")
    db.commit()
    db.refresh(ses)
    logger.info("Session %s checked out of lot %s", ses.id, ses.lot_id)
    return ses
