from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from booking import update_reservation_status
from database import get_db
from models import CampusUser, Reservation, Vehicle
from schemas.reservationsSchema import ReservationDetailRead, ReservationRead, ReservationStatusUpdate

router = APIRouter(prefix="/admin/reservations", tags=["reservations"])


@router.get("", response_model=List[ReservationDetailRead])
def list_reservations(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = (
        db.query(Reservation)
          .join(Vehicle, Reservation.vehicle_id == Vehicle.id)
          .outerjoin(CampusUser, Vehicle.campus_user_id == CampusUser.id)
          .options(
              joinedload(Reservation.faculty),
              joinedload(Reservation.zone),
              joinedload(Reservation.lot),
              joinedload(Reservation.vehicle),
          )
    )
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Reservation.proof_code.ilike(pattern),
            Vehicle.plate_num.ilike(pattern),
            Vehicle.owner_name.ilike(pattern),
            CampusUser.full_name.ilike(pattern),
        ))
    if status:
        query = query.filter(Reservation.status == status)
    return query.order_by(Reservation.created_at.desc(), Reservation.id.desc()).offset(skip).limit(limit).all()


@router.patch("/{reservation_id}/status", response_model=ReservationRead)
def change_status(reservation_id: int, body: ReservationStatusUpdate, db: Session = Depends(get_db)):
    return update_reservation_status(db, reservation_id, body.status)


@router.patch("/{reservation_id}/cancel", response_model=ReservationRead)
def cancel_reservation(reservation_id: int, db: Session = Depends(get_db)):
    return update_reservation_status(db, reservation_id, "Cancelled")
