import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

import config
from booking import create_reservation, find_campus_user, parse_window
from crud import get_available_lots, get_or_404, get_reservation_by_proof_code, settle_fine
from database import get_db
from errors import NotFound, ValidationError
from models import CampusUser, Faculty, Fine, ParkingSession, ParkingZone, Payment, Reservation, Vehicle
from schemas.fineSchema import FineDetailRead, FinePaymentConfirm, PaymentRead
from schemas.parkingzone_schema import AvailableLotRead, FacultyRead, ParkingLotRead, ParkingZoneRead
from schemas.reservationsSchema import (
    FindReservationRequest, ProofCodeResponse, ReservationCreate, ReservationCreated, ReservationDetailRead, ReservationRead
)
from schemas.userSchema import CampusUserRead, VerifyCampusUserRequest
from schemas.vehicleSchema import normalize_plate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["public"])


@router.get("/faculties", response_model=List[FacultyRead])
def list_faculties(db: Session = Depends(get_db)):
    return db.query(Faculty).order_by(Faculty.name).all()


@router.get("/zones", response_model=List[ParkingZoneRead])
def list_zones(faculty_id: int = Query(..., alias="facultyID"), db: Session = Depends(get_db)):
    return db.query(ParkingZone).filter(ParkingZone.faculty_id == faculty_id).all()


@router.get("/available-lots", response_model=List[AvailableLotRead])
def available_lots(
    zone_id: int = Query(..., alias="zoneID"),
    reservation_date: str = Query(..., alias="date"),
    start_time: str = Query(..., alias="startTime"),
    end_time: str = Query(..., alias="endTime"),
    db: Session = Depends(get_db),
):
    get_or_404(db, ParkingZone, zone_id, "Parking zone")
    day, start, end = parse_window(reservation_date, start_time, end_time)
    return [
        AvailableLotRead(**ParkingLotRead.model_validate(lot).model_dump(), is_reserved=is_reserved)
        for lot, is_reserved in get_available_lots(db, zone_id, day, start, end)
    ]


@router.post("/reservations", response_model=ReservationCreated, status_code=status.HTTP_201_CREATED)
def reserve_lot(res: ReservationCreate, db: Session = Depends(get_db)):
    reservation = create_reservation(db, res)
    return ReservationCreated(reservation=ReservationRead.model_validate(reservation), proof_code=reservation.proof_code)


@router.get("/reservations/{proof_code}", response_model=ReservationDetailRead)
def get_ticket(proof_code: str, db: Session = Depends(get_db)):
    reservation = get_reservation_by_proof_code(db, proof_code.strip().upper())
    if not reservation:
        raise NotFound("Reservation not found")
    return reservation


@router.post("/verify-campus-user", response_model=CampusUserRead)
def verify_campus_user(body: VerifyCampusUserRequest, db: Session = Depends(get_db)):
    return find_campus_user(db, body.user_type, body.student_no, body.staff_no)


@router.post("/find-reservation", response_model=ProofCodeResponse)
def find_reservation(body: FindReservationRequest, db: Session = Depends(get_db)):
    today = datetime.now(config.CAMPUS_TIMEZONE).date()
    reservation = (
        db.query(Reservation)
          .join(Vehicle)
          .filter(
              Vehicle.plate_num == body.plate_num,
              Reservation.status.in_(["Reserved", "CheckedIn"]),
              Reservation.reservation_date >= today,
          )
          .order_by(Reservation.reservation_date, Reservation.start_time)
          .first()
    )
    if not reservation:
        raise NotFound("No active reservation found for this vehicle.")
    return ProofCodeResponse(proof_code=reservation.proof_code)


@router.get("/fines", response_model=List[FineDetailRead])
def search_fines(
    plate_num: Optional[str] = Query(None, alias="plateNum"),
    student_no: Optional[str] = Query(None, alias="studentNo"),
    staff_no: Optional[str] = Query(None, alias="staffNo"),
    db: Session = Depends(get_db),
):
    query = (
        db.query(Fine)
          .join(ParkingSession, Fine.session_id == ParkingSession.id)
          .join(Vehicle, ParkingSession.vehicle_id == Vehicle.id)
          .filter(Fine.status == "Unpaid")
          .options(joinedload(Fine.session).joinedload(ParkingSession.vehicle))
    )
    if plate_num:
        try:
            plate_num = normalize_plate(plate_num)
        except ValueError as exc:
            raise ValidationError(str(exc))
        query = query.filter(Vehicle.plate_num == plate_num)
    elif student_no:
        query = query.join(CampusUser, Vehicle.campus_user_id == CampusUser.id).filter(CampusUser.student_no == student_no)
    elif staff_no:
        query = query.join(CampusUser, Vehicle.campus_user_id == CampusUser.id).filter(CampusUser.staff_no == staff_no)
    else:
        raise ValidationError("Provide plateNum, studentNo or staffNo")
    return query.order_by(Fine.issued_date.desc()).all()


@router.post("/fines/confirm", response_model=PaymentRead)
def confirm_fine_payment(body: FinePaymentConfirm, db: Session = Depends(get_db)):
    existing = db.query(Payment).filter(Payment.gateway_ref == body.gateway_ref).first()
    if existing:
        if existing.fine_id != body.fine_id:
            raise ValidationError("Payment reference belongs to a different fine")
        return existing

    fine = get_or_404(db, Fine, body.fine_id, "Fine")
    if fine.status != "Unpaid":
        raise ValidationError("Invalid fine")

    outstanding = fine.amount - sum(p.amount_paid for p in fine.payments)
    payment = Payment(amount_paid=outstanding, payment_method="Card", gateway_ref=body.gateway_ref)
    fine.payments.append(payment)
    settle_fine(db, fine)
    db.commit()
    db.refresh(payment)
    logger.info("Fine %s paid online (ref %s)", fine.id, body.gateway_ref)
    return payment
