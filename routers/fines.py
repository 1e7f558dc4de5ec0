import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, joinedload

from crud import get_or_404, settle_fine
from database import get_db
from errors import NotFound, ValidationError
from models import Admin, Fine, ParkingSession, Payment
from schemas.fineSchema import FineCreate, FineDetailRead, FineRead, PaymentCreate, PaymentRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["fines"])


def resolve_admin(db: Session, admin_id: Optional[int]) -> Admin:
    if admin_id is not None:
        return get_or_404(db, Admin, admin_id, "Admin")
    admin = db.query(Admin).order_by(Admin.id).first()
    if not admin:
        raise NotFound("No admin account exists")
    return admin


# --- Fines ---
@router.get("/fines", response_model=List[FineDetailRead])
def list_fines(db: Session = Depends(get_db)):
    return (
        db.query(Fine)
          .options(joinedload(Fine.session).joinedload(ParkingSession.vehicle))
          .order_by(Fine.issued_date.desc())
          .all()
    )

@router.post("/fines", response_model=FineRead, status_code=status.HTTP_201_CREATED)
def issue_fine(fine_in: FineCreate, db: Session = Depends(get_db)):
    session = get_or_404(db, ParkingSession, fine_in.session_id, "Parking session")
    admin = resolve_admin(db, fine_in.admin_id)

    fine = Fine(
        session_id=session.id,
        admin_id=admin.id,
        fine_type=fine_in.fine_type,
        amount=fine_in.amount,
        status="Unpaid",
        remarks=fine_in.remarks,
    )
    db.add(fine)
    session.is_violation = True
    db.commit()
    db.refresh(fine)
    logger.info("Fine %s (%s, %.2f) issued on session %s", fine.id, fine.fine_type, fine.amount, session.id)
    return fine


# --- Payments ---
@router.get("/payments", response_model=List[PaymentRead])
def list_payments(db: Session = Depends(get_db)):
    return db.query(Payment).order_by(Payment.payment_date.desc()).all()

@router.post("/payments", response_model=PaymentRead, status_code=status.HTTP_201_CREATED)
def record_payment(payment_in: PaymentCreate, db: Session = Depends(get_db)):
    fine = get_or_404(db, Fine, payment_in.fine_id, "Fine")
    if fine.status != "Unpaid":
        raise ValidationError("Fine is already paid")
    admin = resolve_admin(db, payment_in.admin_id)

    payment = Payment(
        admin_id=admin.id,
        amount_paid=payment_in.amount_paid,
        payment_method="Cash",
        receipt_num=payment_in.receipt_num,
    )
    fine.payments.append(payment)
    total_paid = settle_fine(db, fine)
    db.commit()
    db.refresh(payment)
    logger.info("Payment of %.2f recorded for fine %s (total %.2f of %.2f)",
                payment.amount_paid, fine.id, total_paid, fine.amount)
    return payment
