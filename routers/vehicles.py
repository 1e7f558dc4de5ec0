from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from crud import get_or_404, get_vehicle_by_plate
from database import get_db
from errors import ValidationError
from models import CampusUser, ParkingSession, ParkingZone, Permit, Reservation, Vehicle
from schemas.common_schema import SuccessMessage
from schemas.vehicleSchema import (
    PermitCreate, PermitRead, PermitUpdate, VehicleCreate, VehicleRead, VehicleUpdate
)

router = APIRouter(prefix="/admin", tags=["vehicles"])


# --- Vehicles ---
@router.get("/vehicles", response_model=List[VehicleRead])
def list_vehicles(search: Optional[str] = Query(None), db: Session = Depends(get_db)):
    query = db.query(Vehicle)
    if search:
        pattern = f"%{search}%"
        query = query.filter(Vehicle.plate_num.ilike(pattern) | Vehicle.owner_name.ilike(pattern))
    return query.order_by(Vehicle.plate_num).all()

@router.post("/vehicles", response_model=VehicleRead, status_code=status.HTTP_201_CREATED)
def create_vehicle(vehicle_in: VehicleCreate, db: Session = Depends(get_db)):
    if get_vehicle_by_plate(db, vehicle_in.plate_num):
        raise ValidationError(f"Plate {vehicle_in.plate_num} already registered")
    if vehicle_in.campus_user_id is not None:
        get_or_404(db, CampusUser, vehicle_in.campus_user_id, "Campus user")
    vehicle = Vehicle(**vehicle_in.model_dump())
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return vehicle

@router.put("/vehicles/{vehicle_id}", response_model=VehicleRead)
def update_vehicle(vehicle_id: int, vehicle_update: VehicleUpdate, db: Session = Depends(get_db)):
    vehicle = get_or_404(db, Vehicle, vehicle_id, "Vehicle")
    data = vehicle_update.model_dump(exclude_unset=True)
    if data.get("plate_num"):
        other = get_vehicle_by_plate(db, data["plate_num"])
        if other and other.id != vehicle_id:
            raise ValidationError(f"Plate {data['plate_num']} already registered")
    if data.get("campus_user_id") is not None:
        get_or_404(db, CampusUser, data["campus_user_id"], "Campus user")
    for key, value in data.items():
        setattr(vehicle, key, value)
    db.commit()
    db.refresh(vehicle)
    return vehicle

@router.delete("/vehicles/{vehicle_id}", response_model=SuccessMessage)
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    vehicle = get_or_404(db, Vehicle, vehicle_id, "Vehicle")
    in_use = (
        db.query(Reservation).filter(Reservation.vehicle_id == vehicle_id).first()
        or db.query(ParkingSession).filter(ParkingSession.vehicle_id == vehicle_id).first()
    )
    if in_use:
        raise ValidationError("Vehicle has reservations or sessions")
    db.query(Permit).filter(Permit.vehicle_id == vehicle_id).delete(synchronize_session=False)
    db.delete(vehicle)
    db.commit()
    return SuccessMessage(message="Vehicle deleted")


# --- Permits ---
def _check_permit_dates(start_date, end_date):
    if end_date < start_date:
        raise ValidationError("Permit end date must not be before its start date")

@router.get("/permits", response_model=List[PermitRead])
def list_permits(db: Session = Depends(get_db)):
    return db.query(Permit).order_by(Permit.start_date.desc()).all()

@router.post("/permits", response_model=PermitRead, status_code=status.HTTP_201_CREATED)
def create_permit(permit_in: PermitCreate, db: Session = Depends(get_db)):
    get_or_404(db, Vehicle, permit_in.vehicle_id, "Vehicle")
    get_or_404(db, ParkingZone, permit_in.zone_id, "Parking zone")
    _check_permit_dates(permit_in.start_date, permit_in.end_date)
    permit = Permit(**permit_in.model_dump())
    db.add(permit)
    db.commit()
    db.refresh(permit)
    return permit

@router.put("/permits/{permit_id}", response_model=PermitRead)
def update_permit(permit_id: int, permit_update: PermitUpdate, db: Session = Depends(get_db)):
    permit = get_or_404(db, Permit, permit_id, "Permit")
    data = permit_update.model_dump(exclude_unset=True)
    if data.get("vehicle_id") is not None:
        get_or_404(db, Vehicle, data["vehicle_id"], "Vehicle")
    if data.get("zone_id") is not None:
        get_or_404(db, ParkingZone, data["zone_id"], "Parking zone")
    _check_permit_dates(data.get("start_date") or permit.start_date, data.get("end_date") or permit.end_date)
    for key, value in data.items():
        setattr(permit, key, value)
    db.commit()
    db.refresh(permit)
    return permit

@router.delete("/permits/{permit_id}", response_model=SuccessMessage)
def delete_permit(permit_id: int, db: Session = Depends(get_db)):
    permit = get_or_404(db, Permit, permit_id, "Permit")
    db.delete(permit)
    db.commit()
    return SuccessMessage(message="Permit deleted")
