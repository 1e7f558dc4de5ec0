from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, joinedload

from crud import get_or_404
from database import get_db
from errors import ValidationError
from models import Faculty, ParkingLot, ParkingZone, Reservation
from schemas.common_schema import SuccessMessage
from schemas.parkingzone_schema import (
    ParkingLotCreate, ParkingLotRead, ParkingLotUpdate,
    ParkingZoneCreate, ParkingZoneOccupancyRead, ParkingZoneRead, ParkingZoneUpdate
)

router = APIRouter(prefix="/admin", tags=["zones"])


def _check_lot_number_free(db: Session, zone_id: int, lot_number: str, exclude_id: Optional[int] = None):
    query = db.query(ParkingLot).filter(ParkingLot.zone_id == zone_id, ParkingLot.lot_number == lot_number)
    if exclude_id is not None:
        query = query.filter(ParkingLot.id != exclude_id)
    if query.first():
        raise ValidationError(f"Lot {lot_number} already exists in zone {zone_id}")


# --- Parking Zone Endpoints ---
@router.get("/zones", response_model=List[ParkingZoneOccupancyRead])
def list_zones(db: Session = Depends(get_db)):
    zones = db.query(ParkingZone).options(joinedload(ParkingZone.parking_lots)).all()
    result = []
    for zone in zones:
        total = len(zone.parking_lots)
        occupied = sum(1 for lot in zone.parking_lots if lot.status == "Occupied")
        result.append(ParkingZoneOccupancyRead(
            **ParkingZoneRead.model_validate(zone).model_dump(),
            total_spots=total,
            occupied_spots=occupied,
            occupancy_rate=(occupied / total) * 100 if total else 0.0,
        ))
    return result

@router.post("/zones", response_model=ParkingZoneRead, status_code=status.HTTP_201_CREATED)
def create_zone(zone_in: ParkingZoneCreate, db: Session = Depends(get_db)):
    get_or_404(db, Faculty, zone_in.faculty_id, "Faculty")
    db_zone = ParkingZone(**zone_in.model_dump())
    db.add(db_zone)
    db.commit()
    db.refresh(db_zone)
    return db_zone

@router.put("/zones/{zone_id}", response_model=ParkingZoneRead)
def update_zone(zone_id: int, zone_update: ParkingZoneUpdate, db: Session = Depends(get_db)):
    db_zone = get_or_404(db, ParkingZone, zone_id, "Parking zone")
    data = zone_update.model_dump(exclude_unset=True)
    if data.get("faculty_id") is not None:
        get_or_404(db, Faculty, data["faculty_id"], "Faculty")
    for key, value in data.items():
        setattr(db_zone, key, value)
    db.commit()
    db.refresh(db_zone)
    return db_zone

@router.delete("/zones/{zone_id}", response_model=SuccessMessage)
def delete_zone(zone_id: int, db: Session = Depends(get_db)):
    db_zone = get_or_404(db, ParkingZone, zone_id, "Parking zone")
    if db.query(ParkingLot).filter(ParkingLot.zone_id == zone_id).first():
        raise ValidationError("Zone still has parking lots; delete them first")
    db.delete(db_zone)
    db.commit()
    return SuccessMessage(message="Zone deleted")

@router.get("/zones/{zone_id}/lots", response_model=List[ParkingLotRead])
def get_lots_by_zone(zone_id: int, db: Session = Depends(get_db)):
    get_or_404(db, ParkingZone, zone_id, "Parking zone")
    return db.query(ParkingLot).filter(ParkingLot.zone_id == zone_id).order_by(ParkingLot.lot_number).all()


# --- Parking Lot Endpoints ---
@router.get("/lots", response_model=List[ParkingLotRead])
def list_lots(zone_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
    query = db.query(ParkingLot)
    if zone_id is not None:
        query = query.filter(ParkingLot.zone_id == zone_id)
    return query.order_by(ParkingLot.zone_id, ParkingLot.lot_number).all()

@router.post("/lots", response_model=ParkingLotRead, status_code=status.HTTP_201_CREATED)
def create_lot(lot_in: ParkingLotCreate, db: Session = Depends(get_db)):
    get_or_404(db, ParkingZone, lot_in.zone_id, "Parking zone")
    _check_lot_number_free(db, lot_in.zone_id, lot_in.lot_number)
    db_lot = ParkingLot(**lot_in.model_dump())
    db.add(db_lot)
    db.commit()
    db.refresh(db_lot)
    return db_lot

@router.put("/lots/{lot_id}", response_model=ParkingLotRead)
def update_lot(lot_id: int, lot_update: ParkingLotUpdate, db: Session = Depends(get_db)):
    db_lot = get_or_404(db, ParkingLot, lot_id, "Parking lot")
    data = lot_update.model_dump(exclude_unset=True)
    zone_id = data.get("zone_id") or db_lot.zone_id
    if "zone_id" in data:
        get_or_404(db, ParkingZone, zone_id, "Parking zone")
    if "lot_number" in data or "zone_id" in data:
        _check_lot_number_free(db, zone_id, data.get("lot_number", db_lot.lot_number), exclude_id=lot_id)
    for key, value in data.items():
        setattr(db_lot, key, value)
    db.commit()
    db.refresh(db_lot)
    return db_lot

@router.delete("/lots/{lot_id}", response_model=SuccessMessage)
def delete_lot(lot_id: int, db: Session = Depends(get_db)):
    db_lot = get_or_404(db, ParkingLot, lot_id, "Parking lot")
    if db.query(Reservation).filter(Reservation.lot_id == lot_id).first():
        raise ValidationError("Lot has reservations; set it to Maintenance instead")
    db.delete(db_lot)
    db.commit()
    return SuccessMessage(message="Lot deleted")
