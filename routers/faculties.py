from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from crud import get_or_404
from database import get_db
from errors import ValidationError
from models import CampusUser, Faculty, ParkingZone
from schemas.common_schema import SuccessMessage
from schemas.parkingzone_schema import FacultyCreate, FacultyRead, FacultyUpdate

router = APIRouter(prefix="/admin/faculties", tags=["faculties"])


@router.get("", response_model=List[FacultyRead])
def list_faculties(db: Session = Depends(get_db)):
    return db.query(Faculty).order_by(Faculty.name).all()

@router.post("", response_model=FacultyRead, status_code=status.HTTP_201_CREATED)
def create_faculty(faculty_in: FacultyCreate, db: Session = Depends(get_db)):
    if db.query(Faculty).filter(Faculty.code == faculty_in.code).first():
        raise ValidationError(f"Faculty code {faculty_in.code} already exists")
    faculty = Faculty(**faculty_in.model_dump())
    db.add(faculty)
    db.commit()
    db.refresh(faculty)
    return faculty

@router.put("/{faculty_id}", response_model=FacultyRead)
def update_faculty(faculty_id: int, faculty_update: FacultyUpdate, db: Session = Depends(get_db)):
    faculty = get_or_404(db, Faculty, faculty_id, "Faculty")
    data = faculty_update.model_dump(exclude_unset=True)
    if data.get("code") and db.query(Faculty).filter(Faculty.code == data["code"], Faculty.id != faculty_id).first():
        raise ValidationError(f"Faculty code {data['code']} already exists")
    for key, value in data.items():
        setattr(faculty, key, value)
    db.commit()
    db.refresh(faculty)
    return faculty

@router.delete("/{faculty_id}", response_model=SuccessMessage)
def delete_faculty(faculty_id: int, db: Session = Depends(get_db)):
    faculty = get_or_404(db, Faculty, faculty_id, "Faculty")
    in_use = (
        db.query(ParkingZone).filter(ParkingZone.faculty_id == faculty_id).first()
        or db.query(CampusUser).filter(CampusUser.faculty_id == faculty_id).first()
    )
    if in_use:
        raise ValidationError("Faculty still has zones or campus users")
    db.delete(faculty)
    db.commit()
    return SuccessMessage(message="Faculty deleted")
