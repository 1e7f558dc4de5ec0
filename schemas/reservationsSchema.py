from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from schemas.parkingzone_schema import FacultyRead, ParkingLotRead, ParkingZoneRead
from schemas.vehicleSchema import VehicleRead, normalize_plate

ReservationStatus = Literal["Reserved", "CheckedIn", "Completed", "Cancelled"]


class ReservationCreate(BaseModel):
    # Public booking form; wire names are camelCase
    model_config = ConfigDict(populate_by_name=True)

    user_type: Literal["Student", "Staff", "Visitor"] = Field(alias="userType")
    student_no: Optional[str] = Field(None, alias="studentNo")
    staff_no: Optional[str] = Field(None, alias="staffNo")
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone_num: Optional[str] = Field(None, alias="phoneNum")
    plate_num: str = Field(alias="plateNum", min_length=1)
    vehicle_type: str = Field(alias="vehicleType")
    # Kept as strings: parsed server-side after zone eligibility is checked
    reservation_date: str = Field(alias="reservationDate")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    faculty_id: int = Field(alias="facultyID")
    zone_id: int = Field(alias="zoneID")
    lot_id: int = Field(alias="lotID")

    @field_validator("plate_num")
    @classmethod
    def clean_plate(cls, v: str) -> str:
        return normalize_plate(v)


class ReservationRead(BaseModel):
    id: int
    faculty_id: int
    zone_id: int
    lot_id: int
    vehicle_id: int
    reservation_date: date
    start_time: datetime
    end_time: datetime
    created_at: datetime
    status: ReservationStatus
    user_type: str
    proof_code: str

    model_config = ConfigDict(from_attributes=True)


class ReservationDetailRead(ReservationRead):
    faculty: FacultyRead
    zone: ParkingZoneRead
    lot: ParkingLotRead
    vehicle: VehicleRead


class ReservationCreated(BaseModel):
    reservation: ReservationRead
    proof_code: str = Field(serialization_alias="proofCode")


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus


class FindReservationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    plate_num: str = Field(alias="plateNum", min_length=1)

    @field_validator("plate_num")
    @classmethod
    def clean_plate(cls, v: str) -> str:
        return normalize_plate(v)


class ProofCodeResponse(BaseModel):
    proof_code: str = Field(serialization_alias="proofCode")
