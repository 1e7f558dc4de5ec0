from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, field_validator


def normalize_plate(value: str) -> str:
    plate = "".join(value.split()).upper()
    if not plate:
        raise ValueError("plate number must not be blank")
    return plate


class VehicleCreate(BaseModel):
    plate_num: str
    vehicle_type: str
    owner_name: str
    owner_type: Literal["Student", "Staff", "Visitor"]
    contact_num: Optional[str] = None
    campus_user_id: Optional[int] = None

    @field_validator("plate_num")
    @classmethod
    def clean_plate(cls, v: str) -> str:
        return normalize_plate(v)

class VehicleRead(VehicleCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)

class VehicleUpdate(BaseModel):
    plate_num: Optional[str] = None
    vehicle_type: Optional[str] = None
    owner_name: Optional[str] = None
    owner_type: Optional[Literal["Student", "Staff", "Visitor"]] = None
    contact_num: Optional[str] = None
    campus_user_id: Optional[int] = None

    @field_validator("plate_num")
    @classmethod
    def clean_plate(cls, v: Optional[str]) -> Optional[str]:
        return normalize_plate(v) if v is not None else v


class PermitCreate(BaseModel):
    vehicle_id: int
    zone_id: int
    permit_type: str
    start_date: date
    end_date: date
    status: Literal["Active", "Expired", "Revoked"] = "Active"

class PermitRead(PermitCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)

class PermitUpdate(BaseModel):
    vehicle_id: Optional[int] = None
    zone_id: Optional[int] = None
    permit_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[Literal["Active", "Expired", "Revoked"]] = None
