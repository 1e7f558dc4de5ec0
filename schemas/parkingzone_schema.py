from pydantic import BaseModel, ConfigDict, Field
from typing import Literal, Optional

ZoneType = Literal["Student", "Staff", "Visitor", "Mixed", "Disabled"]
LotStatus = Literal["Available", "Occupied", "Reserved", "Maintenance"]


class FacultyCreate(BaseModel):
    name: str
    code: str
    location_desc: Optional[str] = None

class FacultyRead(FacultyCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)

class FacultyUpdate(BaseModel):
    name: Optional[str] = None
    code: Optional[str] = None
    location_desc: Optional[str] = None


class ParkingZoneCreate(BaseModel):
    faculty_id: int
    name: str
    zone_type: ZoneType
    capacity: int = Field(0, ge=0)
    location_desc: Optional[str] = None

class ParkingZoneRead(ParkingZoneCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)

class ParkingZoneUpdate(BaseModel):
    faculty_id: Optional[int] = None
    name: Optional[str] = None
    zone_type: Optional[ZoneType] = None
    capacity: Optional[int] = Field(None, ge=0)
    location_desc: Optional[str] = None

class ParkingZoneOccupancyRead(ParkingZoneRead):
    total_spots: int
    occupied_spots: int
    occupancy_rate: float  # percentage, 0-100


class ParkingLotCreate(BaseModel):
    zone_id: int
    lot_number: str
    status: LotStatus = "Available"
    is_disabled_friendly: bool = False

class ParkingLotRead(ParkingLotCreate):
    id: int
    model_config = ConfigDict(from_attributes=True)

class ParkingLotUpdate(BaseModel):
    zone_id: Optional[int] = None
    lot_number: Optional[str] = None
    status: Optional[LotStatus] = None
    is_disabled_friendly: Optional[bool] = None

class AvailableLotRead(ParkingLotRead):
    is_reserved: bool = Field(serialization_alias="isReserved")
