from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, field_validator

from schemas.vehicleSchema import normalize_plate


class CheckInRequest(BaseModel):
    plate_num: str
    lot_id: Optional[int] = None  # defaults to the reservation's lot when proof_code is given
    proof_code: Optional[str] = None

    @field_validator("plate_num")
    @classmethod
    def clean_plate(cls, v: str) -> str:
        return normalize_plate(v)


class SessionRead(BaseModel):
    id: int
    lot_id: int
    vehicle_id: int
    reservation_id: Optional[int] = None
    entry_time: datetime
    exit_time: Optional[datetime] = None
    session_type: str
    is_violation: bool

    model_config = ConfigDict(from_attributes=True)
