from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from schemas.sessionSchema import SessionRead
from schemas.vehicleSchema import VehicleRead


class FineCreate(BaseModel):
    session_id: int
    fine_type: str
    amount: float = Field(gt=0)
    remarks: Optional[str] = None
    admin_id: Optional[int] = None  # falls back to the first admin account

class FineRead(BaseModel):
    id: int
    session_id: int
    admin_id: int
    issued_date: datetime
    fine_type: str
    amount: float
    status: str
    remarks: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class FineSessionRead(SessionRead):
    vehicle: VehicleRead

class FineDetailRead(FineRead):
    session: FineSessionRead


class PaymentCreate(BaseModel):
    fine_id: int
    amount_paid: float = Field(gt=0)
    receipt_num: Optional[str] = None
    admin_id: Optional[int] = None

class PaymentRead(BaseModel):
    id: int
    fine_id: int
    admin_id: Optional[int] = None
    payment_date: datetime
    amount_paid: float
    payment_method: str
    receipt_num: Optional[str] = None
    gateway_ref: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class FinePaymentConfirm(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    fine_id: int = Field(alias="fineID")
    gateway_ref: str = Field(alias="gatewayRef", min_length=1)
