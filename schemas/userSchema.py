from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CampusUserRead(BaseModel):
    id: int
    faculty_id: int
    full_name: str
    user_type: str
    student_no: Optional[str] = None
    staff_no: Optional[str] = None
    email: str
    phone_num: Optional[str] = None
    status: str

    model_config = ConfigDict(from_attributes=True)

class CampusUserUpdate(BaseModel):
    faculty_id: Optional[int] = None
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone_num: Optional[str] = None
    status: Optional[Literal["Active", "Inactive"]] = None

class VerifyCampusUserRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    user_type: Literal["Student", "Staff"] = Field(alias="userType")
    student_no: Optional[str] = Field(None, alias="studentNo")
    staff_no: Optional[str] = Field(None, alias="staffNo")

class AdminRead(BaseModel):
    id: int
    name: str
    username: str
    email: str
    role: str

    model_config = ConfigDict(from_attributes=True)
