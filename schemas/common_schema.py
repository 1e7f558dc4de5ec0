from pydantic import BaseModel


class SuccessMessage(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    detail: str
