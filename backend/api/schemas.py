from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field

# Request bodies accept any JSON value per field; core.schema owns the rules so
# that every violation comes back in one response instead of FastAPI's 422.


class SupportCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    fullName: Optional[Any] = Field(None, examples=["Jane Doe"])
    email: Optional[Any] = Field(None, examples=["jane@example.com"])
    inquiryType: Optional[Any] = Field(None, examples=["patient"])
    message: Optional[Any] = Field(None, examples=["I would like to know more about home care."])
    status: Optional[Any] = None


class AppointmentCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    patientName: Optional[Any] = Field(None, examples=["Jane Doe"])
    email: Optional[Any] = Field(None, examples=["jane@example.com"])
    phone: Optional[Any] = Field(None, examples=["+1 (555) 123-4567"])
    appointmentDate: Optional[Any] = Field(None, examples=["2026-11-02T10:30:00"])
    appointmentType: Optional[Any] = Field(None, examples=["checkup"])
    notes: Optional[Any] = None
    status: Optional[Any] = None


class AppointmentUpdate(AppointmentCreate):
    pass


class Envelope(BaseModel):
    success: bool
    message: Optional[str] = None
    errors: Optional[List[str]] = None
    data: Optional[Any] = None
    count: Optional[int] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    message: str
    database: str
