from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime


class CamelModel(BaseModel):
    """Base schema using camelCase keys on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BookingRequest(CamelModel):
    """Schema for booking an appointment.

    Fields are optional here so that missing or malformed values are reported
    by the booking rules with their own messages.
    """
    user_id: str | None = Field(None, description="User ID")
    user_name: str | None = Field(None, description="Owner display name")
    user_email: str | None = Field(None, description="Owner contact email")
    service: str | None = Field(None, description="Service type")
    dentist: str | None = Field(None, description="Dentist name")
    date: str | None = Field(None, description="Appointment date (YYYY-MM-DD)")
    time: str | None = Field(None, description="Appointment time (HH:mm, 24-hour)")
    notes: str = Field("", description="Optional notes")


class AppointmentUpdate(CamelModel):
    """Schema for updating an appointment."""
    user_id: str | None = None
    date: str | None = None
    time: str | None = None
    service: str | None = None
    dentist: str | None = None
    notes: str | None = None


class CancelRequest(CamelModel):
    user_id: str | None = None


class AvailabilityQuery(CamelModel):
    date: str | None = None
    dentist: str | None = None


class AppointmentResponse(CamelModel):
    """Schema for appointment response."""
    appointment_id: str
    user_id: str
    user_name: str
    user_email: str
    service: str
    dentist: str
    date: str
    time: str
    notes: str
    status: str
    created_at: datetime
    updated_at: datetime


class AppointmentEnvelope(CamelModel):
    success: bool = True
    message: str
    appointment: AppointmentResponse


class AppointmentDetail(CamelModel):
    success: bool = True
    appointment: AppointmentResponse


class AppointmentList(CamelModel):
    success: bool = True
    count: int
    appointments: list[AppointmentResponse]


class AvailabilityResponse(CamelModel):
    """Schema for a dentist's free and busy slots on one day."""
    success: bool = True
    date: str
    dentist: str
    all_slots: list[str]
    available_slots: list[str]
    total_slots: int
    booked_slots: int
    is_past_date: bool


class MessageResponse(CamelModel):
    success: bool = True
    message: str
