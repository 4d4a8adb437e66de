"""Appointment routes - API endpoints for appointment operations."""

from fastapi import APIRouter

from bliss_dental.api.deps import ClockDep, DBSession
from bliss_dental.schemas.appointment import (
    AppointmentDetail,
    AppointmentEnvelope,
    AppointmentList,
    AppointmentResponse,
    AppointmentUpdate,
    AvailabilityQuery,
    AvailabilityResponse,
    BookingRequest,
    CancelRequest,
    MessageResponse,
)
from bliss_dental.services.appointment_service import AppointmentService

router = APIRouter()


@router.post("/book", response_model=AppointmentEnvelope, status_code=201)
async def book_appointment(request: BookingRequest, db: DBSession, clock: ClockDep):
    """Book a new appointment."""
    service = AppointmentService(db, clock)
    appointment = await service.book(request)
    return AppointmentEnvelope(
        message="Appointment booked successfully",
        appointment=AppointmentResponse.model_validate(appointment),
    )


@router.get("/user/{user_id}", response_model=AppointmentList)
async def get_user_appointments(
    user_id: str,
    db: DBSession,
    clock: ClockDep,
    status: str | None = None,
):
    """Get all appointments for a user, latest first."""
    service = AppointmentService(db, clock)
    appointments = await service.list_for_user(user_id, status)
    return AppointmentList(
        count=len(appointments),
        appointments=[AppointmentResponse.model_validate(a) for a in appointments],
    )


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    db: DBSession,
    clock: ClockDep,
    date: str | None = None,
    dentist: str | None = None,
):
    """Get free and booked slots for a dentist on a date."""
    service = AppointmentService(db, clock)
    availability = await service.availability(
        AvailabilityQuery(date=date, dentist=dentist)
    )
    return AvailabilityResponse(
        date=availability.date,
        dentist=availability.dentist,
        all_slots=availability.all_slots,
        available_slots=availability.available_slots,
        total_slots=availability.total_slots,
        booked_slots=availability.booked_slots,
        is_past_date=availability.is_past_date,
    )


@router.put("/cancel/{appointment_id}", response_model=MessageResponse)
async def cancel_appointment(
    appointment_id: str, request: CancelRequest, db: DBSession, clock: ClockDep
):
    """Cancel an appointment (soft delete by changing status)."""
    service = AppointmentService(db, clock)
    await service.cancel(appointment_id, request)
    return MessageResponse(message="Appointment cancelled successfully")


@router.put("/{appointment_id}", response_model=AppointmentEnvelope)
async def update_appointment(
    appointment_id: str, update: AppointmentUpdate, db: DBSession, clock: ClockDep
):
    """Update an appointment (date, time, dentist, service or notes)."""
    service = AppointmentService(db, clock)
    appointment = await service.update(appointment_id, update)
    return AppointmentEnvelope(
        message="Appointment updated successfully",
        appointment=AppointmentResponse.model_validate(appointment),
    )


@router.get("/{appointment_id}", response_model=AppointmentDetail)
async def get_appointment(appointment_id: str, db: DBSession, clock: ClockDep):
    """Get an appointment by ID."""
    service = AppointmentService(db, clock)
    appointment = await service.get(appointment_id)
    return AppointmentDetail(appointment=AppointmentResponse.model_validate(appointment))
