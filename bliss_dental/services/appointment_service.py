"""Appointment service - Business logic for appointment operations."""

import logging

import logfire
from sqlalchemy.ext.asyncio import AsyncSession

from bliss_dental.clock import Clock
from bliss_dental.exceptions import (
    BookingError,
    ConflictError,
    NotFoundError,
    PolicyViolation,
    ValidationError,
)
from bliss_dental.models.appointment import Appointment, AppointmentStatus
from bliss_dental.repositories.appointments import AppointmentRepository
from bliss_dental.schemas.appointment import (
    AppointmentUpdate,
    AvailabilityQuery,
    BookingRequest,
    CancelRequest,
)
from bliss_dental.services.slot_policy import (
    Availability,
    Decision,
    ReasonCode,
    SERVICES,
    SlotCandidate,
    compute_availability,
    evaluate_booking,
    evaluate_cancellation,
    normalize_time,
    parse_date,
    validate_candidate,
)

logger = logging.getLogger(__name__)

ERROR_CATEGORIES: dict[ReasonCode, type[BookingError]] = {
    ReasonCode.MISSING_FIELD: ValidationError,
    ReasonCode.MALFORMED_INPUT: ValidationError,
    ReasonCode.SLOT_TAKEN: ConflictError,
    ReasonCode.OUTSIDE_HOURS: PolicyViolation,
    ReasonCode.PAST_DATE: PolicyViolation,
    ReasonCode.PAST_TIME: PolicyViolation,
    ReasonCode.TOO_LATE_TO_CANCEL: PolicyViolation,
    ReasonCode.ALREADY_CANCELLED: PolicyViolation,
}


def raise_for_decision(decision: Decision) -> None:
    """Turn a rejected decision into the matching service error."""
    if decision.accepted:
        return
    error_class = ERROR_CATEGORIES[decision.reason]
    raise error_class(decision.message, reason=decision.reason.value)


class AppointmentService:
    """Service class for appointment operations."""

    def __init__(self, db: AsyncSession, clock: Clock):
        self.repository = AppointmentRepository(db)
        self.clock = clock

    async def _check_slot(
        self, candidate: SlotCandidate, exclude_id: str | None = None
    ) -> None:
        decision = validate_candidate(candidate)
        if decision.accepted:
            candidate.time = normalize_time(candidate.time)
            existing = await self.repository.find_conflicting(
                candidate.dentist, candidate.date, candidate.time, exclude_id=exclude_id
            )
            decision = evaluate_booking(
                candidate, existing, self.clock.now(), exclude_id=exclude_id
            )

        if not decision.accepted:
            logfire.info(
                "appointment_rejected",
                reason=decision.reason.value,
                dentist=candidate.dentist,
                date=candidate.date,
                time=candidate.time,
            )
        raise_for_decision(decision)

    async def book(self, request: BookingRequest) -> Appointment:
        """Create a new Pending appointment."""
        candidate = SlotCandidate(
            dentist=request.dentist,
            date=request.date,
            time=request.time,
            service=request.service,
            user_id=request.user_id,
            user_name=request.user_name,
            user_email=request.user_email,
        )
        await self._check_slot(candidate)

        now = self.clock.now()
        appointment = Appointment(
            user_id=candidate.user_id,
            user_name=candidate.user_name,
            user_email=candidate.user_email,
            service=candidate.service,
            dentist=candidate.dentist,
            date=candidate.date,
            time=candidate.time,
            notes=request.notes or "",
            status=AppointmentStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        appointment = await self.repository.save(appointment)

        logfire.info(
            "appointment_booked",
            appointment_id=appointment.appointment_id,
            dentist=appointment.dentist,
            date=appointment.date,
            time=appointment.time,
        )
        logger.info(f"Booked {appointment.appointment_id} for user {appointment.user_id}")
        return appointment

    async def list_for_user(
        self, user_id: str, status: str | None = None
    ) -> list[Appointment]:
        """Appointments of a user, optionally of one status.

        An unknown status matches nothing and yields an empty list.
        """
        return await self.repository.find_by_user(user_id, status or None)

    async def availability(self, query: AvailabilityQuery) -> Availability:
        if not query.date or not query.dentist:
            raise ValidationError(
                "Date and dentist are required", reason=ReasonCode.MISSING_FIELD.value
            )
        if parse_date(query.date) is None:
            raise ValidationError(
                "Invalid date format. Use YYYY-MM-DD",
                reason=ReasonCode.MALFORMED_INPUT.value,
            )

        booked = await self.repository.booked_times(query.dentist, query.date)
        return compute_availability(query.dentist, query.date, booked, self.clock.now())

    async def get(self, appointment_id: str) -> Appointment:
        appointment = await self.repository.find_by_id(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment not found")
        return appointment

    async def update(
        self, appointment_id: str, update: AppointmentUpdate
    ) -> Appointment:
        """Change date, time, dentist, service or notes of an owned appointment."""
        if not update.user_id:
            raise ValidationError(
                "User ID is required", reason=ReasonCode.MISSING_FIELD.value
            )

        appointment = await self.repository.find_by_id(
            appointment_id, user_id=update.user_id
        )
        if not appointment:
            raise NotFoundError("Appointment not found")

        changes = update.model_dump(exclude_unset=True, exclude={"user_id"})
        # Blank fields mean "unchanged"; notes may be cleared with ""
        changes = {
            k: v for k, v in changes.items()
            if v or (k == "notes" and v is not None)
        }

        if "service" in changes and changes["service"] not in SERVICES:
            raise ValidationError(
                f"Unknown service: {changes['service']}",
                reason=ReasonCode.MALFORMED_INPUT.value,
            )

        moved = any(
            field in changes and changes[field] != getattr(appointment, field)
            for field in ("dentist", "date", "time")
        )
        if moved:
            candidate = SlotCandidate(
                dentist=changes.get("dentist", appointment.dentist),
                date=changes.get("date", appointment.date),
                time=changes.get("time", appointment.time),
                service=changes.get("service", appointment.service),
                user_id=appointment.user_id,
                user_name=appointment.user_name,
                user_email=appointment.user_email,
            )
            await self._check_slot(candidate, exclude_id=appointment.appointment_id)
            changes["time"] = candidate.time

        for field, value in changes.items():
            setattr(appointment, field, value)
        appointment.updated_at = self.clock.now()

        appointment = await self.repository.save(appointment)
        logfire.info("appointment_updated", appointment_id=appointment.appointment_id)
        logger.info(f"Updated {appointment.appointment_id} for user {appointment.user_id}")
        return appointment

    async def cancel(self, appointment_id: str, request: CancelRequest) -> Appointment:
        """Cancel an owned appointment at least 24 hours ahead."""
        if not request.user_id:
            raise ValidationError(
                "User ID is required", reason=ReasonCode.MISSING_FIELD.value
            )

        appointment = await self.repository.find_by_id(
            appointment_id, user_id=request.user_id
        )
        if not appointment:
            raise NotFoundError(
                "Appointment not found or you do not have permission to cancel it"
            )

        raise_for_decision(evaluate_cancellation(appointment, self.clock.now()))

        appointment.status = AppointmentStatus.CANCELLED.value
        appointment.updated_at = self.clock.now()
        appointment = await self.repository.save(appointment)

        logfire.info("appointment_cancelled", appointment_id=appointment.appointment_id)
        logger.info(f"Cancelled {appointment.appointment_id} for user {appointment.user_id}")
        return appointment
