"""Appointment repository - storage access for appointments."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bliss_dental.exceptions import ConflictError
from bliss_dental.models.appointment import Appointment, ACTIVE_STATUSES
from bliss_dental.services.slot_policy import MESSAGES, ReasonCode


class AppointmentRepository:
    """Queries and writes keyed by the booking identifier."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_conflicting(
        self, dentist: str, date: str, time: str, exclude_id: str | None = None
    ) -> list[Appointment]:
        """Active appointments holding exactly this slot."""
        query = select(Appointment).where(
            Appointment.dentist == dentist,
            Appointment.date == date,
            Appointment.time == time,
            Appointment.status.in_(ACTIVE_STATUSES),
        )

        if exclude_id:
            query = query.where(Appointment.appointment_id != exclude_id)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_by_user(
        self, user_id: str, status: str | None = None
    ) -> list[Appointment]:
        """Appointments of a user, latest first."""
        query = select(Appointment).where(Appointment.user_id == user_id)

        if status:
            query = query.where(Appointment.status == status)

        query = query.order_by(Appointment.date.desc(), Appointment.time.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def find_by_id(
        self, appointment_id: str, user_id: str | None = None
    ) -> Appointment | None:
        query = select(Appointment).where(Appointment.appointment_id == appointment_id)

        if user_id is not None:
            query = query.where(Appointment.user_id == user_id)

        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def booked_times(self, dentist: str, date: str) -> list[str]:
        result = await self.db.execute(
            select(Appointment.time).where(
                Appointment.dentist == dentist,
                Appointment.date == date,
                Appointment.status.in_(ACTIVE_STATUSES),
            )
        )
        return list(result.scalars().all())

    async def save(self, appointment: Appointment) -> Appointment:
        """Insert or update an appointment.

        The active-slot unique index rejects a concurrent double booking that
        slipped past the pre-check; that surfaces as ``SlotTaken``. Other
        integrity failures propagate unchanged.
        """
        self.db.add(appointment)
        try:
            await self.db.flush()
        except IntegrityError as e:
            if "unique" not in str(e.orig).lower():
                raise
            raise ConflictError(
                MESSAGES[ReasonCode.SLOT_TAKEN], reason=ReasonCode.SLOT_TAKEN.value
            ) from e
        await self.db.refresh(appointment)
        return appointment
