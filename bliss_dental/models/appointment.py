import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import String, DateTime, Text, Index, text
from sqlalchemy.orm import Mapped, mapped_column
from bliss_dental.database import Base


class AppointmentStatus(str, Enum):
    """Appointment status enum."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


class ServiceType(str, Enum):
    """Services offered by the clinic."""
    TEETH_CLEANING = "Teeth Cleaning"
    TOOTH_EXTRACTION = "Tooth Extraction"
    ROOT_CANAL = "Root Canal"
    DENTAL_CHECKUP = "Dental Checkup"
    BRACES = "Braces"
    ADJUST = "Adjust"


class Dentist(str, Enum):
    """Dentists taking bookings."""
    VILLAFLOR = "Dra. Villaflor"
    SMITH = "Dr. Smith"
    CRUZ = "Dr. Cruz"
    LEE = "Dr. Lee"
    SANTOS = "Dr. Santos"


# Statuses that occupy a slot
ACTIVE_STATUSES = (AppointmentStatus.PENDING.value, AppointmentStatus.CONFIRMED.value)

_ACTIVE_SLOT_CLAUSE = text("status IN ('Pending', 'Confirmed')")


def _new_appointment_id() -> str:
    return str(uuid.uuid4())


class Appointment(Base):
    """Appointment model.

    Owner name and email are copied at booking time and are not kept in sync
    with the user record.
    """

    __tablename__ = "appointments"

    appointment_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_appointment_id,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    user_email: Mapped[str] = mapped_column(String(255), nullable=False)
    service: Mapped[str] = mapped_column(String(50), nullable=False)
    dentist: Mapped[str] = mapped_column(String(50), nullable=False)
    # YYYY-MM-DD and HH:mm, stored as text end to end
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    time: Mapped[str] = mapped_column(String(5), nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=AppointmentStatus.PENDING.value,
        nullable=False,
    )
    # Set by the service from the injected clock, never by the database
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (
        Index("ix_appointments_user_date", "user_id", "date"),
        Index("ix_appointments_date_time", "date", "time"),
        Index("ix_appointments_dentist_date", "dentist", "date"),
        # Prevent double-booking: one active appointment per dentist slot
        Index(
            "uq_appointments_active_slot",
            "dentist",
            "date",
            "time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_CLAUSE,
            sqlite_where=_ACTIVE_SLOT_CLAUSE,
        ),
    )

    def __repr__(self) -> str:
        return f"<Appointment {self.dentist} {self.date} {self.time}>"
