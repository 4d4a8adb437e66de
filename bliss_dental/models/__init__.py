from bliss_dental.models.appointment import (
    Appointment,
    AppointmentStatus,
    Dentist,
    ServiceType,
    ACTIVE_STATUSES,
)
from bliss_dental.models.user import User, UserRole

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "Dentist",
    "ServiceType",
    "ACTIVE_STATUSES",
    "User",
    "UserRole",
]
