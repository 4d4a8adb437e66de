from bliss_dental.schemas.appointment import (
    BookingRequest,
    AppointmentUpdate,
    CancelRequest,
    AvailabilityQuery,
    AppointmentResponse,
    AppointmentEnvelope,
    AppointmentDetail,
    AppointmentList,
    AvailabilityResponse,
    MessageResponse,
)
from bliss_dental.schemas.user import (
    RegisterRequest,
    LoginRequest,
    UserResponse,
    AuthResponse,
    ProfileResponse,
    UserList,
    EmailCheckResponse,
)

__all__ = [
    "BookingRequest",
    "AppointmentUpdate",
    "CancelRequest",
    "AvailabilityQuery",
    "AppointmentResponse",
    "AppointmentEnvelope",
    "AppointmentDetail",
    "AppointmentList",
    "AvailabilityResponse",
    "MessageResponse",
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "AuthResponse",
    "ProfileResponse",
    "UserList",
    "EmailCheckResponse",
]
