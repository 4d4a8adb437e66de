"""Error taxonomy raised by the service layer and rendered by the API."""


class BookingError(Exception):
    """Base class for errors with a user-facing message."""

    status_code = 500

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class ValidationError(BookingError):
    """Missing or malformed input. The user must resubmit."""

    status_code = 400


class ConflictError(BookingError):
    """Slot already held, or a duplicate record."""

    status_code = 400


class PolicyViolation(BookingError):
    """Request is well formed but breaks a scheduling rule."""

    status_code = 400


class NotFoundError(BookingError):
    status_code = 404


class AuthenticationError(BookingError):
    status_code = 401


class StorageError(BookingError):
    """Storage collaborator is unavailable."""

    status_code = 500
