"""Scheduling rules deciding whether a dentist slot can be booked or cancelled.

Every function here is pure: existing appointments and the current instant
are passed in by the caller, and rejections come back as a ``Decision``
carrying a ``ReasonCode`` rather than as exceptions.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Iterable, Protocol

from bliss_dental.models.appointment import (
    ACTIVE_STATUSES,
    AppointmentStatus,
    Dentist,
    ServiceType,
)

OPENING_HOUR = 8
CLOSING_HOUR = 17  # last slot starts at 17:00 sharp
SLOT_MINUTES = 30
CANCELLATION_NOTICE_HOURS = 24.0

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

SERVICES = frozenset(s.value for s in ServiceType)
DENTISTS = frozenset(d.value for d in Dentist)


class ReasonCode(str, Enum):
    """Why a booking, update or cancellation was rejected."""
    MISSING_FIELD = "MissingField"
    MALFORMED_INPUT = "MalformedInput"
    SLOT_TAKEN = "SlotTaken"
    OUTSIDE_HOURS = "OutsideHours"
    PAST_DATE = "PastDate"
    PAST_TIME = "PastTime"
    TOO_LATE_TO_CANCEL = "TooLateToCancel"
    ALREADY_CANCELLED = "AlreadyCancelled"


MESSAGES = {
    ReasonCode.MISSING_FIELD: "Please provide all required fields",
    ReasonCode.MALFORMED_INPUT: "Invalid date or time format. Use YYYY-MM-DD and HH:mm (24-hour)",
    ReasonCode.SLOT_TAKEN: "This time slot is already booked",
    ReasonCode.OUTSIDE_HOURS: "Appointments can only be booked between 8:00 AM and 5:00 PM",
    ReasonCode.PAST_DATE: "Cannot book appointments for past dates",
    ReasonCode.PAST_TIME: "Cannot book appointments for past times today",
    ReasonCode.TOO_LATE_TO_CANCEL: "Appointments can only be cancelled at least 24 hours in advance",
    ReasonCode.ALREADY_CANCELLED: "Appointment is already cancelled",
}


@dataclass(frozen=True)
class Decision:
    accepted: bool
    reason: ReasonCode | None = None
    detail: str | None = None

    @classmethod
    def accept(cls) -> "Decision":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: ReasonCode, detail: str | None = None) -> "Decision":
        return cls(accepted=False, reason=reason, detail=detail)

    @property
    def message(self) -> str | None:
        if self.accepted:
            return None
        return self.detail or MESSAGES[self.reason]


@dataclass
class SlotCandidate:
    """A proposed booking. Fields are raw request text and may be missing."""
    dentist: str | None = None
    date: str | None = None
    time: str | None = None
    service: str | None = None
    user_id: str | None = None
    user_name: str | None = None
    user_email: str | None = None


class SlotHolder(Protocol):
    appointment_id: str
    dentist: str
    date: str
    time: str
    status: str


@dataclass(frozen=True)
class Availability:
    dentist: str
    date: str
    all_slots: list[str]
    available_slots: list[str]
    total_slots: int
    booked_slots: int
    is_past_date: bool


def parse_date(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD string, or return None when it is not a real date."""
    if not value or not DATE_PATTERN.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def parse_time(value: str | None) -> time | None:
    if not value or not TIME_PATTERN.match(value):
        return None
    hour, minute = value.split(":")
    return time(int(hour), int(minute))


def normalize_time(value: str) -> str:
    """Zero-pad an H:mm time to HH:mm. Unparseable input is returned unchanged."""
    parsed = parse_time(value)
    return parsed.strftime("%H:%M") if parsed else value


def slot_grid() -> list[str]:
    """All bookable start times of a day: 08:00, 08:30, ..., 16:30, 17:00."""
    slots = []
    for hour in range(OPENING_HOUR, CLOSING_HOUR + 1):
        for minute in range(0, 60, SLOT_MINUTES):
            if hour == CLOSING_HOUR and minute > 0:
                break
            slots.append(f"{hour:02d}:{minute:02d}")
    return slots


def within_operating_hours(slot_time: time) -> bool:
    if slot_time.hour < OPENING_HOUR or slot_time.hour > CLOSING_HOUR:
        return False
    return not (slot_time.hour == CLOSING_HOUR and slot_time.minute > 0)


def validate_candidate(candidate: SlotCandidate) -> Decision:
    """Field presence and format checks, the first two booking rules."""
    required = (
        candidate.dentist,
        candidate.date,
        candidate.time,
        candidate.service,
        candidate.user_id,
        candidate.user_name,
        candidate.user_email,
    )
    if any(value is None or not str(value).strip() for value in required):
        return Decision.reject(ReasonCode.MISSING_FIELD)

    if parse_date(candidate.date) is None:
        return Decision.reject(
            ReasonCode.MALFORMED_INPUT, "Invalid date format. Use YYYY-MM-DD"
        )
    if parse_time(candidate.time) is None:
        return Decision.reject(
            ReasonCode.MALFORMED_INPUT, "Invalid time format. Use HH:mm (24-hour)"
        )
    if candidate.service not in SERVICES:
        return Decision.reject(
            ReasonCode.MALFORMED_INPUT, f"Unknown service: {candidate.service}"
        )
    if candidate.dentist not in DENTISTS:
        return Decision.reject(
            ReasonCode.MALFORMED_INPUT, f"Unknown dentist: {candidate.dentist}"
        )
    return Decision.accept()


def holds_slot(
    existing: SlotHolder, candidate: SlotCandidate, exclude_id: str | None = None
) -> bool:
    if exclude_id is not None and existing.appointment_id == exclude_id:
        return False
    if existing.status not in ACTIVE_STATUSES:
        return False
    return (
        existing.dentist == candidate.dentist
        and existing.date == candidate.date
        and normalize_time(existing.time) == normalize_time(candidate.time)
    )


def evaluate_booking(
    candidate: SlotCandidate,
    existing_same_slot: Iterable[SlotHolder],
    now: datetime,
    exclude_id: str | None = None,
) -> Decision:
    """Decide whether ``candidate`` may be committed.

    ``existing_same_slot`` holds the appointments already stored for the same
    dentist, date and time; for updates ``exclude_id`` names the record being
    moved so it does not conflict with itself. Rules run in a fixed order and
    the first failure decides the reason.
    """
    decision = validate_candidate(candidate)
    if not decision.accepted:
        return decision

    if any(holds_slot(e, candidate, exclude_id) for e in existing_same_slot):
        return Decision.reject(ReasonCode.SLOT_TAKEN)

    slot_date = parse_date(candidate.date)
    slot_time = parse_time(candidate.time)

    if not within_operating_hours(slot_time):
        return Decision.reject(ReasonCode.OUTSIDE_HOURS)

    today = now.date()
    if slot_date < today:
        return Decision.reject(ReasonCode.PAST_DATE)
    if slot_date == today and datetime.combine(slot_date, slot_time) < now:
        return Decision.reject(ReasonCode.PAST_TIME)

    return Decision.accept()


def compute_availability(
    dentist: str, day: str, booked_times: Iterable[str], now: datetime
) -> Availability:
    """Free and busy slots of ``dentist`` on ``day``.

    A day before today has no available slots, whatever is booked.
    """
    grid = slot_grid()
    booked = [normalize_time(t) for t in booked_times]
    available = [slot for slot in grid if slot not in booked]

    slot_date = parse_date(day)
    is_past_date = slot_date is not None and slot_date < now.date()
    if is_past_date:
        available = []

    return Availability(
        dentist=dentist,
        date=day,
        all_slots=grid,
        available_slots=available,
        total_slots=len(grid),
        booked_slots=len(booked),
        is_past_date=is_past_date,
    )


def hours_until(appointment: SlotHolder, now: datetime) -> float:
    starts_at = datetime.combine(
        date.fromisoformat(appointment.date), parse_time(appointment.time)
    )
    return (starts_at - now).total_seconds() / 3600


def evaluate_cancellation(appointment: SlotHolder, now: datetime) -> Decision:
    """Cancellation needs at least 24 hours notice."""
    if appointment.status == AppointmentStatus.CANCELLED.value:
        return Decision.reject(ReasonCode.ALREADY_CANCELLED)
    if hours_until(appointment, now) < CANCELLATION_NOTICE_HOURS:
        return Decision.reject(ReasonCode.TOO_LATE_TO_CANCEL)
    return Decision.accept()
