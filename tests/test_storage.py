"""Tests for the database lifecycle and repository guarantees."""
from datetime import datetime
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from bliss_dental.database import Database
from bliss_dental.exceptions import ConflictError, StorageError
from bliss_dental.models.appointment import Appointment, AppointmentStatus
from bliss_dental.models.user import User
from bliss_dental.repositories.appointments import AppointmentRepository

STORED_AT = datetime(2030, 1, 10, 12, 0)


def new_appointment(**overrides) -> Appointment:
    fields = dict(
        created_at=STORED_AT,
        updated_at=STORED_AT,
        user_id="user-1",
        user_name="Ana Reyes",
        user_email="ana@example.com",
        service="Braces",
        dentist="Dr. Lee",
        date="2030-01-15",
        time="09:00",
        notes="",
        status=AppointmentStatus.PENDING.value,
    )
    fields.update(overrides)
    return Appointment(**fields)


class TestAppointmentRepository:
    @pytest.mark.asyncio
    async def test_save_generates_booking_id(self, session):
        repository = AppointmentRepository(session)

        appointment = await repository.save(new_appointment())

        assert appointment.appointment_id
        assert await repository.find_by_id(appointment.appointment_id) is appointment

    @pytest.mark.asyncio
    async def test_storage_rejects_second_active_booking(self, session):
        """Concurrent writers that both passed the pre-check still cannot double book."""
        repository = AppointmentRepository(session)
        await repository.save(new_appointment())

        with pytest.raises(ConflictError) as exc_info:
            await repository.save(new_appointment(user_id="user-2"))

        assert exc_info.value.reason == "SlotTaken"
        await session.rollback()

    @pytest.mark.asyncio
    async def test_missing_timestamps_are_not_reported_as_slot_taken(self, session):
        repository = AppointmentRepository(session)

        with pytest.raises(IntegrityError):
            await repository.save(new_appointment(created_at=None, updated_at=None))

        await session.rollback()

    @pytest.mark.asyncio
    async def test_cancelled_booking_does_not_hold_slot(self, session):
        repository = AppointmentRepository(session)
        await repository.save(new_appointment(status=AppointmentStatus.CANCELLED.value))
        await repository.save(new_appointment(user_id="user-2"))

        conflicting = await repository.find_conflicting("Dr. Lee", "2030-01-15", "09:00")

        assert [a.user_id for a in conflicting] == ["user-2"]

    @pytest.mark.asyncio
    async def test_find_conflicting_excludes_given_id(self, session):
        repository = AppointmentRepository(session)
        saved = await repository.save(new_appointment())

        conflicting = await repository.find_conflicting(
            "Dr. Lee", "2030-01-15", "09:00", exclude_id=saved.appointment_id
        )

        assert conflicting == []

    @pytest.mark.asyncio
    async def test_find_by_id_checks_owner(self, session):
        repository = AppointmentRepository(session)
        saved = await repository.save(new_appointment())

        assert await repository.find_by_id(saved.appointment_id, user_id="user-1") is saved
        assert await repository.find_by_id(saved.appointment_id, user_id="user-2") is None

    @pytest.mark.asyncio
    async def test_booked_times_only_active(self, session):
        repository = AppointmentRepository(session)
        await repository.save(new_appointment(time="09:00"))
        await repository.save(new_appointment(time="10:00", status=AppointmentStatus.CONFIRMED.value))
        await repository.save(new_appointment(time="11:00", status=AppointmentStatus.COMPLETED.value))
        await repository.save(new_appointment(time="12:00", dentist="Dr. Cruz"))

        times = await repository.booked_times("Dr. Lee", "2030-01-15")

        assert sorted(times) == ["09:00", "10:00"]


@pytest.mark.parametrize(
    "column",
    [
        Appointment.__table__.c.created_at,
        Appointment.__table__.c.updated_at,
        User.__table__.c.created_at,
    ],
)
def test_timestamps_have_no_wall_clock_default(column):
    """Timestamps come from the injected clock, so the schema never fills them in."""
    assert column.default is None
    assert column.server_default is None
    assert not column.nullable


class TestDatabase:
    @pytest.mark.asyncio
    async def test_connect_gives_up_after_retries(self):
        db = Database("sqlite+aiosqlite://", connect_retries=3, retry_delay=0)
        db.engine = Mock()
        db.engine.begin.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

        with pytest.raises(StorageError):
            await db.connect()

        assert db.engine.begin.call_count == 3

    @pytest.mark.asyncio
    async def test_is_connected(self, test_db):
        assert await test_db.is_connected() is True

    @pytest.mark.asyncio
    async def test_session_rolls_back_on_error(self, test_db):
        with pytest.raises(RuntimeError):
            async with test_db.session() as s:
                s.add(new_appointment())
                await s.flush()
                raise RuntimeError("boom")

        async with test_db.session() as s:
            assert await AppointmentRepository(s).find_by_user("user-1") == []


@pytest.mark.asyncio
async def test_health_reports_database(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "API is running"
    assert body["database"] == "connected"
