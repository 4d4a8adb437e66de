"""Shared test fixtures."""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["LOGFIRE_TOKEN"] = ""

from datetime import datetime  # noqa: E402

import logfire  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from bliss_dental.clock import FixedClock, get_clock  # noqa: E402
from bliss_dental.database import Database, get_db  # noqa: E402
from bliss_dental.main import app  # noqa: E402

logfire.configure(send_to_logfire=False, console=False)

# "Now" for every test: Thursday 2030-01-10 at noon
NOW = datetime(2030, 1, 10, 12, 0)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest_asyncio.fixture
async def test_db():
    """Fresh in-memory database per test."""
    db = Database("sqlite+aiosqlite://", connect_retries=1, retry_delay=0)
    await db.connect()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(test_db):
    async with test_db.session() as s:
        yield s


@pytest_asyncio.fixture
async def client(test_db, clock):
    """HTTP client bound to the app with the test database and clock."""

    async def override_get_db():
        async with test_db.session() as s:
            yield s

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload():
    """Create a valid booking body; keyword arguments override fields."""
    def _create(**overrides):
        payload = {
            "userId": "user-1",
            "userName": "Ana Reyes",
            "userEmail": "ana@example.com",
            "service": "Dental Checkup",
            "dentist": "Dr. Smith",
            "date": "2030-01-15",
            "time": "09:00",
            "notes": "",
        }
        payload.update(overrides)
        return payload
    return _create
