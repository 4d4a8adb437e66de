import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import logfire

from bliss_dental.config import settings
from bliss_dental.database import database
from bliss_dental.exceptions import BookingError
from bliss_dental.api import api_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize Logfire - auto-instruments FastAPI
if settings.logfire_token:
    logfire.configure(
        token=settings.logfire_token,
        service_name="bliss-dental-api",
        environment=settings.app_env,
        console=False,  # Disable console logging (too verbose)
    )
    print("✅ Logfire initialized")
else:
    print("⚠️ Logfire token not set - observability disabled")

started_at = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    print("🚀 Starting Dental Bliss API...")
    await database.connect()
    print("✅ Database initialized")

    yield

    # Shutdown
    print("👋 Shutting down...")
    await database.dispose()
    print("✅ Database connections closed")


app = FastAPI(
    title=settings.app_name,
    description="Dental clinic patient and appointment booking",
    version="1.0.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
if settings.logfire_token:
    logfire.instrument_fastapi(app)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    content = {"success": False, "message": exc.message}
    if exc.reason:
        content["reason"] = exc.reason
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Wrong JSON types and unparseable params count as malformed input
    fields = [
        ".".join(
            part for part in error["loc"]
            if isinstance(part, str) and part not in ("body", "query", "path")
        )
        for error in exc.errors()
    ]
    fields = [f for f in fields if f]
    message = (
        f"Invalid value for {', '.join(fields)}" if fields else "Invalid request body"
    )
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": message, "reason": "MalformedInput"},
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Storage error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Server error"},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unexpected error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"},
    )


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Service banner."""
    return {
        "message": f"{settings.app_name} is running!",
        "version": "1.0.0",
        "endpoints": {
            "health": "GET /api/health",
            "register": "POST /api/register",
            "login": "POST /api/login",
            "profile": "GET /api/me",
            "users": "GET /api/users",
            "checkEmail": "GET /api/check-email/:email",
            "bookAppointment": "POST /api/appointments/book",
            "getUserAppointments": "GET /api/appointments/user/:userId",
            "checkAvailability": "GET /api/appointments/availability",
            "cancelAppointment": "PUT /api/appointments/cancel/:appointmentId",
            "updateAppointment": "PUT /api/appointments/:appointmentId",
            "getAppointment": "GET /api/appointments/:appointmentId",
        },
    }


@app.get("/api/health")
async def health_check():
    """Detailed health check."""
    connected = await database.is_connected()
    return {
        "success": True,
        "status": "API is running",
        "database": "connected" if connected else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - started_at, 3),
    }
