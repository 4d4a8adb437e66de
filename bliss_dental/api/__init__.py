from fastapi import APIRouter
from bliss_dental.api.routes import auth, appointments

api_router = APIRouter()

api_router.include_router(auth.router, tags=["Auth"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["Appointments"])
