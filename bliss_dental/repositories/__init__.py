"""Repositories package - Storage access layer."""

from bliss_dental.repositories.appointments import AppointmentRepository
from bliss_dental.repositories.users import UserRepository

__all__ = ["AppointmentRepository", "UserRepository"]
