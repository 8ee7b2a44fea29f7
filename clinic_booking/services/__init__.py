"""
Service layer for the clinic booking schema.
"""
from .appointment_service import list_upcoming_appointments, next_appointment_number

__all__ = ["list_upcoming_appointments", "next_appointment_number"]
