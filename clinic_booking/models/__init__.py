from .patient import Patient
from .doctor import Doctor, Specialty, doctor_specialties
from .room import Room
from .appointment import Appointment
from .prescription import Prescription
from .invoice import Invoice
from .user import User
from .views import upcoming_appointments
from .enums import GENDERS, APPOINTMENT_STATUSES, USER_ROLES

__all__ = [
    "Patient", "Doctor", "Specialty", "doctor_specialties", "Room", "Appointment",
    "Prescription", "Invoice", "User", "upcoming_appointments",
    "GENDERS", "APPOINTMENT_STATUSES", "USER_ROLES",
]
