"""
Sample clinic data. Loads only into an empty database, so it is safe to re-run.
"""
import logging
from datetime import date, datetime
from decimal import Decimal

from clinic_booking.extensions import db
from clinic_booking.models import (
    Patient, Doctor, Specialty, Room, Appointment, Prescription, Invoice, User,
)

logger = logging.getLogger(__name__)

PATIENTS = [
    {"first_name": "Amina", "last_name": "Njeri", "date_of_birth": date(1996, 4, 12),
     "gender": "Female", "email": "amina.njeri@example.com", "phone": "+254700111222"},
    {"first_name": "Brian", "last_name": "Otieno", "date_of_birth": date(1988, 9, 2),
     "gender": "Male", "email": "brian.otieno@example.com", "phone": "+254700333444"},
]

DOCTORS = [
    {"first_name": "Dr. John", "last_name": "Mwangi", "license_number": "LIC-2020-001",
     "phone": "+254701111222", "email": "j.mwangi@clinic.com"},
    {"first_name": "Dr. Grace", "last_name": "Kiptoo", "license_number": "LIC-2019-045",
     "phone": "+254702222333", "email": "g.kiptoo@clinic.com"},
]

SPECIALTIES = [
    {"name": "General Practice", "description": "General family medicine"},
    {"name": "Pediatrics", "description": "Child health"},
]

# (doctor license, specialty name)
DOCTOR_SPECIALTIES = [
    ("LIC-2020-001", "General Practice"),
    ("LIC-2019-045", "General Practice"),
    ("LIC-2019-045", "Pediatrics"),
]

ROOMS = [
    {"room_number": "101", "floor": "1"},
    {"room_number": "201", "floor": "2"},
]

# (number, patient email, doctor license, room number, date, duration, status)
APPOINTMENTS = [
    ("APT-0001", "amina.njeri@example.com", "LIC-2020-001", "101", datetime(2025, 8, 12, 9, 30), 30, "Scheduled"),
    ("APT-0002", "brian.otieno@example.com", "LIC-2019-045", "201", datetime(2025, 8, 12, 10, 30), 45, "Scheduled"),
]

PRESCRIPTIONS = [
    {"appointment_number": "APT-0001", "medication_name": "Amoxicillin", "dosage": "500mg", "frequency": "3 times a day"},
]

INVOICES = [
    {"appointment_number": "APT-0001", "amount": Decimal("5000.00"), "paid": False},
]

USERS = [
    {"username": "admin", "password": "admin123", "role": "Admin"},
]


def seed_sample_data():
    """
    Insert the sample clinic rows if no patients exist yet.
    Returns True when data was inserted.
    """
    if Patient.query.count() > 0:
        logger.info("Sample data skipped: patients table is not empty")
        return False

    try:
        patients = {}
        for row in PATIENTS:
            patient = Patient(**row)
            db.session.add(patient)
            patients[row["email"]] = patient

        specialties = {}
        for row in SPECIALTIES:
            specialty = Specialty(**row)
            db.session.add(specialty)
            specialties[row["name"]] = specialty

        doctors = {}
        for row in DOCTORS:
            doctor = Doctor(**row)
            db.session.add(doctor)
            doctors[row["license_number"]] = doctor

        for license_number, specialty_name in DOCTOR_SPECIALTIES:
            doctors[license_number].specialties.append(specialties[specialty_name])

        rooms = {}
        for row in ROOMS:
            room = Room(**row)
            db.session.add(room)
            rooms[row["room_number"]] = room

        appointments = {}
        for number, email, license_number, room_number, when, duration, status in APPOINTMENTS:
            appointment = Appointment(
                appointment_number=number,
                patient=patients[email],
                doctor=doctors[license_number],
                room=rooms[room_number],
                appointment_date=when,
                duration_minutes=duration,
                status=status,
            )
            db.session.add(appointment)
            appointments[number] = appointment

        for row in PRESCRIPTIONS:
            fields = dict(row)
            appointment = appointments[fields.pop("appointment_number")]
            appointment.prescriptions.append(Prescription(**fields))

        for row in INVOICES:
            fields = dict(row)
            appointment = appointments[fields.pop("appointment_number")]
            appointment.invoice = Invoice(**fields)

        for row in USERS:
            user = User(username=row["username"], role=row["role"])
            user.set_password(row["password"])
            db.session.add(user)

        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Sample data seeding failed")
        raise

    logger.info(
        "Seeded %d patients, %d doctors, %d appointments",
        len(PATIENTS), len(DOCTORS), len(APPOINTMENTS),
    )
    return True
