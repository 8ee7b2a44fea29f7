from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from clinic_booking import create_app
from clinic_booking.extensions import db
from clinic_booking.models import (
    Patient, Doctor, Specialty, Room, Appointment, Invoice, User,
)


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


class Factory:
    """Builds committed rows with just enough fields to satisfy the schema."""

    def __init__(self):
        self._seq = 0

    def _next(self):
        self._seq += 1
        return self._seq

    def patient(self, **kwargs):
        n = self._next()
        fields = {'first_name': f'Patient{n}', 'last_name': 'Test'}
        fields.update(kwargs)
        patient = Patient(**fields)
        db.session.add(patient)
        db.session.commit()
        return patient

    def doctor(self, **kwargs):
        n = self._next()
        fields = {'first_name': f'Doctor{n}', 'last_name': 'Test', 'license_number': f'LIC-TEST-{n:03d}'}
        fields.update(kwargs)
        doctor = Doctor(**fields)
        db.session.add(doctor)
        db.session.commit()
        return doctor

    def specialty(self, **kwargs):
        n = self._next()
        fields = {'name': f'Specialty {n}'}
        fields.update(kwargs)
        specialty = Specialty(**fields)
        db.session.add(specialty)
        db.session.commit()
        return specialty

    def room(self, **kwargs):
        n = self._next()
        fields = {'room_number': f'R{n}', 'floor': '1'}
        fields.update(kwargs)
        room = Room(**fields)
        db.session.add(room)
        db.session.commit()
        return room

    def appointment(self, patient=None, doctor=None, **kwargs):
        n = self._next()
        fields = {
            'appointment_number': f'TEST-{n:04d}',
            'patient_id': (patient or self.patient()).id,
            'doctor_id': (doctor or self.doctor()).id,
            'appointment_date': utcnow() + timedelta(days=1),
        }
        fields.update(kwargs)
        appointment = Appointment(**fields)
        db.session.add(appointment)
        db.session.commit()
        return appointment

    def invoice(self, appointment, amount=Decimal('100.00'), **kwargs):
        invoice = Invoice(appointment_id=appointment.id, amount=amount, **kwargs)
        db.session.add(invoice)
        db.session.commit()
        return invoice

    def user(self, password='secret', **kwargs):
        n = self._next()
        fields = {'username': f'user{n}'}
        fields.update(kwargs)
        user = User(**fields)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user


@pytest.fixture
def make(app):
    return Factory()
