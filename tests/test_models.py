from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import select, func, text
from sqlalchemy.exc import IntegrityError

from clinic_booking.extensions import db
from clinic_booking.models import (
    Patient, Doctor, Appointment, Prescription, Invoice, User, doctor_specialties,
)


def _commit_fails():
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


class TestPatient:
    def test_duplicate_email_rejected(self, make):
        make.patient(email='amina@example.com')
        db.session.add(Patient(first_name='Other', last_name='Person', email='amina@example.com'))
        _commit_fails()

    def test_distinct_and_missing_emails_allowed(self, make):
        make.patient(email='a@example.com')
        make.patient(email='b@example.com')
        make.patient(email=None)
        make.patient(email=None)
        assert Patient.query.count() == 4

    def test_gender_defaults_to_other(self, make):
        patient = make.patient(date_of_birth=date(1996, 4, 12))
        db.session.expire_all()
        assert patient.gender == 'Other'
        assert patient.created_at is not None

    def test_unknown_gender_rejected(self, app):
        db.session.add(Patient(first_name='A', last_name='B', gender='Unknown'))
        _commit_fails()

    def test_delete_blocked_while_appointments_exist(self, make):
        appointment = make.appointment()
        patient = db.session.get(Patient, appointment.patient_id)
        db.session.delete(patient)
        _commit_fails()
        assert db.session.get(Patient, appointment.patient_id) is not None

    def test_delete_without_appointments(self, make):
        patient = make.patient()
        db.session.delete(patient)
        db.session.commit()
        assert Patient.query.count() == 0


class TestDoctor:
    def test_duplicate_license_rejected(self, make):
        make.doctor(license_number='LIC-2020-001')
        db.session.add(Doctor(first_name='Dr. Other', last_name='Doc', license_number='LIC-2020-001'))
        _commit_fails()

    def test_delete_blocked_while_appointments_exist(self, make):
        appointment = make.appointment()
        doctor = db.session.get(Doctor, appointment.doctor_id)
        db.session.delete(doctor)
        _commit_fails()

    def test_delete_cascades_specialties_and_detaches_users(self, make):
        general = make.specialty(name='General Practice')
        pediatrics = make.specialty(name='Pediatrics')
        doctor = make.doctor()
        doctor.specialties.extend([general, pediatrics])
        db.session.commit()
        user = make.user(role='Doctor', doctor_id=doctor.id)
        doctor_id = doctor.id

        db.session.delete(doctor)
        db.session.commit()
        db.session.expire_all()

        links = db.session.execute(
            select(func.count()).select_from(doctor_specialties).where(doctor_specialties.c.doctor_id == doctor_id)
        ).scalar()
        assert links == 0
        assert db.session.get(User, user.id).doctor_id is None
        # the specialties themselves survive
        assert general.name == 'General Practice'
        assert pediatrics.doctors == []

    def test_engine_cascades_raw_delete(self, make):
        specialty = make.specialty()
        doctor = make.doctor()
        doctor.specialties.append(specialty)
        db.session.commit()
        user = make.user(role='Doctor', doctor_id=doctor.id)
        doctor_id = doctor.id

        db.session.execute(text('DELETE FROM doctors WHERE id = :id'), {'id': doctor_id})
        db.session.commit()
        db.session.expire_all()

        remaining = db.session.execute(text('SELECT COUNT(*) FROM doctor_specialties')).scalar()
        assert remaining == 0
        assert db.session.get(User, user.id).doctor_id is None

    def test_duplicate_specialty_link_rejected(self, make):
        specialty = make.specialty()
        doctor = make.doctor()
        db.session.execute(doctor_specialties.insert().values(doctor_id=doctor.id, specialty_id=specialty.id))
        db.session.commit()
        db.session.execute(doctor_specialties.insert().values(doctor_id=doctor.id, specialty_id=specialty.id))
        _commit_fails()

    def test_duplicate_specialty_name_rejected(self, make):
        make.specialty(name='Cardiology')
        with pytest.raises(IntegrityError):
            make.specialty(name='Cardiology')
        db.session.rollback()


class TestRoom:
    def test_duplicate_room_number_rejected(self, make):
        make.room(room_number='101')
        with pytest.raises(IntegrityError):
            make.room(room_number='101')
        db.session.rollback()

    def test_delete_nulls_appointment_room(self, make):
        room = make.room()
        appointment = make.appointment(room_id=room.id)
        db.session.delete(room)
        db.session.commit()
        db.session.expire_all()

        appointment = db.session.get(Appointment, appointment.id)
        assert appointment is not None
        assert appointment.room_id is None

    def test_engine_nulls_room_on_raw_delete(self, make):
        room = make.room()
        appointment = make.appointment(room_id=room.id)
        db.session.execute(text('DELETE FROM rooms WHERE id = :id'), {'id': room.id})
        db.session.commit()
        db.session.expire_all()
        assert db.session.get(Appointment, appointment.id).room_id is None


class TestAppointment:
    @pytest.mark.parametrize('duration', [0, -15])
    def test_non_positive_duration_rejected(self, make, duration):
        patient, doctor = make.patient(), make.doctor()
        with pytest.raises(IntegrityError):
            make.appointment(patient=patient, doctor=doctor, duration_minutes=duration)
        db.session.rollback()

    def test_thirty_minutes_accepted(self, make):
        appointment = make.appointment(duration_minutes=30)
        assert appointment.duration_minutes == 30

    def test_defaults(self, make):
        appointment = make.appointment()
        db.session.expire_all()
        assert appointment.duration_minutes == 30
        assert appointment.status == 'Scheduled'
        assert appointment.room_id is None

    def test_duplicate_number_rejected(self, make):
        make.appointment(appointment_number='APT-0001')
        with pytest.raises(IntegrityError):
            make.appointment(appointment_number='APT-0001')
        db.session.rollback()

    def test_unknown_patient_rejected(self, make):
        doctor = make.doctor()
        with pytest.raises(IntegrityError):
            make.appointment(patient_id=9999, doctor=doctor)
        db.session.rollback()

    def test_unknown_status_rejected(self, make):
        with pytest.raises(IntegrityError):
            make.appointment(status='Pending')
        db.session.rollback()

    def test_status_moves_freely(self, make):
        appointment = make.appointment(status='Completed')
        for status in ('Scheduled', 'No-Show', 'Cancelled', 'Completed', 'Scheduled'):
            appointment.status = status
            db.session.commit()
        assert appointment.status == 'Scheduled'

    def test_delete_cascades_prescriptions_and_invoice(self, make):
        appointment = make.appointment()
        appointment.prescriptions.append(Prescription(medication_name='Amoxicillin', dosage='500mg'))
        db.session.commit()
        make.invoice(appointment)

        db.session.delete(appointment)
        db.session.commit()
        assert Prescription.query.count() == 0
        assert Invoice.query.count() == 0

    def test_engine_cascades_raw_delete(self, make):
        appointment = make.appointment()
        db.session.add(Prescription(appointment_id=appointment.id, medication_name='Ibuprofen'))
        db.session.commit()
        make.invoice(appointment)

        db.session.execute(text('DELETE FROM appointments WHERE id = :id'), {'id': appointment.id})
        db.session.commit()
        assert db.session.execute(text('SELECT COUNT(*) FROM prescriptions')).scalar() == 0
        assert db.session.execute(text('SELECT COUNT(*) FROM invoices')).scalar() == 0


class TestInvoice:
    def test_negative_amount_rejected(self, make):
        appointment = make.appointment()
        with pytest.raises(IntegrityError):
            make.invoice(appointment, amount=Decimal('-1.00'))
        db.session.rollback()

    def test_zero_amount_accepted(self, make):
        invoice = make.invoice(make.appointment(), amount=Decimal('0'))
        db.session.expire_all()
        assert invoice.amount == 0
        assert invoice.paid is False

    def test_one_invoice_per_appointment(self, make):
        appointment = make.appointment()
        make.invoice(appointment)
        with pytest.raises(IntegrityError):
            make.invoice(appointment, amount=Decimal('20.00'))
        db.session.rollback()


class TestUser:
    def test_password_is_hashed(self, make):
        user = make.user(password='admin123', role='Admin')
        assert user.password_hash != 'admin123'
        assert user.check_password('admin123')
        assert not user.check_password('wrong')
        assert 'password_hash' not in user.to_dict()

    def test_role_defaults_to_reception(self, make):
        user = make.user()
        db.session.expire_all()
        assert user.role == 'Reception'

    def test_unknown_role_rejected(self, make):
        with pytest.raises(IntegrityError):
            make.user(role='Janitor')
        db.session.rollback()

    def test_duplicate_username_rejected(self, make):
        make.user(username='admin')
        with pytest.raises(IntegrityError):
            make.user(username='admin')
        db.session.rollback()


class TestKeyUpdates:
    """Primary key changes follow through every foreign key."""

    def _update_id(self, table, old_id, new_id):
        db.session.execute(text(f'UPDATE {table} SET id = :new WHERE id = :old'), {'new': new_id, 'old': old_id})
        db.session.commit()
        db.session.expire_all()

    def test_appointment_references_follow(self, make):
        room = make.room()
        appointment = make.appointment(room_id=room.id)
        patient_id, doctor_id = appointment.patient_id, appointment.doctor_id

        self._update_id('rooms', room.id, 500)
        self._update_id('patients', patient_id, 600)
        self._update_id('doctors', doctor_id, 700)

        appointment = db.session.get(Appointment, appointment.id)
        assert (appointment.room_id, appointment.patient_id, appointment.doctor_id) == (500, 600, 700)

    def test_children_of_appointment_follow(self, make):
        appointment = make.appointment()
        db.session.add(Prescription(appointment_id=appointment.id, medication_name='Amoxicillin'))
        make.invoice(appointment)

        self._update_id('appointments', appointment.id, 900)

        assert db.session.scalars(select(Prescription.appointment_id)).all() == [900]
        assert db.session.scalars(select(Invoice.appointment_id)).all() == [900]

    def test_specialty_links_and_users_follow(self, make):
        doctor, specialty = make.doctor(), make.specialty()
        doctor.specialties.append(specialty)
        db.session.commit()
        user = make.user(role='Doctor', doctor_id=doctor.id)

        self._update_id('specialties', specialty.id, 40)
        self._update_id('doctors', doctor.id, 41)

        links = db.session.execute(select(doctor_specialties)).all()
        assert [(row.doctor_id, row.specialty_id) for row in links] == [(41, 40)]
        assert db.session.get(User, user.id).doctor_id == 41
