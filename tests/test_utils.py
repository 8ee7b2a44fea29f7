from datetime import date, datetime

import pytest

from clinic_booking.utils import (
    classify_integrity_error, integrity_error_response, parse_date, parse_datetime, is_id,
)
from clinic_booking.services import next_appointment_number


@pytest.mark.parametrize('message, kind', [
    ('UNIQUE constraint failed: patients.email', 'unique'),
    ("(1062, \"Duplicate entry 'a@b.c' for key 'patients.email'\")", 'unique'),
    ('duplicate key value violates unique constraint "patients_email_key"', 'unique'),
    ('FOREIGN KEY constraint failed', 'foreign_key'),
    ('(1451, "Cannot delete or update a parent row: a foreign key constraint fails")', 'foreign_key'),
    ('update or delete on table "patients" violates foreign key constraint "fk_appt_patient"', 'foreign_key'),
    ('CHECK constraint failed: ck_invoices_amount_non_negative', 'check'),
    ("(3819, \"Check constraint 'ck_appointments_duration_positive' is violated.\")", 'check'),
    ('new row for relation "invoices" violates check constraint "ck_invoices_amount_non_negative"', 'check'),
    ('NOT NULL constraint failed: patients.first_name', 'not_null'),
    ("(1048, \"Column 'first_name' cannot be null\")", 'not_null'),
    ('something else entirely', 'unknown'),
])
def test_classify_integrity_error(message, kind):
    assert classify_integrity_error(Exception(message)) == kind


def test_integrity_error_response_status():
    payload, status = integrity_error_response(Exception('CHECK constraint failed: x'))
    assert status == 400
    assert payload['success'] is False
    assert payload['constraint'] == 'check'

    _, status = integrity_error_response(Exception('UNIQUE constraint failed: x'))
    assert status == 409


def test_parse_datetime():
    assert parse_datetime('2025-08-12T09:30:00') == datetime(2025, 8, 12, 9, 30)
    assert parse_datetime('2025-08-12T09:30:00Z') == datetime(2025, 8, 12, 9, 30)
    assert parse_datetime('2025-08-12T09:30:00+03:00') == datetime(2025, 8, 12, 6, 30)
    assert parse_datetime('not a date') is None
    assert parse_datetime(None) is None
    assert parse_datetime(42) is None


def test_parse_date():
    assert parse_date('1996-04-12') == date(1996, 4, 12)
    assert parse_date('1996-04-12T08:00:00') == date(1996, 4, 12)
    assert parse_date('12/04/1996') is None
    assert parse_date('') is None


def test_next_appointment_number_ignores_other_formats(app, make):
    assert next_appointment_number() == 'APT-0001'
    make.appointment(appointment_number='APT-0009')
    make.appointment(appointment_number='APT-X')
    make.appointment(appointment_number='WALKIN-50')
    assert next_appointment_number() == 'APT-0010'


def test_is_id():
    assert is_id(7)
    assert is_id(0)
    assert not is_id(True)
    assert not is_id('7')
    assert not is_id(7.0)
    assert not is_id(None)
    assert not is_id([7])
