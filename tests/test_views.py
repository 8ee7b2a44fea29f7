from datetime import timedelta

import pytest
from sqlalchemy import inspect

from clinic_booking.extensions import db
from clinic_booking.models.views import UPCOMING_APPOINTMENTS_VIEW, create_view_sql
from clinic_booking.services import list_upcoming_appointments
from tests.conftest import utcnow


def test_view_created_with_schema(app):
    assert UPCOMING_APPOINTMENTS_VIEW in inspect(db.engine).get_view_names()


def test_only_future_rows_in_ascending_order(make):
    now = utcnow()
    later = make.appointment(appointment_date=now + timedelta(days=3))
    sooner = make.appointment(appointment_date=now + timedelta(days=1))
    make.appointment(appointment_date=now - timedelta(days=1))

    rows = list_upcoming_appointments()

    assert [r['appointment_id'] for r in rows] == [sooner.id, later.id]
    assert rows[0]['appointment_number'] == sooner.appointment_number


def test_row_shape_and_outer_join_on_room(make):
    room = make.room(room_number='101')
    patient = make.patient(first_name='Amina', last_name='Njeri')
    doctor = make.doctor(first_name='Dr. John', last_name='Mwangi')
    with_room = make.appointment(patient=patient, doctor=doctor, room_id=room.id,
                                 appointment_date=utcnow() + timedelta(days=1))
    without_room = make.appointment(patient=patient, doctor=doctor,
                                    appointment_date=utcnow() + timedelta(days=2))

    rows = list_upcoming_appointments()

    assert [r['appointment_id'] for r in rows] == [with_room.id, without_room.id]
    first = rows[0]
    assert first['patient_id'] == patient.id
    assert first['patient_first'] == 'Amina'
    assert first['patient_last'] == 'Njeri'
    assert first['doctor_id'] == doctor.id
    assert first['doctor_first'] == 'Dr. John'
    assert first['doctor_last'] == 'Mwangi'
    assert first['room_number'] == '101'
    assert first['duration_minutes'] == 30
    assert first['status'] == 'Scheduled'
    assert rows[1]['room_number'] is None


def test_filters_and_limit(make):
    doctor = make.doctor()
    other = make.doctor()
    mine = make.appointment(doctor=doctor, appointment_date=utcnow() + timedelta(days=1))
    make.appointment(doctor=other, appointment_date=utcnow() + timedelta(days=2))
    make.appointment(doctor=doctor, appointment_date=utcnow() + timedelta(days=3))

    assert len(list_upcoming_appointments(doctor_id=doctor.id)) == 2
    assert [r['appointment_id'] for r in list_upcoming_appointments(doctor_id=doctor.id, limit=1)] == [mine.id]
    assert len(list_upcoming_appointments(patient_id=mine.patient_id)) == 1


def test_rows_without_patient_are_excluded(make):
    orphaned = make.appointment(appointment_date=utcnow() + timedelta(days=1))
    kept = make.appointment(appointment_date=utcnow() + timedelta(days=2))
    db.session.commit()

    # Bypass the RESTRICT rule to leave an appointment pointing at a missing patient
    with db.engine.connect() as conn:
        conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
        try:
            conn.exec_driver_sql("DELETE FROM patients WHERE id = ?", (orphaned.patient_id,))
            conn.commit()
        finally:
            conn.exec_driver_sql("PRAGMA foreign_keys=ON")

    assert db.session.execute(db.text("SELECT COUNT(*) FROM appointments")).scalar() == 2
    assert [r['appointment_id'] for r in list_upcoming_appointments()] == [kept.id]


@pytest.mark.parametrize('dialect, utc_now', [
    ('mysql', 'UTC_TIMESTAMP()'),
    ('postgresql', "(now() AT TIME ZONE 'utc')"),
    ('sqlite', 'CURRENT_TIMESTAMP'),
])
def test_view_compares_against_utc_now(dialect, utc_now):
    sql = create_view_sql(dialect)
    assert f'a.appointment_date >= {utc_now}' in sql
    assert '{utc_now}' not in sql
