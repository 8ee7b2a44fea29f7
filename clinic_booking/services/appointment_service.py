"""
Read helpers over appointments and the upcoming-appointments view.
"""
import logging
import re

import sqlalchemy as sa

from clinic_booking.extensions import db
from clinic_booking.models import Appointment, upcoming_appointments

logger = logging.getLogger(__name__)

APPOINTMENT_NUMBER_PREFIX = 'APT-'
_NUMBER_RE = re.compile(r'^APT-(\d+)$')


def list_upcoming_appointments(doctor_id=None, patient_id=None, limit=None):
    """
    Rows of ``vw_upcoming_appointments``, soonest first.

    The view already filters to future dates and inner-joins patients and
    doctors; this only narrows it further.
    """
    view = upcoming_appointments
    stmt = sa.select(view).order_by(view.c.appointment_date.asc(), view.c.appointment_id.asc())
    if doctor_id is not None:
        stmt = stmt.where(view.c.doctor_id == doctor_id)
    if patient_id is not None:
        stmt = stmt.where(view.c.patient_id == patient_id)
    if limit:
        stmt = stmt.limit(limit)

    rows = db.session.execute(stmt).mappings().all()
    result = []
    for row in rows:
        item = dict(row)
        if item['appointment_date'] is not None:
            item['appointment_date'] = item['appointment_date'].isoformat()
        result.append(item)
    return result


def next_appointment_number():
    """
    Next free appointment number of the form APT-0001.

    One above the highest numeric suffix already issued; numbers that do not
    follow the pattern are ignored.
    """
    numbers = db.session.execute(
        sa.select(Appointment.appointment_number).where(
            Appointment.appointment_number.like(f'{APPOINTMENT_NUMBER_PREFIX}%')
        )
    ).scalars().all()

    highest = 0
    for number in numbers:
        match = _NUMBER_RE.match(number)
        if match:
            highest = max(highest, int(match.group(1)))

    return f"{APPOINTMENT_NUMBER_PREFIX}{highest + 1:04d}"
