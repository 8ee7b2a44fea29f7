"""
Read-only reporting view: upcoming appointments.

The view is created and dropped together with the tables through metadata
events. It is described by a standalone ``Table`` on its own ``MetaData`` so
``create_all`` never tries to create it as a table.
"""
import sqlalchemy as sa

from clinic_booking.extensions import db

UPCOMING_APPOINTMENTS_VIEW = 'vw_upcoming_appointments'

UPCOMING_APPOINTMENTS_SELECT = """
SELECT a.id AS appointment_id,
       a.appointment_number,
       a.appointment_date,
       a.duration_minutes,
       a.status,
       p.id AS patient_id,
       p.first_name AS patient_first,
       p.last_name AS patient_last,
       d.id AS doctor_id,
       d.first_name AS doctor_first,
       d.last_name AS doctor_last,
       r.room_number
FROM appointments a
JOIN patients p ON a.patient_id = p.id
JOIN doctors d ON a.doctor_id = d.id
LEFT JOIN rooms r ON a.room_id = r.id
WHERE a.appointment_date >= {utc_now}
ORDER BY a.appointment_date ASC
"""

view_metadata = sa.MetaData()

upcoming_appointments = sa.Table(
    UPCOMING_APPOINTMENTS_VIEW,
    view_metadata,
    sa.Column('appointment_id', sa.Integer, primary_key=True),
    sa.Column('appointment_number', sa.String(50)),
    sa.Column('appointment_date', sa.DateTime),
    sa.Column('duration_minutes', sa.Integer),
    sa.Column('status', sa.String(20)),
    sa.Column('patient_id', sa.Integer),
    sa.Column('patient_first', sa.String(80)),
    sa.Column('patient_last', sa.String(80)),
    sa.Column('doctor_id', sa.Integer),
    sa.Column('doctor_first', sa.String(80)),
    sa.Column('doctor_last', sa.String(80)),
    sa.Column('room_number', sa.String(20)),
)


def utc_now_sql(dialect_name):
    """SQL for the current UTC time as a naive timestamp, matching how appointment_date is stored."""
    if dialect_name in ('mysql', 'mariadb'):
        return 'UTC_TIMESTAMP()'
    if dialect_name == 'postgresql':
        return "(now() AT TIME ZONE 'utc')"
    # SQLite CURRENT_TIMESTAMP is already UTC
    return 'CURRENT_TIMESTAMP'


def create_view_sql(dialect_name):
    select = UPCOMING_APPOINTMENTS_SELECT.format(utc_now=utc_now_sql(dialect_name))
    # SQLite has no CREATE OR REPLACE VIEW; PostgreSQL and MySQL have no IF NOT EXISTS
    if dialect_name == 'sqlite':
        return f"CREATE VIEW IF NOT EXISTS {UPCOMING_APPOINTMENTS_VIEW} AS {select}"
    return f"CREATE OR REPLACE VIEW {UPCOMING_APPOINTMENTS_VIEW} AS {select}"


def drop_view_sql():
    return f"DROP VIEW IF EXISTS {UPCOMING_APPOINTMENTS_VIEW}"


@sa.event.listens_for(db.metadata, 'after_create')
def _create_upcoming_view(target, connection, **kw):
    connection.execute(sa.text(create_view_sql(connection.dialect.name)))


@sa.event.listens_for(db.metadata, 'before_drop')
def _drop_upcoming_view(target, connection, **kw):
    connection.execute(sa.text(drop_view_sql()))
