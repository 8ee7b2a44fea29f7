"""Initial clinic booking schema

Creates patients, doctors, specialties, doctor_specialties, rooms,
appointments, prescriptions, invoices and users, the secondary indexes and
the vw_upcoming_appointments view.

Revision ID: 0001
Revises:
Create Date: 2025-08-10 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


GENDERS = ('Male', 'Female', 'Other')
APPOINTMENT_STATUSES = ('Scheduled', 'Completed', 'Cancelled', 'No-Show')
USER_ROLES = ('Admin', 'Reception', 'Nurse', 'Doctor')

VIEW_NAME = 'vw_upcoming_appointments'
VIEW_SELECT = """
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

UTC_NOW = {
    'mysql': 'UTC_TIMESTAMP()',
    'mariadb': 'UTC_TIMESTAMP()',
    'postgresql': "(now() AT TIME ZONE 'utc')",
    'sqlite': 'CURRENT_TIMESTAMP',
}


def upgrade():
    """Create every table, index and the upcoming-appointments view."""
    op.create_table(
        'patients',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.Enum(*GENDERS, name='patient_gender', create_constraint=True),
                  nullable=True, server_default='Other'),
        sa.Column('email', sa.String(length=150), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'doctors',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=False),
        sa.Column('license_number', sa.String(length=50), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('email', sa.String(length=150), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.UniqueConstraint('license_number'),
    )

    op.create_table(
        'specialties',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'doctor_specialties',
        sa.Column('doctor_id', sa.Integer(), nullable=False),
        sa.Column('specialty_id', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('doctor_id', 'specialty_id'),
        sa.ForeignKeyConstraint(['doctor_id'], ['doctors.id'], name='fk_ds_doctor',
                                ondelete='CASCADE', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['specialty_id'], ['specialties.id'], name='fk_ds_specialty',
                                ondelete='CASCADE', onupdate='CASCADE'),
    )

    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_number', sa.String(length=20), nullable=False),
        sa.Column('floor', sa.String(length=20), nullable=True),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.UniqueConstraint('room_number'),
    )

    op.create_table(
        'appointments',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('appointment_number', sa.String(length=50), nullable=False),
        sa.Column('patient_id', sa.Integer(), nullable=False),
        sa.Column('doctor_id', sa.Integer(), nullable=False),
        sa.Column('room_id', sa.Integer(), nullable=True),
        sa.Column('appointment_date', sa.DateTime(), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('status', sa.Enum(*APPOINTMENT_STATUSES, name='appointment_status', create_constraint=True),
                  nullable=True, server_default='Scheduled'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.UniqueConstraint('appointment_number'),
        sa.ForeignKeyConstraint(['patient_id'], ['patients.id'], name='fk_appt_patient',
                                ondelete='RESTRICT', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['doctor_id'], ['doctors.id'], name='fk_appt_doctor',
                                ondelete='RESTRICT', onupdate='CASCADE'),
        sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], name='fk_appt_room',
                                ondelete='SET NULL', onupdate='CASCADE'),
        sa.CheckConstraint('duration_minutes > 0', name='ck_appointments_duration_positive'),
    )
    op.create_index('idx_appointments_patient', 'appointments', ['patient_id'], unique=False)
    op.create_index('idx_appointments_doctor', 'appointments', ['doctor_id'], unique=False)
    op.create_index('idx_appointments_date', 'appointments', ['appointment_date'], unique=False)

    op.create_table(
        'prescriptions',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('appointment_id', sa.Integer(), nullable=False),
        sa.Column('medication_name', sa.String(length=150), nullable=False),
        sa.Column('dosage', sa.String(length=80), nullable=True),
        sa.Column('frequency', sa.String(length=80), nullable=True),
        sa.Column('notes', sa.String(length=255), nullable=True),
        sa.Column('issued_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(['appointment_id'], ['appointments.id'], name='fk_presc_appointment',
                                ondelete='CASCADE', onupdate='CASCADE'),
    )

    op.create_table(
        'invoices',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('appointment_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('paid', sa.Boolean(), nullable=True, server_default=sa.false()),
        sa.Column('issued_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.UniqueConstraint('appointment_id'),
        sa.ForeignKeyConstraint(['appointment_id'], ['appointments.id'], name='fk_invoice_appt',
                                ondelete='CASCADE', onupdate='CASCADE'),
        sa.CheckConstraint('amount >= 0', name='ck_invoices_amount_non_negative'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.Enum(*USER_ROLES, name='user_role', create_constraint=True),
                  nullable=False, server_default='Reception'),
        sa.Column('doctor_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True, server_default=sa.func.now()),
        sa.UniqueConstraint('username'),
        sa.ForeignKeyConstraint(['doctor_id'], ['doctors.id'], name='fk_users_doctor',
                                ondelete='SET NULL', onupdate='CASCADE'),
    )
    op.create_index('idx_users_role', 'users', ['role'], unique=False)

    # appointment_date is naive UTC, so compare against UTC now on every engine
    dialect = op.get_bind().dialect.name
    view_select = VIEW_SELECT.format(utc_now=UTC_NOW.get(dialect, 'CURRENT_TIMESTAMP'))

    # SQLite has no CREATE OR REPLACE VIEW
    if dialect == 'sqlite':
        op.execute(f"CREATE VIEW IF NOT EXISTS {VIEW_NAME} AS {view_select}")
    else:
        op.execute(f"CREATE OR REPLACE VIEW {VIEW_NAME} AS {view_select}")


def downgrade():
    """Drop the view, then every table in dependency order (indexes go with their tables)."""
    op.execute(f"DROP VIEW IF EXISTS {VIEW_NAME}")

    op.drop_table('users')
    op.drop_table('invoices')
    op.drop_table('prescriptions')
    op.drop_table('appointments')
    op.drop_table('rooms')
    op.drop_table('doctor_specialties')
    op.drop_table('specialties')
    op.drop_table('doctors')
    op.drop_table('patients')

    # Native enum types outlive their tables on PostgreSQL
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum_name in ('user_role', 'appointment_status', 'patient_gender'):
            sa.Enum(name=enum_name).drop(bind, checkfirst=True)
