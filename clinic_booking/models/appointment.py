from clinic_booking.extensions import db
from .base import TimestampMixin, isoformat
from .enums import APPOINTMENT_STATUSES


class Appointment(db.Model, TimestampMixin):
    """
    One appointment is for one patient with one doctor, optionally in a room.

    Deleting a patient or doctor is rejected while appointments reference
    them; deleting a room clears ``room_id``. Status is a plain enumeration
    with no enforced transitions.
    """
    __tablename__ = 'appointments'
    __table_args__ = (
        db.CheckConstraint('duration_minutes > 0', name='ck_appointments_duration_positive'),
        db.Index('idx_appointments_patient', 'patient_id'),
        db.Index('idx_appointments_doctor', 'doctor_id'),
        db.Index('idx_appointments_date', 'appointment_date'),
    )

    id = db.Column(db.Integer, primary_key=True)
    appointment_number = db.Column(db.String(50), unique=True, nullable=False)
    patient_id = db.Column(
        db.Integer,
        db.ForeignKey('patients.id', name='fk_appt_patient', ondelete='RESTRICT', onupdate='CASCADE'),
        nullable=False,
    )
    doctor_id = db.Column(
        db.Integer,
        db.ForeignKey('doctors.id', name='fk_appt_doctor', ondelete='RESTRICT', onupdate='CASCADE'),
        nullable=False,
    )
    room_id = db.Column(
        db.Integer,
        db.ForeignKey('rooms.id', name='fk_appt_room', ondelete='SET NULL', onupdate='CASCADE'),
        nullable=True,
    )
    appointment_date = db.Column(db.DateTime, nullable=False)  # naive UTC
    duration_minutes = db.Column(db.Integer, nullable=False, default=30, server_default='30')
    status = db.Column(
        db.Enum(*APPOINTMENT_STATUSES, name='appointment_status', create_constraint=True),
        default='Scheduled',
        server_default='Scheduled',
    )
    notes = db.Column(db.Text)

    # Relationships
    patient = db.relationship('Patient', back_populates='appointments', lazy=True)
    doctor = db.relationship('Doctor', back_populates='appointments', lazy=True)
    room = db.relationship('Room', back_populates='appointments', lazy=True)
    prescriptions = db.relationship(
        'Prescription',
        back_populates='appointment',
        cascade='all, delete-orphan',
        passive_deletes=True,
        order_by='Prescription.id',
        lazy=True,
    )
    invoice = db.relationship(
        'Invoice',
        back_populates='appointment',
        uselist=False,
        cascade='all, delete-orphan',
        passive_deletes=True,
        lazy=True,
    )

    def to_dict(self):
        return {
            'id': self.id,
            'appointment_number': self.appointment_number,
            'patient_id': self.patient_id,
            'doctor_id': self.doctor_id,
            'room_id': self.room_id,
            'appointment_date': isoformat(self.appointment_date),
            'duration_minutes': self.duration_minutes,
            'status': self.status,
            'notes': self.notes,
            'created_at': isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Appointment {self.appointment_number} - patient {self.patient_id} with doctor {self.doctor_id} on {self.appointment_date}>"
