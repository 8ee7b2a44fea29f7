from clinic_booking.extensions import db
from .base import TimestampMixin, isoformat
from .enums import GENDERS


class Patient(db.Model, TimestampMixin):
    __tablename__ = 'patients'

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    date_of_birth = db.Column(db.Date)
    gender = db.Column(
        db.Enum(*GENDERS, name='patient_gender', create_constraint=True),
        default='Other',
        server_default='Other',
    )
    email = db.Column(db.String(150), unique=True, nullable=True)
    phone = db.Column(db.String(30))

    # RESTRICT on the foreign key: leave dependent appointments to the engine
    appointments = db.relationship('Appointment', back_populates='patient', passive_deletes='all', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'date_of_birth': isoformat(self.date_of_birth),
            'gender': self.gender,
            'email': self.email,
            'phone': self.phone,
            'created_at': isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Patient {self.first_name} {self.last_name} ({self.id})>"
