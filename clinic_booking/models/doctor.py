from clinic_booking.extensions import db
from .base import TimestampMixin, isoformat


# Many-to-many: a doctor has many specialties, a specialty belongs to many doctors
doctor_specialties = db.Table(
    'doctor_specialties',
    db.Column(
        'doctor_id',
        db.Integer,
        db.ForeignKey('doctors.id', name='fk_ds_doctor', ondelete='CASCADE', onupdate='CASCADE'),
        primary_key=True,
    ),
    db.Column(
        'specialty_id',
        db.Integer,
        db.ForeignKey('specialties.id', name='fk_ds_specialty', ondelete='CASCADE', onupdate='CASCADE'),
        primary_key=True,
    ),
)


class Doctor(db.Model, TimestampMixin):
    __tablename__ = 'doctors'

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False)
    license_number = db.Column(db.String(50), unique=True, nullable=False)
    phone = db.Column(db.String(30))
    email = db.Column(db.String(150))

    specialties = db.relationship(
        'Specialty',
        secondary=doctor_specialties,
        back_populates='doctors',
        passive_deletes=True,
        lazy=True,
    )
    # RESTRICT on the foreign key: leave dependent appointments to the engine
    appointments = db.relationship('Appointment', back_populates='doctor', passive_deletes='all', lazy=True)
    users = db.relationship('User', back_populates='doctor', passive_deletes=True, lazy=True)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def to_dict(self, include_specialties=True):
        data = {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'license_number': self.license_number,
            'phone': self.phone,
            'email': self.email,
            'created_at': isoformat(self.created_at),
        }
        if include_specialties:
            data['specialties'] = [s.to_dict() for s in self.specialties]
        return data

    def __repr__(self):
        return f"<Doctor {self.full_name} ({self.license_number})>"


class Specialty(db.Model):
    """Lookup table for doctor specialties (e.g. Cardiology)"""
    __tablename__ = 'specialties'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.String(255))

    doctors = db.relationship(
        'Doctor',
        secondary=doctor_specialties,
        back_populates='specialties',
        passive_deletes=True,
        lazy=True,
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
        }

    def __repr__(self):
        return f"<Specialty {self.name}>"
