from clinic_booking.extensions import db
from .base import isoformat


class Prescription(db.Model):
    """An appointment can produce multiple prescriptions."""

    __tablename__ = "prescriptions"

    id = db.Column(db.Integer, primary_key=True)
    appointment_id = db.Column(
        db.Integer,
        db.ForeignKey("appointments.id", name="fk_presc_appointment", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
    )
    medication_name = db.Column(db.String(150), nullable=False)
    dosage = db.Column(db.String(80))  # e.g. "500mg"
    frequency = db.Column(db.String(80))  # e.g. "3 times a day"
    notes = db.Column(db.String(255))
    issued_at = db.Column(db.DateTime, server_default=db.func.now())

    appointment = db.relationship("Appointment", back_populates="prescriptions", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "appointment_id": self.appointment_id,
            "medication_name": self.medication_name,
            "dosage": self.dosage,
            "frequency": self.frequency,
            "notes": self.notes,
            "issued_at": isoformat(self.issued_at),
        }

    def __repr__(self):
        return f"<Prescription {self.id} - {self.medication_name} (appointment {self.appointment_id})>"
