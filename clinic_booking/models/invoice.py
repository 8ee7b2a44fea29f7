from clinic_booking.extensions import db
from .base import isoformat


class Invoice(db.Model):
    """Billing for an appointment. At most one invoice per appointment."""

    __tablename__ = "invoices"
    __table_args__ = (
        db.CheckConstraint("amount >= 0", name="ck_invoices_amount_non_negative"),
    )

    id = db.Column(db.Integer, primary_key=True)
    appointment_id = db.Column(
        db.Integer,
        db.ForeignKey("appointments.id", name="fk_invoice_appt", ondelete="CASCADE", onupdate="CASCADE"),
        unique=True,
        nullable=False,
    )
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    paid = db.Column(db.Boolean, default=False, server_default=db.false())
    issued_at = db.Column(db.DateTime, server_default=db.func.now())

    appointment = db.relationship("Appointment", back_populates="invoice", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "appointment_id": self.appointment_id,
            "amount": str(self.amount) if self.amount is not None else None,
            "paid": bool(self.paid),
            "issued_at": isoformat(self.issued_at),
        }

    def __repr__(self):
        return f"<Invoice {self.id} - appointment {self.appointment_id} amount {self.amount}>"
