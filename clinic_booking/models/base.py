from clinic_booking.extensions import db


class TimestampMixin:
    """Adds a server-side ``created_at`` column."""
    created_at = db.Column(db.DateTime, server_default=db.func.now())


def isoformat(value):
    return value.isoformat() if value else None
