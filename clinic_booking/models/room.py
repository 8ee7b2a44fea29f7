from clinic_booking.extensions import db


class Room(db.Model):
    """Clinic room where appointments happen"""
    __tablename__ = 'rooms'

    id = db.Column(db.Integer, primary_key=True)
    room_number = db.Column(db.String(20), unique=True, nullable=False)
    floor = db.Column(db.String(20))
    notes = db.Column(db.String(255))

    # SET NULL on the foreign key
    appointments = db.relationship('Appointment', back_populates='room', passive_deletes=True, lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'room_number': self.room_number,
            'floor': self.floor,
            'notes': self.notes,
        }

    def __repr__(self):
        return f"<Room {self.room_number}>"
