from clinic_booking.extensions import db, bcrypt
from .base import TimestampMixin, isoformat
from .enums import USER_ROLES


class User(db.Model, TimestampMixin):
    """Clinic staff account, kept separate from the Doctors table."""
    __tablename__ = 'users'
    __table_args__ = (
        db.Index('idx_users_role', 'role'),
    )

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(*USER_ROLES, name='user_role', create_constraint=True),
        nullable=False,
        default='Reception',
        server_default='Reception',
    )
    # Link to Doctors when role = Doctor (optional)
    doctor_id = db.Column(
        db.Integer,
        db.ForeignKey('doctors.id', name='fk_users_doctor', ondelete='SET NULL', onupdate='CASCADE'),
        nullable=True,
    )

    doctor = db.relationship('Doctor', back_populates='users', lazy=True)

    def set_password(self, password):
        """Hash and set password"""
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        """Check if provided password matches hash"""
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        # password_hash is never serialized
        return {
            'id': self.id,
            'username': self.username,
            'role': self.role,
            'doctor_id': self.doctor_id,
            'created_at': isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<User {self.username} - {self.role}>"
