from .health import health_bp
from .patient import patient_bp
from .doctor import doctor_bp
from .specialty import specialty_bp
from .room import room_bp
from .appointment import appointment_bp
from .user import user_bp

__all__ = ['health_bp', 'patient_bp', 'doctor_bp', 'specialty_bp', 'room_bp', 'appointment_bp', 'user_bp']
