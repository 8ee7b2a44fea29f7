"""
Development server for the clinic booking API
Run with: python run.py
"""
import os

from clinic_booking import create_app
from clinic_booking.models.views import UPCOMING_APPOINTMENTS_VIEW

app = create_app()

if __name__ == '__main__':
    host = os.getenv('FLASK_HOST', '127.0.0.1')
    port = int(os.getenv('FLASK_PORT', 5000))
    debug = app.config.get('DEBUG', False)
    database = app.config['SQLALCHEMY_DATABASE_URI'].split('@')[-1]

    print(f"""
    ========================================
    Clinic Booking API (development)
    ========================================
    Listening: http://{host}:{port}
    Database:  {database}
    Debug:     {debug}

    Endpoints: /api/patients  /api/doctors  /api/specialties
               /api/rooms  /api/appointments  /api/users
    Upcoming:  /api/appointments/upcoming ({UPCOMING_APPOINTMENTS_VIEW})
    Schema:    flask --app clinic_booking db upgrade
    Sample:    flask --app clinic_booking seed
    ========================================
    """)

    app.run(host=host, port=port, debug=debug)
