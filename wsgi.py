"""
WSGI entry point for production deployment
Used by Gunicorn, uWSGI, and other WSGI servers
"""
from clinic_booking import create_app

application = app = create_app()
