from flask import Flask, jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException
from .extensions import db, migrate, bcrypt
import logging
import os

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'migrations')


def create_app(config_name=None, overrides=None):
    """Create Flask application factory.

    ``overrides`` is applied on top of the config class, e.g. a different
    SQLALCHEMY_DATABASE_URI for one-off scripts and tests.
    """
    app = Flask(__name__)

    # Load configuration
    from clinic_booking.config import config, get_config
    config_class = config.get(config_name, config['default']) if config_name else get_config()
    if hasattr(config_class, 'validate'):
        config_class.validate()
    app.config.from_object(config_class)
    if overrides:
        app.config.update(overrides)

    logging.getLogger().setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db, directory=MIGRATIONS_DIR)
    bcrypt.init_app(app)

    # Initialize CORS
    from clinic_booking.utils.cors import init_cors
    init_cors(app)

    # Constraint violations raised by the database engine
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        from clinic_booking.utils import integrity_error_response
        db.session.rollback()
        payload, status = integrity_error_response(error)
        logger.warning("Integrity error (%s): %s", payload['constraint'], payload['detail'])
        return jsonify(payload), status

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({
            'success': False,
            'error': 'Endpoint not found'
        }), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({
            'success': False,
            'error': 'Method not allowed'
        }), 405

    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return jsonify({
                'success': False,
                'error': e.description
            }), e.code
        db.session.rollback()
        logger.error(f"Unhandled exception: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'error': 'Internal server error. Check server logs for details.'
        }), 500

    # Setup file logging
    if not app.debug and not app.testing:
        from logging.handlers import RotatingFileHandler

        log_file = app.config.get('LOG_FILE', 'logs/app.log')
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10240000,
            backupCount=10
        )
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        app.logger.setLevel(logging.INFO)
        app.logger.info('Application startup')

    # Security headers middleware
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    with app.app_context():
        # Import models to register them (and the view DDL) with SQLAlchemy
        from . import models  # noqa: F401

        from .routes import health_bp, patient_bp, doctor_bp, specialty_bp, room_bp, appointment_bp, user_bp
        app.register_blueprint(health_bp)  # Register health check first
        app.register_blueprint(patient_bp)
        app.register_blueprint(doctor_bp)
        app.register_blueprint(specialty_bp)
        app.register_blueprint(room_bp)
        app.register_blueprint(appointment_bp)
        app.register_blueprint(user_bp)

    from .commands import register_commands
    register_commands(app)

    return app
