"""
Liveness and readiness endpoints
"""
import logging
from datetime import datetime, timezone

from flask import Blueprint, jsonify
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from clinic_booking.extensions import db
from clinic_booking.models.views import UPCOMING_APPOINTMENTS_VIEW

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__, url_prefix='/health')


def _now():
    return datetime.now(timezone.utc).isoformat()


@health_bp.route('', methods=['GET'])
@health_bp.route('/ping', methods=['GET'])
def health_check():
    """Process is up; does not touch the database."""
    return jsonify({
        'status': 'healthy',
        'timestamp': _now(),
        'service': 'clinic-booking-api'
    }), 200


@health_bp.route('/ready', methods=['GET'])
def readiness_check():
    """
    Database reachable and schema loaded.
    The upcoming-appointments view is created last, so its presence means the
    tables are there too.
    """
    schema = 'missing'
    try:
        db.session.execute(db.text('SELECT 1'))
        db_status = 'connected'
        if UPCOMING_APPOINTMENTS_VIEW in inspect(db.engine).get_view_names():
            schema = 'loaded'
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning("Readiness check failed: %s", e)
        db_status = f'error: {e}'

    ready = db_status == 'connected' and schema == 'loaded'
    return jsonify({
        'status': 'ready' if ready else 'not_ready',
        'database': db_status,
        'schema': schema,
        'timestamp': _now()
    }), 200 if ready else 503
