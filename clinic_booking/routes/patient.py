from flask import Blueprint, request, jsonify
from sqlalchemy import or_

from clinic_booking.extensions import db
from clinic_booking.models import Patient, GENDERS
from clinic_booking.utils import parse_date, get_pagination_args

patient_bp = Blueprint('patient', __name__, url_prefix='/api/patients')

UPDATABLE_FIELDS = ('first_name', 'last_name', 'gender', 'email', 'phone')


def _patient_not_found():
    return jsonify({
        'success': False,
        'error': 'Patient not found'
    }), 404


def _validate_gender(data):
    gender = data.get('gender')
    if gender is not None and gender not in GENDERS:
        return jsonify({
            'success': False,
            'error': f'Invalid gender. Allowed: {", ".join(GENDERS)}'
        }), 400
    return None


@patient_bp.route('', methods=['GET'])
def list_patients():
    """
    List patients with pagination and search
    Query params: page, limit, search
    """
    page, limit = get_pagination_args()
    search = request.args.get('search', '', type=str).strip()

    query = Patient.query
    if search:
        query = query.filter(or_(
            Patient.first_name.ilike(f'%{search}%'),
            Patient.last_name.ilike(f'%{search}%'),
            Patient.email.ilike(f'%{search}%'),
            Patient.phone.ilike(f'%{search}%'),
        ))

    patients = query.order_by(Patient.last_name, Patient.first_name, Patient.id).paginate(
        page=page,
        per_page=limit,
        error_out=False
    )

    return jsonify({
        'success': True,
        'data': [p.to_dict() for p in patients.items],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': patients.total,
            'pages': patients.pages,
            'has_next': patients.has_next,
            'has_prev': patients.has_prev
        }
    }), 200


@patient_bp.route('/<int:patient_id>', methods=['GET'])
def get_patient(patient_id):
    patient = db.session.get(Patient, patient_id)
    if not patient:
        return _patient_not_found()

    return jsonify({
        'success': True,
        'data': patient.to_dict()
    }), 200


@patient_bp.route('', methods=['POST'])
def create_patient():
    """
    Create new patient. Email uniqueness is enforced by the database.
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400

    for field in ('first_name', 'last_name'):
        if not data.get(field):
            return jsonify({
                'success': False,
                'error': f'Field "{field}" is required'
            }), 400

    invalid = _validate_gender(data)
    if invalid:
        return invalid

    date_of_birth = None
    if data.get('date_of_birth'):
        date_of_birth = parse_date(data['date_of_birth'])
        if date_of_birth is None:
            return jsonify({
                'success': False,
                'error': 'Invalid date_of_birth. Use YYYY-MM-DD'
            }), 400

    patient = Patient(
        first_name=data['first_name'],
        last_name=data['last_name'],
        date_of_birth=date_of_birth,
        gender=data.get('gender') or 'Other',
        email=data.get('email') or None,
        phone=data.get('phone'),
    )
    db.session.add(patient)
    db.session.commit()

    return jsonify({
        'success': True,
        'data': patient.to_dict(),
        'message': 'Patient created successfully'
    }), 201


@patient_bp.route('/<int:patient_id>', methods=['PUT'])
def update_patient(patient_id):
    patient = db.session.get(Patient, patient_id)
    if not patient:
        return _patient_not_found()

    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400

    invalid = _validate_gender(data)
    if invalid:
        return invalid

    date_of_birth = parse_date(data.get('date_of_birth'))
    if data.get('date_of_birth') and date_of_birth is None:
        return jsonify({
            'success': False,
            'error': 'Invalid date_of_birth. Use YYYY-MM-DD'
        }), 400

    for field in UPDATABLE_FIELDS:
        if field in data:
            value = data[field]
            if field == 'email' and not value:
                value = None
            setattr(patient, field, value)
    if 'date_of_birth' in data:
        patient.date_of_birth = date_of_birth

    db.session.commit()

    return jsonify({
        'success': True,
        'data': patient.to_dict(),
        'message': 'Patient updated successfully'
    }), 200


@patient_bp.route('/<int:patient_id>', methods=['DELETE'])
def delete_patient(patient_id):
    """
    Delete patient. Rejected by the database (409) while appointments reference them.
    """
    patient = db.session.get(Patient, patient_id)
    if not patient:
        return _patient_not_found()

    db.session.delete(patient)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': f'Patient {patient_id} deleted successfully'
    }), 200
