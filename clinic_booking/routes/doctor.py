from flask import Blueprint, request, jsonify
from sqlalchemy import or_

from clinic_booking.extensions import db
from clinic_booking.models import Doctor, Specialty, doctor_specialties
from clinic_booking.utils import get_pagination_args, is_id

doctor_bp = Blueprint('doctor', __name__, url_prefix='/api/doctors')

UPDATABLE_FIELDS = ('first_name', 'last_name', 'license_number', 'phone', 'email')


def _doctor_not_found():
    return jsonify({
        'success': False,
        'error': 'Doctor not found'
    }), 404


@doctor_bp.route('', methods=['GET'])
def list_doctors():
    """
    List doctors with pagination.
    Query params: page, limit, search, specialty_id
    """
    page, limit = get_pagination_args()
    search = request.args.get('search', '', type=str).strip()
    specialty_id = request.args.get('specialty_id', type=int)

    query = Doctor.query
    if search:
        query = query.filter(or_(
            Doctor.first_name.ilike(f'%{search}%'),
            Doctor.last_name.ilike(f'%{search}%'),
            Doctor.license_number.ilike(f'%{search}%'),
        ))
    if specialty_id:
        query = query.filter(Doctor.specialties.any(Specialty.id == specialty_id))

    doctors = query.order_by(Doctor.last_name, Doctor.first_name, Doctor.id).paginate(
        page=page,
        per_page=limit,
        error_out=False
    )

    return jsonify({
        'success': True,
        'data': [d.to_dict() for d in doctors.items],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': doctors.total,
            'pages': doctors.pages,
            'has_next': doctors.has_next,
            'has_prev': doctors.has_prev
        }
    }), 200


@doctor_bp.route('/<int:doctor_id>', methods=['GET'])
def get_doctor(doctor_id):
    doctor = db.session.get(Doctor, doctor_id)
    if not doctor:
        return _doctor_not_found()

    return jsonify({
        'success': True,
        'data': doctor.to_dict()
    }), 200


@doctor_bp.route('', methods=['POST'])
def create_doctor():
    """
    Create new doctor, optionally with ``specialty_ids``.
    License number uniqueness is enforced by the database.
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400

    for field in ('first_name', 'last_name', 'license_number'):
        if not data.get(field):
            return jsonify({
                'success': False,
                'error': f'Field "{field}" is required'
            }), 400

    specialty_ids = data.get('specialty_ids') or []
    if not isinstance(specialty_ids, list) or not all(is_id(i) for i in specialty_ids):
        return jsonify({
            'success': False,
            'error': 'specialty_ids must be a list of ids'
        }), 400

    specialties = []
    for specialty_id in specialty_ids:
        specialty = db.session.get(Specialty, specialty_id)
        if not specialty:
            return jsonify({
                'success': False,
                'error': f'Specialty {specialty_id} not found'
            }), 404
        if specialty not in specialties:
            specialties.append(specialty)

    doctor = Doctor(
        first_name=data['first_name'],
        last_name=data['last_name'],
        license_number=data['license_number'],
        phone=data.get('phone'),
        email=data.get('email'),
        specialties=specialties,
    )
    db.session.add(doctor)
    db.session.commit()

    return jsonify({
        'success': True,
        'data': doctor.to_dict(),
        'message': 'Doctor created successfully'
    }), 201


@doctor_bp.route('/<int:doctor_id>', methods=['PUT'])
def update_doctor(doctor_id):
    doctor = db.session.get(Doctor, doctor_id)
    if not doctor:
        return _doctor_not_found()

    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400

    for field in UPDATABLE_FIELDS:
        if field in data:
            setattr(doctor, field, data[field])

    db.session.commit()

    return jsonify({
        'success': True,
        'data': doctor.to_dict(),
        'message': 'Doctor updated successfully'
    }), 200


@doctor_bp.route('/<int:doctor_id>', methods=['DELETE'])
def delete_doctor(doctor_id):
    """
    Delete doctor. Specialty links are removed and linked users are detached;
    rejected (409) while appointments reference the doctor.
    """
    doctor = db.session.get(Doctor, doctor_id)
    if not doctor:
        return _doctor_not_found()

    db.session.delete(doctor)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': f'Doctor {doctor_id} deleted successfully'
    }), 200


@doctor_bp.route('/<int:doctor_id>/specialties', methods=['POST'])
def add_doctor_specialty(doctor_id):
    """
    Link a specialty to a doctor. Body: {"specialty_id": 1}
    A link that already exists is rejected by the composite primary key.
    """
    doctor = db.session.get(Doctor, doctor_id)
    if not doctor:
        return _doctor_not_found()

    data = request.get_json(silent=True) or {}
    specialty_id = data.get('specialty_id')
    if not is_id(specialty_id):
        return jsonify({
            'success': False,
            'error': 'Field "specialty_id" is required'
        }), 400

    specialty = db.session.get(Specialty, specialty_id)
    if not specialty:
        return jsonify({
            'success': False,
            'error': 'Specialty not found'
        }), 404

    db.session.execute(
        doctor_specialties.insert().values(doctor_id=doctor.id, specialty_id=specialty.id)
    )
    db.session.commit()
    db.session.refresh(doctor)

    return jsonify({
        'success': True,
        'data': doctor.to_dict(),
        'message': 'Specialty added'
    }), 201


@doctor_bp.route('/<int:doctor_id>/specialties/<int:specialty_id>', methods=['DELETE'])
def remove_doctor_specialty(doctor_id, specialty_id):
    doctor = db.session.get(Doctor, doctor_id)
    if not doctor:
        return _doctor_not_found()

    result = db.session.execute(
        doctor_specialties.delete().where(
            doctor_specialties.c.doctor_id == doctor_id,
            doctor_specialties.c.specialty_id == specialty_id,
        )
    )
    if result.rowcount == 0:
        db.session.rollback()
        return jsonify({
            'success': False,
            'error': 'Doctor does not have this specialty'
        }), 404

    db.session.commit()
    db.session.refresh(doctor)

    return jsonify({
        'success': True,
        'data': doctor.to_dict(),
        'message': 'Specialty removed'
    }), 200
