from flask import Blueprint, request, jsonify

from clinic_booking.extensions import db
from clinic_booking.models import Specialty

specialty_bp = Blueprint('specialty', __name__, url_prefix='/api/specialties')


@specialty_bp.route('', methods=['GET'])
def list_specialties():
    specialties = Specialty.query.order_by(Specialty.name).all()
    return jsonify({
        'success': True,
        'data': [s.to_dict() for s in specialties]
    }), 200


@specialty_bp.route('/<int:specialty_id>', methods=['GET'])
def get_specialty(specialty_id):
    specialty = db.session.get(Specialty, specialty_id)
    if not specialty:
        return jsonify({'success': False, 'error': 'Specialty not found'}), 404

    data = specialty.to_dict()
    data['doctors'] = [d.to_dict(include_specialties=False) for d in specialty.doctors]
    return jsonify({
        'success': True,
        'data': data
    }), 200


@specialty_bp.route('', methods=['POST'])
def create_specialty():
    data = request.get_json(silent=True)
    if not data or not data.get('name'):
        return jsonify({
            'success': False,
            'error': 'Field "name" is required'
        }), 400

    specialty = Specialty(name=data['name'], description=data.get('description'))
    db.session.add(specialty)
    db.session.commit()

    return jsonify({
        'success': True,
        'data': specialty.to_dict(),
        'message': 'Specialty created successfully'
    }), 201


@specialty_bp.route('/<int:specialty_id>', methods=['DELETE'])
def delete_specialty(specialty_id):
    """Delete specialty; doctor links go with it."""
    specialty = db.session.get(Specialty, specialty_id)
    if not specialty:
        return jsonify({'success': False, 'error': 'Specialty not found'}), 404

    db.session.delete(specialty)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': f'Specialty {specialty_id} deleted successfully'
    }), 200
