from flask import Blueprint, request, jsonify

from clinic_booking.extensions import db
from clinic_booking.models import User, Doctor, USER_ROLES
from clinic_booking.utils import is_id

user_bp = Blueprint('user', __name__, url_prefix='/api/users')


@user_bp.route('', methods=['GET'])
def list_users():
    """List staff accounts. Query params: role"""
    query = User.query
    role = request.args.get('role', type=str)
    if role:
        if role not in USER_ROLES:
            return jsonify({
                'success': False,
                'error': f'Invalid role. Allowed: {", ".join(USER_ROLES)}'
            }), 400
        query = query.filter(User.role == role)

    users = query.order_by(User.username).all()
    return jsonify({
        'success': True,
        'data': [u.to_dict() for u in users]
    }), 200


@user_bp.route('/<int:user_id>', methods=['GET'])
def get_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'success': False, 'error': 'User not found'}), 404
    return jsonify({'success': True, 'data': user.to_dict()}), 200


@user_bp.route('', methods=['POST'])
def create_user():
    """
    Create staff account.
    Required: username, password. Optional: role (default Reception), doctor_id
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400

    for field in ('username', 'password'):
        if not data.get(field):
            return jsonify({
                'success': False,
                'error': f'Field "{field}" is required'
            }), 400

    role = data.get('role') or 'Reception'
    if role not in USER_ROLES:
        return jsonify({
            'success': False,
            'error': f'Invalid role. Allowed: {", ".join(USER_ROLES)}'
        }), 400

    doctor_id = data.get('doctor_id')
    if doctor_id is not None and not is_id(doctor_id):
        return jsonify({
            'success': False,
            'error': 'doctor_id must be an integer'
        }), 400
    if doctor_id and not db.session.get(Doctor, doctor_id):
        return jsonify({'success': False, 'error': 'Doctor not found'}), 404

    user = User(username=data['username'], role=role, doctor_id=doctor_id or None)
    user.set_password(data['password'])
    db.session.add(user)
    db.session.commit()

    return jsonify({
        'success': True,
        'data': user.to_dict(),
        'message': 'User created successfully'
    }), 201


@user_bp.route('/<int:user_id>', methods=['DELETE'])
def delete_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({'success': False, 'error': 'User not found'}), 404

    db.session.delete(user)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': f'User {user_id} deleted successfully'
    }), 200
