from flask import Blueprint, request, jsonify

from clinic_booking.extensions import db
from clinic_booking.models import Room

room_bp = Blueprint('room', __name__, url_prefix='/api/rooms')

UPDATABLE_FIELDS = ('room_number', 'floor', 'notes')


@room_bp.route('', methods=['GET'])
def list_rooms():
    query = Room.query
    floor = request.args.get('floor', type=str)
    if floor:
        query = query.filter(Room.floor == floor)

    rooms = query.order_by(Room.room_number).all()
    return jsonify({
        'success': True,
        'data': [r.to_dict() for r in rooms]
    }), 200


@room_bp.route('/<int:room_id>', methods=['GET'])
def get_room(room_id):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify({'success': False, 'error': 'Room not found'}), 404
    return jsonify({'success': True, 'data': room.to_dict()}), 200


@room_bp.route('', methods=['POST'])
def create_room():
    data = request.get_json(silent=True)
    if not data or not data.get('room_number'):
        return jsonify({
            'success': False,
            'error': 'Field "room_number" is required'
        }), 400

    room = Room(
        room_number=data['room_number'],
        floor=data.get('floor'),
        notes=data.get('notes'),
    )
    db.session.add(room)
    db.session.commit()

    return jsonify({
        'success': True,
        'data': room.to_dict(),
        'message': 'Room created successfully'
    }), 201


@room_bp.route('/<int:room_id>', methods=['PUT'])
def update_room(room_id):
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify({'success': False, 'error': 'Room not found'}), 404

    data = request.get_json(silent=True)
    if not data:
        return jsonify({
            'success': False,
            'error': 'Request body must be JSON'
        }), 400

    for field in UPDATABLE_FIELDS:
        if field in data:
            setattr(room, field, data[field])
    db.session.commit()

    return jsonify({
        'success': True,
        'data': room.to_dict(),
        'message': 'Room updated successfully'
    }), 200


@room_bp.route('/<int:room_id>', methods=['DELETE'])
def delete_room(room_id):
    """Delete room; appointments booked in it keep going without a room."""
    room = db.session.get(Room, room_id)
    if not room:
        return jsonify({'success': False, 'error': 'Room not found'}), 404

    db.session.delete(room)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': f'Room {room_id} deleted successfully'
    }), 200
