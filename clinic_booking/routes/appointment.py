from datetime import datetime, time, timedelta
from decimal import Decimal, InvalidOperation

from flask import Blueprint, request, jsonify

from clinic_booking.extensions import db
from clinic_booking.models import (
    Appointment, Patient, Doctor, Room, Prescription, Invoice, APPOINTMENT_STATUSES,
)
from clinic_booking.services import list_upcoming_appointments, next_appointment_number
from clinic_booking.utils import parse_date, parse_datetime, get_pagination_args, is_id

appointment_bp = Blueprint('appointment', __name__, url_prefix='/api/appointments')

# Largest value a DECIMAL(10,2) column holds
MAX_AMOUNT = Decimal('99999999.99')


def _appointment_not_found():
    return jsonify({
        'success': False,
        'error': 'Appointment not found'
    }), 404


def _bad_request(message):
    return jsonify({
        'success': False,
        'error': message
    }), 400


def _validate_status(status):
    if status not in APPOINTMENT_STATUSES:
        return _bad_request(f'Invalid status. Allowed: {", ".join(APPOINTMENT_STATUSES)}')
    return None


def _parse_amount(value):
    """Decimal amount that fits DECIMAL(10,2); None if not a finite number or too large."""
    if isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not amount.is_finite() or abs(amount) > MAX_AMOUNT:
        return None
    return amount


def _appointment_detail(appointment):
    data = appointment.to_dict()
    data['patient'] = appointment.patient.to_dict() if appointment.patient else None
    data['doctor'] = appointment.doctor.to_dict(include_specialties=False) if appointment.doctor else None
    data['room'] = appointment.room.to_dict() if appointment.room else None
    data['prescriptions'] = [p.to_dict() for p in appointment.prescriptions]
    data['invoice'] = appointment.invoice.to_dict() if appointment.invoice else None
    return data


@appointment_bp.route('', methods=['GET'])
def list_appointments():
    """
    List appointments with filters and pagination.
    Query params:
        date: YYYY-MM-DD (optional)
        patient_id, doctor_id, room_id: Filter by reference (optional)
        status: Filter by status (optional)
        page, limit: Pagination
    """
    page, limit = get_pagination_args()
    filter_date = request.args.get('date', type=str)
    patient_id = request.args.get('patient_id', type=int)
    doctor_id = request.args.get('doctor_id', type=int)
    room_id = request.args.get('room_id', type=int)
    status = request.args.get('status', type=str)

    query = Appointment.query

    if filter_date:
        filter_date_obj = parse_date(filter_date)
        if filter_date_obj is None:
            return _bad_request('Invalid date format. Use YYYY-MM-DD')
        day_start = datetime.combine(filter_date_obj, time.min)
        query = query.filter(
            Appointment.appointment_date >= day_start,
            Appointment.appointment_date < day_start + timedelta(days=1),
        )

    if patient_id:
        query = query.filter(Appointment.patient_id == patient_id)
    if doctor_id:
        query = query.filter(Appointment.doctor_id == doctor_id)
    if room_id:
        query = query.filter(Appointment.room_id == room_id)
    if status:
        invalid = _validate_status(status)
        if invalid:
            return invalid
        query = query.filter(Appointment.status == status)

    appointments = query.order_by(
        Appointment.appointment_date.asc(),
        Appointment.id.asc()
    ).paginate(
        page=page,
        per_page=limit,
        error_out=False
    )

    return jsonify({
        'success': True,
        'data': [a.to_dict() for a in appointments.items],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': appointments.total,
            'pages': appointments.pages,
            'has_next': appointments.has_next,
            'has_prev': appointments.has_prev
        }
    }), 200


@appointment_bp.route('/upcoming', methods=['GET'])
def upcoming_appointments():
    """
    Upcoming appointments from the reporting view, soonest first.
    Query params: doctor_id, patient_id, limit (all optional)
    """
    doctor_id = request.args.get('doctor_id', type=int)
    patient_id = request.args.get('patient_id', type=int)
    limit = request.args.get('limit', type=int)
    if limit is not None and limit < 1:
        return _bad_request('limit must be positive')

    rows = list_upcoming_appointments(doctor_id=doctor_id, patient_id=patient_id, limit=limit)
    return jsonify({
        'success': True,
        'data': rows,
        'count': len(rows)
    }), 200


@appointment_bp.route('/<int:appointment_id>', methods=['GET'])
def get_appointment(appointment_id):
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        return _appointment_not_found()

    return jsonify({
        'success': True,
        'data': _appointment_detail(appointment)
    }), 200


@appointment_bp.route('', methods=['POST'])
def create_appointment():
    """
    Book an appointment.
    Required: patient_id, doctor_id, appointment_date (ISO 8601)
    Optional: appointment_number (generated as APT-NNNN when omitted),
              room_id, duration_minutes (default 30), status, notes
    """
    data = request.get_json(silent=True)
    if not data:
        return _bad_request('Request body must be JSON')

    for field in ('patient_id', 'doctor_id', 'appointment_date'):
        if not data.get(field):
            return _bad_request(f'Field "{field}" is required')
    for field in ('patient_id', 'doctor_id', 'room_id'):
        if data.get(field) is not None and not is_id(data[field]):
            return _bad_request(f'{field} must be an integer')

    appointment_date = parse_datetime(data['appointment_date'])
    if appointment_date is None:
        return _bad_request('Invalid appointment_date. Use ISO 8601, e.g. 2025-08-12T09:30:00')

    if not db.session.get(Patient, data['patient_id']):
        return jsonify({'success': False, 'error': 'Patient not found'}), 404
    if not db.session.get(Doctor, data['doctor_id']):
        return jsonify({'success': False, 'error': 'Doctor not found'}), 404
    if data.get('room_id') and not db.session.get(Room, data['room_id']):
        return jsonify({'success': False, 'error': 'Room not found'}), 404

    status = data.get('status') or 'Scheduled'
    invalid = _validate_status(status)
    if invalid:
        return invalid

    duration = data.get('duration_minutes', 30)
    if not isinstance(duration, int) or isinstance(duration, bool):
        return _bad_request('duration_minutes must be an integer')

    appointment = Appointment(
        appointment_number=data.get('appointment_number') or next_appointment_number(),
        patient_id=data['patient_id'],
        doctor_id=data['doctor_id'],
        room_id=data.get('room_id'),
        appointment_date=appointment_date,
        duration_minutes=duration,
        status=status,
        notes=data.get('notes'),
    )
    db.session.add(appointment)
    db.session.commit()

    return jsonify({
        'success': True,
        'data': appointment.to_dict(),
        'message': 'Appointment created successfully'
    }), 201


@appointment_bp.route('/<int:appointment_id>', methods=['PATCH', 'PUT'])
def update_appointment(appointment_id):
    """
    Update status, room, date, duration or notes.
    Any status may be set from any other status.
    """
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        return _appointment_not_found()

    data = request.get_json(silent=True)
    if not data:
        return _bad_request('Request body must be JSON')

    if 'status' in data:
        invalid = _validate_status(data['status'])
        if invalid:
            return invalid
    if 'appointment_date' in data:
        appointment_date = parse_datetime(data['appointment_date'])
        if appointment_date is None:
            return _bad_request('Invalid appointment_date. Use ISO 8601, e.g. 2025-08-12T09:30:00')
    if 'duration_minutes' in data:
        duration = data['duration_minutes']
        if not isinstance(duration, int) or isinstance(duration, bool):
            return _bad_request('duration_minutes must be an integer')
    if data.get('room_id') is not None and not is_id(data['room_id']):
        return _bad_request('room_id must be an integer')
    if data.get('room_id') and not db.session.get(Room, data['room_id']):
        return jsonify({'success': False, 'error': 'Room not found'}), 404

    if 'status' in data:
        appointment.status = data['status']
    if 'appointment_date' in data:
        appointment.appointment_date = appointment_date
    if 'duration_minutes' in data:
        appointment.duration_minutes = data['duration_minutes']
    if 'room_id' in data:
        appointment.room_id = data['room_id'] or None
    if 'notes' in data:
        appointment.notes = data['notes']

    db.session.commit()

    return jsonify({
        'success': True,
        'data': appointment.to_dict(),
        'message': 'Appointment updated successfully'
    }), 200


@appointment_bp.route('/<int:appointment_id>', methods=['DELETE'])
def delete_appointment(appointment_id):
    """Delete appointment together with its prescriptions and invoice."""
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        return _appointment_not_found()

    db.session.delete(appointment)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': f'Appointment {appointment_id} deleted successfully'
    }), 200


# ---------------------------------------------------------------------------
# Prescriptions
# ---------------------------------------------------------------------------

@appointment_bp.route('/<int:appointment_id>/prescriptions', methods=['GET'])
def list_prescriptions(appointment_id):
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        return _appointment_not_found()

    return jsonify({
        'success': True,
        'data': [p.to_dict() for p in appointment.prescriptions]
    }), 200


@appointment_bp.route('/<int:appointment_id>/prescriptions', methods=['POST'])
def create_prescription(appointment_id):
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        return _appointment_not_found()

    data = request.get_json(silent=True)
    if not data or not data.get('medication_name'):
        return _bad_request('Field "medication_name" is required')

    prescription = Prescription(
        appointment_id=appointment.id,
        medication_name=data['medication_name'],
        dosage=data.get('dosage'),
        frequency=data.get('frequency'),
        notes=data.get('notes'),
    )
    db.session.add(prescription)
    db.session.commit()

    return jsonify({
        'success': True,
        'data': prescription.to_dict(),
        'message': 'Prescription created successfully'
    }), 201


@appointment_bp.route('/prescriptions/<int:prescription_id>', methods=['DELETE'])
def delete_prescription(prescription_id):
    prescription = db.session.get(Prescription, prescription_id)
    if not prescription:
        return jsonify({'success': False, 'error': 'Prescription not found'}), 404

    db.session.delete(prescription)
    db.session.commit()

    return jsonify({
        'success': True,
        'message': f'Prescription {prescription_id} deleted successfully'
    }), 200


# ---------------------------------------------------------------------------
# Invoice (one per appointment)
# ---------------------------------------------------------------------------

@appointment_bp.route('/<int:appointment_id>/invoice', methods=['GET'])
def get_invoice(appointment_id):
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        return _appointment_not_found()
    if not appointment.invoice:
        return jsonify({'success': False, 'error': 'Invoice not found'}), 404

    return jsonify({
        'success': True,
        'data': appointment.invoice.to_dict()
    }), 200


@appointment_bp.route('/<int:appointment_id>/invoice', methods=['POST'])
def create_invoice(appointment_id):
    """
    Issue the invoice for an appointment. Body: {"amount": "5000.00", "paid": false}
    A second invoice for the same appointment is rejected (409); a negative amount is rejected (400).
    """
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        return _appointment_not_found()

    data = request.get_json(silent=True)
    if not data or data.get('amount') is None:
        return _bad_request('Field "amount" is required')

    amount = _parse_amount(data['amount'])
    if amount is None:
        return _bad_request('amount must be a finite number no larger than 99999999.99')

    paid = data.get('paid', False)
    if not isinstance(paid, bool):
        return _bad_request('paid must be true or false')

    invoice = Invoice(
        appointment_id=appointment.id,
        amount=amount,
        paid=paid,
    )
    db.session.add(invoice)
    db.session.commit()

    return jsonify({
        'success': True,
        'data': invoice.to_dict(),
        'message': 'Invoice created successfully'
    }), 201


@appointment_bp.route('/<int:appointment_id>/invoice', methods=['PATCH'])
def update_invoice(appointment_id):
    """Mark paid/unpaid or correct the amount."""
    appointment = db.session.get(Appointment, appointment_id)
    if not appointment:
        return _appointment_not_found()
    invoice = appointment.invoice
    if not invoice:
        return jsonify({'success': False, 'error': 'Invoice not found'}), 404

    data = request.get_json(silent=True)
    if not data:
        return _bad_request('Request body must be JSON')

    if 'paid' in data and not isinstance(data['paid'], bool):
        return _bad_request('paid must be true or false')

    if 'amount' in data:
        amount = _parse_amount(data['amount'])
        if amount is None:
            return _bad_request('amount must be a finite number no larger than 99999999.99')
        invoice.amount = amount
    if 'paid' in data:
        invoice.paid = data['paid']

    db.session.commit()

    return jsonify({
        'success': True,
        'data': invoice.to_dict(),
        'message': 'Invoice updated successfully'
    }), 200
