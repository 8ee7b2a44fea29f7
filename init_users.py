#!/usr/bin/env python3
"""
Initialize default staff accounts for the clinic.
Run with: python init_users.py
"""
from clinic_booking import create_app
from clinic_booking.extensions import db
from clinic_booking.models import User, Doctor

# Default staff accounts to create
DEFAULT_USERS = [
    {
        'username': 'admin',
        'password': 'admin123',
        'role': 'Admin',
    },
    {
        'username': 'reception1',
        'password': 'recep123',
        'role': 'Reception',
    },
    {
        'username': 'nurse1',
        'password': 'nurse123',
        'role': 'Nurse',
    },
    {
        'username': 'doctor1',
        'password': 'doctor123',
        'role': 'Doctor',
        # Linked to the doctor with this license, if present
        'license_number': 'LIC-2020-001',
    },
]


def create_users(users=DEFAULT_USERS):
    """Create staff accounts that do not exist yet. Returns the number created."""
    print("=" * 60)
    print("Initializing Staff Users")
    print("=" * 60)
    print()

    created_count = 0

    for user_data in users:
        username = user_data['username']

        existing = User.query.filter_by(username=username).first()
        if existing:
            print(f"  - User '{username}' already exists (skipping)")
            continue

        doctor = None
        if user_data.get('license_number'):
            doctor = Doctor.query.filter_by(license_number=user_data['license_number']).first()

        user = User(
            username=username,
            role=user_data['role'],
            doctor=doctor,
        )
        user.set_password(user_data['password'])

        db.session.add(user)
        created_count += 1
        linked = f", linked to {doctor.full_name}" if doctor else ""
        print(f"  ✓ Created: {username} ({user_data['role']}{linked})")

    db.session.commit()

    print()
    print("=" * 60)
    print(f"Created {created_count} new user(s)")
    print("=" * 60)
    print("\nIMPORTANT: Change passwords after first login!")
    return created_count


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        create_users()
