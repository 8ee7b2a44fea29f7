"""
Enumerated column values. The engine enforces them (native ENUM on MySQL and
PostgreSQL, a named CHECK constraint elsewhere).
"""

GENDERS = ('Male', 'Female', 'Other')
APPOINTMENT_STATUSES = ('Scheduled', 'Completed', 'Cancelled', 'No-Show')
USER_ROLES = ('Admin', 'Reception', 'Nurse', 'Doctor')
