"""
Translate engine constraint violations into API errors.

SQLite, MySQL and PostgreSQL word their messages differently; the checks
below match each of them.
"""

UNIQUE = 'unique'
FOREIGN_KEY = 'foreign_key'
CHECK = 'check'
NOT_NULL = 'not_null'
UNKNOWN = 'unknown'

_PATTERNS = (
    # sqlite: "UNIQUE constraint failed", mysql 1062: "Duplicate entry", postgres: "duplicate key value"
    (UNIQUE, ('unique constraint', 'duplicate entry', 'duplicate key')),
    # sqlite: "FOREIGN KEY constraint failed", mysql 1451/1452, postgres: "violates foreign key constraint"
    (FOREIGN_KEY, ('foreign key',)),
    # sqlite: "CHECK constraint failed", mysql 3819: "Check constraint ... is violated", postgres: "violates check constraint"
    (CHECK, ('check constraint',)),
    # sqlite: "NOT NULL constraint failed", mysql 1048: "cannot be null", postgres: "violates not-null constraint"
    (NOT_NULL, ('not null constraint', 'not-null constraint', 'cannot be null')),
)

_STATUS = {
    UNIQUE: 409,
    FOREIGN_KEY: 409,
    CHECK: 400,
    NOT_NULL: 400,
    UNKNOWN: 409,
}

_MESSAGES = {
    UNIQUE: 'A record with the same unique value already exists',
    FOREIGN_KEY: 'The operation conflicts with related records',
    CHECK: 'A value violates a check constraint',
    NOT_NULL: 'A required value is missing',
    UNKNOWN: 'The operation violates a database constraint',
}


def classify_integrity_error(error):
    """Return the kind of constraint an IntegrityError (or its message) violated."""
    message = str(getattr(error, 'orig', error)).lower()
    for kind, needles in _PATTERNS:
        if any(needle in message for needle in needles):
            return kind
    return UNKNOWN


def integrity_error_response(error):
    """Returns (payload, status) for an IntegrityError."""
    kind = classify_integrity_error(error)
    return {
        'success': False,
        'error': _MESSAGES[kind],
        'constraint': kind,
        'detail': str(getattr(error, 'orig', error)),
    }, _STATUS[kind]
