from .db_errors import classify_integrity_error, integrity_error_response
from .request_parsing import parse_date, parse_datetime, get_pagination_args, is_id

__all__ = [
    # Constraint errors
    "classify_integrity_error",
    "integrity_error_response",
    # Request parsing
    "parse_date",
    "parse_datetime",
    "get_pagination_args",
    "is_id",
]
