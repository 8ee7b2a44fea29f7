from datetime import datetime, timezone

from flask import current_app, request


def parse_date(date_string):
    """Parse YYYY-MM-DD (or an ISO datetime) to a date; None if empty or invalid."""
    if not date_string:
        return None
    try:
        return datetime.fromisoformat(date_string).date()
    except (TypeError, ValueError):
        try:
            return datetime.strptime(date_string, '%Y-%m-%d').date()
        except (TypeError, ValueError):
            return None


def parse_datetime(value):
    """
    Parse an ISO 8601 datetime to a naive UTC datetime.

    Offsets are converted to UTC; naive input is taken as UTC already.
    Returns None if empty or invalid.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except (AttributeError, TypeError, ValueError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def get_pagination_args():
    """Read page/limit query params, clamped to the configured bounds."""
    default_limit = current_app.config.get('DEFAULT_PAGE_SIZE', 20)
    max_limit = current_app.config.get('MAX_PAGE_SIZE', 100)

    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', default_limit, type=int)

    if page < 1:
        page = 1
    if limit < 1:
        limit = default_limit
    limit = min(limit, max_limit)
    return page, limit


def is_id(value):
    """True for a JSON integer usable as a row id (booleans excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)
