# bengal_portal/services/date_utils.py
import os
import re
import pytz
import logging
from datetime import datetime, date, timedelta

logger = logging.getLogger(__name__)

# Configure server timezone
SERVER_TIMEZONE = pytz.timezone(os.environ.get('TIMEZONE', 'Europe/London'))

DATE_ONLY_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')

def utc_now():
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(pytz.utc)

def ensure_aware(dt):
    """Attach the server timezone to naive datetimes, leave aware ones alone."""
    if dt.tzinfo is None:
        return SERVER_TIMEZONE.localize(dt)
    return dt

def parse_iso_datetime(date_str):
    """
    Parse a stored date or datetime string into an aware datetime.

    Date-only values ("2026-01-15") are read as midnight UTC, which is how
    the browser client has always interpreted them. Datetimes with a
    "Z" suffix or an offset keep their zone; naive datetimes are taken to
    be in the server timezone.

    Args:
        date_str (str): ISO formatted date or datetime

    Returns:
        datetime: timezone-aware datetime

    Raises:
        ValueError: if the string is empty or not ISO formatted
    """
    if not date_str:
        raise ValueError("Empty date string")
    if not isinstance(date_str, str):
        raise ValueError(f"Expected a date string, got {type(date_str).__name__}")

    value = date_str.strip()
    try:
        if DATE_ONLY_PATTERN.match(value):
            year, month, day = map(int, value.split('-'))
            return datetime(year, month, day, tzinfo=pytz.utc)

        if value.endswith('Z'):
            value = value[:-1] + '+00:00'
        return ensure_aware(datetime.fromisoformat(value))

    except ValueError as e:
        logger.error(f"Error parsing date '{date_str}': {str(e)}")
        raise ValueError(f"Invalid date format: {date_str}")

def parse_job_date(date_str):
    """
    Parse a date string for job scheduling, returning a date object
    without time component.

    Args:
        date_str (str): Date string to parse

    Returns:
        date: Parsed date object (without time), or None for empty input
    """
    if not date_str:
        return None
    if not isinstance(date_str, str):
        raise ValueError(f"Expected a date string, got {type(date_str).__name__}")

    if DATE_ONLY_PATTERN.match(date_str.strip()):
        year, month, day = map(int, date_str.strip().split('-'))
        try:
            return date(year, month, day)
        except ValueError as e:
            raise ValueError(f"Invalid date format: {str(e)}")

    # Full timestamps are converted to the server timezone before the date is taken
    return parse_iso_datetime(date_str).astimezone(SERVER_TIMEZONE).date()

def format_date_for_response(date_obj):
    """
    Format a date or datetime as YYYY-MM-DD.

    Args:
        date_obj (date or datetime): The date to format

    Returns:
        str: ISO date string, or None
    """
    if not date_obj:
        return None

    if isinstance(date_obj, datetime):
        return ensure_aware(date_obj).date().isoformat()
    return date_obj.isoformat()

def format_datetime_for_response(dt):
    """ISO timestamp with timezone information."""
    if not dt:
        return None
    return ensure_aware(dt).isoformat()

def days_from_now(days, now=None):
    """YYYY-MM-DD string for the day `days` after `now`."""
    now = now or utc_now()
    return format_date_for_response(now + timedelta(days=days))
