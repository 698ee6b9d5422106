"""
Form Service

Presence checks and value parsing for the registration, profile and report forms.
"""

from config.models import REPORT_FLAGS
from utils import parse_iso_date, to_bool

PROFILE_FIELDS = ('username', 'email', 'password', 'first_name', 'last_name', 'birthday', 'fav_resort')


def read_profile_form(form, current_password=None):
    """
    Validate and parse a registration or profile form.

    Args:
        form: Request form MultiDict
        current_password (str, optional): Kept when the form leaves the password blank

    Returns:
        tuple: (values, error_message). values is None when error_message is set.
    """
    raw = {field: (form.get(field) or '').strip() for field in PROFILE_FIELDS}
    # Passwords are compared verbatim, so keep surrounding whitespace
    raw['password'] = form.get('password') or current_password or ''

    if not all(raw.values()):
        return None, 'Please fill in all required fields.'

    if '@' not in raw['email']:
        return None, 'Please enter a valid email address.'

    try:
        birthday = parse_iso_date(raw['birthday'])
    except ValueError:
        return None, 'Birthday must be a date in YYYY-MM-DD format.'

    try:
        fav_resort = int(raw['fav_resort'])
    except ValueError:
        return None, 'Please choose a valid favorite resort.'

    values = dict(raw, birthday=birthday, fav_resort=fav_resort)
    return values, None


def read_report_flags(form):
    """Map each condition flag to True when its checkbox value is truthy."""
    return {flag: to_bool(form.get(flag, '')) for flag in REPORT_FLAGS}
