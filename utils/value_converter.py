"""
Value Conversion Utility

Interprets the loose true/false spellings found in seed CSVs and form checkboxes.
"""

TRUTHY = {'true', '1', 't', 'yes', 'y', 'on'}


def to_bool(value):
    """
    Interpret a CSV or form value as a boolean.

    Args:
        value: Raw value, usually a string; None means False

    Returns:
        bool: True for any TRUTHY spelling (case and surrounding space ignored)
    """
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY
