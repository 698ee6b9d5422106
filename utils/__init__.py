"""
Utility modules for the SlopeSense application.
"""

from .date_converter import parse_iso_date, format_report_time
from .value_converter import TRUTHY, to_bool

__all__ = ['parse_iso_date', 'format_report_time', 'TRUTHY', 'to_bool']
