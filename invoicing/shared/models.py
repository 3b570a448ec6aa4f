"""
Shared Models Module

This module contains shared enums used across the application.

Features:
- Counter scope enum

Author: Invoicing Development Team
"""

from enum import Enum

class CounterScope(str, Enum):
    """
    Period an invoice counter is counted over.

    Attributes:
        ALL: Every invoice ever stored
        YEAR: Invoices in the calendar year of the reference date
        MONTH: Invoices in the calendar month of the reference date
        DAY: Invoices on the reference date
    """
    ALL = "all"
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
