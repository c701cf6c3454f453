# File: utils/__init__.py
"""Pure utility modules for SalesQuest.

Everything under utils/ is free of Home Assistant imports so it can be unit
tested directly.
"""

from . import business_days, dt_utils, math_utils
from .business_days import BusinessCalendar

__all__ = [
    "BusinessCalendar",
    "business_days",
    "dt_utils",
    "math_utils",
]
