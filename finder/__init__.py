# freelancer-finder - Core Library
"""
Work history aggregation and team directory sync for the staffing assistant.
"""

from .names import names_match, normalize_name
from .service import FinderService

__all__ = [
    "FinderService",
    "names_match",
    "normalize_name",
]

__version__ = "0.3.0"
