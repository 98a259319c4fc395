#!/usr/bin/env python3
"""
Utility functions for the web application.
"""

from decimal import Decimal
from typing import Optional, Any
from datetime import datetime


def safe_float(value: Optional[Any], default: Optional[float] = None) -> Optional[float]:
    """
    Safely convert value to float.
    
    Args:
        value: Value to convert (can be Decimal, int, float, or None).
        default: Default value if conversion fails or value is None.
    
    Returns:
        Float value, or ``default``.
    """
    if value is None:
        return default
    
    if isinstance(value, Decimal):
        return float(value)
    
    try:
        return float(value)
    except (ValueError, TypeError):
        return default


def safe_datetime_iso(dt: Optional[datetime]) -> Optional[str]:
    """
    Safely convert datetime to ISO format string.
    
    Args:
        dt: Datetime object.
    
    Returns:
        ISO format string or None.
    """
    if dt is None:
        return None
    return dt.isoformat()
