#!/usr/bin/env python3
"""
Utility functions for the web application.
"""

from typing import Optional, Any, List
from datetime import datetime


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


def safe_list(value: Optional[Any]) -> List[Any]:
    """Copy an iterable (including ORM association proxies) into a plain list."""
    if value is None:
        return []
    return list(value)
