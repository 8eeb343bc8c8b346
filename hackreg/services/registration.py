"""
HackReg Backend - Registration Window
=======================================

What:  Answers whether registration is still open.
Who:   The challenge POST route (submission gate), the registration status
       route and the health check.
"""

from datetime import datetime, timezone
from typing import Optional

from hackreg.config import settings


def is_registration_alive(now: Optional[datetime] = None) -> bool:
    """
    True while the current moment is before the configured close datetime.

    Args:
        now: Override for the current time (timezone-aware). Defaults to
             the current UTC time.
    """
    current = now if now is not None else datetime.now(timezone.utc)
    return current < settings.registration_close_datetime
