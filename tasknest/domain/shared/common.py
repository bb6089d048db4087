"""Small helpers shared by the domain models.

Identifier generation, the clock, and the rounding rule used for every
percentage shown to the user.
"""

import math
from datetime import UTC, datetime
from uuid import uuid4


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid4().hex


def utcnow() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC so they compare with ``utcnow()``."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def percent(part: int, whole: int) -> int:
    """Integer percentage of ``part`` in ``whole``, halves rounded up.

    Returns 0 when ``whole`` is 0.
    """
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))
