"""Clock helpers.

Services take a ``Clock`` so tests can pin "now" at an exact boundary.
"""

from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)
