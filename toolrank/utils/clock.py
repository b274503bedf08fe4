"""Clock provider for "now".

Routers depend on ``get_clock`` rather than calling ``datetime.now`` so tests
can pin the time through ``app.dependency_overrides``.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """FastAPI dependency returning the wall clock."""
    return utc_now
