"""Wall-clock access, injected so slot classification can be tested."""
from datetime import datetime

import pytz


def utcnow() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(pytz.UTC)


async def get_now() -> datetime:
    """FastAPI dependency returning the request's "now"."""
    return utcnow()


def to_local(now: datetime, timezone: str) -> datetime:
    """Convert an aware instant to naive wall time in ``timezone``."""
    if now.tzinfo is None:
        now = pytz.UTC.localize(now)
    return now.astimezone(pytz.timezone(timezone)).replace(tzinfo=None)
