"""Timezone-aware timestamps for bets and outcomes."""

from datetime import datetime

import pytz

from casino.config import settings


def now(timezone: str = None) -> datetime:
    """Current time in the table's timezone (settings.table.timezone by default)."""
    tz = pytz.timezone(timezone or settings.table.timezone)
    return datetime.now(tz)
