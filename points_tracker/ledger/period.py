"""Monthly period keys."""

from datetime import date
from typing import Optional


DEFAULT_PERIOD_FORMAT = "%B %Y"
DEFAULT_DATE_FORMAT = "%m/%d/%Y"


def current_period_key(today: Optional[date] = None, fmt: str = DEFAULT_PERIOD_FORMAT) -> str:
    """
    Key of the month containing `today`, e.g. "October 2026".

    A ledger belongs to exactly one period; a new month starts a new ledger.
    """
    return (today or date.today()).strftime(fmt)


def format_entry_date(today: Optional[date] = None, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """Date string stamped on a new entry."""
    return (today or date.today()).strftime(fmt)
