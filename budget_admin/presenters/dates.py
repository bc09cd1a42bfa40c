"""Date window helpers shared by the budget and phase presenters.

Both budgets and phases expose ``starts_at`` / ``ends_at``, so these take
either one.
"""

from __future__ import annotations

import datetime
from typing import Protocol

from budget_admin.utils.dates import (
    distance_of_time_in_words,
    formatted_end_date,
    formatted_start_date,
)


class DateWindow(Protocol):
    @property
    def starts_at(self) -> datetime.datetime | None: ...

    @property
    def ends_at(self) -> datetime.datetime | None: ...


def start_date(record: DateWindow, locale: str | None = None) -> str:
    return formatted_start_date(record.starts_at, locale)


def end_date(record: DateWindow, locale: str | None = None) -> str:
    """Inclusive closing date (stored ``ends_at`` minus one minute)."""
    return formatted_end_date(record.ends_at, locale)


def duration(record: DateWindow, locale: str | None = None) -> str:
    return distance_of_time_in_words(record.starts_at, record.ends_at, locale)
