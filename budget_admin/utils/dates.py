"""
Pure date helpers shared by every presenter.

Phase windows are half-open ``[starts_at, ends_at)``. For display the
exclusive upper bound is turned into an inclusive closing moment by
``display_end`` (one minute earlier). The stored value is never touched;
presenters must call ``formatted_end_date`` rather than subtracting
themselves.
"""

from __future__ import annotations

import calendar
import datetime

from budget_admin.utils.i18n import translate, translate_count

DISPLAY_END_OFFSET = datetime.timedelta(minutes=1)

_MINUTES_IN_DAY = 1_440
_MINUTES_IN_MONTH = 43_200
_MINUTES_IN_QUARTER_YEAR = 131_400
_MINUTES_IN_THREE_QUARTERS_YEAR = 394_200
_MINUTES_IN_YEAR = 525_600


def to_naive_utc(value: datetime.datetime | None) -> datetime.datetime | None:
    """Convert an aware timestamp to naive UTC; naive values pass through.

    Stored phase windows are naive UTC, so anything compared with them
    goes through here first.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)


def display_end(ends_at: datetime.datetime | None) -> datetime.datetime | None:
    """Inclusive closing moment shown for an exclusive ``ends_at``."""
    if ends_at is None:
        return None
    return ends_at - DISPLAY_END_OFFSET


def formatted_date(value: datetime.date | None, locale: str | None = None) -> str:
    """Long, locale-formatted date, or an empty string when unset."""
    if value is None:
        return ""
    return translate(
        "date.long",
        locale,
        month=translate(f"month.{value.month}", locale),
        day=value.day,
        year=value.year,
    )


def formatted_start_date(
    starts_at: datetime.datetime | None, locale: str | None = None
) -> str:
    return formatted_date(starts_at, locale)


def formatted_end_date(
    ends_at: datetime.datetime | None, locale: str | None = None
) -> str:
    return formatted_date(display_end(ends_at), locale)


def _half_up(value: float) -> int:
    return int(value + 0.5)


def _leap_days_between(from_time: datetime.datetime, to_time: datetime.datetime) -> int:
    from_year = from_time.year + (1 if from_time.month >= 3 else 0)
    to_year = to_time.year - (1 if to_time.month < 3 else 0)
    return sum(1 for year in range(from_year, to_year + 1) if calendar.isleap(year))


def distance_of_time_in_words(
    from_time: datetime.datetime | None,
    to_time: datetime.datetime | None,
    locale: str | None = None,
) -> str:
    """Approximate span between two timestamps, e.g. "about 1 month".

    Uses the raw timestamps; callers must not pass display-adjusted values.
    Order of the arguments does not matter.
    """
    if from_time is None or to_time is None:
        return ""

    if from_time > to_time:
        from_time, to_time = to_time, from_time
    seconds = (to_time - from_time).total_seconds()
    minutes = _half_up(seconds / 60)

    if minutes <= 1:
        if minutes == 0:
            return translate_count("duration.less_than_x_minutes", 1, locale)
        return translate_count("duration.x_minutes", minutes, locale)
    if minutes < 45:
        return translate_count("duration.x_minutes", minutes, locale)
    if minutes < 90:
        return translate_count("duration.about_x_hours", 1, locale)
    if minutes < _MINUTES_IN_DAY:
        return translate_count("duration.about_x_hours", _half_up(minutes / 60), locale)
    if minutes < 2_520:
        return translate_count("duration.x_days", 1, locale)
    if minutes < _MINUTES_IN_MONTH:
        return translate_count(
            "duration.x_days", _half_up(minutes / _MINUTES_IN_DAY), locale
        )
    if minutes < 86_400:
        return translate_count(
            "duration.about_x_months", _half_up(minutes / _MINUTES_IN_MONTH), locale
        )
    if minutes < _MINUTES_IN_YEAR:
        return translate_count(
            "duration.x_months", _half_up(minutes / _MINUTES_IN_MONTH), locale
        )

    # Leap days between the two dates do not count towards the remainder.
    minutes = max(
        minutes - _leap_days_between(from_time, to_time) * _MINUTES_IN_DAY,
        _MINUTES_IN_YEAR,
    )
    years, remainder = divmod(minutes, _MINUTES_IN_YEAR)
    if remainder < _MINUTES_IN_QUARTER_YEAR:
        return translate_count("duration.about_x_years", years, locale)
    if remainder < _MINUTES_IN_THREE_QUARTERS_YEAR:
        return translate_count("duration.over_x_years", years, locale)
    return translate_count("duration.almost_x_years", years + 1, locale)


def add_months(value: datetime.datetime, months: int) -> datetime.datetime:
    """Same day ``months`` later, clamped to the last day of short months."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    next_month_first = datetime.date(year + month // 12, month % 12 + 1, 1)
    last_day = (next_month_first - datetime.timedelta(days=1)).day
    return value.replace(year=year, month=month, day=min(value.day, last_day))
