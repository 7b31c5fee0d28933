"""
Calendar arithmetic for season scheduling.

Pure date/time helpers: no state, no I/O. Dates are calendar dates in the
division's city timezone; only `localize` and `today_in` touch timezones.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from league_scheduler.models import DateRange, Weekday
from league_scheduler.core.config import DEFAULT_TIMEZONE


DAYS_PER_WEEK = 7


def next_occurrence_of(weekday: Weekday, on_or_after: date) -> date:
    """Return the first date falling on `weekday` that is on or after `on_or_after`."""
    offset = (weekday.index - on_or_after.weekday()) % DAYS_PER_WEEK
    return on_or_after + timedelta(days=offset)


def is_within_any_range(day: date, ranges: Iterable[DateRange]) -> bool:
    """Check whether `day` falls inside any inclusive date range."""
    return any(date_range.contains(day) for date_range in ranges)


def week_of_season(day: date, season_start: date, weekday: Weekday) -> int:
    """
    Calendar week index of `day` within a season, 1-based.

    Week 1 is the week of the first `weekday` occurrence on or after the
    season start. This counts calendar weeks, not playable weeks: blackout
    weeks are included. Days before the first occurrence return 0 or less.
    """
    first = next_occurrence_of(weekday, season_start)
    return (day - first).days // DAYS_PER_WEEK + 1


def resolve_timezone(name: Optional[str]) -> ZoneInfo:
    """Return the ZoneInfo for an IANA name, falling back to the default zone."""
    try:
        return ZoneInfo(name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # Region names such as "America" resolve to a directory of zones
        raise ValueError(f"Unknown timezone: {name!r}")


def is_known_timezone(name: Optional[str]) -> bool:
    try:
        resolve_timezone(name)
    except ValueError:
        return False
    return True


def localize(day: date, time_of_day: time, tz_name: Optional[str] = None) -> datetime:
    """Combine a calendar date and time of day into an aware datetime in the city's zone."""
    return datetime.combine(day, time_of_day, tzinfo=resolve_timezone(tz_name))


def today_in(tz_name: Optional[str] = None, now: Optional[datetime] = None) -> date:
    """Today's calendar date in the given timezone."""
    tz = resolve_timezone(tz_name)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def current_week(slot_dates, today: date) -> int:
    """
    Current playable week given the ordered dates of the playable weeks.

    A week runs from its game date until the next week's date, so this is
    the last week dated on or before today, clamped to 1..N. Before the
    first game and in an empty season it is week 1.
    """
    current = 1
    for week_number, slot_date in enumerate(slot_dates, 1):
        if slot_date > today:
            break
        current = week_number
    return current


def time_ranges_overlap(start_a: time, end_a: time, start_b: time, end_b: time) -> bool:
    """Half-open interval test: touching ranges (end == start) do not overlap."""
    return start_a < end_b and start_b < end_a
