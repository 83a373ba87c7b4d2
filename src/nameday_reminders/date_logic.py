from __future__ import annotations

from datetime import date, datetime, tzinfo

from nameday_reminders.models import Contact

DEFAULT_LEAP_DAY_RULE = "mar1"
ALLOWED_LEAP_DAY_RULES = {"feb28", "mar1"}


class InvalidDateError(ValueError):
    pass


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def parse_calendar_date(value: str, tz: tzinfo | None = None) -> date:
    """Parse ``YYYY-MM-DD`` or a full ISO timestamp.

    Timestamps are converted to ``tz`` (local time when omitted) before the
    date is taken, so a local midnight stored as UTC keeps its calendar day.
    """
    text = value.strip()
    try:
        if "T" not in text:
            return date.fromisoformat(text)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).astimezone(tz).date()
    except ValueError as exc:
        raise InvalidDateError(f"Invalid calendar date: {value!r}") from exc


def as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def occurrence_in_year(month: int, day: int, year: int, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> date:
    if month == 2 and day == 29 and not is_leap_year(year):
        if leap_day_rule == "feb28":
            return date(year, 2, 28)
        if leap_day_rule == "mar1":
            return date(year, 3, 1)
        raise InvalidDateError(f"Unsupported leap day rule: {leap_day_rule}")
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid month/day combination: {month:02d}-{day:02d}") from exc


def next_occurrence(
    month_day: date,
    today: date | datetime,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
) -> date:
    today = as_date(today)
    candidate = occurrence_in_year(month_day.month, month_day.day, today.year, leap_day_rule)
    if candidate >= today:
        return candidate
    return occurrence_in_year(month_day.month, month_day.day, today.year + 1, leap_day_rule)


def next_occurrence_for_contact(
    contact: Contact,
    today: date | datetime,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
) -> date | None:
    event_dates: list[date] = []
    if contact.birthday is not None:
        event_dates.append(contact.birthday)
    event_dates.extend(entry.date for entry in contact.name_days)

    if not event_dates:
        return None
    return min(next_occurrence(event_date, today, leap_day_rule) for event_date in event_dates)
