from __future__ import annotations

import calendar
from datetime import date, datetime

from nameday_reminders.date_logic import as_date
from nameday_reminders.event_merger import DayKey
from nameday_reminders.models import CalendarEvent, CellEventType, DayCell, EventType

WEEKDAY_LABELS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

MonthGrid = list[list[DayCell | None]]


def cell_event_type(events: list[CalendarEvent]) -> CellEventType:
    reminder_types = {event.type for event in events if event.is_reminder}
    has_birthday = EventType.BIRTHDAY in reminder_types
    has_name_day = EventType.NAME_DAY in reminder_types

    if has_birthday and has_name_day:
        return CellEventType.BOTH
    if has_birthday:
        return CellEventType.BIRTHDAY
    if has_name_day:
        return CellEventType.NAME_DAY
    return CellEventType.NONE


def build_month(
    events_by_day: dict[DayKey, list[CalendarEvent]],
    year: int,
    month: int,
    today: date | datetime,
) -> MonthGrid:
    """Lay out a Sunday-first month grid; padding cells are ``None``."""
    today = as_date(today)
    days_in_month = calendar.monthrange(year, month)[1]
    leading_blanks = (date(year, month, 1).weekday() + 1) % 7

    weeks: MonthGrid = []
    current_week: list[DayCell | None] = [None] * leading_blanks

    for day_number in range(1, days_in_month + 1):
        if len(current_week) == 7:
            weeks.append(current_week)
            current_week = []

        full_date = date(year, month, day_number)
        events = list(events_by_day.get((month, day_number), []))
        current_week.append(
            DayCell(
                day_number=day_number,
                full_date=full_date,
                is_today=full_date == today,
                event_type=cell_event_type(events),
                events=events,
            )
        )

    current_week.extend([None] * (7 - len(current_week)))
    weeks.append(current_week)
    return weeks
