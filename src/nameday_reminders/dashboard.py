from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from nameday_reminders.date_logic import DEFAULT_LEAP_DAY_RULE, as_date, next_occurrence
from nameday_reminders.models import DEFAULT_TRADITION, Contact, EventType, FlatNameDay

UPCOMING_WINDOW_DAYS = 7


@dataclass(frozen=True)
class DashboardEvent:
    title: str
    type: EventType
    date: date


@dataclass(frozen=True)
class Dashboard:
    todays_events: list[DashboardEvent]
    upcoming_events: list[DashboardEvent]
    todays_name_days: list[str]


def _display_name(contact: Contact) -> str:
    if contact.last_name:
        return f"{contact.first_name} {contact.last_name}"
    return contact.first_name


def _contact_events(contact: Contact, today: date, leap_day_rule: str) -> list[DashboardEvent]:
    raw: list[tuple[EventType, date]] = []
    if contact.birthday is not None:
        raw.append((EventType.BIRTHDAY, contact.birthday))
    raw.extend((EventType.NAME_DAY, entry.date) for entry in contact.name_days)

    return [
        DashboardEvent(
            title=_display_name(contact),
            type=event_type,
            date=next_occurrence(month_day, today, leap_day_rule),
        )
        for event_type, month_day in raw
    ]


def build_dashboard(
    contacts: Iterable[Contact],
    flat_name_days: Iterable[FlatNameDay],
    today: date | datetime,
    *,
    tradition: str = DEFAULT_TRADITION,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
) -> Dashboard:
    today = as_date(today)
    window_end = today + timedelta(days=UPCOMING_WINDOW_DAYS)

    todays_events: list[DashboardEvent] = []
    upcoming_events: list[DashboardEvent] = []
    for contact in contacts:
        for event in _contact_events(contact, today, leap_day_rule):
            if event.date == today:
                todays_events.append(event)
            elif event.date <= window_end:
                upcoming_events.append(event)

    upcoming_events.sort(key=lambda event: event.date)

    todays_name_days = [
        entry.name
        for entry in flat_name_days
        if entry.tradition == tradition and (entry.date.month, entry.date.day) == (today.month, today.day)
    ]

    return Dashboard(
        todays_events=todays_events,
        upcoming_events=upcoming_events,
        todays_name_days=todays_name_days,
    )
