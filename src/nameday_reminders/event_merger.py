from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from nameday_reminders.models import CalendarEvent, Contact, EventType, FlatNameDay
from nameday_reminders.normalizer import normalize_name

DayKey = tuple[int, int]


def suppression_key(name: str, when: date) -> tuple[str, int, int]:
    return normalize_name(name), when.month, when.day


def personal_events(contacts: Iterable[Contact]) -> list[CalendarEvent]:
    events: list[CalendarEvent] = []
    for contact in contacts:
        if contact.birthday is not None:
            events.append(
                CalendarEvent(
                    title=contact.first_name,
                    type=EventType.BIRTHDAY,
                    date=contact.birthday,
                    is_reminder=True,
                )
            )
        for entry in contact.name_days:
            events.append(
                CalendarEvent(
                    title=contact.first_name,
                    type=EventType.NAME_DAY,
                    date=entry.date,
                    is_reminder=True,
                )
            )
    return events


def merge_events(contacts: list[Contact], flat_name_days: Iterable[FlatNameDay]) -> list[CalendarEvent]:
    """Personal events first, then catalog name days nobody has a reminder for.

    Only name-day entries suppress catalog entries; a birthday on the same
    date as a catalog name day leaves the catalog entry visible.
    """
    events = personal_events(contacts)

    suppressed = {
        suppression_key(contact.first_name, entry.date)
        for contact in contacts
        for entry in contact.name_days
    }

    for name_day in flat_name_days:
        if suppression_key(name_day.name, name_day.date) in suppressed:
            continue
        events.append(
            CalendarEvent(
                title=name_day.name,
                type=EventType.NAME_DAY,
                date=name_day.date,
                is_reminder=False,
            )
        )

    return events


def index_events_by_day(events: Iterable[CalendarEvent]) -> dict[DayKey, list[CalendarEvent]]:
    index: dict[DayKey, list[CalendarEvent]] = {}
    for event in events:
        index.setdefault((event.date.month, event.date.day), []).append(event)
    return index
