from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta

from nameday_reminders.date_logic import DEFAULT_LEAP_DAY_RULE, as_date, next_occurrence_for_contact
from nameday_reminders.models import GROUP_ORDER, Contact, GroupName, Reminder, ReminderGroup


def _end_of_month(year: int, month: int) -> date:
    if month > 12:
        year, month = year + 1, month - 12
    return date(year, month, calendar.monthrange(year, month)[1])


def group_name_for(event_date: date | None, today: date) -> GroupName:
    if event_date is None:
        return GroupName.NO_UPCOMING_EVENTS

    if (event_date - today).days == 0:
        return GroupName.TODAY

    # Weeks run Sunday..Saturday.
    weekday_from_sunday = (today.weekday() + 1) % 7
    end_of_week = today + timedelta(days=6 - weekday_from_sunday)
    end_of_next_week = end_of_week + timedelta(days=7)

    if event_date <= end_of_week:
        return GroupName.THIS_WEEK
    if event_date <= end_of_next_week:
        return GroupName.NEXT_WEEK
    if event_date <= _end_of_month(today.year, today.month):
        return GroupName.THIS_MONTH
    if event_date <= _end_of_month(today.year, today.month + 1):
        return GroupName.NEXT_MONTH
    return GroupName.LATER


def sort_reminders(contacts: list[Contact], today: date, leap_day_rule: str = DEFAULT_LEAP_DAY_RULE) -> list[Reminder]:
    reminders = [
        Reminder(contact=contact, next_occurrence=next_occurrence_for_contact(contact, today, leap_day_rule))
        for contact in contacts
    ]
    reminders.sort(key=lambda item: (item.next_occurrence is None, item.next_occurrence or today))
    return reminders


def rank_contacts(
    contacts: list[Contact],
    today: date | datetime,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
) -> list[ReminderGroup]:
    today = as_date(today)
    buckets: dict[GroupName, list[Reminder]] = {}

    for reminder in sort_reminders(contacts, today, leap_day_rule):
        buckets.setdefault(group_name_for(reminder.next_occurrence, today), []).append(reminder)

    return [ReminderGroup(name=name, reminders=buckets[name]) for name in GROUP_ORDER if name in buckets]
