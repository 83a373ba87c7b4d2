from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


DEFAULT_REMINDER_TIME = "09:00:00"
DEFAULT_TRADITION = "Hungary"


class EventType(str, Enum):
    BIRTHDAY = "Birthday"
    NAME_DAY = "Name Day"


class CellEventType(str, Enum):
    NONE = "none"
    BIRTHDAY = "birthday"
    NAME_DAY = "nameDay"
    BOTH = "both"


class GroupName(str, Enum):
    TODAY = "Today"
    THIS_WEEK = "This Week"
    NEXT_WEEK = "Next Week"
    THIS_MONTH = "This Month"
    NEXT_MONTH = "Next Month"
    LATER = "Later"
    NO_UPCOMING_EVENTS = "No Upcoming Events"


GROUP_ORDER = tuple(GroupName)


@dataclass(frozen=True)
class NameDayEntry:
    date: date
    notes: str | None = None


@dataclass(frozen=True)
class Contact:
    id: int
    first_name: str
    last_name: str | None = None
    birthday: date | None = None
    phone_number: str | None = None
    name_days: tuple[NameDayEntry, ...] = ()
    reminder_enabled: bool = True


@dataclass(frozen=True)
class FlatNameDay:
    name: str
    normalized_name: str
    date: date
    tradition: str


@dataclass(frozen=True)
class CalendarEvent:
    title: str
    type: EventType
    date: date
    is_reminder: bool


@dataclass(frozen=True)
class Reminder:
    contact: Contact
    next_occurrence: date | None


@dataclass(frozen=True)
class ReminderGroup:
    name: GroupName
    reminders: list[Reminder]


@dataclass(frozen=True)
class DayCell:
    day_number: int
    full_date: date
    is_today: bool
    event_type: CellEventType
    events: list[CalendarEvent] = field(default_factory=list)


@dataclass(frozen=True)
class AppSettings:
    default_reminder_time: str = DEFAULT_REMINDER_TIME


@dataclass(frozen=True)
class ScheduledNotification:
    id: int
    contact_id: int
    role: str
    title: str
    body: str
    trigger_at: datetime
