from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime, time
from typing import Protocol

from nameday_reminders.date_logic import DEFAULT_LEAP_DAY_RULE, occurrence_in_year
from nameday_reminders.models import Contact, ScheduledNotification
from nameday_reminders.notification_ids import BIRTHDAY_ROLE, derive_notification_id, name_day_role
from nameday_reminders.settings_service import SettingsService, parse_reminder_time

LOGGER = logging.getLogger(__name__)

BIRTHDAY_TITLE = "Birthday Reminder! 🎂"
BIRTHDAY_BODY = "It's {first_name}'s birthday today! Don't forget to send your wishes."
NAME_DAY_TITLE = "Name Day Reminder! 🎉"
NAME_DAY_BODY = "It's {first_name}'s name day today!"


class NotificationScheduler(Protocol):
    def schedule(self, notifications: Sequence[ScheduledNotification]) -> None: ...

    def get_pending(self) -> list[ScheduledNotification]: ...

    def cancel(self, notifications: Sequence[ScheduledNotification]) -> None: ...


def next_trigger_at(
    month_day: date,
    reminder_time: time,
    now: datetime,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
) -> datetime:
    """Next moment ``month_day`` at ``reminder_time`` that is not in the past."""
    this_year = occurrence_in_year(month_day.month, month_day.day, now.year, leap_day_rule)
    trigger_at = datetime.combine(this_year, reminder_time)
    if trigger_at >= now:
        return trigger_at
    next_year = occurrence_in_year(month_day.month, month_day.day, now.year + 1, leap_day_rule)
    return datetime.combine(next_year, reminder_time)


class ReminderService:
    def __init__(
        self,
        *,
        scheduler: NotificationScheduler,
        settings_service: SettingsService,
        leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
    ) -> None:
        self._scheduler = scheduler
        self._settings_service = settings_service
        self._leap_day_rule = leap_day_rule

    def build_notifications(self, contact: Contact, now: datetime) -> list[ScheduledNotification]:
        if not contact.reminder_enabled:
            return []

        settings = self._settings_service.get_current_settings()
        reminder_time = parse_reminder_time(settings.default_reminder_time)

        planned: list[tuple[str, date, str, str]] = []
        if contact.birthday is not None:
            planned.append((BIRTHDAY_ROLE, contact.birthday, BIRTHDAY_TITLE, BIRTHDAY_BODY))
        for index, entry in enumerate(contact.name_days):
            planned.append((name_day_role(index), entry.date, NAME_DAY_TITLE, NAME_DAY_BODY))

        return [
            ScheduledNotification(
                id=derive_notification_id(contact.id, role),
                contact_id=contact.id,
                role=role,
                title=title,
                body=body.format(first_name=contact.first_name),
                trigger_at=next_trigger_at(month_day, reminder_time, now, self._leap_day_rule),
            )
            for role, month_day, title, body in planned
        ]

    def schedule_reminders(self, contact: Contact, now: datetime | None = None) -> int:
        notifications = self.build_notifications(contact, now or datetime.now())
        if not notifications:
            return 0

        try:
            self._scheduler.schedule(notifications)
        except Exception:
            LOGGER.exception("Error scheduling notifications for contact %s", contact.id)
            return 0

        LOGGER.info("Scheduled %s reminders for contact %s", len(notifications), contact.id)
        return len(notifications)

    def cancel_reminders(self, contact_id: int) -> int:
        stale = [item for item in self._scheduler.get_pending() if item.contact_id == contact_id]
        if stale:
            self._scheduler.cancel(stale)
            LOGGER.info("Canceled %s reminders for contact %s", len(stale), contact_id)
        return len(stale)

    def cancel_all(self) -> list[ScheduledNotification]:
        pending = self._scheduler.get_pending()
        if pending:
            self._scheduler.cancel(pending)
        return pending

    def reschedule(self, contact: Contact, now: datetime | None = None) -> int:
        self.cancel_reminders(contact.id)
        return self.schedule_reminders(contact, now)

    def reschedule_all(self, contacts: Sequence[Contact], now: datetime | None = None) -> int:
        now = now or datetime.now()
        self.cancel_all()
        return sum(self.schedule_reminders(contact, now) for contact in contacts)
