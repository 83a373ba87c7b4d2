from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import time

from nameday_reminders.kv_store import KeyValueStore
from nameday_reminders.models import AppSettings

LOGGER = logging.getLogger(__name__)

SETTINGS_KEY = "app_settings"

SettingsListener = Callable[[AppSettings], None]


def parse_reminder_time(value: str) -> time:
    pieces = value.strip().split(":")
    if len(pieces) not in (2, 3):
        raise ValueError("default_reminder_time must be in HH:MM or HH:MM:SS format")
    if not all(piece.isdigit() for piece in pieces):
        raise ValueError("default_reminder_time must contain numeric hour/minute/second")

    hour, minute = int(pieces[0]), int(pieces[1])
    second = int(pieces[2]) if len(pieces) == 3 else 0
    if hour > 23 or minute > 59 or second > 59:
        raise ValueError("default_reminder_time must be a valid 24-hour time")

    return time(hour, minute, second)


def validate_settings(settings: AppSettings) -> AppSettings:
    parsed = parse_reminder_time(settings.default_reminder_time)
    return AppSettings(default_reminder_time=parsed.strftime("%H:%M:%S"))


class SettingsService:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self._current: AppSettings | None = None
        self._listeners: list[SettingsListener] = []

    def get_current_settings(self) -> AppSettings:
        if self._current is None:
            self._current = self._load()
        return self._current

    def _load(self) -> AppSettings:
        stored = self._store.get(SETTINGS_KEY)
        if not isinstance(stored, dict) or "defaultReminderTime" not in stored:
            return AppSettings()

        try:
            return validate_settings(AppSettings(default_reminder_time=str(stored["defaultReminderTime"])))
        except ValueError:
            LOGGER.warning("Ignoring invalid stored settings %r", stored)
            return AppSettings()

    def save_settings(self, settings: AppSettings) -> AppSettings:
        validated = validate_settings(settings)
        self._store.set(SETTINGS_KEY, {"defaultReminderTime": validated.default_reminder_time})
        self._current = validated

        for listener in list(self._listeners):
            listener(validated)
        return validated

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
