from datetime import time
from pathlib import Path

import pytest

from nameday_reminders.kv_store import JsonFileStore
from nameday_reminders.models import AppSettings
from nameday_reminders.settings_service import SETTINGS_KEY, SettingsService, parse_reminder_time


def test_default_settings_when_nothing_stored(tmp_path: Path) -> None:
    service = SettingsService(JsonFileStore(tmp_path / "store.json"))
    assert service.get_current_settings() == AppSettings(default_reminder_time="09:00:00")


def test_save_normalizes_and_persists(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "store.json")
    service = SettingsService(store)

    saved = service.save_settings(AppSettings(default_reminder_time="7:05"))

    assert saved.default_reminder_time == "07:05:00"
    assert store.get(SETTINGS_KEY) == {"defaultReminderTime": "07:05:00"}
    assert SettingsService(store).get_current_settings() == saved


def test_invalid_settings_rejected(tmp_path: Path) -> None:
    service = SettingsService(JsonFileStore(tmp_path / "store.json"))

    with pytest.raises(ValueError):
        service.save_settings(AppSettings(default_reminder_time="25:00"))
    assert service.get_current_settings().default_reminder_time == "09:00:00"


def test_invalid_stored_settings_fall_back_to_default(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "store.json")
    store.set(SETTINGS_KEY, {"defaultReminderTime": "noon"})

    assert SettingsService(store).get_current_settings() == AppSettings()


def test_subscribers_are_notified_until_unsubscribed(tmp_path: Path) -> None:
    service = SettingsService(JsonFileStore(tmp_path / "store.json"))
    received: list[AppSettings] = []
    unsubscribe = service.subscribe(received.append)

    service.save_settings(AppSettings(default_reminder_time="08:00:00"))
    unsubscribe()
    service.save_settings(AppSettings(default_reminder_time="10:00:00"))

    assert received == [AppSettings(default_reminder_time="08:00:00")]


@pytest.mark.parametrize(
    "value, expected",
    [("09:00:00", time(9, 0)), ("23:59", time(23, 59)), ("00:00:30", time(0, 0, 30))],
)
def test_parse_reminder_time(value: str, expected: time) -> None:
    assert parse_reminder_time(value) == expected


@pytest.mark.parametrize("value", ["", "9", "09:60", "aa:bb", "09:00:00:00", "-1:00"])
def test_parse_reminder_time_rejects(value: str) -> None:
    with pytest.raises(ValueError):
        parse_reminder_time(value)
