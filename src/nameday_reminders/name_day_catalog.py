from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any

from nameday_reminders.date_logic import DEFAULT_LEAP_DAY_RULE, InvalidDateError, occurrence_in_year
from nameday_reminders.models import DEFAULT_TRADITION, FlatNameDay
from nameday_reminders.normalizer import normalize_name

LOGGER = logging.getLogger(__name__)

MONTHS = {
    "January": 1,
    "February": 2,
    "March": 3,
    "April": 4,
    "May": 5,
    "June": 6,
    "July": 7,
    "August": 8,
    "September": 9,
    "October": 10,
    "November": 11,
    "December": 12,
}


def flatten_catalog_data(
    data: dict[str, Any],
    year: int,
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
) -> list[FlatNameDay]:
    """Flatten ``month -> day -> tradition -> [names]`` into one record per name.

    Unknown month names and malformed day entries are skipped so that a partly
    broken dataset still yields everything that can be read.
    """
    flat: list[FlatNameDay] = []

    for month_name, days in data.items():
        month = MONTHS.get(month_name)
        if month is None or not isinstance(days, dict):
            LOGGER.warning("Skipping unrecognized catalog month %r", month_name)
            continue

        for day_text, traditions in days.items():
            try:
                when = occurrence_in_year(month, int(day_text), year, leap_day_rule)
            except (ValueError, InvalidDateError):
                LOGGER.warning("Skipping invalid catalog day %s %r", month_name, day_text)
                continue
            if not isinstance(traditions, dict):
                continue

            for tradition, names in traditions.items():
                if not isinstance(names, list):
                    continue
                for name in names:
                    flat.append(
                        FlatNameDay(
                            name=str(name),
                            normalized_name=normalize_name(str(name)),
                            date=when,
                            tradition=str(tradition),
                        )
                    )

    return flat


class NameDayCatalog:
    def __init__(
        self,
        path: Path,
        *,
        year: int | None = None,
        leap_day_rule: str = DEFAULT_LEAP_DAY_RULE,
    ) -> None:
        self._path = path
        self._year = year
        self._leap_day_rule = leap_day_rule
        self._entries: tuple[FlatNameDay, ...] = ()
        self._loaded = False
        self._load_failed = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> None:
        if self._loaded:
            return

        try:
            with self._path.open("r", encoding="utf-8") as file_obj:
                data = json.load(file_obj)
        except (OSError, json.JSONDecodeError) as exc:
            if self._load_failed:
                LOGGER.warning("Name day catalog %s still unavailable: %s", self._path, exc)
            else:
                LOGGER.exception("Error loading name day catalog from %s", self._path)
            self._load_failed = True
            return

        if not isinstance(data, dict):
            if self._load_failed:
                LOGGER.warning("Name day catalog %s is still not a month mapping", self._path)
            else:
                LOGGER.error("Name day catalog %s is not a month mapping", self._path)
            self._load_failed = True
            return

        year = self._year if self._year is not None else date.today().year
        self._entries = tuple(flatten_catalog_data(data, year, self._leap_day_rule))
        self._loaded = True
        self._load_failed = False
        LOGGER.info("Loaded %s name day entries from %s", len(self._entries), self._path)

    def reset(self) -> None:
        self._entries = ()
        self._loaded = False
        self._load_failed = False

    def flatten(self) -> tuple[FlatNameDay, ...]:
        self.load()
        return self._entries

    def find_dates_for_name(self, name: str, tradition: str = DEFAULT_TRADITION) -> list[date]:
        wanted = normalize_name(name)
        return [
            entry.date
            for entry in self.flatten()
            if entry.normalized_name == wanted and entry.tradition == tradition
        ]

    def get_autocomplete_suggestions(self, partial: str, tradition: str = DEFAULT_TRADITION) -> list[str]:
        prefix = normalize_name(partial)
        if not prefix:
            return []

        suggestions: list[str] = []
        seen: set[str] = set()
        for entry in self.flatten():
            if entry.tradition != tradition or not entry.normalized_name.startswith(prefix):
                continue
            if entry.name in seen:
                continue
            seen.add(entry.name)
            suggestions.append(entry.name)
        return suggestions
