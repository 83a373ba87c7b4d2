from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Any

from nameday_reminders.date_logic import parse_calendar_date
from nameday_reminders.kv_store import KeyValueStore
from nameday_reminders.models import DEFAULT_TRADITION, Contact, NameDayEntry
from nameday_reminders.name_day_catalog import NameDayCatalog

CONTACTS_KEY = "reminders"


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def contact_from_dict(row: Any) -> Contact:
    if not isinstance(row, dict):
        raise ValueError("contact must be an object")

    first_name = str(row.get("firstName", "")).strip()
    if not first_name:
        raise ValueError("contact firstName must not be empty")

    raw_id = row.get("id")
    if not isinstance(raw_id, int) or isinstance(raw_id, bool):
        raise ValueError("contact id must be an integer")

    raw_name_days = row.get("nameDays", [])
    if not isinstance(raw_name_days, list):
        raise ValueError("contact nameDays must be a list")

    name_days: list[NameDayEntry] = []
    for item in raw_name_days:
        if not isinstance(item, dict) or "date" not in item:
            raise ValueError("nameDays entries must carry a date")
        name_days.append(
            NameDayEntry(
                date=parse_calendar_date(str(item["date"])),
                notes=_optional_str(item.get("notes")),
            )
        )

    birthday = row.get("birthday")
    return Contact(
        id=raw_id,
        first_name=first_name,
        last_name=_optional_str(row.get("lastName")),
        birthday=parse_calendar_date(str(birthday)) if birthday else None,
        phone_number=_optional_str(row.get("phoneNumber")),
        name_days=tuple(name_days),
        reminder_enabled=bool(row.get("reminderEnabled", True)),
    )


def contact_to_dict(contact: Contact) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": contact.id,
        "firstName": contact.first_name,
        "nameDays": [],
        "reminderEnabled": contact.reminder_enabled,
    }
    if contact.last_name is not None:
        payload["lastName"] = contact.last_name
    if contact.birthday is not None:
        payload["birthday"] = contact.birthday.isoformat()
    if contact.phone_number is not None:
        payload["phoneNumber"] = contact.phone_number
    for entry in contact.name_days:
        item: dict[str, Any] = {"date": entry.date.isoformat()}
        if entry.notes is not None:
            item["notes"] = entry.notes
        payload["nameDays"].append(item)
    return payload


def add_name_day(contact: Contact, when: date, notes: str | None = None) -> Contact:
    if any((entry.date.month, entry.date.day) == (when.month, when.day) for entry in contact.name_days):
        return contact
    return replace(contact, name_days=(*contact.name_days, NameDayEntry(date=when, notes=notes)))


def apply_catalog_name_days(
    contact: Contact,
    catalog: NameDayCatalog,
    tradition: str = DEFAULT_TRADITION,
) -> Contact:
    for when in catalog.find_dates_for_name(contact.first_name, tradition):
        contact = add_name_day(contact, when)
    return contact


class ContactStore:
    """Contact collection kept as one whole value; callers serialize writes."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def get_contacts(self) -> list[Contact]:
        rows = self._store.get(CONTACTS_KEY) or []
        return [contact_from_dict(row) for row in rows]

    def get_contact(self, contact_id: int) -> Contact | None:
        for contact in self.get_contacts():
            if contact.id == contact_id:
                return contact
        return None

    def save_contacts(self, contacts: list[Contact]) -> None:
        self._store.set(CONTACTS_KEY, [contact_to_dict(contact) for contact in contacts])

    def add_contact(self, draft: Contact) -> Contact:
        contacts = self.get_contacts()
        new_id = max((contact.id for contact in contacts), default=0) + 1
        created = replace(draft, id=new_id)
        self.save_contacts([*contacts, created])
        return created

    def update_contact(self, contact: Contact) -> Contact:
        contacts = self.get_contacts()
        if not any(existing.id == contact.id for existing in contacts):
            raise KeyError(f"Unknown contact id: {contact.id}")

        self.save_contacts([contact if existing.id == contact.id else existing for existing in contacts])
        return contact

    def delete_contact(self, contact_id: int) -> None:
        contacts = self.get_contacts()
        self.save_contacts([contact for contact in contacts if contact.id != contact_id])
