from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from nameday_reminders.contact_store import ContactStore, contact_from_dict, contact_to_dict
from nameday_reminders.kv_store import write_json_atomic

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportResult:
    success: bool
    message: str


def export_contacts(contact_store: ContactStore, path: Path) -> int:
    contacts = contact_store.get_contacts()
    write_json_atomic(path, [contact_to_dict(contact) for contact in contacts])
    LOGGER.info("Exported %s contacts to %s", len(contacts), path)
    return len(contacts)


def import_contacts(contact_store: ContactStore, path: Path) -> ImportResult:
    """Replace the whole contact collection with a JSON backup."""
    try:
        with path.open("r", encoding="utf-8") as file_obj:
            rows = json.load(file_obj)
    except OSError:
        return ImportResult(success=False, message="Failed to read the file.")
    except json.JSONDecodeError:
        return ImportResult(success=False, message="Failed to parse backup file.")

    if not isinstance(rows, list):
        return ImportResult(success=False, message="Invalid backup file format.")

    try:
        contacts = [contact_from_dict(row) for row in rows]
    except ValueError as exc:
        return ImportResult(success=False, message=f"Invalid backup file format: {exc}")

    contact_store.save_contacts(contacts)
    LOGGER.info("Imported %s contacts from %s", len(contacts), path)
    return ImportResult(success=True, message=f"{len(contacts)} reminders imported successfully.")
