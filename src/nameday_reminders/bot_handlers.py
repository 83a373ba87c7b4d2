from __future__ import annotations

import calendar
import logging
import re
import tempfile
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path

from telegram import Update
from telegram.ext import CallbackContext, CommandHandler, MessageHandler, filters

from nameday_reminders.backup import export_contacts, import_contacts
from nameday_reminders.calendar_grid import WEEKDAY_LABELS, MonthGrid, build_month
from nameday_reminders.contact_store import ContactStore, add_name_day, apply_catalog_name_days
from nameday_reminders.dashboard import Dashboard, build_dashboard
from nameday_reminders.date_logic import InvalidDateError, parse_calendar_date
from nameday_reminders.event_merger import index_events_by_day, merge_events
from nameday_reminders.models import AppSettings, CellEventType, Contact, ReminderGroup
from nameday_reminders.name_day_catalog import NameDayCatalog
from nameday_reminders.reminder_grouper import rank_contacts
from nameday_reminders.reminder_service import ReminderService
from nameday_reminders.settings import Settings
from nameday_reminders.settings_service import SettingsService

LOGGER = logging.getLogger(__name__)

BACKUP_FILENAME = "reminders-backup.json"
# Year for name days entered as MM-DD; a leap year so 02-29 is accepted.
NAME_DAY_STORAGE_YEAR = 2000

CELL_MARKERS = {
    CellEventType.NONE: " ",
    CellEventType.BIRTHDAY: "*",
    CellEventType.NAME_DAY: "+",
    CellEventType.BOTH: "#",
}


@dataclass(frozen=True)
class HandlerDependencies:
    settings: Settings
    contact_store: ContactStore
    catalog: NameDayCatalog
    settings_service: SettingsService
    reminder_service: ReminderService


def is_authorized(update: Update, settings: Settings) -> bool:
    effective_user = update.effective_user
    effective_chat = update.effective_chat
    if effective_user is None or effective_chat is None:
        return False
    return (
        effective_user.id == settings.telegram_allowed_user_id
        and effective_chat.id == settings.telegram_allowed_chat_id
    )


async def _deny_unauthorized(update: Update) -> None:
    if update.effective_message:
        await update.effective_message.reply_text("This bot is restricted to its configured owner.")


def parse_month_arg(args: list[str], today: date) -> tuple[int, int]:
    if not args:
        return today.year, today.month

    match = re.fullmatch(r"(\d{4})-(\d{2})", args[0].strip())
    if not match:
        raise ValueError("Month must use YYYY-MM")

    year, month = int(match.group(1)), int(match.group(2))
    if month < 1 or month > 12:
        raise ValueError(f"Invalid month: {month}")
    return year, month


def parse_add_args(args: list[str]) -> tuple[str, date | None]:
    if not args:
        raise ValueError("Usage: /add <first name> [YYYY-MM-DD]")

    birthday: date | None = None
    words = list(args)
    if len(words) > 1 and re.fullmatch(r"\d{4}-\d{2}-\d{2}", words[-1]):
        birthday = parse_calendar_date(words.pop())

    first_name = " ".join(words).strip()
    if not first_name:
        raise ValueError("Name cannot be empty")
    return first_name, birthday


def parse_contact_id(raw: str) -> int | None:
    text = raw.strip().lstrip("#")
    return int(text) if text.isdigit() else None


def parse_name_day_args(args: list[str]) -> tuple[int, date, str | None]:
    usage = "Usage: /addnameday <id> <MM-DD> [notes]"
    if len(args) < 2:
        raise ValueError(usage)

    contact_id = parse_contact_id(args[0])
    match = re.fullmatch(r"(\d{2})-(\d{2})", args[1].strip())
    if contact_id is None or not match:
        raise ValueError(usage)

    try:
        when = date(NAME_DAY_STORAGE_YEAR, int(match.group(1)), int(match.group(2)))
    except ValueError as exc:
        raise InvalidDateError(f"Invalid month/day: {args[1]}") from exc

    notes = " ".join(args[2:]).strip() or None
    return contact_id, when, notes


def _render_help() -> str:
    return (
        "Commands:\n"
        "/upcoming - Contacts grouped by their next birthday or name day\n"
        "/today - Today's events and the week ahead\n"
        "/calendar [YYYY-MM] - Month view with birthdays and name days\n"
        "/nameday <name> - Name day dates for a name\n"
        "/add <first name> [YYYY-MM-DD] - Add a contact (name days are filled in)\n"
        "/delete <id> - Delete a contact and its reminders\n"
        "/addnameday <id> <MM-DD> [notes] - Add a name day to a contact\n"
        "/toggle <id> - Turn a contact's reminders on or off\n"
        "/export - Download all contacts as a JSON backup\n"
        "Send a backup .json file to replace all contacts with it\n"
        "/remindat HH:MM[:SS] - Change the reminder time of day\n"
        "/help - Show this help message"
    )


def _render_groups(groups: list[ReminderGroup]) -> str:
    if not groups:
        return "No contacts are currently tracked."

    lines: list[str] = []
    for group in groups:
        lines.append(group.name.value)
        for reminder in group.reminders:
            contact = reminder.contact
            when = f" | {reminder.next_occurrence.isoformat()}" if reminder.next_occurrence else ""
            lines.append(f"  #{contact.id} {contact.first_name}{when}")
        lines.append("")
    return "\n".join(lines).rstrip()


def _render_month_grid(grid: MonthGrid, year: int, month: int) -> str:
    lines = [f"{calendar.month_name[month]} {year}", " ".join(f"{label[:2]:>3}" for label in WEEKDAY_LABELS)]

    for week in grid:
        cells: list[str] = []
        for cell in week:
            if cell is None:
                cells.append("   ")
                continue
            marker = "!" if cell.is_today and cell.event_type is CellEventType.NONE else CELL_MARKERS[cell.event_type]
            cells.append(f"{cell.day_number:>2}{marker}")
        lines.append(" ".join(cells))

    lines.append("")
    lines.append("* birthday  + name day  # both  ! today")

    for week in grid:
        for cell in week:
            if cell is None or not cell.events:
                continue
            personal = [f"{event.title}'s {event.type.value}" for event in cell.events if event.is_reminder]
            general = [event.title for event in cell.events if not event.is_reminder]
            parts = personal + ([f"Name day: {', '.join(general)}"] if general else [])
            lines.append(f"{cell.day_number:>2}: {'; '.join(parts)}")

    return "\n".join(lines)


def _render_dashboard(dashboard: Dashboard) -> str:
    lines = ["Today"]
    if dashboard.todays_events:
        lines.extend(f"  {event.title} - {event.type.value}" for event in dashboard.todays_events)
    else:
        lines.append("  Nothing today.")

    lines.append("")
    lines.append("Next 7 days")
    if dashboard.upcoming_events:
        lines.extend(
            f"  {event.date.isoformat()} {event.title} - {event.type.value}" for event in dashboard.upcoming_events
        )
    else:
        lines.append("  Nothing coming up.")

    if dashboard.todays_name_days:
        lines.append("")
        lines.append(f"Name days today: {', '.join(dashboard.todays_name_days)}")
    return "\n".join(lines)


def _render_name_dates(name: str, dates: list[date], suggestions: list[str]) -> str:
    if dates:
        formatted = ", ".join(f"{when.month:02d}-{when.day:02d}" for when in dates)
        return f"{name} celebrates on {formatted}."
    if suggestions:
        return f"No exact match for {name}. Did you mean: {', '.join(suggestions[:10])}?"
    return f"No name days found for {name}."


def _deps(context: CallbackContext) -> HandlerDependencies:
    return context.application.bot_data["handler_deps"]


async def help_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return
    await update.effective_message.reply_text(_render_help())


async def upcoming_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    groups = rank_contacts(deps.contact_store.get_contacts(), date.today(), deps.settings.leap_day_rule)
    await update.effective_message.reply_text(_render_groups(groups))


async def today_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    dashboard = build_dashboard(
        deps.contact_store.get_contacts(),
        deps.catalog.flatten(),
        date.today(),
        tradition=deps.settings.tradition,
        leap_day_rule=deps.settings.leap_day_rule,
    )
    await update.effective_message.reply_text(_render_dashboard(dashboard))


async def calendar_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    today = date.today()
    try:
        year, month = parse_month_arg(list(context.args or []), today)
    except ValueError as exc:
        await update.effective_message.reply_text(f"{exc}. Example: /calendar 2025-03")
        return

    flat = [entry for entry in deps.catalog.flatten() if entry.tradition == deps.settings.tradition]
    events = merge_events(deps.contact_store.get_contacts(), flat)
    grid = build_month(index_events_by_day(events), year, month, today)
    await update.effective_message.reply_text(_render_month_grid(grid, year, month))


async def nameday_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    name = " ".join(context.args or []).strip()
    if not name:
        await update.effective_message.reply_text("Usage: /nameday <name>")
        return

    tradition = deps.settings.tradition
    dates = deps.catalog.find_dates_for_name(name, tradition)
    suggestions = [] if dates else deps.catalog.get_autocomplete_suggestions(name, tradition)
    await update.effective_message.reply_text(_render_name_dates(name, dates, suggestions))


async def add_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    try:
        first_name, birthday = parse_add_args(list(context.args or []))
    except ValueError as exc:
        await update.effective_message.reply_text(str(exc))
        return

    draft = Contact(id=0, first_name=first_name, birthday=birthday)
    draft = apply_catalog_name_days(draft, deps.catalog, deps.settings.tradition)
    contact = deps.contact_store.add_contact(draft)
    scheduled = deps.reminder_service.schedule_reminders(contact)

    await update.effective_message.reply_text(
        f"Saved #{contact.id} {contact.first_name} with {len(contact.name_days)} name day(s). "
        f"{scheduled} reminder(s) scheduled."
    )
    LOGGER.info("Added contact %s", contact.id)


async def delete_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    contact_id = parse_contact_id(" ".join(context.args or []))
    if contact_id is None:
        await update.effective_message.reply_text("Usage: /delete <id>")
        return

    if deps.contact_store.get_contact(contact_id) is None:
        await update.effective_message.reply_text(f"No contact with id {contact_id}.")
        return

    deps.reminder_service.cancel_reminders(contact_id)
    deps.contact_store.delete_contact(contact_id)
    await update.effective_message.reply_text("Reminder deleted.")
    LOGGER.info("Deleted contact %s", contact_id)


def _save_and_reschedule(deps: HandlerDependencies, contact: Contact) -> int:
    deps.contact_store.update_contact(contact)
    return deps.reminder_service.reschedule(contact)


async def addnameday_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    try:
        contact_id, when, notes = parse_name_day_args(list(context.args or []))
    except ValueError as exc:
        await update.effective_message.reply_text(str(exc))
        return

    contact = deps.contact_store.get_contact(contact_id)
    if contact is None:
        await update.effective_message.reply_text(f"No contact with id {contact_id}.")
        return

    updated = add_name_day(contact, when, notes)
    if updated is contact:
        await update.effective_message.reply_text(
            f"{contact.first_name} already has a name day on {when.month:02d}-{when.day:02d}."
        )
        return

    scheduled = _save_and_reschedule(deps, updated)
    await update.effective_message.reply_text(
        f"Added {when.month:02d}-{when.day:02d} to #{contact.id} {contact.first_name}. "
        f"{scheduled} reminder(s) scheduled."
    )
    LOGGER.info("Added name day %s to contact %s", when.isoformat(), contact.id)


async def toggle_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    contact_id = parse_contact_id(" ".join(context.args or []))
    if contact_id is None:
        await update.effective_message.reply_text("Usage: /toggle <id>")
        return

    contact = deps.contact_store.get_contact(contact_id)
    if contact is None:
        await update.effective_message.reply_text(f"No contact with id {contact_id}.")
        return

    updated = replace(contact, reminder_enabled=not contact.reminder_enabled)
    scheduled = _save_and_reschedule(deps, updated)
    state = "on" if updated.reminder_enabled else "off"
    await update.effective_message.reply_text(
        f"Reminders for #{contact.id} {contact.first_name} are {state}. {scheduled} reminder(s) scheduled."
    )
    LOGGER.info("Toggled reminders for contact %s to %s", contact.id, state)


async def export_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    with tempfile.TemporaryDirectory() as tmp_dir:
        path = Path(tmp_dir) / BACKUP_FILENAME
        count = export_contacts(deps.contact_store, path)
        await update.effective_message.reply_document(
            document=path,
            filename=BACKUP_FILENAME,
            caption=f"{count} contact(s) exported.",
        )


async def import_document(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    document = update.effective_message.document
    if document is None:
        return

    with tempfile.TemporaryDirectory() as tmp_dir:
        path = Path(tmp_dir) / BACKUP_FILENAME
        telegram_file = await document.get_file()
        await telegram_file.download_to_drive(custom_path=path)
        result = import_contacts(deps.contact_store, path)

    if not result.success:
        await update.effective_message.reply_text(result.message)
        return

    scheduled = deps.reminder_service.reschedule_all(deps.contact_store.get_contacts())
    await update.effective_message.reply_text(f"{result.message} {scheduled} reminder(s) scheduled.")


async def remindat_command(update: Update, context: CallbackContext) -> None:
    deps = _deps(context)
    if not is_authorized(update, deps.settings):
        await _deny_unauthorized(update)
        return

    raw = " ".join(context.args or []).strip()
    try:
        saved = deps.settings_service.save_settings(AppSettings(default_reminder_time=raw))
    except ValueError as exc:
        await update.effective_message.reply_text(f"{exc}. Example: /remindat 08:30")
        return

    await update.effective_message.reply_text(f"Reminders will fire at {saved.default_reminder_time}.")


def build_handlers() -> list:
    return [
        CommandHandler("help", help_command),
        CommandHandler("start", help_command),
        CommandHandler("upcoming", upcoming_command),
        CommandHandler("today", today_command),
        CommandHandler("calendar", calendar_command),
        CommandHandler("nameday", nameday_command),
        CommandHandler("add", add_command),
        CommandHandler("delete", delete_command),
        CommandHandler("addnameday", addnameday_command),
        CommandHandler("toggle", toggle_command),
        CommandHandler("export", export_command),
        CommandHandler("remindat", remindat_command),
        MessageHandler(filters.Document.FileExtension("json"), import_document),
    ]
