from __future__ import annotations

import logging
from datetime import datetime, time

from telegram.ext import Application, CallbackContext, Defaults

from nameday_reminders.bot_handlers import HandlerDependencies, build_handlers
from nameday_reminders.contact_store import ContactStore
from nameday_reminders.kv_store import JsonFileStore
from nameday_reminders.models import AppSettings
from nameday_reminders.name_day_catalog import NameDayCatalog
from nameday_reminders.reminder_service import ReminderService
from nameday_reminders.settings import load_settings
from nameday_reminders.settings_service import SettingsService
from nameday_reminders.telegram_scheduler import JobQueueScheduler

LOGGER = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _reschedule_everything(deps: HandlerDependencies) -> None:
    contacts = deps.contact_store.get_contacts()
    scheduled = deps.reminder_service.reschedule_all(contacts)
    LOGGER.info("Rescheduled %s reminders for %s contacts", scheduled, len(contacts))


async def daily_refresh_callback(context: CallbackContext) -> None:
    _reschedule_everything(context.application.bot_data["handler_deps"])


async def startup_schedule(application: Application) -> None:
    _reschedule_everything(application.bot_data["handler_deps"])


def main() -> None:
    configure_logging()

    settings = load_settings()
    settings.store_path.parent.mkdir(parents=True, exist_ok=True)

    store = JsonFileStore(settings.store_path)
    contact_store = ContactStore(store)
    settings_service = SettingsService(store)

    catalog = NameDayCatalog(settings.catalog_path, leap_day_rule=settings.leap_day_rule)
    catalog.load()

    local_tz = datetime.now().astimezone().tzinfo
    application = (
        Application.builder()
        .token(settings.telegram_bot_token)
        .defaults(Defaults(tzinfo=local_tz))
        .build()
    )

    reminder_service = ReminderService(
        scheduler=JobQueueScheduler(application.job_queue, settings.telegram_allowed_chat_id),
        settings_service=settings_service,
        leap_day_rule=settings.leap_day_rule,
    )

    deps = HandlerDependencies(
        settings=settings,
        contact_store=contact_store,
        catalog=catalog,
        settings_service=settings_service,
        reminder_service=reminder_service,
    )
    application.bot_data["settings"] = settings
    application.bot_data["handler_deps"] = deps

    def on_settings_changed(_: AppSettings) -> None:
        _reschedule_everything(deps)

    settings_service.subscribe(on_settings_changed)

    for handler in build_handlers():
        application.add_handler(handler)

    application.job_queue.run_daily(
        daily_refresh_callback,
        time=time(hour=0, minute=5, tzinfo=local_tz),
        name="daily-reminder-refresh",
    )

    application.post_init = startup_schedule
    application.run_polling()


if __name__ == "__main__":
    main()
