from __future__ import annotations

import logging
from collections.abc import Sequence

from telegram.ext import CallbackContext, JobQueue

from nameday_reminders.models import ScheduledNotification

LOGGER = logging.getLogger(__name__)

JOB_NAME_PREFIX = "reminder-"


def job_name(notification_id: int) -> str:
    return f"{JOB_NAME_PREFIX}{notification_id}"


def format_notification_text(notification: ScheduledNotification) -> str:
    return f"{notification.title}\n{notification.body}"


async def deliver_notification(context: CallbackContext) -> None:
    notification: ScheduledNotification = context.job.data
    await context.bot.send_message(chat_id=context.job.chat_id, text=format_notification_text(notification))
    LOGGER.info("Delivered reminder %s for contact %s", notification.id, notification.contact_id)


class JobQueueScheduler:
    """Notification scheduler backed by python-telegram-bot's JobQueue."""

    def __init__(self, job_queue: JobQueue, chat_id: int) -> None:
        self._job_queue = job_queue
        self._chat_id = chat_id

    def _remove_jobs(self, notification_id: int) -> None:
        for job in self._job_queue.get_jobs_by_name(job_name(notification_id)):
            job.schedule_removal()

    def schedule(self, notifications: Sequence[ScheduledNotification]) -> None:
        for notification in notifications:
            # Same id replaces the earlier job.
            self._remove_jobs(notification.id)
            self._job_queue.run_once(
                deliver_notification,
                when=notification.trigger_at,
                name=job_name(notification.id),
                data=notification,
                chat_id=self._chat_id,
            )

    def get_pending(self) -> list[ScheduledNotification]:
        return [
            job.data
            for job in self._job_queue.jobs()
            if isinstance(job.data, ScheduledNotification) and not job.removed
        ]

    def cancel(self, notifications: Sequence[ScheduledNotification]) -> None:
        for notification in notifications:
            self._remove_jobs(notification.id)
