"""Celery tasks for outbound notifications."""

import logging
from celery import shared_task

logger = logging.getLogger("kvl.tasks")


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def deliver_email(self, to: str, subject: str, body: str):
    """Deliver a plain-text email; retried a few times before giving up."""
    from apps.notifications.service import NotificationService

    if NotificationService().deliver_email(to, subject, body):
        return True
    if self.request.retries < self.max_retries:
        raise self.retry()
    logger.warning("Giving up on email to %s after %d retries", to, self.request.retries)
    return False
