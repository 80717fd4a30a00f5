"""
Notification service.
Email goes through Django's mail backend (SMTP relay in production); SMS goes
through an HTTP gateway and is only attempted when KVL_SMS_ENABLED is set.
"""

import logging
import requests
from django.conf import settings
from django.core.mail import EmailMessage

logger = logging.getLogger("kvl.notifications")


class NotificationService:
    """Send Email and SMS notifications. Failures are logged and never block the main flow."""

    def send_email(self, to: str, subject: str, body: str, attachments=None) -> bool:
        """
        Queue or send an email. Always returns True once the message was handed
        off; delivery failures are logged here and never reach the caller.
        """
        if not to:
            return True
        if settings.NOTIFICATIONS_ASYNC and not attachments:
            from apps.notifications.tasks import deliver_email
            try:
                deliver_email.delay(to, subject, body)
                return True
            except Exception as exc:  # broker down: fall back to inline delivery
                logger.warning("Email queueing failed for %s: %s", to, exc)
        self.deliver_email(to, subject, body, attachments)
        return True

    def deliver_email(self, to: str, subject: str, body: str, attachments=None) -> bool:
        """Send now. Returns True on success."""
        message = EmailMessage(subject=subject, body=body, to=[to])
        for filename, content, mimetype in attachments or ():
            message.attach(filename, content, mimetype)
        try:
            message.send(fail_silently=False)
            logger.info("EMAIL → %s | Subject: %s", to, subject)
            return True
        except Exception as exc:
            logger.warning("Email failed for %s: %s", to, exc)
        return False

    def send_sms(self, mobile: str, message: str) -> bool:
        """Send SMS via gateway. Returns True on success."""
        if not settings.KVL_SMS_ENABLED or not mobile:
            return False
        try:
            resp = requests.post(
                settings.SMS_GATEWAY_URL,
                json={"route": "q", "message": message, "language": "english", "numbers": mobile},
                headers={"authorization": settings.SMS_API_KEY},
                timeout=3,
            )
            if resp.status_code == 200:
                logger.info("SMS sent to %s", mobile)
                return True
            logger.warning("SMS gateway returned %s for %s", resp.status_code, mobile)
        except requests.RequestException as exc:
            logger.warning("SMS failed for %s: %s", mobile, exc)
        return False

    def notify_party(self, party, subject: str, message: str) -> None:
        """Email (and SMS when enabled) to a consignor / consignee snapshot."""
        if party.email:
            self.send_email(party.email, subject, message)
        self.send_sms(party.mobile, message)
