"""Outbound mail over SMTP: password reset links."""
import asyncio
import logging
import smtplib
from email.message import EmailMessage

from hrdesk.config import Settings
from hrdesk.errors import InternalError

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password Reset"
RESET_BODY = (
    "<p>Click the following link to reset your password: "
    '<a href="{url}">{url}</a></p>'
    "<p>The link expires in {minutes} minutes.</p>"
)


class Mailer:
    def __init__(self, settings: Settings):
        self._settings = settings

    @property
    def configured(self) -> bool:
        return bool(self._settings.smtp_host)

    def _send_sync(self, message: EmailMessage) -> None:
        s = self._settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=30) as smtp:
            if s.smtp_use_tls:
                smtp.starttls()
            if s.smtp_username:
                smtp.login(s.smtp_username, s.smtp_password)
            smtp.send_message(message)

    async def send(self, to: str, subject: str, html: str) -> None:
        if not self.configured:
            logger.warning("SMTP_HOST not set. Cannot send mail to %s.", to)
            raise InternalError("Mail delivery is not configured")

        message = EmailMessage()
        message["From"] = self._settings.mail_from or self._settings.smtp_username
        message["To"] = to
        message["Subject"] = subject
        message.set_content(html, subtype="html")

        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send mail to {to}: {e}")
            raise InternalError("Failed to send email") from e
        logger.info("Sent '%s' mail to %s", subject, to)

    async def send_password_reset(self, to: str, token: str) -> None:
        url = f"{self._settings.reset_password_url}?token={token}"
        html = RESET_BODY.format(url=url, minutes=self._settings.reset_token_expire_minutes)
        await self.send(to, RESET_SUBJECT, html)
