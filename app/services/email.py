"""SMTP delivery of task notifications."""

from __future__ import annotations

import asyncio
import smtplib
import ssl
from email.message import EmailMessage

from app.application.interfaces import NotificationDispatcherInterface
from app.config.settings import MailConfig
from app.domain.errors import DispatchError, DispatchErrorKind


class SmtpMailer(NotificationDispatcherInterface):
    """Send plain text emails with the configured SMTP provider."""

    def __init__(self, config: MailConfig, *, timeout: float = 30.0) -> None:
        self._config = config
        self._timeout = timeout

    async def send(self, *, recipient: str, subject: str, body: str) -> None:
        mail_settings = self._config
        if not mail_settings.is_configured():
            raise DispatchError(
                DispatchErrorKind.NOT_CONFIGURED, "SMTP settings are not configured."
            )

        message = EmailMessage()
        message["From"] = mail_settings.from_address
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(body)

        password = (
            mail_settings.password.get_secret_value()
            if mail_settings.password is not None
            else None
        )
        timeout = self._timeout

        def _send_sync() -> None:
            context = ssl.create_default_context()
            if mail_settings.use_ssl:
                with smtplib.SMTP_SSL(
                    mail_settings.host,
                    mail_settings.port,
                    context=context,
                    timeout=timeout,
                ) as client:
                    if mail_settings.username and password:
                        client.login(mail_settings.username, password)
                    client.send_message(message)
                return

            with smtplib.SMTP(mail_settings.host, mail_settings.port, timeout=timeout) as client:
                if mail_settings.use_tls:
                    client.starttls(context=context)
                if mail_settings.username and password:
                    client.login(mail_settings.username, password)
                client.send_message(message)

        try:
            await asyncio.to_thread(_send_sync)
        except TimeoutError as exc:  # pragma: no cover - network errors
            raise DispatchError(
                DispatchErrorKind.TIMEOUT, "Timed out talking to the SMTP server."
            ) from exc
        except (smtplib.SMTPException, OSError) as exc:  # pragma: no cover - network errors
            raise DispatchError(
                DispatchErrorKind.TRANSPORT, f"Failed to send email: {exc}"
            ) from exc


__all__ = ["SmtpMailer"]
