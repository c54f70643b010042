"""SMTP email sender."""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid

from app.infrastructure.channels.base import (
    ChannelSender,
    ConfigCheckResult,
    EmailPayload,
    SendResult,
    Sleep,
    send_with_retries,
    simulated_message_id,
)
from app.settings import Settings

logger = logging.getLogger(__name__)

SMTP_SSL_PORT = 465


class EmailSender(ChannelSender):
    """Email sender over SMTP.

    Without SMTP credentials the sender runs in simulated mode: the message
    is logged and reported as sent.
    """

    channel = "email"

    def __init__(
        self,
        host: str,
        port: int,
        user: str | None,
        password: str | None,
        from_email: str,
        from_name: str,
        timeout: float = 15.0,
        retries: int = 3,
        retry_base_delay: float = 1.0,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize email sender.

        Args:
            host: SMTP server host
            port: SMTP port (465 uses implicit SSL, anything else STARTTLS)
            user: SMTP username
            password: SMTP password
            from_email: Sender address
            from_name: Sender display name
            timeout: Socket timeout in seconds
            retries: Tries per send before reporting failure
            retry_base_delay: First backoff delay in seconds
            sleep: Awaitable used for backoff waits
        """
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.from_email = from_email
        self.from_name = from_name
        self.timeout = timeout
        self.retries = retries
        self.retry_base_delay = retry_base_delay
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: Settings, sleep: Sleep = asyncio.sleep) -> "EmailSender":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            from_email=settings.smtp_from_email,
            from_name=settings.smtp_from_name,
            timeout=settings.smtp_timeout_seconds,
            retries=settings.send_retries,
            retry_base_delay=settings.send_retry_base_delay_seconds,
            sleep=sleep,
        )

    @property
    def simulated(self) -> bool:
        return not (self.user and self.password)

    @property
    def from_address(self) -> str:
        return f'"{self.from_name}" <{self.from_email}>'

    async def send(self, destination: str | None, payload: EmailPayload) -> SendResult:
        """Send an email, retrying with backoff.

        Args:
            destination: Recipient email address
            payload: Subject, HTML and plain-text bodies

        Returns:
            SendResult with the Message-ID on success
        """
        if not destination:
            return SendResult(success=False, error="Missing recipient email address")

        logger.info(f"Sending email to {destination}: {payload.subject}")

        if self.simulated:
            logger.info(
                "Simulating email send (no SMTP configured)",
                extra={"to": destination, "subject": payload.subject, "content": payload.text},
            )
            return SendResult(success=True, provider_message_id=simulated_message_id())

        message = self._build_message(destination, payload)

        async def attempt() -> SendResult:
            await asyncio.to_thread(self._deliver, message)
            return SendResult(success=True, provider_message_id=message["Message-ID"])

        result = await send_with_retries(
            attempt,
            channel=self.channel,
            destination=destination,
            retries=self.retries,
            base_delay=self.retry_base_delay,
            sleep=self.sleep,
        )
        if result.success:
            logger.info(f"Email sent to {destination}, message id {result.provider_message_id}")
        else:
            logger.error(f"Email to {destination} failed: {result.error}")
        return result

    async def verify(self) -> ConfigCheckResult:
        """Check that the SMTP server accepts the configured login."""
        if self.simulated:
            return ConfigCheckResult(success=False, error="SMTP credentials not configured")

        try:
            await asyncio.to_thread(self._login_only)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP configuration check failed: {e}")
            return ConfigCheckResult(success=False, error=str(e))

        logger.info("SMTP configuration verified successfully")
        return ConfigCheckResult(success=True, details={"host": self.host, "port": self.port})

    def _build_message(self, destination: str, payload: EmailPayload) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = payload.subject
        message["From"] = self.from_address
        message["To"] = destination
        message["Message-ID"] = make_msgid(domain=self.from_email.rpartition("@")[2] or None)
        message.set_content(payload.text)
        message.add_alternative(payload.html, subtype="html")
        return message

    def _connect(self) -> smtplib.SMTP:
        """Open an authenticated SMTP connection (blocking)."""
        context = ssl.create_default_context()
        if self.port == SMTP_SSL_PORT:
            server: smtplib.SMTP = smtplib.SMTP_SSL(
                self.host, self.port, context=context, timeout=self.timeout
            )
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            server.ehlo()
            if server.has_extn("starttls"):
                server.starttls(context=context)
                server.ehlo()
        try:
            server.login(self.user, self.password)
        except Exception:
            server.close()
            raise
        return server

    def _deliver(self, message: EmailMessage) -> None:
        with self._connect() as server:
            server.send_message(message)

    def _login_only(self) -> None:
        with self._connect() as server:
            server.noop()
