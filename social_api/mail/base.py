import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html: str
    from_email: str
    text: str | None = None


class EmailSender(ABC):
    """
    Best-effort email delivery.

    ``send`` never raises for delivery problems: failures are logged and
    reported through the boolean result, so callers can fire and forget.
    """

    name: str = "email"

    def __init__(self, from_email: str) -> None:
        self.from_email = from_email

    async def send(self, to: str, subject: str, html: str, text: str | None = None) -> bool:
        message = EmailMessage(
            to=to,
            subject=subject,
            html=html,
            text=text or None,
            from_email=self.from_email,
        )
        try:
            await self.deliver(message)
        except Exception:
            logger.exception("%s delivery to %s failed", self.name, to)
            return False
        logger.info("%s delivered %r to %s", self.name, subject, to)
        return True

    @abstractmethod
    async def deliver(self, message: EmailMessage) -> None:
        """Hand *message* to the provider; raise on failure."""


class FallbackEmailSender(EmailSender):
    """Try each sender in order until one reports success."""

    name = "fallback"

    def __init__(self, senders: list[EmailSender]) -> None:
        if not senders:
            raise ValueError("FallbackEmailSender needs at least one sender")
        super().__init__(senders[0].from_email)
        self.senders = senders

    async def send(self, to: str, subject: str, html: str, text: str | None = None) -> bool:
        for sender in self.senders:
            if await sender.send(to, subject, html, text):
                return True
            logger.warning("%s could not deliver to %s, trying next provider", sender.name, to)
        return False

    async def deliver(self, message: EmailMessage) -> None:
        if not await self.send(message.to, message.subject, message.html, message.text):
            raise RuntimeError(f"no provider delivered email to {message.to}")
