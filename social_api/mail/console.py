import logging
from collections import deque

from .base import EmailMessage, EmailSender

logger = logging.getLogger(__name__)

OUTBOX_SIZE = 50


class ConsoleEmailSender(EmailSender):
    """
    Logs messages instead of sending them.  Used when no provider is configured.

    Only the last ``OUTBOX_SIZE`` messages are kept in ``outbox``.
    """

    name = "console"

    def __init__(self, from_email: str) -> None:
        super().__init__(from_email)
        self.outbox: deque[EmailMessage] = deque(maxlen=OUTBOX_SIZE)

    async def deliver(self, message: EmailMessage) -> None:
        self.outbox.append(message)
        logger.info(
            "[console email] from=%s to=%s subject=%r",
            message.from_email,
            message.to,
            message.subject,
        )
