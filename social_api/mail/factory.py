import logging

import resend

from social_api.config import Settings

from .base import EmailSender, FallbackEmailSender
from .console import ConsoleEmailSender
from .resend_sender import ResendEmailSender
from .sendgrid_sender import SendGridEmailSender

logger = logging.getLogger(__name__)


def _provider(name: str, settings: Settings) -> EmailSender | None:
    """Return the sender for *name*, or None when it cannot be configured."""
    name = name.strip().lower()
    if name == "console":
        return ConsoleEmailSender(settings.EMAIL_FROM)
    if name == "sendgrid":
        if not settings.SENDGRID_API_KEY:
            logger.warning("EMAIL provider 'sendgrid' selected but SENDGRID_API_KEY is not set")
            return None
        return SendGridEmailSender(settings.SENDGRID_API_KEY, settings.EMAIL_FROM)
    if name == "resend":
        if not settings.RESEND_API_KEY:
            logger.warning("EMAIL provider 'resend' selected but RESEND_API_KEY is not set")
            return None
        # The resend SDK only reads its module-level key; set it once, here.
        resend.api_key = settings.RESEND_API_KEY
        return ResendEmailSender(settings.EMAIL_FROM)
    logger.warning("Unknown email provider %r ignored", name)
    return None


def build_email_sender(settings: Settings) -> EmailSender:
    """
    Build the process-wide sender from ``EMAIL_PROVIDER`` and the optional
    ``EMAIL_FALLBACK_PROVIDER``.

    Email settings never abort startup: unknown or unusable providers are
    skipped and the console sender takes over when nothing is left.
    """
    names = [settings.EMAIL_PROVIDER]
    if settings.EMAIL_FALLBACK_PROVIDER:
        names.append(settings.EMAIL_FALLBACK_PROVIDER)

    senders = [s for s in (_provider(n, settings) for n in names) if s is not None]
    if not senders:
        logger.warning("No email provider configured; emails will only be logged")
        return ConsoleEmailSender(settings.EMAIL_FROM)
    if len(senders) == 1:
        return senders[0]
    return FallbackEmailSender(senders)
