"""
Transactional email.

One capability (``EmailSender.send``) with a concrete adapter per
provider.  Which adapter runs is decided once, by ``build_email_sender``,
from settings.
"""
from .base import EmailMessage, EmailSender, FallbackEmailSender
from .console import ConsoleEmailSender
from .factory import build_email_sender
from .resend_sender import ResendEmailSender
from .sendgrid_sender import SendGridEmailSender

__all__ = [
    "EmailMessage",
    "EmailSender",
    "FallbackEmailSender",
    "ConsoleEmailSender",
    "ResendEmailSender",
    "SendGridEmailSender",
    "build_email_sender",
]
