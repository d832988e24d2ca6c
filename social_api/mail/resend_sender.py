import asyncio

import resend

from .base import EmailMessage, EmailSender


class ResendEmailSender(EmailSender):
    """
    Sends through the resend SDK.

    The SDK authenticates with the process-global ``resend.api_key``,
    which ``build_email_sender`` sets once.  Instances carry no key of
    their own, so there is one Resend account per process.
    """

    name = "resend"

    async def deliver(self, message: EmailMessage) -> None:
        params = {
            "from": message.from_email,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }
        if message.text:
            params["text"] = message.text
        await asyncio.to_thread(resend.Emails.send, params)
