import asyncio

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from .base import EmailMessage, EmailSender


class SendGridEmailSender(EmailSender):
    name = "sendgrid"

    def __init__(self, api_key: str, from_email: str) -> None:
        super().__init__(from_email)
        self._client = SendGridAPIClient(api_key)

    async def deliver(self, message: EmailMessage) -> None:
        mail = Mail(
            from_email=message.from_email,
            to_emails=message.to,
            subject=message.subject,
            plain_text_content=message.text,
            html_content=message.html,
        )
        # The SDK is blocking; keep it off the event loop.
        response = await asyncio.to_thread(self._client.send, mail)
        if response.status_code >= 400:
            raise RuntimeError(f"SendGrid responded {response.status_code}")
