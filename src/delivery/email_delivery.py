"""
Email Delivery channel
"""
import logging
from typing import List
from email.message import EmailMessage
from email.utils import make_msgid
import aiosmtplib

from delivery.base import DeliveryChannel, DeliveryError

logger = logging.getLogger(__name__)


class EmailDelivery(DeliveryChannel):
    name = "email"

    def __init__(
        self,
        *,
        smtp_host: str,
        smtp_port: int,
        username: str,
        password: str,
        sender: str,
        recipients: List[str],
    ):
        if not recipients:
            raise ValueError("No valid email recipients provided")

        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.sender = sender
        self.recipients = recipients

    def build_message(self, *, subject: str, html_body: str, text_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = ", ".join(self.recipients)
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid(domain=self.sender.rpartition("@")[2] or None)

        # Set plain text content as fallback
        msg.set_content(text_body)

        # Add HTML as the preferred alternative
        msg.add_alternative(html_body, subtype="html")
        return msg

    async def send(
        self,
        *,
        subject: str,
        html_body: str,
        text_body: str,
    ) -> str:
        msg = self.build_message(subject=subject, html_body=html_body, text_body=text_body)

        try:
            await aiosmtplib.send(
                msg,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.username,
                password=self.password,
                start_tls=True,
            )
        except aiosmtplib.SMTPException as e:
            raise DeliveryError(f"Email sending error: {e}") from e

        message_id = msg["Message-ID"]
        logger.info(f"Email sent to {len(self.recipients)} recipient(s): {message_id}")
        return message_id
