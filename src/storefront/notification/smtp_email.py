"""SMTP email adapter — delivers through a relay configured by STOREFRONT_SMTP_* settings."""

import smtplib
from email.message import EmailMessage
from email.utils import make_msgid

from storefront import config
from storefront.notification.email_port import Delivery, EmailPort, OrderEmail


class SmtpEmailAdapter(EmailPort):
    def __init__(
        self,
        host: str = config.SMTP_HOST,
        port: int = config.SMTP_PORT,
        user: str = config.SMTP_USER,
        password: str = config.SMTP_PASSWORD,
        sender: str = config.SMTP_FROM,
        timeout: int = config.SMTP_TIMEOUT_SECONDS,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender
        self.timeout = timeout

    def deliver(self, email: OrderEmail) -> Delivery:
        message = EmailMessage()
        message_id = make_msgid()
        message["Message-ID"] = message_id
        message["From"] = self.sender
        message["To"] = email.to
        message["Subject"] = email.subject
        message.set_content(email.body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
                client.starttls()
                if self.user:
                    client.login(self.user, self.password)
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            return Delivery(delivered=False, failure_reason=str(exc))

        return Delivery(delivered=True, message_id=message_id)
