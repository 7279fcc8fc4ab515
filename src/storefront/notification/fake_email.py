"""Fake email adapter — keeps delivered order emails in memory."""

from uuid import uuid4

from storefront.notification.email_port import Delivery, EmailPort, OrderEmail


class FakeEmailAdapter(EmailPort):
    """Records every delivered ``OrderEmail`` in ``sent_emails``.

    ``configure(should_succeed=False)`` rejects deliveries;
    ``configure(raise_error=...)`` makes ``deliver`` raise instead.
    """

    def __init__(self):
        self.sent_emails: list[OrderEmail] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.raise_error: Exception | None = None

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Email delivery failed",
        raise_error: Exception | None = None,
    ):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_error = raise_error

    def deliver(self, email: OrderEmail) -> Delivery:
        if self.raise_error is not None:
            raise self.raise_error

        if not self.should_succeed:
            return Delivery(delivered=False, failure_reason=self.failure_reason)

        self.sent_emails.append(email)
        return Delivery(delivered=True, message_id=f"email-{uuid4().hex[:12]}")

    def sent_to(self, address: str) -> list[OrderEmail]:
        return [email for email in self.sent_emails if email.to == address]

    def reset(self):
        self.sent_emails.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.raise_error = None
