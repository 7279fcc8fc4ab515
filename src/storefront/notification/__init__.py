"""Email channel registry — one email adapter per process.

Uses the fake adapter by default; ``STOREFRONT_EMAIL_BACKEND=smtp`` switches
to SMTP delivery.
"""

from storefront import config
from storefront.notification.email_port import EmailPort

_email_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_channel
    if _email_channel is None:
        if config.EMAIL_BACKEND == "fake":
            from storefront.notification.fake_email import FakeEmailAdapter

            _email_channel = FakeEmailAdapter()
        elif config.EMAIL_BACKEND == "smtp":
            from storefront.notification.smtp_email import SmtpEmailAdapter

            _email_channel = SmtpEmailAdapter()
        else:
            raise ValueError(f"Unknown email backend: {config.EMAIL_BACKEND}")

    return _email_channel


def reset_email_channel():
    """Reset the email adapter singleton (useful for testing)."""
    global _email_channel
    _email_channel = None
