"""Order email port — the contract every delivery adapter implements.

Adapters take a rendered ``OrderEmail`` and answer with a ``Delivery``. A
rejected message is a ``Delivery`` with ``delivered=False``; adapters raise
only when the transport itself breaks, and ``OrderNotifier`` absorbs both.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OrderEmail:
    """A rendered, plain-text email about one order."""

    to: str
    subject: str
    body: str
    order_id: str | None = None


@dataclass(frozen=True)
class Delivery:
    """Outcome of a single delivery attempt."""

    delivered: bool
    message_id: str | None = None
    failure_reason: str | None = None


class EmailPort(ABC):
    @abstractmethod
    def deliver(self, email: OrderEmail) -> Delivery: ...
