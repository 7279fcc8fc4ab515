"""Bounded-retry generation of short, human-readable unique identifiers."""

import random
import string
from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from storefront.shared.errors import IdentifierExhaustedError

logger = structlog.get_logger(__name__)


def generate_unique(
    generator: Callable[[], str],
    exists: Callable[[str], bool],
    max_attempts: int,
    label: str = "identifier",
    error_cls: type[Exception] = IdentifierExhaustedError,
) -> str:
    """Call ``generator`` until it yields a value ``exists`` rejects as unused.

    Raises ``error_cls`` once ``max_attempts`` candidates have all collided.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = generator()
        if not exists(candidate):
            return candidate
        logger.warning("Identifier collision, retrying", label=label, candidate=candidate, attempt=attempt)

    logger.error("Could not generate a unique identifier", label=label, max_attempts=max_attempts)
    raise error_cls({label: [f"Failed to generate a unique {label} after {max_attempts} attempts"]})


def random_code(length: int, alphabet: str = string.ascii_uppercase + string.digits) -> str:
    return "".join(random.choices(alphabet, k=length))


def new_order_number(now: datetime | None = None) -> str:
    """Order numbers look like ``ORD-1718000000000-0421``."""
    now = now or datetime.now(UTC)
    millis = int(now.timestamp() * 1000)
    return f"ORD-{millis}-{random.randint(0, 9999):04d}"
