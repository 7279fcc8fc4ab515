"""SKU generation — ``GEN-CAT-YYYYMMDD-XXXX`` codes, e.g. ``MEN-CLO-20250112-AB3X``."""

import re
from collections.abc import Callable
from datetime import UTC, datetime

from storefront import config
from storefront.shared.identifiers import generate_unique, random_code

SKU_PATTERN = re.compile(r"^[A-Z0-9]{3}-[A-Z0-9]{3}-\d{8}-[A-Z0-9]{4}$")


def _code(name: str) -> str:
    # Three uppercase alphanumerics, padded with X for short names
    cleaned = re.sub(r"[^A-Za-z0-9]", "", name or "").upper()
    return cleaned[:3].ljust(3, "X")


def build_sku(gender_name: str, category_name: str, today: datetime | None = None) -> str:
    today = today or datetime.now(UTC)
    return f"{_code(gender_name)}-{_code(category_name)}-{today:%Y%m%d}-{random_code(4)}"


def generate_sku(
    gender_name: str,
    category_name: str,
    exists: Callable[[str], bool],
    max_attempts: int | None = None,
) -> str:
    """Generate a SKU that ``exists`` does not already know about.

    Raises ``IdentifierExhaustedError`` after ``max_attempts`` collisions.
    """
    return generate_unique(
        lambda: build_sku(gender_name, category_name),
        exists,
        max_attempts or config.SKU_MAX_ATTEMPTS,
        label="sku",
    )


def is_valid_sku_format(sku: str) -> bool:
    return bool(SKU_PATTERN.match(sku or ""))
